"""
Layout Preference Service

Per-site layout choices that are not widget placements: which side the
sidebar renders on, and free-form settings per template position.
"""

import logging
from typing import Any, Dict

from ..extensions import db
from ..models.site import Site, SiteLayoutPreference, SitePositionSetting, SIDEBAR_POSITIONS
from ..utils.exceptions import SiteNotFoundError, ValidationError
from .position_registry import WidgetPositionRegistry

logger = logging.getLogger(__name__)

DEFAULT_SIDEBAR_POSITION = 'right'


class LayoutService:
    """Read and save per-site layout preferences."""

    def __init__(self, registry: WidgetPositionRegistry = None):
        self.registry = registry or WidgetPositionRegistry()

    def _site(self, site_id: int) -> Site:
        site = db.session.get(Site, site_id)
        if site is None:
            raise SiteNotFoundError(site_id)
        return site

    def get(self, site_id: int) -> Dict[str, Any]:
        """Layout of a site; sites that never saved one get the default."""
        self._site(site_id)
        preference = db.session.get(SiteLayoutPreference, site_id)
        if preference is None:
            return {'site_id': site_id, 'sidebar_position': DEFAULT_SIDEBAR_POSITION}
        return preference.to_dict()

    def save(self, site_id: int, sidebar_position: str) -> Dict[str, Any]:
        """
        Upsert the sidebar side.

        Raises:
            ValidationError: if sidebar_position is not left or right
        """
        if sidebar_position not in SIDEBAR_POSITIONS:
            raise ValidationError(
                f"sidebar_position must be one of: {', '.join(SIDEBAR_POSITIONS)}",
                'sidebar_position'
            )

        self._site(site_id)
        preference = db.session.get(SiteLayoutPreference, site_id)
        if preference is None:
            preference = SiteLayoutPreference(site_id=site_id)
            db.session.add(preference)
        preference.sidebar_position = sidebar_position
        db.session.commit()

        logger.info(f'Site {site_id}: sidebar moved to the {sidebar_position}')
        return preference.to_dict()

    def get_position_settings(self, site_id: int, position_slug: str) -> Dict[str, Any]:
        site = self._site(site_id)
        self.registry.get(site.template_id, position_slug)

        setting = SitePositionSetting.query.filter_by(site_id=site_id, position_slug=position_slug).first()
        if setting is None:
            return {'site_id': site_id, 'position_slug': position_slug, 'settings': {}}
        return setting.to_dict()

    def save_position_settings(self, site_id: int, position_slug: str, settings: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the settings of one position of a site."""
        if not isinstance(settings, dict):
            raise ValidationError('settings must be an object', 'settings')

        site = self._site(site_id)
        self.registry.get(site.template_id, position_slug)

        setting = SitePositionSetting.query.filter_by(site_id=site_id, position_slug=position_slug).first()
        if setting is None:
            setting = SitePositionSetting(site_id=site_id, position_slug=position_slug)
            db.session.add(setting)
        setting.settings = dict(settings)
        db.session.commit()
        return setting.to_dict()
