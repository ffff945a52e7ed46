"""
Widget Position Registry

Per-template named slots. Reads are ordered deterministically (order, then
slug); the administrative write path refuses (template_id, slug) collisions.
"""

import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models.site import SiteTemplate
from ..models.widget import WidgetDefinition
from ..models.widget_position import WidgetPosition, DEFAULT_POSITIONS, AREAS
from ..utils.exceptions import (
    DuplicatePositionError,
    UnknownPositionError,
    ValidationError,
)
from .widget_catalog import WidgetCatalog

logger = logging.getLogger(__name__)


class WidgetPositionRegistry:
    """Read and administer template positions."""

    def __init__(self, catalog: Optional[WidgetCatalog] = None):
        self.catalog = catalog or WidgetCatalog()

    def list_for_template(self, template_id: int, area: Optional[str] = None) -> List[WidgetPosition]:
        """Active positions of a template ordered by order, then slug."""
        query = WidgetPosition.query.filter_by(template_id=template_id, is_active=True)
        if area:
            query = query.filter_by(area=area)
        return query.order_by(WidgetPosition.order, WidgetPosition.slug).all()

    def grouped_by_area(self, template_id: int) -> Dict[str, List[WidgetPosition]]:
        """Active positions keyed by area, areas in page order."""
        grouped = OrderedDict((area, []) for area in AREAS)
        for position in self.list_for_template(template_id):
            grouped.setdefault(position.area, []).append(position)
        return OrderedDict((area, items) for area, items in grouped.items() if items)

    def find(self, template_id: int, slug: str) -> Optional[WidgetPosition]:
        return WidgetPosition.query.filter_by(template_id=template_id, slug=slug).first()

    def get(self, template_id: int, slug: str, include_inactive: bool = False) -> WidgetPosition:
        """
        Get a position by (template_id, slug).

        Raises:
            UnknownPositionError: if missing, or inactive unless include_inactive
        """
        position = self.find(template_id, slug)
        if position is None or (not position.is_active and not include_inactive):
            raise UnknownPositionError(slug, template_id)
        return position

    def is_widget_allowed(self, position: WidgetPosition, widget_slug: str) -> bool:
        return position.is_widget_allowed(widget_slug)

    def available_widgets(
        self,
        template_id: int,
        slug: str,
        site_type: Optional[str] = None
    ) -> List[WidgetDefinition]:
        """Catalog entries that may be dropped into this position."""
        position = self.get(template_id, slug)
        return [
            definition
            for definition in self.catalog.list_active(site_type=site_type)
            if position.is_widget_allowed(definition.slug)
        ]

    def add(self, template_id: int, slug: str, commit: bool = True, **fields: Any) -> WidgetPosition:
        """
        Create a position.

        Raises:
            DuplicatePositionError: if (template_id, slug) already exists
            ValidationError: on an unknown area
        """
        area = fields.get('area', 'content')
        if area not in AREAS:
            raise ValidationError(f"Area must be one of: {', '.join(AREAS)}", 'area')

        if self.find(template_id, slug) is not None:
            raise DuplicatePositionError(template_id, slug)

        position = WidgetPosition(
            template_id=template_id,
            slug=slug,
            name=fields.get('name', slug.replace('_', ' ').title()),
            description=fields.get('description'),
            area=area,
            order=fields.get('order', 0),
            allowed_widgets=list(fields.get('allowed_widgets') or []),
            is_required=bool(fields.get('is_required', False)),
            is_active=bool(fields.get('is_active', True)),
            layout_config=dict(fields.get('layout_config') or {}),
        )
        db.session.add(position)

        try:
            if commit:
                db.session.commit()
            else:
                db.session.flush()
        except IntegrityError:
            # Lost a race with another writer of the same slug
            db.session.rollback()
            raise DuplicatePositionError(template_id, slug)

        return position

    def create_default_positions(self, template: SiteTemplate) -> List[WidgetPosition]:
        """Seed header/hero/content/sidebar/footer, skipping existing slugs."""
        created = []
        for data in DEFAULT_POSITIONS:
            if self.find(template.id, data['slug']) is not None:
                continue
            fields = {key: value for key, value in data.items() if key != 'slug'}
            created.append(self.add(template.id, data['slug'], commit=False, **fields))

        db.session.commit()
        if created:
            logger.info(f'Created {len(created)} default positions for template {template.slug}')
        return created

    def update_layout(self, template_id: int, slug: str, layout_config: Dict[str, Any]) -> WidgetPosition:
        """Shallow-merge renderer layout hints into a position."""
        if not isinstance(layout_config, dict):
            raise ValidationError('layout_config must be an object', 'layout_config')

        position = self.get(template_id, slug, include_inactive=True)
        merged = dict(position.layout_config or {})
        merged.update(layout_config)
        position.layout_config = merged
        db.session.commit()
        return position
