"""
Widget Catalog Service

Read-only access to the registry of widget kinds. Injected into the instance
store and the position registry instead of being read as ambient state.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import func, or_

from ..extensions import db
from ..models.widget import WidgetDefinition
from ..models.site_widget import SiteWidgetInstance
from ..utils.exceptions import UnknownWidgetError, WidgetInUseError
from .widget_config import WidgetConfigSchema

logger = logging.getLogger(__name__)


CATEGORY_NAMES = {
    'layout': 'Layout',
    'hero': 'Hero',
    'content': 'Content',
    'media': 'Media',
    'forms': 'Forms',
    'navigation': 'Navigation',
    'payment': 'Payments',
}


class WidgetCatalog:
    """Query the widget definitions."""

    def list_active(
        self,
        site_type: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[WidgetDefinition]:
        """
        Active definitions ordered by sort_order, then name.

        Args:
            site_type: Drop entries whose allowed_site_types exclude this type.
                An unknown type just filters; it is not an error.
            category: Only this category
            search: Case-insensitive match on name or description
        """
        query = WidgetDefinition.query.filter_by(is_active=True)

        if category:
            query = query.filter(WidgetDefinition.category == category)

        if search:
            pattern = f'%{search.lower()}%'
            query = query.filter(or_(
                func.lower(WidgetDefinition.name).like(pattern),
                func.lower(WidgetDefinition.description).like(pattern),
            ))

        definitions = query.order_by(WidgetDefinition.sort_order, WidgetDefinition.name).all()

        # allowed_site_types is a JSON list, filter in Python for portability
        if site_type is not None:
            definitions = [d for d in definitions if d.permits_site_type(site_type)]

        return definitions

    def find(self, slug: str) -> Optional[WidgetDefinition]:
        return WidgetDefinition.query.filter_by(slug=slug).first()

    def get(self, slug: str) -> WidgetDefinition:
        """
        Get a definition by slug, active or not.

        Raises:
            UnknownWidgetError: if no definition has this slug
        """
        definition = self.find(slug)
        if definition is None:
            raise UnknownWidgetError(slug)
        return definition

    def permits(self, definition: WidgetDefinition, site_type: str) -> bool:
        """Whether a definition may be placed on a site of this type."""
        return definition.is_active and definition.permits_site_type(site_type)

    def schema_for(self, slug: str) -> WidgetConfigSchema:
        return WidgetConfigSchema.for_definition(self.get(slug))

    def categories(self) -> List[Dict[str, str]]:
        """Distinct categories of active definitions with display names."""
        rows = (
            db.session.query(WidgetDefinition.category)
            .filter(WidgetDefinition.is_active.is_(True), WidgetDefinition.category.isnot(None))
            .distinct()
            .order_by(WidgetDefinition.category)
            .all()
        )
        return [
            {'slug': category, 'name': CATEGORY_NAMES.get(category, category.replace('_', ' ').title())}
            for (category,) in rows
        ]

    def usage_count(self, slug: str) -> int:
        return SiteWidgetInstance.query.filter_by(widget_slug=slug).count()

    def remove(self, slug: str) -> None:
        """
        Delete a definition that no instance references.

        Raises:
            UnknownWidgetError: if the slug is unknown
            WidgetInUseError: if any site instance still uses it
        """
        definition = self.get(slug)
        count = self.usage_count(slug)
        if count:
            raise WidgetInUseError(slug, count)

        db.session.delete(definition)
        db.session.commit()
        logger.info(f'Removed widget definition {slug}')
