"""
Business logic services for the site builder.
"""
from .widget_catalog import WidgetCatalog
from .position_registry import WidgetPositionRegistry
from .site_widget_store import SiteWidgetStore
from .layout_service import LayoutService
from .widget_config import WidgetConfigSchema, FieldSpec

__all__ = [
    'WidgetCatalog',
    'WidgetPositionRegistry',
    'SiteWidgetStore',
    'LayoutService',
    'WidgetConfigSchema',
    'FieldSpec',
]
