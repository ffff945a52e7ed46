"""
Database models for the site builder.
Templates, positions, the widget catalog and site widget placements.
"""
from .site import (
    SiteTemplate,
    Site,
    SiteLayoutPreference,
    SitePositionSetting,
    SITE_TYPES,
    SIDEBAR_POSITIONS,
    DEFAULT_TEMPLATES,
)
from .widget import WidgetDefinition, DEFAULT_WIDGET_DEFINITIONS, seed_widget_catalog
from .widget_position import WidgetPosition, DEFAULT_POSITIONS, AREAS
from .site_widget import SiteWidgetInstance

__all__ = [
    'SiteTemplate',
    'Site',
    'SiteLayoutPreference',
    'SitePositionSetting',
    'SITE_TYPES',
    'SIDEBAR_POSITIONS',
    'DEFAULT_TEMPLATES',
    # Catalog
    'WidgetDefinition',
    'DEFAULT_WIDGET_DEFINITIONS',
    'seed_widget_catalog',
    # Positions
    'WidgetPosition',
    'DEFAULT_POSITIONS',
    'AREAS',
    # Placements
    'SiteWidgetInstance',
]
