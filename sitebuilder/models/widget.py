"""
Widget Catalog Model

Static registry of widget kinds that can be placed into template positions.
Seeded once and read-only at runtime; an entry is never deleted while a site
widget instance still references its slug.
"""

from datetime import datetime
from ..extensions import db


# Default catalog. Field schemas drive the per-widget config validation.
DEFAULT_WIDGET_DEFINITIONS = [
    {
        'slug': 'menu',
        'name': 'Menu',
        'description': 'Navigation menu, can be placed in any position',
        'icon': 'compass',
        'category': 'navigation',
        'component_name': 'MenuWidget',
        'sort_order': 1,
        'fields_config': {
            'title': {'type': 'text', 'required': False, 'label': 'Title'},
            'orientation': {'type': 'select', 'required': False, 'label': 'Orientation',
                            'options': ['horizontal', 'vertical'], 'default': 'horizontal'},
        },
    },
    {
        'slug': 'hero',
        'name': 'Hero Banner',
        'description': 'Single slide or slider banner at the top of the page',
        'icon': 'target',
        'category': 'hero',
        'component_name': 'HeroWidget',
        'sort_order': 2,
        'fields_config': {
            'title': {'type': 'text', 'required': True, 'label': 'Title'},
            'subtitle': {'type': 'text', 'required': False, 'label': 'Subtitle'},
            'description': {'type': 'textarea', 'required': False, 'label': 'Description'},
            'background_image': {'type': 'image', 'required': False, 'label': 'Background image'},
            'button_text': {'type': 'text', 'required': False, 'label': 'Button text'},
            'button_url': {'type': 'url', 'required': False, 'label': 'Button link'},
            'button_style': {'type': 'select', 'required': False, 'label': 'Button style',
                             'options': ['primary', 'secondary', 'outline']},
        },
        'settings_config': {
            'height': {'type': 'text', 'label': 'Height', 'default': '400px'},
            'parallax': {'type': 'checkbox', 'label': 'Parallax effect', 'default': False},
            'overlay': {'type': 'checkbox', 'label': 'Overlay', 'default': True},
            'overlay_opacity': {'type': 'range', 'label': 'Overlay opacity', 'min': 0, 'max': 100, 'default': 50},
        },
    },
    {
        'slug': 'text',
        'name': 'Text Block',
        'description': 'Rich text with formatting, lists, quotes and links',
        'icon': 'memo',
        'category': 'content',
        'component_name': 'TextWidget',
        'sort_order': 10,
        'fields_config': {
            'title': {'type': 'text', 'required': False, 'label': 'Title'},
            'content': {'type': 'richtext', 'required': True, 'label': 'Content'},
            'text_align': {'type': 'select', 'required': False, 'label': 'Alignment',
                           'options': ['left', 'center', 'right']},
            'background_color': {'type': 'color', 'required': False, 'label': 'Background color'},
            'text_color': {'type': 'color', 'required': False, 'label': 'Text color'},
        },
        'settings_config': {
            'padding': {'type': 'text', 'label': 'Padding', 'default': '20px'},
            'margin': {'type': 'text', 'label': 'Margin', 'default': '0'},
            'border_radius': {'type': 'text', 'label': 'Border radius', 'default': '0'},
        },
    },
    {
        'slug': 'projects',
        'name': 'Projects',
        'description': 'Fundraising projects with progress',
        'icon': 'rocket',
        'category': 'content',
        'component_name': 'ProjectsWidget',
        'sort_order': 11,
        'fields_config': {
            'title': {'type': 'text', 'required': False, 'label': 'Title', 'default': 'Our projects'},
            'limit': {'type': 'number', 'required': False, 'label': 'Projects shown', 'min': 1, 'max': 20, 'default': 6},
            'columns': {'type': 'number', 'required': False, 'label': 'Columns', 'min': 1, 'max': 4, 'default': 3},
            'show_description': {'type': 'checkbox', 'required': False, 'label': 'Show description', 'default': True},
            'show_progress': {'type': 'checkbox', 'required': False, 'label': 'Show progress', 'default': True},
            'show_image': {'type': 'checkbox', 'required': False, 'label': 'Show image', 'default': True},
        },
        'settings_config': {
            'animation': {'type': 'select', 'label': 'Animation', 'options': ['none', 'fade', 'slide', 'zoom'], 'default': 'fade'},
            'hover_effect': {'type': 'select', 'label': 'Hover effect', 'options': ['none', 'lift', 'shadow', 'scale'], 'default': 'lift'},
        },
    },
    {
        'slug': 'stats',
        'name': 'Statistics',
        'description': 'Key figures block',
        'icon': 'chart',
        'category': 'content',
        'component_name': 'StatsWidget',
        'sort_order': 12,
        'fields_config': {
            'title': {'type': 'text', 'required': False, 'label': 'Title'},
            'columns': {'type': 'number', 'required': False, 'label': 'Columns', 'min': 1, 'max': 6, 'default': 3},
        },
    },
    {
        'slug': 'region_rating',
        'name': 'Region Rating',
        'description': 'Regions ranked by donations',
        'icon': 'map',
        'category': 'content',
        'component_name': 'RegionRatingWidget',
        'sort_order': 13,
        'allowed_site_types': ['main'],
        'fields_config': {
            'title': {'type': 'text', 'required': False, 'label': 'Title'},
            'limit': {'type': 'number', 'required': False, 'label': 'Regions shown', 'min': 1, 'max': 100, 'default': 10},
        },
    },
    {
        'slug': 'donations_list',
        'name': 'Donations List',
        'description': 'Latest donations with filtering',
        'icon': 'money',
        'category': 'content',
        'component_name': 'DonationsListWidget',
        'sort_order': 14,
        'fields_config': {
            'title': {'type': 'text', 'required': False, 'label': 'Title'},
            'limit': {'type': 'number', 'required': False, 'label': 'Donations shown', 'min': 1, 'max': 50, 'default': 10},
        },
    },
    {
        'slug': 'top_donors',
        'name': 'Top Donors',
        'description': 'Leaderboard of the organization\'s recurring donors',
        'icon': 'trophy',
        'category': 'content',
        'component_name': 'TopDonorsWidget',
        'sort_order': 15,
        'allowed_site_types': ['organization'],
        'fields_config': {
            'title': {'type': 'text', 'required': False, 'label': 'Title'},
            'limit': {'type': 'number', 'required': False, 'label': 'Donors shown', 'min': 1, 'max': 50, 'default': 10},
        },
    },
    {
        'slug': 'form',
        'name': 'Form',
        'description': 'Form builder with custom fields',
        'icon': 'clipboard',
        'category': 'forms',
        'component_name': 'FormWidget',
        'sort_order': 16,
        'fields_config': {},
    },
    {
        'slug': 'image',
        'name': 'Image',
        'description': 'Single image with caption',
        'icon': 'frame',
        'category': 'media',
        'component_name': 'ImageWidget',
        'sort_order': 20,
        'fields_config': {
            'image': {'type': 'image', 'required': True, 'label': 'Image'},
            'alt_text': {'type': 'text', 'required': False, 'label': 'Alt text'},
            'caption': {'type': 'text', 'required': False, 'label': 'Caption'},
            'alignment': {'type': 'select', 'required': False, 'label': 'Alignment', 'options': ['left', 'center', 'right']},
            'size': {'type': 'select', 'required': False, 'label': 'Size', 'options': ['small', 'medium', 'large', 'full']},
        },
    },
    {
        'slug': 'gallery',
        'name': 'Gallery',
        'description': 'Image gallery with lightbox',
        'icon': 'frames',
        'category': 'media',
        'component_name': 'GalleryWidget',
        'sort_order': 21,
        'fields_config': {
            'images': {'type': 'images', 'required': True, 'label': 'Images'},
            'columns': {'type': 'number', 'required': False, 'label': 'Columns', 'min': 1, 'max': 6, 'default': 3},
            'show_captions': {'type': 'checkbox', 'required': False, 'label': 'Show captions', 'default': False},
            'lightbox': {'type': 'checkbox', 'required': False, 'label': 'Lightbox', 'default': True},
        },
    },
    {
        'slug': 'donation',
        'name': 'Donation Form',
        'description': 'Accepts one-off and recurring donations',
        'icon': 'card',
        'category': 'payment',
        'component_name': 'DonationWidget',
        'sort_order': 30,
        'fields_config': {
            'title': {'type': 'text', 'required': False, 'label': 'Title'},
            'allow_recurring': {'type': 'checkbox', 'required': False, 'label': 'Allow recurring', 'default': True},
        },
    },
]


class WidgetDefinition(db.Model):
    """
    A reusable kind of content block ("Hero", "Donations List").

    ``allowed_site_types`` of None or [] means the widget is available to
    every site type.
    """
    __tablename__ = 'widget_definitions'

    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(64), unique=True, nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    icon = db.Column(db.String(255))
    category = db.Column(db.String(50), index=True)
    component_name = db.Column(db.String(100))

    allowed_site_types = db.Column(db.JSON)

    # Schema of the editable instance fields: {name: {type, label, required, default, ...}}
    fields_config = db.Column(db.JSON, nullable=False, default=dict)
    settings_config = db.Column(db.JSON, nullable=False, default=dict)

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<WidgetDefinition {self.slug} active={self.is_active}>'

    def permits_site_type(self, site_type: str) -> bool:
        """Whether instances may be placed on a site of this type."""
        if not self.allowed_site_types:
            return True
        return site_type in self.allowed_site_types

    def to_dict(self):
        """Serialize definition to dictionary."""
        return {
            'id': self.id,
            'slug': self.slug,
            'widget_slug': self.slug,
            'name': self.name,
            'description': self.description,
            'icon': self.icon,
            'category': self.category,
            'component_name': self.component_name,
            'allowed_site_types': self.allowed_site_types or [],
            'fields_config': self.fields_config or {},
            'settings_config': self.settings_config or {},
            'is_active': self.is_active,
            'sort_order': self.sort_order,
        }


def seed_widget_catalog() -> list:
    """
    Upsert the default catalog by slug.

    Returns:
        List of WidgetDefinition rows that were created or updated
    """
    touched = []
    for data in DEFAULT_WIDGET_DEFINITIONS:
        definition = WidgetDefinition.query.filter_by(slug=data['slug']).first()
        if not definition:
            definition = WidgetDefinition(slug=data['slug'])
            db.session.add(definition)

        definition.name = data['name']
        definition.description = data.get('description')
        definition.icon = data.get('icon')
        definition.category = data.get('category')
        definition.component_name = data.get('component_name')
        definition.allowed_site_types = data.get('allowed_site_types')
        definition.fields_config = data.get('fields_config', {})
        definition.settings_config = data.get('settings_config', {})
        definition.sort_order = data.get('sort_order', 0)
        definition.is_active = data.get('is_active', True)
        touched.append(definition)

    db.session.commit()
    return touched
