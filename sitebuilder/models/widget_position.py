"""
Widget Position Model

Named slots of a site template (header, hero, content, sidebar, footer) that
hold zero or more widget instances.
"""

from datetime import datetime
from ..extensions import db


AREAS = ('header', 'hero', 'content', 'sidebar', 'footer')

# Slots created for every new template
DEFAULT_POSITIONS = [
    {
        'slug': 'header',
        'name': 'Header',
        'description': 'Top bar with logo and navigation',
        'area': 'header',
        'order': 1,
        'is_required': False,
        'allowed_widgets': ['menu', 'text', 'image'],
    },
    {
        'slug': 'hero',
        'name': 'Hero Banner',
        'description': 'Main banner at the top of the page',
        'area': 'hero',
        'order': 2,
        'is_required': False,
        'allowed_widgets': ['hero', 'image', 'gallery'],
    },
    {
        'slug': 'content',
        'name': 'Main Content',
        'description': 'Main content area',
        'area': 'content',
        'order': 3,
        'is_required': True,
        'allowed_widgets': [],
    },
    {
        'slug': 'sidebar',
        'name': 'Sidebar',
        'description': 'Side column with supplementary blocks',
        'area': 'sidebar',
        'order': 4,
        'is_required': False,
        'allowed_widgets': ['text', 'menu', 'stats', 'donation', 'donations_list', 'top_donors'],
    },
    {
        'slug': 'footer',
        'name': 'Footer',
        'description': 'Page footer with contact information',
        'area': 'footer',
        'order': 5,
        'is_required': False,
        'allowed_widgets': ['text', 'menu', 'image'],
    },
]


class WidgetPosition(db.Model):
    """
    A slot within a template.

    ``allowed_widgets`` empty means any widget may be placed here.
    """
    __tablename__ = 'widget_positions'

    id = db.Column(db.Integer, primary_key=True)
    template_id = db.Column(db.Integer, db.ForeignKey('site_templates.id'), nullable=False, index=True)
    slug = db.Column(db.String(64), nullable=False)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    area = db.Column(db.String(20), nullable=False, default='content')
    order = db.Column(db.Integer, nullable=False, default=0)

    allowed_widgets = db.Column(db.JSON, nullable=False, default=list)
    is_required = db.Column(db.Boolean, default=False, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Width/alignment hints for the renderer
    layout_config = db.Column(db.JSON, nullable=False, default=dict)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    template = db.relationship('SiteTemplate', back_populates='positions')

    __table_args__ = (
        db.UniqueConstraint('template_id', 'slug', name='unique_template_position_slug'),
    )

    def __repr__(self):
        return f'<WidgetPosition {self.slug} template={self.template_id} order={self.order}>'

    def is_widget_allowed(self, widget_slug: str) -> bool:
        """Check the allow-list; an empty list allows everything."""
        if not self.allowed_widgets:
            return True
        return widget_slug in self.allowed_widgets

    def to_dict(self):
        """Serialize position to dictionary."""
        return {
            'id': self.id,
            'template_id': self.template_id,
            'slug': self.slug,
            'name': self.name,
            'description': self.description,
            'area': self.area,
            'order': self.order,
            'allowed_widgets': self.allowed_widgets or [],
            'is_required': self.is_required,
            'is_active': self.is_active,
            'layout_config': self.layout_config or {},
        }
