"""
Site aggregate models.

A Site owns its widget instances, its per-position settings and its layout
preference; deleting the site removes all of them.
"""

from datetime import datetime
from ..extensions import db


SITE_TYPES = ('main', 'organization', 'school', 'alumni')
SIDEBAR_POSITIONS = ('left', 'right')

DEFAULT_TEMPLATES = [
    {'slug': 'default', 'name': 'Default', 'description': 'Basic template with a simple design', 'sort_order': 1},
    {'slug': 'modern', 'name': 'Modern', 'description': 'Gradients and animations', 'sort_order': 2},
    {'slug': 'minimal', 'name': 'Minimal', 'description': 'Clean, minimalist design', 'sort_order': 3},
    {'slug': 'corporate', 'name': 'Corporate', 'description': 'Professional corporate design', 'sort_order': 4},
]


class SiteTemplate(db.Model):
    """Layout blueprint owning a fixed set of widget positions."""
    __tablename__ = 'site_templates'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(64), unique=True, nullable=False)
    description = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    positions = db.relationship(
        'WidgetPosition',
        back_populates='template',
        cascade='all, delete-orphan',
        lazy='dynamic',
    )

    def __repr__(self):
        return f'<SiteTemplate {self.slug}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'is_active': self.is_active,
            'sort_order': self.sort_order,
        }


class Site(db.Model):
    """
    A site built by an organization.

    Only the fields the widget placement model needs: the site type (for the
    catalog's site-type restrictions) and the template (for positions).
    """
    __tablename__ = 'sites'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    site_type = db.Column(db.String(50), nullable=False, default='organization', index=True)
    template_id = db.Column(db.Integer, db.ForeignKey('site_templates.id'), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    template = db.relationship('SiteTemplate')
    widgets = db.relationship(
        'SiteWidgetInstance',
        back_populates='site',
        cascade='all, delete-orphan',
        lazy='dynamic',
    )
    position_settings = db.relationship(
        'SitePositionSetting',
        cascade='all, delete-orphan',
        lazy='dynamic',
    )
    layout_preference = db.relationship(
        'SiteLayoutPreference',
        cascade='all, delete-orphan',
        uselist=False,
    )

    def __repr__(self):
        return f'<Site {self.id} type={self.site_type} template={self.template_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'site_type': self.site_type,
            'template_id': self.template_id,
        }


class SiteLayoutPreference(db.Model):
    """Per-site layout singleton."""
    __tablename__ = 'site_layout_preferences'

    site_id = db.Column(db.Integer, db.ForeignKey('sites.id'), primary_key=True)
    sidebar_position = db.Column(db.String(10), nullable=False, default='right')
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'site_id': self.site_id,
            'sidebar_position': self.sidebar_position,
        }


class SitePositionSetting(db.Model):
    """Free-form per-site settings for one template position."""
    __tablename__ = 'site_position_settings'

    id = db.Column(db.Integer, primary_key=True)
    site_id = db.Column(db.Integer, db.ForeignKey('sites.id'), nullable=False, index=True)
    position_slug = db.Column(db.String(64), nullable=False)
    settings = db.Column(db.JSON, nullable=False, default=dict)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('site_id', 'position_slug', name='unique_site_position_setting'),
    )

    def to_dict(self):
        return {
            'site_id': self.site_id,
            'position_slug': self.position_slug,
            'settings': self.settings or {},
        }
