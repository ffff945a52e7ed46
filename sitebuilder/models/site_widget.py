"""
Site Widget Instance Model

Placement of one catalog widget into one position of one site. Within a
(site, position) pair the ``order`` values are always exactly 1..n; the
unique constraint backs that up at the storage layer.
"""

import uuid
from datetime import datetime
from ..extensions import db


def _new_instance_id() -> str:
    return uuid.uuid4().hex


class SiteWidgetInstance(db.Model):
    """A widget placed on a site."""
    __tablename__ = 'site_widgets'

    id = db.Column(db.String(32), primary_key=True, default=_new_instance_id)
    site_id = db.Column(db.Integer, db.ForeignKey('sites.id'), nullable=False, index=True)
    widget_slug = db.Column(
        db.String(64),
        db.ForeignKey('widget_definitions.slug', ondelete='RESTRICT'),
        nullable=False,
        index=True,
    )
    position_slug = db.Column(db.String(64), nullable=False)
    order = db.Column(db.Integer, nullable=False)

    # Values of the definition's fields_config / settings_config
    config = db.Column(db.JSON, nullable=False, default=dict)
    settings = db.Column(db.JSON, nullable=False, default=dict)

    # Inactive: suppressed everywhere. Invisible: placeholder for editors only.
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    is_visible = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    site = db.relationship('Site', back_populates='widgets')
    definition = db.relationship('WidgetDefinition', lazy='joined')

    __table_args__ = (
        db.UniqueConstraint('site_id', 'position_slug', 'order', name='unique_site_position_order'),
        db.Index('ix_site_widgets_site_position', 'site_id', 'position_slug'),
    )

    def __repr__(self):
        return f'<SiteWidgetInstance {self.widget_slug} at {self.position_slug}#{self.order} site={self.site_id}>'

    def to_dict(self):
        """Serialize instance to dictionary."""
        return {
            'id': self.id,
            'site_id': self.site_id,
            'widget_slug': self.widget_slug,
            'name': self.definition.name if self.definition else None,
            'position_slug': self.position_slug,
            'order': self.order,
            'config': self.config or {},
            'settings': self.settings or {},
            'is_active': self.is_active,
            'is_visible': self.is_visible,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
