"""
CLI Commands for site templates.
"""

import click
from flask.cli import with_appcontext

from ..extensions import db
from ..models.site import SiteTemplate, DEFAULT_TEMPLATES
from ..services.position_registry import WidgetPositionRegistry


@click.group('templates')
def templates_cli():
    """Site template commands."""
    pass


@templates_cli.command('seed')
@with_appcontext
def seed_templates():
    """
    Create the default templates and their positions.

    Existing templates and positions are left as they are.
    """
    registry = WidgetPositionRegistry()

    for data in DEFAULT_TEMPLATES:
        template = SiteTemplate.query.filter_by(slug=data['slug']).first()
        if not template:
            template = SiteTemplate(**data)
            db.session.add(template)
            db.session.commit()
            click.echo(f"Created template {template.slug}")

        created = registry.create_default_positions(template)
        click.echo(f"  {template.slug}: {len(created)} new positions")


def init_app(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(templates_cli)
