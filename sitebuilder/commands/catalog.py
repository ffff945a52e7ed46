"""
CLI Commands for the widget catalog.
"""

import click
from flask.cli import with_appcontext

from ..models.widget import seed_widget_catalog
from ..services.widget_catalog import WidgetCatalog
from ..utils.exceptions import SiteBuilderError


@click.group('catalog')
def catalog_cli():
    """Widget catalog commands."""
    pass


@catalog_cli.command('seed')
@with_appcontext
def seed_catalog():
    """Upsert the default widget definitions by slug."""
    definitions = seed_widget_catalog()
    click.echo(f"Seeded {len(definitions)} widget definitions")


@catalog_cli.command('list')
@click.option('--site-type', help='Only widgets available for this site type')
@with_appcontext
def list_catalog(site_type):
    """List active widget definitions."""
    definitions = WidgetCatalog().list_active(site_type=site_type)
    if not definitions:
        click.echo("No widgets found")
        return

    for definition in definitions:
        restriction = ', '.join(definition.allowed_site_types or []) or 'all site types'
        click.echo(f"  {definition.slug:<16} {definition.name:<24} [{definition.category}] ({restriction})")


@catalog_cli.command('remove')
@click.argument('slug')
@with_appcontext
def remove_widget(slug):
    """
    Remove a widget definition.

    Refused while any site still uses the widget.
    """
    try:
        WidgetCatalog().remove(slug)
    except SiteBuilderError as e:
        raise click.ClickException(e.message)

    click.echo(f"Removed widget {slug}")


def init_app(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(catalog_cli)
