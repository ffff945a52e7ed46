"""
CLI Commands for the site builder.

Usage:
    flask db-init                           # Create all tables
    flask catalog seed                      # Upsert the default widget catalog
    flask catalog list --site-type main     # Widgets available for a site type
    flask catalog remove top_donors         # Remove an unused widget definition
    flask templates seed                    # Default templates and their positions
    flask sites repair-orders --site-id 7   # Re-densify widget orders
"""
import click
from flask.cli import with_appcontext

from ..extensions import db
from .catalog import init_app as init_catalog_commands
from .templates import init_app as init_template_commands
from .sites import init_app as init_site_commands


@click.command('db-init')
@with_appcontext
def db_init():
    """Create all tables."""
    db.create_all()
    click.echo("Database tables created")


def init_app(app):
    """Register all CLI commands with the Flask app."""
    app.cli.add_command(db_init)
    init_catalog_commands(app)
    init_template_commands(app)
    init_site_commands(app)
