"""
CLI Commands for sites.

Order repair can run from cron after manual database edits:

0 3 * * * cd /app && flask sites repair-orders
"""

import click
from flask.cli import with_appcontext

from ..extensions import db
from ..models.site import Site
from ..services.site_widget_store import SiteWidgetStore


@click.group('sites')
def sites_cli():
    """Site commands."""
    pass


@sites_cli.command('repair-orders')
@click.option('--site-id', type=int, help='Specific site ID (or all if not specified)')
@with_appcontext
def repair_orders(site_id):
    """Re-densify the widget orders of every position."""
    if site_id:
        site = db.session.get(Site, site_id)
        if not site:
            click.echo(f"Site {site_id} not found")
            return
        sites = [site]
    else:
        sites = Site.query.order_by(Site.id).all()

    total = 0
    for site in sites:
        repaired = SiteWidgetStore(site.id).repair_orders()
        if repaired:
            click.echo(f"  Site {site.id}: {repaired} widget(s) renumbered")
        total += repaired

    click.echo(f"TOTAL: {total} widget(s) renumbered across {len(sites)} site(s)")


def init_app(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(sites_cli)
