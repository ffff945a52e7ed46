"""
Shared fixtures: an in-memory app with the default catalog seeded, sample
templates and sites, and a requests-compatible session that routes editor
calls into the Flask test client.
"""
import json
from urllib.parse import urlsplit

import pytest

from sitebuilder import create_app
from sitebuilder.extensions import db
from sitebuilder.models import Site, SiteTemplate, seed_widget_catalog
from sitebuilder.services import SiteWidgetStore, WidgetPositionRegistry


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        seed_widget_catalog()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Click runner for flask CLI commands."""
    return app.test_cli_runner()


@pytest.fixture
def sample_template(app):
    """Template with the default header/hero/content/sidebar/footer positions."""
    template = SiteTemplate(name='Default', slug='default', sort_order=1)
    db.session.add(template)
    db.session.commit()
    WidgetPositionRegistry().create_default_positions(template)
    return template


@pytest.fixture
def open_template(app):
    """Template whose hero position accepts any widget."""
    template = SiteTemplate(name='Open', slug='open')
    db.session.add(template)
    db.session.commit()

    registry = WidgetPositionRegistry()
    registry.add(template.id, 'hero', area='hero', order=1)
    registry.add(template.id, 'content', area='content', order=2)
    registry.add(template.id, 'sidebar', area='sidebar', order=3, allowed_widgets=['text', 'menu'])
    return template


@pytest.fixture
def sample_site(sample_template):
    site = Site(name='Main site', site_type='main', template_id=sample_template.id)
    db.session.add(site)
    db.session.commit()
    return site


@pytest.fixture
def organization_site(sample_template):
    site = Site(name='School No. 5', site_type='organization', template_id=sample_template.id)
    db.session.add(site)
    db.session.commit()
    return site


@pytest.fixture
def site_seven(open_template):
    site = Site(id=7, name='Alumni', site_type='organization', template_id=open_template.id)
    db.session.add(site)
    db.session.commit()
    return site


@pytest.fixture
def store(organization_site):
    return SiteWidgetStore(organization_site.id)


def orders_by_position(store):
    """{position_slug: [order, ...]} as listed by the store."""
    return {
        slug: [instance.order for instance in instances]
        for slug, instances in store.list_for_site().items()
    }


def assert_dense(store):
    for slug, orders in orders_by_position(store).items():
        assert orders == list(range(1, len(orders) + 1)), f'{slug}: {orders}'


class TestResponse:
    """The parts of requests.Response the API client reads."""

    __test__ = False

    def __init__(self, response):
        self.status_code = response.status_code
        self.content = response.get_data()
        self.headers = response.headers

    def json(self):
        return json.loads(self.content)


class FlaskTestSession:
    """
    requests.Session stand-in backed by the Flask test client.

    ``on_request`` runs before each request is dispatched, which lets tests
    act while the editor has a request in flight.
    """

    def __init__(self, client):
        self.client = client
        self.calls = []
        self.on_request = None

    def request(self, method, url, json=None, params=None, headers=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append((method, path))
        if self.on_request is not None:
            self.on_request(method, path)
        response = self.client.open(path, method=method, json=json, query_string=params, headers=headers)
        return TestResponse(response)

    def mutations(self):
        return [(method, path) for method, path in self.calls if method != 'GET']


@pytest.fixture
def api_session(client):
    return FlaskTestSession(client)
