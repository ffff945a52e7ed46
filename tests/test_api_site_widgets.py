"""
Tests for the site widget API endpoints.

Tests cover:
- Listing (flat array grouped by position) and published listing
- Create (201), move, patch, delete (204)
- Error envelope and status codes for every rejection kind
- Request id propagation
"""
import json


def create(client, site_id, widget_slug, position_slug, config=None):
    body = {'widget_slug': widget_slug, 'position_slug': position_slug}
    if config is not None:
        body['config'] = config
    return client.post(
        f'/api/sites/{site_id}/widgets',
        data=json.dumps(body),
        content_type='application/json'
    )


def error_of(response):
    return response.get_json()['error']


class TestListSiteWidgets:
    """Tests for GET /api/sites/{id}/widgets."""

    def test_empty_site(self, client, organization_site):
        """Should return an empty array."""
        response = client.get(f'/api/sites/{organization_site.id}/widgets')
        assert response.status_code == 200
        assert response.get_json() == []

    def test_grouped_and_ordered(self, client, organization_site):
        """Should list positions in template order, each by order."""
        site_id = organization_site.id
        create(client, site_id, 'text', 'footer')
        create(client, site_id, 'text', 'content')
        create(client, site_id, 'image', 'content')

        data = client.get(f'/api/sites/{site_id}/widgets').get_json()
        assert [(w['position_slug'], w['order'], w['widget_slug']) for w in data] == [
            ('content', 1, 'text'),
            ('content', 2, 'image'),
            ('footer', 1, 'text'),
        ]
        assert data[0]['name'] == 'Text Block'

    def test_unknown_site(self, client, app):
        """Should answer 404 SITE_NOT_FOUND."""
        response = client.get('/api/sites/999/widgets')
        assert response.status_code == 404
        assert error_of(response)['code'] == 'SITE_NOT_FOUND'
        assert error_of(response)['kind'] == 'SiteNotFound'

    def test_published_excludes_hidden(self, client, organization_site):
        """Should only return active and visible instances."""
        site_id = organization_site.id
        hidden = create(client, site_id, 'text', 'content').get_json()
        shown = create(client, site_id, 'text', 'content').get_json()
        client.patch(
            f"/api/sites/{site_id}/widgets/{hidden['id']}",
            data=json.dumps({'is_visible': False}),
            content_type='application/json'
        )

        data = client.get(f'/api/sites/{site_id}/widgets/published').get_json()
        assert [w['id'] for w in data] == [shown['id']]


class TestCreateSiteWidget:
    """Tests for POST /api/sites/{id}/widgets."""

    def test_create(self, client, organization_site):
        """Should answer 201 with the new instance."""
        response = create(client, organization_site.id, 'text', 'sidebar', {'title': 'News'})
        assert response.status_code == 201
        data = response.get_json()
        assert data['order'] == 1
        assert data['config'] == {'title': 'News'}
        assert data['settings'] == {'padding': '20px', 'margin': '0', 'border_radius': '0'}
        assert data['is_visible'] is True

    def test_position_not_allowed(self, client, organization_site):
        """Should answer 422 POSITION_NOT_ALLOWED and create nothing."""
        response = create(client, organization_site.id, 'gallery', 'sidebar')
        assert response.status_code == 422
        assert error_of(response) == {
            'message': "Widget 'gallery' is not allowed in position 'sidebar'",
            'code': 'POSITION_NOT_ALLOWED',
            'kind': 'PositionNotAllowed',
        }
        assert client.get(f'/api/sites/{organization_site.id}/widgets').get_json() == []

    def test_widget_not_allowed_for_site_type(self, client, sample_site):
        """Should answer 422 WIDGET_NOT_ALLOWED for top_donors on a main site."""
        response = create(client, sample_site.id, 'top_donors', 'sidebar')
        assert response.status_code == 422
        assert error_of(response)['kind'] == 'WidgetNotAllowed'

    def test_unknown_widget(self, client, organization_site):
        """Should answer 422 UNKNOWN_WIDGET."""
        response = create(client, organization_site.id, 'carousel', 'content')
        assert response.status_code == 422
        assert error_of(response)['kind'] == 'UnknownWidget'

    def test_unknown_position(self, client, organization_site):
        """Should answer 422 UNKNOWN_POSITION."""
        response = create(client, organization_site.id, 'text', 'popup')
        assert response.status_code == 422
        assert error_of(response)['kind'] == 'UnknownPosition'

    def test_invalid_config(self, client, organization_site):
        """Should answer 422 INVALID_CONFIG naming the field."""
        response = create(client, organization_site.id, 'text', 'content', {'text_color': 'blue'})
        assert response.status_code == 422
        assert error_of(response)['kind'] == 'InvalidConfig'
        assert 'text_color' in error_of(response)['message']

    def test_config_not_an_object(self, client, organization_site):
        """Should answer 422 INVALID_CONFIG for an empty list config."""
        response = create(client, organization_site.id, 'text', 'content', [])
        assert response.status_code == 422
        assert error_of(response)['kind'] == 'InvalidConfig'
        assert client.get(f'/api/sites/{organization_site.id}/widgets').get_json() == []

    def test_missing_fields(self, client, organization_site):
        """Should answer 400 when widget_slug is missing."""
        response = client.post(
            f'/api/sites/{organization_site.id}/widgets',
            data=json.dumps({'position_slug': 'content'}),
            content_type='application/json'
        )
        assert response.status_code == 400
        assert error_of(response)['code'] == 'INVALID_WIDGET_SLUG'

    def test_body_not_json(self, client, organization_site):
        """Should answer 400 for a body that is not a JSON object."""
        response = client.post(
            f'/api/sites/{organization_site.id}/widgets',
            data='widget_slug=text',
            content_type='application/x-www-form-urlencoded'
        )
        assert response.status_code == 400
        assert error_of(response)['kind'] == 'ValidationError'


class TestMoveSiteWidget:
    """Tests for POST /api/sites/{id}/widgets/{iid}/move."""

    def test_move(self, client, organization_site):
        """Should move and re-densify both positions."""
        site_id = organization_site.id
        a = create(client, site_id, 'text', 'content').get_json()
        b = create(client, site_id, 'text', 'content').get_json()
        s = create(client, site_id, 'menu', 'sidebar').get_json()

        response = client.post(
            f"/api/sites/{site_id}/widgets/{a['id']}/move",
            data=json.dumps({'position_slug': 'sidebar', 'order': 1}),
            content_type='application/json'
        )
        assert response.status_code == 200
        assert response.get_json()['position_slug'] == 'sidebar'
        assert response.get_json()['order'] == 1

        data = client.get(f'/api/sites/{site_id}/widgets').get_json()
        slots = {w['id']: (w['position_slug'], w['order']) for w in data}
        assert slots == {
            b['id']: ('content', 1),
            a['id']: ('sidebar', 1),
            s['id']: ('sidebar', 2),
        }

    def test_invalid_order(self, client, organization_site):
        """Should answer 400 INVALID_ORDER for order 0."""
        a = create(client, organization_site.id, 'text', 'content').get_json()
        response = client.post(
            f"/api/sites/{organization_site.id}/widgets/{a['id']}/move",
            data=json.dumps({'position_slug': 'content', 'order': 0}),
            content_type='application/json'
        )
        assert response.status_code == 400
        assert error_of(response)['code'] == 'INVALID_ORDER'

    def test_stale_instance(self, client, organization_site):
        """Should answer 404 INSTANCE_NOT_FOUND."""
        response = client.post(
            f'/api/sites/{organization_site.id}/widgets/deadbeef/move',
            data=json.dumps({'position_slug': 'content', 'order': 1}),
            content_type='application/json'
        )
        assert response.status_code == 404
        assert error_of(response)['kind'] == 'InstanceNotFound'

    def test_instance_of_other_site(self, client, organization_site, sample_site):
        """Should not reach instances through another site's URL."""
        a = create(client, sample_site.id, 'text', 'content').get_json()
        response = client.post(
            f"/api/sites/{organization_site.id}/widgets/{a['id']}/move",
            data=json.dumps({'position_slug': 'content', 'order': 1}),
            content_type='application/json'
        )
        assert response.status_code == 404


class TestUpdateSiteWidget:
    """Tests for PATCH /api/sites/{id}/widgets/{iid}."""

    def test_patch_config_and_toggles(self, client, organization_site):
        """Should merge config and apply toggles in one call."""
        site_id = organization_site.id
        a = create(client, site_id, 'text', 'content', {'title': 'Old'}).get_json()

        response = client.patch(
            f"/api/sites/{site_id}/widgets/{a['id']}",
            data=json.dumps({'config': {'content': '<p>Body</p>'}, 'is_active': False}),
            content_type='application/json'
        )
        assert response.status_code == 200
        data = response.get_json()
        assert data['config'] == {'title': 'Old', 'content': '<p>Body</p>'}
        assert data['is_active'] is False
        assert data['order'] == 1

    def test_patch_nothing(self, client, organization_site):
        """Should answer 400 for a body without updatable fields."""
        a = create(client, organization_site.id, 'text', 'content').get_json()
        response = client.patch(
            f"/api/sites/{organization_site.id}/widgets/{a['id']}",
            data=json.dumps({'order': 3}),
            content_type='application/json'
        )
        assert response.status_code == 400

    def test_patch_non_boolean_toggle(self, client, organization_site):
        """Should answer 400 INVALID_IS_VISIBLE."""
        a = create(client, organization_site.id, 'text', 'content').get_json()
        response = client.patch(
            f"/api/sites/{organization_site.id}/widgets/{a['id']}",
            data=json.dumps({'is_visible': 'false'}),
            content_type='application/json'
        )
        assert response.status_code == 400
        assert error_of(response)['code'] == 'INVALID_IS_VISIBLE'


class TestDeleteSiteWidget:
    """Tests for DELETE /api/sites/{id}/widgets/{iid}."""

    def test_delete(self, client, organization_site):
        """Should answer 204 and close the gap."""
        site_id = organization_site.id
        a = create(client, site_id, 'text', 'content').get_json()
        b = create(client, site_id, 'text', 'content').get_json()

        response = client.delete(f"/api/sites/{site_id}/widgets/{a['id']}")
        assert response.status_code == 204
        assert response.data == b''

        data = client.get(f'/api/sites/{site_id}/widgets').get_json()
        assert [(w['id'], w['order']) for w in data] == [(b['id'], 1)]

    def test_delete_twice(self, client, organization_site):
        """Should answer 404 for an already deleted instance."""
        a = create(client, organization_site.id, 'text', 'content').get_json()
        client.delete(f"/api/sites/{organization_site.id}/widgets/{a['id']}")

        response = client.delete(f"/api/sites/{organization_site.id}/widgets/{a['id']}")
        assert response.status_code == 404


class TestRequestId:
    """Tests for X-Request-ID handling."""

    def test_incoming_id_echoed(self, client, organization_site):
        """Should echo a caller supplied request id."""
        response = client.get(
            f'/api/sites/{organization_site.id}/widgets',
            headers={'X-Request-ID': 'trace-123'}
        )
        assert response.headers['X-Request-ID'] == 'trace-123'

    def test_id_generated(self, client, app):
        """Should generate an id when none is supplied."""
        response = client.get('/health')
        assert response.get_json() == {'status': 'healthy', 'service': 'sitebuilder'}
        assert len(response.headers['X-Request-ID']) == 32

    def test_unknown_route_uses_envelope(self, client, app):
        """Should answer unknown routes with the error envelope."""
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert error_of(response)['code'] == 'NOT_FOUND'
