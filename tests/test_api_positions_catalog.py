"""
Tests for the catalog and template position API endpoints.

Tests cover:
- GET /api/widgets with site type, category and search filters
- GET /api/widgets/categories and /api/widgets/{slug}/config
- GET /api/templates/{id}/widget-positions (flat, by area, grouped)
- Widgets allowed in a position, position layout updates
"""
import json


class TestCatalogEndpoints:
    """Tests for /api/widgets."""

    def test_list_widgets(self, client, app):
        """Should return active widgets in sort order."""
        response = client.get('/api/widgets')
        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['data'][0]['slug'] == 'menu'
        assert len(data['data']) == 12

    def test_site_type_filter(self, client, app):
        """Should hide top_donors from main sites."""
        data = client.get('/api/widgets?site_type=main').get_json()['data']
        slugs = {w['slug'] for w in data}
        assert 'top_donors' not in slugs
        assert 'region_rating' in slugs

    def test_category_and_search(self, client, app):
        """Should combine category and search filters."""
        data = client.get('/api/widgets?category=content&search=donor').get_json()['data']
        assert [w['slug'] for w in data] == ['top_donors']

    def test_categories(self, client, app):
        """Should list categories with display names."""
        data = client.get('/api/widgets/categories').get_json()['data']
        assert {'slug': 'media', 'name': 'Media'} in data

    def test_widget_config(self, client, app):
        """Should describe fields, defaults and settings of a widget."""
        response = client.get('/api/widgets/projects/config')
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['widget']['slug'] == 'projects'
        assert data['config']['fields']['limit']['max'] == 20
        assert data['defaults']['limit'] == 6
        assert 'animation' in data['settings_config']

    def test_widget_config_unknown(self, client, app):
        """Should answer 422 UNKNOWN_WIDGET."""
        response = client.get('/api/widgets/carousel/config')
        assert response.status_code == 422
        assert response.get_json()['error']['kind'] == 'UnknownWidget'


class TestPositionEndpoints:
    """Tests for /api/templates/{id}/widget-positions."""

    def test_list_positions(self, client, sample_template):
        """Should list active positions in order."""
        response = client.get(f'/api/templates/{sample_template.id}/widget-positions')
        assert response.status_code == 200
        slugs = [p['slug'] for p in response.get_json()['data']]
        assert slugs == ['header', 'hero', 'content', 'sidebar', 'footer']

    def test_area_filter(self, client, sample_template):
        """Should only return positions of the area."""
        data = client.get(f'/api/templates/{sample_template.id}/widget-positions?area=footer').get_json()['data']
        assert [p['slug'] for p in data] == ['footer']
        assert data[0]['allowed_widgets'] == ['text', 'menu', 'image']

    def test_grouped(self, client, sample_template):
        """Should group positions by area."""
        data = client.get(f'/api/templates/{sample_template.id}/widget-positions?grouped=1').get_json()['data']
        assert data['sidebar'][0]['slug'] == 'sidebar'
        assert set(data) == {'header', 'hero', 'content', 'sidebar', 'footer'}

    def test_position_widgets(self, client, sample_template):
        """Should intersect the allow-list with the site type's catalog."""
        response = client.get(
            f'/api/templates/{sample_template.id}/widget-positions/hero/widgets?site_type=organization'
        )
        assert response.status_code == 200
        assert [w['slug'] for w in response.get_json()['data']] == ['hero', 'image', 'gallery']

    def test_position_widgets_unknown_position(self, client, sample_template):
        """Should answer 422 UNKNOWN_POSITION."""
        response = client.get(f'/api/templates/{sample_template.id}/widget-positions/popup/widgets')
        assert response.status_code == 422
        assert response.get_json()['error']['code'] == 'UNKNOWN_POSITION'

    def test_update_layout(self, client, sample_template):
        """Should merge layout hints into the position."""
        response = client.patch(
            f'/api/templates/{sample_template.id}/widget-positions/content/layout',
            data=json.dumps({'layout_config': {'width': 'wide'}}),
            content_type='application/json'
        )
        assert response.status_code == 200
        assert response.get_json()['data']['layout_config'] == {'width': 'wide'}

    def test_update_layout_requires_object(self, client, sample_template):
        """Should answer 400 when layout_config is missing."""
        response = client.patch(
            f'/api/templates/{sample_template.id}/widget-positions/content/layout',
            data=json.dumps({}),
            content_type='application/json'
        )
        assert response.status_code == 400
        assert response.get_json()['error']['code'] == 'INVALID_LAYOUT_CONFIG'
