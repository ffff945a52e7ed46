"""
Tests for the flask CLI commands.
"""
from sitebuilder.extensions import db
from sitebuilder.models import SiteTemplate, WidgetDefinition, WidgetPosition
from sitebuilder.services import SiteWidgetStore


class TestDbInit:

    def test_creates_tables(self, runner):
        result = runner.invoke(args=['db-init'])
        assert result.exit_code == 0
        assert 'Database tables created' in result.output


class TestCatalogCommands:
    """Tests for flask catalog ..."""

    def test_seed_is_idempotent(self, runner):
        """Should upsert by slug without duplicating definitions."""
        result = runner.invoke(args=['catalog', 'seed'])
        assert result.exit_code == 0
        assert 'Seeded 12 widget definitions' in result.output
        assert WidgetDefinition.query.count() == 12

    def test_list_for_site_type(self, runner):
        """Should hide widgets restricted to other site types."""
        result = runner.invoke(args=['catalog', 'list', '--site-type', 'main'])
        assert result.exit_code == 0
        assert 'region_rating' in result.output
        assert 'top_donors' not in result.output

    def test_remove_unused(self, runner):
        result = runner.invoke(args=['catalog', 'remove', 'form'])
        assert result.exit_code == 0
        assert 'Removed widget form' in result.output
        assert WidgetDefinition.query.filter_by(slug='form').first() is None

    def test_remove_in_use_refused(self, runner, store):
        """Should refuse while a site still places the widget."""
        store.create('text', 'content')

        result = runner.invoke(args=['catalog', 'remove', 'text'])
        assert result.exit_code != 0
        assert 'text' in result.output
        assert WidgetDefinition.query.filter_by(slug='text').first() is not None

    def test_remove_unknown(self, runner):
        result = runner.invoke(args=['catalog', 'remove', 'carousel'])
        assert result.exit_code != 0


class TestTemplateCommands:
    """Tests for flask templates seed."""

    def test_seed_templates(self, runner):
        result = runner.invoke(args=['templates', 'seed'])
        assert result.exit_code == 0
        assert 'Created template default' in result.output

        templates = SiteTemplate.query.all()
        assert {t.slug for t in templates} == {'default', 'modern', 'minimal', 'corporate'}
        for template in templates:
            assert WidgetPosition.query.filter_by(template_id=template.id).count() == 5

    def test_seed_twice(self, runner):
        """Should leave existing templates and positions alone."""
        runner.invoke(args=['templates', 'seed'])
        result = runner.invoke(args=['templates', 'seed'])

        assert result.exit_code == 0
        assert 'Created template' not in result.output
        assert 'default: 0 new positions' in result.output
        assert SiteTemplate.query.count() == 4


class TestSiteCommands:
    """Tests for flask sites repair-orders."""

    def test_repair_orders(self, runner, store):
        a = store.create('text', 'content')
        b = store.create('text', 'content')
        a.order, b.order = 3, 7
        db.session.commit()

        result = runner.invoke(args=['sites', 'repair-orders', '--site-id', str(store.site_id)])
        assert result.exit_code == 0
        assert f'Site {store.site_id}: 2 widget(s) renumbered' in result.output
        assert 'TOTAL: 2 widget(s) renumbered across 1 site(s)' in result.output
        assert [i.order for i in store.list_for_site()['content']] == [1, 2]

    def test_repair_all_sites(self, runner, store, sample_site):
        result = runner.invoke(args=['sites', 'repair-orders'])
        assert result.exit_code == 0
        assert 'TOTAL: 0 widget(s) renumbered across 2 site(s)' in result.output

    def test_unknown_site(self, runner, app):
        result = runner.invoke(args=['sites', 'repair-orders', '--site-id', '999'])
        assert 'Site 999 not found' in result.output
