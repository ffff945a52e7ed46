"""
Tests for the widget position registry.

Tests cover:
- Deterministic ordering and area grouping
- Duplicate (template, slug) rejection
- Default position seeding
- Allow-lists and available widgets
- Layout config merging
"""
import pytest

from sitebuilder.extensions import db
from sitebuilder.models import SiteTemplate, WidgetPosition
from sitebuilder.services import WidgetPositionRegistry
from sitebuilder.utils.exceptions import (
    DuplicatePositionError,
    UnknownPositionError,
    ValidationError,
)


class TestListForTemplate:
    """Tests for listing positions."""

    def test_default_positions_in_page_order(self, sample_template):
        """Should order by order ascending."""
        slugs = [p.slug for p in WidgetPositionRegistry().list_for_template(sample_template.id)]
        assert slugs == ['header', 'hero', 'content', 'sidebar', 'footer']

    def test_ties_broken_by_slug(self, app):
        """Should order positions sharing an order by slug."""
        template = SiteTemplate(name='Ties', slug='ties')
        db.session.add(template)
        db.session.commit()

        registry = WidgetPositionRegistry()
        registry.add(template.id, 'zeta', order=1)
        registry.add(template.id, 'alpha', order=1)
        registry.add(template.id, 'first', order=0)

        slugs = [p.slug for p in registry.list_for_template(template.id)]
        assert slugs == ['first', 'alpha', 'zeta']

    def test_inactive_positions_skipped(self, sample_template):
        """Should not list inactive positions."""
        registry = WidgetPositionRegistry()
        registry.get(sample_template.id, 'footer').is_active = False
        db.session.commit()

        assert 'footer' not in [p.slug for p in registry.list_for_template(sample_template.id)]
        with pytest.raises(UnknownPositionError):
            registry.get(sample_template.id, 'footer')
        assert registry.get(sample_template.id, 'footer', include_inactive=True).slug == 'footer'

    def test_area_filter(self, sample_template):
        """Should return only positions of the area."""
        positions = WidgetPositionRegistry().list_for_template(sample_template.id, area='sidebar')
        assert [p.slug for p in positions] == ['sidebar']

    def test_grouped_by_area(self, sample_template):
        """Should group positions by area in page order."""
        grouped = WidgetPositionRegistry().grouped_by_area(sample_template.id)
        assert list(grouped) == ['header', 'hero', 'content', 'sidebar', 'footer']

    def test_unknown_template_is_empty(self, app):
        """Should list nothing for a template without positions."""
        assert WidgetPositionRegistry().list_for_template(9999) == []


class TestAdd:
    """Tests for the administrative write path."""

    def test_duplicate_slug_rejected(self, sample_template):
        """Should raise DuplicatePositionError for an existing (template, slug)."""
        with pytest.raises(DuplicatePositionError):
            WidgetPositionRegistry().add(sample_template.id, 'sidebar')

        assert WidgetPosition.query.filter_by(template_id=sample_template.id, slug='sidebar').count() == 1

    def test_same_slug_on_other_template(self, sample_template, open_template):
        """Should allow the same slug on a different template."""
        position = WidgetPositionRegistry().add(open_template.id, 'footer', area='footer', order=9)
        assert position.template_id == open_template.id

    def test_unknown_area_rejected(self, sample_template):
        """Should validate the area."""
        with pytest.raises(ValidationError):
            WidgetPositionRegistry().add(sample_template.id, 'banner', area='popup')

    def test_default_positions_skip_existing(self, sample_template):
        """Should not duplicate positions when seeding twice."""
        created = WidgetPositionRegistry().create_default_positions(sample_template)
        assert created == []
        assert sample_template.positions.count() == 5


class TestAllowedWidgets:
    """Tests for allow-lists."""

    def test_empty_allow_list_is_unrestricted(self, sample_template):
        """Should accept any widget when allowed_widgets is empty."""
        registry = WidgetPositionRegistry()
        content = registry.get(sample_template.id, 'content')
        assert registry.is_widget_allowed(content, 'gallery')
        assert registry.is_widget_allowed(content, 'anything')

    def test_allow_list_restricts(self, sample_template):
        """Should reject widgets missing from a non-empty allow-list."""
        registry = WidgetPositionRegistry()
        sidebar = registry.get(sample_template.id, 'sidebar')
        assert registry.is_widget_allowed(sidebar, 'text')
        assert not registry.is_widget_allowed(sidebar, 'hero')

    def test_available_widgets_applies_site_type(self, sample_template):
        """Should intersect the allow-list with the site type's catalog."""
        registry = WidgetPositionRegistry()

        main = {d.slug for d in registry.available_widgets(sample_template.id, 'sidebar', site_type='main')}
        org = {d.slug for d in registry.available_widgets(sample_template.id, 'sidebar', site_type='organization')}

        assert main == {'menu', 'text', 'stats', 'donations_list', 'donation'}
        assert org == main | {'top_donors'}


class TestUpdateLayout:
    """Tests for position layout hints."""

    def test_merges_layout_config(self, sample_template):
        """Should shallow-merge into the stored layout_config."""
        registry = WidgetPositionRegistry()
        registry.update_layout(sample_template.id, 'content', {'width': 'full'})
        position = registry.update_layout(sample_template.id, 'content', {'alignment': 'center'})

        assert position.layout_config == {'width': 'full', 'alignment': 'center'}

    def test_rejects_non_object(self, sample_template):
        """Should reject a layout_config that is not a dict."""
        with pytest.raises(ValidationError):
            WidgetPositionRegistry().update_layout(sample_template.id, 'content', ['full'])
