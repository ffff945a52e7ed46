"""
Site Widget Instance Store

Creates, moves, edits and deletes the widget instances of one site while
keeping every position's orders a dense 1..n sequence.

Renumbering runs inside a single transaction in two phases: rows whose slot
changes first get distinct negative orders, then their final ones. The
(site, position, order) unique constraint never sees a duplicate, and a
failure anywhere rolls the whole move back.
"""

import logging
from collections import OrderedDict
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Tuple

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models.site import Site
from ..models.site_widget import SiteWidgetInstance
from ..models.widget import WidgetDefinition
from ..models.widget_position import WidgetPosition
from ..utils.exceptions import (
    InstanceNotFoundError,
    PositionNotAllowedError,
    SiteNotFoundError,
    ValidationError,
    WidgetNotAllowedError,
)
from . import ordering
from .position_registry import WidgetPositionRegistry
from .widget_catalog import WidgetCatalog
from .widget_config import WidgetConfigSchema, merge_config

logger = logging.getLogger(__name__)


class SiteWidgetStore:
    """Widget placements of one site."""

    def __init__(
        self,
        site_id: int,
        catalog: Optional[WidgetCatalog] = None,
        registry: Optional[WidgetPositionRegistry] = None
    ):
        self.site_id = site_id
        self.catalog = catalog or WidgetCatalog()
        self.registry = registry or WidgetPositionRegistry(self.catalog)
        self._site = None

    @property
    def site(self) -> Site:
        if self._site is None:
            site = db.session.get(Site, self.site_id)
            if site is None:
                raise SiteNotFoundError(self.site_id)
            self._site = site
        return self._site

    # ==================== Reads ====================

    def get(self, instance_id: str) -> SiteWidgetInstance:
        """
        Get one instance of this site.

        Raises:
            InstanceNotFoundError: for unknown ids and ids of other sites
        """
        instance = SiteWidgetInstance.query.filter_by(id=instance_id, site_id=self.site_id).first()
        if instance is None:
            raise InstanceNotFoundError(instance_id)
        return instance

    def list_for_site(self) -> 'OrderedDict[str, List[SiteWidgetInstance]]':
        """All instances grouped by position slug, each group by order."""
        return self._grouped(self._query().all())

    def list_published(self) -> 'OrderedDict[str, List[SiteWidgetInstance]]':
        """What visitors see: active and visible instances only."""
        rows = self._query().filter(
            SiteWidgetInstance.is_active.is_(True),
            SiteWidgetInstance.is_visible.is_(True),
        ).all()
        return self._grouped(rows)

    def count_by_position(self) -> Dict[str, int]:
        """Instance counts per position; inactive instances do not count."""
        rows = (
            db.session.query(SiteWidgetInstance.position_slug, func.count(SiteWidgetInstance.id))
            .filter_by(site_id=self.site_id, is_active=True)
            .group_by(SiteWidgetInstance.position_slug)
            .all()
        )
        return {slug: count for slug, count in rows}

    # ==================== Mutations ====================

    def create(
        self,
        widget_slug: str,
        position_slug: str,
        initial_config: Optional[Dict[str, Any]] = None
    ) -> SiteWidgetInstance:
        """
        Place a catalog widget at the end of a position.

        Raises:
            UnknownPositionError, PositionNotAllowedError,
            UnknownWidgetError, WidgetNotAllowedError, InvalidConfigError
        """
        definition, position = self._validate_placement(widget_slug, position_slug)

        schema = WidgetConfigSchema.for_definition(definition)
        if initial_config is None:
            initial_config = {}
        config = merge_config(schema.defaults(), self._clean_config(schema, initial_config))
        settings = WidgetConfigSchema.settings_for_definition(definition).defaults()

        with self._transaction():
            self._lock(position.slug)
            max_order = (
                db.session.query(func.max(SiteWidgetInstance.order))
                .filter_by(site_id=self.site_id, position_slug=position.slug)
                .scalar()
            )
            instance = SiteWidgetInstance(
                site_id=self.site_id,
                widget_slug=definition.slug,
                position_slug=position.slug,
                order=(max_order or 0) + 1,
                config=config,
                settings=settings,
            )
            db.session.add(instance)

        logger.info(
            f'Site {self.site_id}: placed {definition.slug} at {position.slug}#{instance.order} ({instance.id})'
        )
        return instance

    def move(self, instance_id: str, target_position_slug: str, target_order: int) -> SiteWidgetInstance:
        """
        Move an instance to ``target_order`` of a (possibly different) position.

        Everything at or after the target order shifts up, the gap in the
        source position closes. Orders past the end append.

        Raises:
            ValidationError: if target_order is not a positive integer
            InstanceNotFoundError, UnknownPositionError,
            PositionNotAllowedError, WidgetNotAllowedError
        """
        if isinstance(target_order, bool) or not isinstance(target_order, int) or target_order < 1:
            raise ValidationError('order must be a positive integer', 'order')

        instance = self.get(instance_id)
        _, position = self._validate_placement(instance.widget_slug, target_position_slug)
        source_slug = instance.position_slug

        with self._transaction():
            rows, before = self._layout({source_slug, position.slug}, lock=True)
            self._apply(rows, ordering.move(before, instance.id, position.slug, target_order))

        logger.info(
            f'Site {self.site_id}: moved {instance.id} from {source_slug} '
            f'to {instance.position_slug}#{instance.order}'
        )
        return instance

    def update_config(self, instance_id: str, partial_config: Dict[str, Any]) -> SiteWidgetInstance:
        """Validate against the widget's schema, then shallow-merge."""
        return self.update(instance_id, config=partial_config)

    def set_visibility(self, instance_id: str, is_visible: bool) -> SiteWidgetInstance:
        """Hide from visitors (editors still see a placeholder). Orders untouched."""
        return self.update(instance_id, is_visible=is_visible)

    def set_active(self, instance_id: str, is_active: bool) -> SiteWidgetInstance:
        """Suppress or restore the instance entirely. Orders untouched."""
        return self.update(instance_id, is_active=is_active)

    def update(
        self,
        instance_id: str,
        config: Optional[Dict[str, Any]] = None,
        is_visible: Optional[bool] = None,
        is_active: Optional[bool] = None,
        settings: Optional[Dict[str, Any]] = None
    ) -> SiteWidgetInstance:
        """
        Apply a partial update: everything is validated before anything is
        written, and it is committed once.
        """
        instance = self.get(instance_id)

        for name, value in (('is_visible', is_visible), ('is_active', is_active)):
            if value is not None and not isinstance(value, bool):
                raise ValidationError(f'{name} must be a boolean', name)

        new_config = None
        if config is not None:
            schema = WidgetConfigSchema.for_definition(instance.definition)
            new_config = merge_config(instance.config, self._clean_config(schema, config))

        new_settings = None
        if settings is not None:
            schema = WidgetConfigSchema.settings_for_definition(instance.definition)
            new_settings = merge_config(instance.settings, self._clean_config(schema, settings))

        with self._transaction():
            if new_config is not None:
                instance.config = new_config
            if new_settings is not None:
                instance.settings = new_settings
            if is_visible is not None:
                instance.is_visible = is_visible
            if is_active is not None:
                instance.is_active = is_active

        return instance

    def delete(self, instance_id: str) -> None:
        """Remove an instance and close the gap it leaves."""
        instance = self.get(instance_id)
        position_slug = instance.position_slug

        with self._transaction():
            rows, before = self._layout({position_slug}, lock=True)
            db.session.delete(instance)
            # Deletes flush after updates by default; free the order first
            db.session.flush()
            rows.pop(instance.id, None)
            self._apply(rows, ordering.remove(before, instance.id))

        logger.info(f'Site {self.site_id}: deleted {instance_id} from {position_slug}')

    def repair_orders(self) -> int:
        """
        Re-densify every position of the site.

        Returns:
            Number of instances whose order changed
        """
        with self._transaction():
            rows, current = self._layout(None, lock=True)
            # Rows come sorted by (order, created_at, id), so the loaded
            # layout already is the dense target
            repaired = self._apply(rows, current)

        if repaired:
            logger.warning(f'Site {self.site_id}: repaired order of {repaired} instance(s)')
        return repaired

    # ==================== Internals ====================

    def _validate_placement(self, widget_slug: str, position_slug: str) -> Tuple[WidgetDefinition, WidgetPosition]:
        """
        Check a widget may sit in a position of this site.

        The allow-list is checked before the widget lookup, so a slug the
        position excludes is always PositionNotAllowed.
        """
        site = self.site
        position = self.registry.get(site.template_id, position_slug)

        if not position.is_widget_allowed(widget_slug):
            raise PositionNotAllowedError(widget_slug, position_slug)

        definition = self.catalog.get(widget_slug)
        if not definition.is_active:
            raise WidgetNotAllowedError(widget_slug, 'widget is inactive')
        if not definition.permits_site_type(site.site_type):
            raise WidgetNotAllowedError(widget_slug, f"not available for '{site.site_type}' sites")

        return definition, position

    def _clean_config(self, schema: WidgetConfigSchema, partial: Any) -> Dict[str, Any]:
        if not current_app.config.get('WIDGET_CONFIG_VALIDATION', True):
            if not isinstance(partial, dict):
                raise ValidationError('config must be an object', 'config')
            return dict(partial)
        return schema.validate_partial(partial)

    def _query(self):
        return SiteWidgetInstance.query.filter_by(site_id=self.site_id).order_by(
            SiteWidgetInstance.position_slug,
            SiteWidgetInstance.order,
            SiteWidgetInstance.created_at,
            SiteWidgetInstance.id,
        )

    def _lock(self, position_slug: str) -> None:
        # Row locks on Postgres; SQLite serializes writers anyway
        self._query().filter_by(position_slug=position_slug).with_for_update(of=SiteWidgetInstance).all()

    def _layout(
        self,
        position_slugs: Optional[Iterable[str]],
        lock: bool = False
    ) -> Tuple[Dict[str, SiteWidgetInstance], ordering.Layout]:
        """Load rows of the given positions (all when None) and their layout."""
        query = self._query()
        if position_slugs is not None:
            query = query.filter(SiteWidgetInstance.position_slug.in_(list(position_slugs)))
        if lock:
            query = query.with_for_update(of=SiteWidgetInstance)

        rows = OrderedDict()
        layout: ordering.Layout = {}
        for row in query.all():
            rows[row.id] = row
            layout.setdefault(row.position_slug, []).append(row.id)
        return rows, layout

    def _apply(self, rows: Dict[str, SiteWidgetInstance], target: ordering.Layout) -> int:
        """Write the slots of ``target`` that differ from the stored ones."""
        changed = {
            instance_id: slot
            for instance_id, slot in ordering.assignments(target).items()
            if (rows[instance_id].position_slug, rows[instance_id].order) != slot
        }
        if not changed:
            return 0

        # Phase 1: park every moving row on a distinct negative order
        for index, (instance_id, (position_slug, _)) in enumerate(changed.items(), start=1):
            row = rows[instance_id]
            row.position_slug = position_slug
            row.order = -index
        db.session.flush()

        # Phase 2: final orders, free of collisions now
        for instance_id, (_, order) in changed.items():
            rows[instance_id].order = order
        db.session.flush()
        return len(changed)

    def _grouped(self, rows: List[SiteWidgetInstance]) -> 'OrderedDict[str, List[SiteWidgetInstance]]':
        """Group rows by position, positions in template order."""
        by_slug: Dict[str, List[SiteWidgetInstance]] = {}
        for row in rows:
            by_slug.setdefault(row.position_slug, []).append(row)

        grouped = OrderedDict()
        for position in self.registry.list_for_template(self.site.template_id):
            if position.slug in by_slug:
                grouped[position.slug] = by_slug.pop(position.slug)
        # Instances left in positions that were deactivated since
        for slug in sorted(by_slug):
            grouped[slug] = by_slug[slug]
        return grouped

    @contextmanager
    def _transaction(self):
        try:
            yield
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise


def flatten(grouped: Dict[str, List[SiteWidgetInstance]]) -> List[SiteWidgetInstance]:
    """Grouped instances as one list, group order preserved."""
    return [instance for instances in grouped.values() for instance in instances]
