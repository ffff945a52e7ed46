"""
Placement Editor

Headless editing session for one site. Gestures update the local state
first and then call the API; each instance tracks where its last change
stands:

    PENDING -> COMMITTED   the server accepted it
    PENDING -> FAILED      the server refused it; local state rolls back to
                           the last committed snapshot

Only one request runs at a time. Undo and redo replace local state only;
``save()`` pushes the local snapshot to the server.
"""

import copy
import logging
import time
from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..services import ordering
from .client import ApiError, SiteBuilderClient
from .drag import DragPayload, DropEligibility
from .history import EditorSnapshot, SnapshotHistory

logger = logging.getLogger(__name__)

# How long a freshly dropped widget stays highlighted
NEWLY_ADDED_SECONDS = 3

PATCHABLE_FIELDS = ('config', 'settings', 'is_visible', 'is_active')


class SyncState(str, Enum):
    PENDING = 'pending'
    COMMITTED = 'committed'
    FAILED = 'failed'


class EditorError(Exception):
    """Gesture the editor cannot perform in its current state."""


class EditorBusy(EditorError):
    """A request is already in flight."""


class NoActiveDrag(EditorError):
    """hover/drop without begin_drag."""


class PlacementEditor:
    """
    Editing session driving the site widget API.

    Usage:
        editor = PlacementEditor(client, site_id=7, template_id=1, site_type='organization')
        editor.load()
        editor.begin_drag(DragPayload.catalog('text'))
        if editor.hover('sidebar').allowed:
            editor.drop('sidebar')
    """

    def __init__(
        self,
        client: SiteBuilderClient,
        site_id: int,
        template_id: int,
        site_type: str,
        clock: Callable[[], float] = time.monotonic
    ):
        self.client = client
        self.site_id = site_id
        self.template_id = template_id
        self.site_type = site_type
        self.clock = clock

        self.catalog: Dict[str, Dict[str, Any]] = {}
        self.positions: List[Dict[str, Any]] = []
        self.sidebar_position = 'right'

        self.state = EditorSnapshot()
        self._committed = EditorSnapshot()
        self.history = SnapshotHistory()
        self.sync_states: Dict[str, SyncState] = {}
        self.last_error: Optional[ApiError] = None

        self.drag: Optional[DragPayload] = None
        self.editing_instance_id: Optional[str] = None
        self._newly_added: Dict[str, float] = {}
        self._pending_ids = 0
        self._busy = False

    # ==================== Loading & reads ====================

    def load(self) -> None:
        """Fetch catalog, positions, instances and layout from the server."""
        with self._request():
            catalog = self.client.list_widgets(site_type=self.site_type)
            positions = self.client.list_positions(self.template_id)
            instances = self.client.list_instances(self.site_id)
            layout = self.client.get_layout(self.site_id)

        self.catalog = {widget['slug']: widget for widget in catalog}
        self.positions = positions
        self.sidebar_position = layout['sidebar_position']
        self._reset(EditorSnapshot.from_instances(instances))

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def has_unsaved_changes(self) -> bool:
        return self.state != self._committed

    def position(self, position_slug: str) -> Optional[Dict[str, Any]]:
        for position in self.positions:
            if position['slug'] == position_slug:
                return position
        return None

    def instance(self, instance_id: str) -> Dict[str, Any]:
        try:
            return self.state.instances[instance_id]
        except KeyError:
            raise EditorError(f'Unknown instance {instance_id}')

    def instances_in(self, position_slug: str) -> List[Dict[str, Any]]:
        """Instances of a position in order."""
        return [self.state.instances[i] for i in self.state.layout.get(position_slug, [])]

    def is_newly_added(self, instance_id: str) -> bool:
        expires_at = self._newly_added.get(instance_id)
        if expires_at is None:
            return False
        if self.clock() >= expires_at:
            del self._newly_added[instance_id]
            return False
        return True

    @property
    def newly_added_ids(self) -> List[str]:
        return [i for i in list(self._newly_added) if self.is_newly_added(i)]

    # ==================== Drag & drop ====================

    def begin_drag(self, payload: DragPayload) -> None:
        self._ensure_idle()
        if not payload.is_catalog:
            self.instance(payload.value)
        self.drag = payload

    def hover(self, position_slug: str) -> DropEligibility:
        """Pre-check a drop target against its allow-list."""
        if self.drag is None:
            raise NoActiveDrag('Nothing is being dragged')

        position = self.position(position_slug)
        if position is None:
            return DropEligibility(position_slug, False, 'unknown position')

        if self.drag.is_catalog:
            widget_slug = self.drag.value
            if widget_slug not in self.catalog:
                return DropEligibility(position_slug, False, 'widget not available for this site')
        else:
            widget_slug = self.instance(self.drag.value)['widget_slug']

        allowed_widgets = position.get('allowed_widgets') or []
        if allowed_widgets and widget_slug not in allowed_widgets:
            return DropEligibility(position_slug, False, 'widget not allowed in this position')

        return DropEligibility(position_slug, True)

    def drop(self, position_slug: str, order: Optional[int] = None) -> Dict[str, Any]:
        """
        Finish the drag: a catalog widget is created, an instance is moved.
        Without an order the drop lands at the end of the position.
        """
        if self.drag is None:
            raise NoActiveDrag('Nothing is being dragged')
        self._ensure_idle()

        payload, self.drag = self.drag, None
        if payload.is_catalog:
            return self.create(payload.value, position_slug, order)
        return self.move(payload.value, position_slug, order)

    def cancel_drag(self) -> None:
        self.drag = None

    # ==================== Mutations ====================

    def create(
        self,
        widget_slug: str,
        position_slug: str,
        order: Optional[int] = None,
        config: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Place a catalog widget; the new instance opens for editing."""
        self._pending_ids += 1
        temp_id = f'pending-{self._pending_ids}'
        widget = self.catalog.get(widget_slug, {})

        def change(state):
            state.instances[temp_id] = {
                'id': temp_id,
                'site_id': self.site_id,
                'widget_slug': widget_slug,
                'name': widget.get('name'),
                'config': dict(config or {}),
                'settings': {},
                'is_active': True,
                'is_visible': True,
            }
            state.layout = ordering.place(state.layout, temp_id, position_slug)

        created = self._optimistic(
            temp_id,
            change,
            lambda: self.client.create_instance(self.site_id, widget_slug, position_slug, config),
        )

        instance_id = created['id']
        self.sync_states.pop(temp_id, None)
        self._settle(instance_id, created, replaces=temp_id)

        self.editing_instance_id = instance_id
        self._newly_added[instance_id] = self.clock() + NEWLY_ADDED_SECONDS
        logger.info(f'Editor site {self.site_id}: added {widget_slug} to {position_slug}')

        if order is not None and order < len(self.state.layout[position_slug]):
            return self.move(instance_id, position_slug, order)
        return self.state.instances[instance_id]

    def move(self, instance_id: str, position_slug: str, order: Optional[int] = None) -> Dict[str, Any]:
        self.instance(instance_id)
        if order is None:
            others = [i for i in self.state.layout.get(position_slug, []) if i != instance_id]
            order = len(others) + 1

        def change(state):
            state.layout = ordering.move(state.layout, instance_id, position_slug, order)

        result = self._optimistic(
            instance_id,
            change,
            lambda: self.client.move_instance(self.site_id, instance_id, position_slug, order),
        )
        self._settle(instance_id, result)
        return self.state.instances[instance_id]

    def update_config(self, instance_id: str, partial_config: Dict[str, Any]) -> Dict[str, Any]:
        current = self.instance(instance_id).get('config') or {}
        return self._patch(instance_id, config=dict(current, **partial_config), send={'config': partial_config})

    def set_visibility(self, instance_id: str, is_visible: bool) -> Dict[str, Any]:
        return self._patch(instance_id, is_visible=is_visible)

    def set_active(self, instance_id: str, is_active: bool) -> Dict[str, Any]:
        return self._patch(instance_id, is_active=is_active)

    def toggle_visibility(self, instance_id: str) -> Dict[str, Any]:
        return self.set_visibility(instance_id, not self.instance(instance_id)['is_visible'])

    def toggle_active(self, instance_id: str) -> Dict[str, Any]:
        return self.set_active(instance_id, not self.instance(instance_id)['is_active'])

    def delete(self, instance_id: str) -> None:
        self.instance(instance_id)

        def change(state):
            state.layout = ordering.remove(state.layout, instance_id)
            del state.instances[instance_id]

        self._optimistic(
            instance_id,
            change,
            lambda: self.client.delete_instance(self.site_id, instance_id),
        )
        self.sync_states.pop(instance_id, None)
        self._newly_added.pop(instance_id, None)
        if self.editing_instance_id == instance_id:
            self.editing_instance_id = None
        self._settle(None)

    def toggle_sidebar(self) -> str:
        """Flip the sidebar side, reverting when the server refuses."""
        with self._request():
            previous = self.sidebar_position
            self.sidebar_position = 'left' if previous == 'right' else 'right'
            try:
                layout = self.client.save_layout(self.site_id, self.sidebar_position)
            except ApiError as e:
                logger.warning(f'Editor site {self.site_id}: sidebar change rejected ({e.kind}), reverting')
                self.sidebar_position = previous
                self.last_error = e
                raise
            self.sidebar_position = layout['sidebar_position']
        return self.sidebar_position

    def open_editor(self, instance_id: str) -> None:
        self.instance(instance_id)
        self.editing_instance_id = instance_id

    def close_editor(self) -> None:
        self.editing_instance_id = None

    # ==================== Undo / redo / save ====================

    def undo(self) -> bool:
        """Step back one committed change, locally only."""
        self._ensure_idle()
        snapshot = self.history.undo()
        if snapshot is None:
            return False
        self.state = snapshot
        self._forget_missing()
        return True

    def redo(self) -> bool:
        self._ensure_idle()
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self.state = snapshot
        self._forget_missing()
        return True

    def save(self) -> int:
        """
        Make the server match the local snapshot.

        Diffs against a fresh server listing, so a save that failed halfway
        can simply be retried. Instances restored by undo after a delete are
        created again under new ids. Clears the undo history.

        Returns:
            Number of mutating requests sent
        """
        with self._request():
            desired = self.state.copy()
            try:
                server = EditorSnapshot.from_instances(self.client.list_instances(self.site_id))
                sent = self._push(desired, server)
                instances = self.client.list_instances(self.site_id)
            except ApiError as e:
                logger.warning(f'Editor site {self.site_id}: save failed ({e.kind}: {e.message})')
                self.last_error = e
                raise

        self._reset(EditorSnapshot.from_instances(instances))
        logger.info(f'Editor site {self.site_id}: saved with {sent} request(s)')
        return sent

    # ==================== Internals ====================

    def _push(self, desired: EditorSnapshot, server: EditorSnapshot) -> int:
        sent = 0
        mirror = server.copy()

        for instance_id in list(server.instances):
            if instance_id not in desired.instances:
                self.client.delete_instance(self.site_id, instance_id)
                mirror.layout = ordering.remove(mirror.layout, instance_id)
                del mirror.instances[instance_id]
                sent += 1

        for position_slug, ids in desired.layout.items():
            for index, instance_id in enumerate(ids):
                if instance_id in mirror.instances:
                    continue
                local = desired.instances.pop(instance_id)
                created = self.client.create_instance(
                    self.site_id, local['widget_slug'], position_slug, local.get('config') or None
                )
                sent += 1
                ids[index] = created['id']
                desired.instances[created['id']] = dict(local, id=created['id'])
                mirror.instances[created['id']] = created
                mirror.layout = ordering.place(mirror.layout, created['id'], position_slug)

        for instance_id, local in desired.instances.items():
            remote = mirror.instances[instance_id]
            fields = {
                name: local.get(name)
                for name in PATCHABLE_FIELDS
                if local.get(name) is not None and local.get(name) != remote.get(name)
            }
            if fields:
                self.client.update_instance(self.site_id, instance_id, **fields)
                sent += 1

        # Filling each position front to back never disturbs slots already set
        for position_slug, ids in desired.layout.items():
            for order, instance_id in enumerate(ids, start=1):
                if ordering.locate(mirror.layout, instance_id) != (position_slug, order):
                    self.client.move_instance(self.site_id, instance_id, position_slug, order)
                    mirror.layout = ordering.move(mirror.layout, instance_id, position_slug, order)
                    sent += 1

        return sent

    def _patch(self, instance_id: str, send: Optional[Dict[str, Any]] = None, **fields: Any) -> Dict[str, Any]:
        self.instance(instance_id)
        payload = send if send is not None else fields

        result = self._optimistic(
            instance_id,
            lambda state: state.instances[instance_id].update(fields),
            lambda: self.client.update_instance(self.site_id, instance_id, **payload),
        )
        self._settle(instance_id, result)
        return self.state.instances[instance_id]

    def _optimistic(self, instance_id: str, change: Callable[[EditorSnapshot], None], send: Callable[[], Any]) -> Any:
        """
        Apply ``change`` locally, then ``send`` it; roll back on refusal.

        Once the server accepts, the same change is replayed on the
        committed snapshot, which tracks what the server holds even when
        undo has moved the local state elsewhere.
        """
        with self._request():
            change(self.state)
            self.state.renumber()
            self.sync_states[instance_id] = SyncState.PENDING
            try:
                result = send()
            except Exception as e:
                logger.warning(f'Editor site {self.site_id}: change to {instance_id} failed ({e}), rolling back')
                self.state = self._committed.copy()
                if instance_id in self.state.instances:
                    self.sync_states[instance_id] = SyncState.FAILED
                else:
                    # Placeholder of a refused create
                    self.sync_states.pop(instance_id, None)
                if isinstance(e, ApiError):
                    self.last_error = e
                raise

            change(self._committed)
            return result

    def _settle(
        self,
        instance_id: Optional[str],
        result: Optional[Dict[str, Any]] = None,
        replaces: Optional[str] = None
    ) -> None:
        """Store the server's answer in the local and committed snapshots."""
        for snapshot in (self.state, self._committed):
            if replaces is not None:
                del snapshot.instances[replaces]
                snapshot.layout = {
                    slug: [instance_id if i == replaces else i for i in ids]
                    for slug, ids in snapshot.layout.items()
                }
            if result is not None:
                snapshot.instances[instance_id] = copy.deepcopy(result)
            snapshot.renumber()

        if instance_id is not None:
            self.sync_states[instance_id] = SyncState.COMMITTED
        self.history.record(self.state)
        self.last_error = None

    def _reset(self, snapshot: EditorSnapshot) -> None:
        self.state = snapshot
        self._committed = snapshot.copy()
        self.history.reset(snapshot)
        self.sync_states = {instance_id: SyncState.COMMITTED for instance_id in snapshot.instances}
        self._forget_missing()

    def _forget_missing(self) -> None:
        if self.editing_instance_id not in self.state.instances:
            self.editing_instance_id = None
        for instance_id in list(self._newly_added):
            if instance_id not in self.state.instances:
                del self._newly_added[instance_id]

    def _ensure_idle(self) -> None:
        if self._busy:
            raise EditorBusy('Wait for the current request to finish')

    @contextmanager
    def _request(self):
        self._ensure_idle()
        self._busy = True
        try:
            yield
        finally:
            self._busy = False
