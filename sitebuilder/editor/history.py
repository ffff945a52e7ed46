"""
Local editor state and its undo/redo history.

Snapshots are full copies of the editor's instances and layout. Undo and
redo only swap local snapshots; nothing reaches the server until the
editor saves.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..services import ordering


@dataclass
class EditorSnapshot:
    """Instances by id plus the position -> [instance ids] layout."""
    instances: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    layout: ordering.Layout = field(default_factory=dict)

    def copy(self) -> 'EditorSnapshot':
        return EditorSnapshot(copy.deepcopy(self.instances), ordering.copy_layout(self.layout))

    def renumber(self) -> None:
        """Write layout slots back into the instance dicts."""
        for instance_id, (position_slug, order) in ordering.assignments(self.layout).items():
            instance = self.instances.get(instance_id)
            if instance is not None:
                instance['position_slug'] = position_slug
                instance['order'] = order

    @classmethod
    def from_instances(cls, instances: List[Dict[str, Any]]) -> 'EditorSnapshot':
        snapshot = cls()
        for instance in sorted(instances, key=lambda i: (i['position_slug'], i['order'])):
            snapshot.instances[instance['id']] = dict(instance)
            snapshot.layout.setdefault(instance['position_slug'], []).append(instance['id'])
        snapshot.renumber()
        return snapshot


class SnapshotHistory:
    """Linear history; recording after an undo drops the redo branch."""

    def __init__(self, limit: int = 100):
        self.limit = limit
        self._entries: List[EditorSnapshot] = []
        self._cursor = -1

    def reset(self, snapshot: EditorSnapshot) -> None:
        self._entries = [snapshot.copy()]
        self._cursor = 0

    def record(self, snapshot: EditorSnapshot) -> None:
        del self._entries[self._cursor + 1:]
        self._entries.append(snapshot.copy())
        if len(self._entries) > self.limit:
            del self._entries[0]
        self._cursor = len(self._entries) - 1

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def undo(self) -> Optional[EditorSnapshot]:
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._entries[self._cursor].copy()

    def redo(self) -> Optional[EditorSnapshot]:
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._entries[self._cursor].copy()
