"""
Drag and drop gesture types of the placement editor.
"""
from dataclasses import dataclass
from typing import Optional

CATALOG = 'catalog'
INSTANCE = 'instance'


@dataclass(frozen=True)
class DragPayload:
    """What is being dragged: a catalog widget or a placed instance."""
    kind: str
    value: str

    @classmethod
    def catalog(cls, widget_slug: str) -> 'DragPayload':
        return cls(CATALOG, widget_slug)

    @classmethod
    def instance(cls, instance_id: str) -> 'DragPayload':
        return cls(INSTANCE, instance_id)

    @property
    def is_catalog(self) -> bool:
        return self.kind == CATALOG


@dataclass(frozen=True)
class DropEligibility:
    """
    Client-side verdict while hovering a position.

    ``allowed=False`` only discourages the drop; the server decides.
    """
    position_slug: str
    allowed: bool
    reason: Optional[str] = None
