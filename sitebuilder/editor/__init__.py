"""
Client-side placement editor: drag and drop, optimistic updates, undo/redo.
"""
from .client import SiteBuilderClient, ApiError
from .drag import DragPayload, DropEligibility
from .history import EditorSnapshot, SnapshotHistory
from .placement_editor import (
    PlacementEditor,
    SyncState,
    EditorError,
    EditorBusy,
    NoActiveDrag,
    NEWLY_ADDED_SECONDS,
)

__all__ = [
    'SiteBuilderClient',
    'ApiError',
    'DragPayload',
    'DropEligibility',
    'EditorSnapshot',
    'SnapshotHistory',
    'PlacementEditor',
    'SyncState',
    'EditorError',
    'EditorBusy',
    'NoActiveDrag',
    'NEWLY_ADDED_SECONDS',
]
