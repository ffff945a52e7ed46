"""
Dense ordering of widget instances within positions.

A layout is a mapping ``position_slug -> [instance_id, ...]`` where list index
``i`` means order ``i + 1``. Every function returns a new layout and leaves its
input untouched. The instance store plans its renumbering with these helpers,
and the placement editor uses the same ones for its optimistic updates, so
both sides always agree on the resulting orders.
"""
from typing import Dict, List, Optional, Tuple

Layout = Dict[str, List[str]]


def copy_layout(layout: Layout) -> Layout:
    return {slug: list(ids) for slug, ids in layout.items()}


def clamp_order(order: Optional[int], length: int) -> int:
    """Clamp a 1-based insert position into 1..length+1 (None appends)."""
    if order is None or order > length + 1:
        return length + 1
    if order < 1:
        return 1
    return order


def locate(layout: Layout, item_id: str) -> Optional[Tuple[str, int]]:
    """Return (position_slug, order) of an item, or None."""
    for slug, ids in layout.items():
        if item_id in ids:
            return slug, ids.index(item_id) + 1
    return None


def place(layout: Layout, item_id: str, position_slug: str, order: Optional[int] = None) -> Layout:
    """Insert an item; everything at or after ``order`` shifts up by one."""
    result = copy_layout(layout)
    ids = result.setdefault(position_slug, [])
    ids.insert(clamp_order(order, len(ids)) - 1, item_id)
    return result


def remove(layout: Layout, item_id: str) -> Layout:
    """Drop an item; everything after it shifts down by one."""
    result = copy_layout(layout)
    for ids in result.values():
        if item_id in ids:
            ids.remove(item_id)
            break
    return result


def move(layout: Layout, item_id: str, position_slug: str, order: Optional[int]) -> Layout:
    """Remove from the source sequence and insert into the target one."""
    return place(remove(layout, item_id), item_id, position_slug, order)


def assignments(layout: Layout) -> Dict[str, Tuple[str, int]]:
    """Flatten a layout into ``{instance_id: (position_slug, order)}``."""
    return {
        item_id: (slug, index + 1)
        for slug, ids in layout.items()
        for index, item_id in enumerate(ids)
    }

