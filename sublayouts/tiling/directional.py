"""
sublayouts.tiling.directional - Directional group operations.

Resolves "the window to the left/right/up/down" from the placements of
the last redraw and uses it to merge groups:

    - pull_group:  merge the neighbour's group into ours.
    - push_group:  merge our group into the neighbour's.
    - pull_window: take only the neighbour window out of its group and
      merge it into ours.
    - push_window: take only the focused window out of its group and
      merge it into the neighbour's.

The geometric search compares rectangle centers and picks the closest
window on the primary axis of the direction, with the secondary axis
as tiebreaker.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Optional

from sublayouts.core.messages import (
    Merge,
    Message,
    SubMessage,
    UnMerge,
    WithGroup,
)
from sublayouts.core.stack import Stack, WindowId
from sublayouts.tiling.rect import Rect

if TYPE_CHECKING:
    from sublayouts.tiling.workspace import Workspace

log = logging.getLogger(__name__)


class Direction(enum.Enum):
    """Cardinal directions for navigation and merge operations."""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


def find_nearest_window(
    focused: WindowId,
    candidates: Mapping[WindowId, Rect],
    direction: Direction,
) -> Optional[WindowId]:
    """
    Find the nearest window in a given direction from the focused window.

    The algorithm:
        1. Compute the center of the focused window's rectangle.
        2. Keep the candidates whose center lies in the requested
           direction (e.g. for LEFT, candidate.cx < focused.cx).
        3. Pick the closest by distance on the primary axis, with the
           secondary axis distance as tiebreaker.

    Args:
        focused:    The currently focused window.
        candidates: Rectangle of every visible window (focused included).
        direction:  The direction to search.

    Returns:
        The nearest window in that direction, or None if there is none.
    """
    origin = candidates.get(focused)
    if origin is None:
        return None

    fx, fy = origin.center
    best: Optional[WindowId] = None
    best_primary: float = float("inf")
    best_secondary: float = float("inf")

    for window, rect in candidates.items():
        if window == focused:
            continue

        cx, cy = rect.center
        dx = cx - fx
        dy = cy - fy

        if direction is Direction.LEFT and dx < 0:
            primary, secondary = abs(dx), abs(dy)
        elif direction is Direction.RIGHT and dx > 0:
            primary, secondary = abs(dx), abs(dy)
        elif direction is Direction.UP and dy < 0:
            primary, secondary = abs(dy), abs(dx)
        elif direction is Direction.DOWN and dy > 0:
            primary, secondary = abs(dy), abs(dx)
        else:
            continue

        if (primary < best_primary) or (
            primary == best_primary and secondary < best_secondary
        ):
            best = window
            best_primary = primary
            best_secondary = secondary

    return best


# ============================================================================
# Merge helpers
# ============================================================================
def _merge_nav(
    ws: Workspace,
    direction: Direction,
    action: Callable[[WindowId, WindowId], bool],
    label: str,
) -> bool:
    """Run *action(other, current)* against the neighbour in *direction*."""
    current = ws.focused
    if current is None:
        return False

    other = ws.window_in_direction(direction)
    if other is None:
        log.debug("%s_%s: no window in that direction", label, direction.value)
        return False

    changed = action(other, current)
    log.info("%s_%s: %s / %s -> %s", label, direction.value, current, other, changed)
    return changed


def pull_group(ws: Workspace, direction: Direction) -> bool:
    """Merge the neighbour's group into the focused one."""
    return _merge_nav(
        ws, direction, lambda o, c: ws.send_message(Merge(o, c)), "pull_group"
    )


def push_group(ws: Workspace, direction: Direction) -> bool:
    """Merge the focused group into the neighbour's group."""
    return _merge_nav(
        ws, direction, lambda o, c: ws.send_message(Merge(c, o)), "push_group"
    )


def pull_window(ws: Workspace, direction: Direction) -> bool:
    """Take the neighbour window out of its group and merge it into ours."""

    def action(other: WindowId, current: WindowId) -> bool:
        ws.send_message(UnMerge(other))
        ws.modifier.reconcile(ws)
        return ws.send_message(Merge(other, current))

    return _merge_nav(ws, direction, action, "pull_window")


def push_window(ws: Workspace, direction: Direction) -> bool:
    """Take the focused window out of its group and merge it into the neighbour's."""

    def action(other: WindowId, current: WindowId) -> bool:
        ws.send_message(UnMerge(current))
        ws.modifier.reconcile(ws)
        return ws.send_message(Merge(current, other))

    return _merge_nav(ws, direction, action, "push_window")


# ============================================================================
# Focused-group helpers
# ============================================================================
def merge_dir(
    ws: Workspace, select: Callable[[Stack], Stack], window: WindowId
) -> WithGroup:
    """
    Build a WithGroup command that merges the group of *window* with the
    window chosen by *select* from the workspace stack with the group's
    members removed.

    Example: merge_dir(ws, Stack.focus_down, ws.focused) merges with the
    next group down the stack.
    """

    def transform(group: Stack) -> Stack:
        members = set(group.flatten())
        stack = ws.stack
        others = stack.filter(lambda w: w not in members) if stack is not None else None
        if others is not None:
            ws.send_message(Merge(group.focus, select(others).focus))
        return group

    return WithGroup(transform, window)


def on_group(ws: Workspace, fn: Callable[[Stack], Stack]) -> bool:
    """Apply *fn* to the Stack of the focused window's group."""
    focused = ws.focused
    if focused is None:
        return False
    return ws.send_message(WithGroup(fn, focused))


def to_subl(ws: Workspace, message: Message) -> bool:
    """Send *message* to the inner layout of the focused window's group."""
    focused = ws.focused
    if focused is None:
        return False
    return ws.send_message(SubMessage(message, focused))
