"""
sublayouts.core.stack - The focus-centered Stack value.

A Stack is an ordered sequence of windows with one focused element.
Windows above the focus are kept nearest-first in `up`, windows below it
in order in `down`.  The flattened order is therefore:

    reversed(up) + [focus] + down

Stacks are immutable: every operation returns a new Stack (or None when
the result would be empty).
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass
from typing import Optional

# Window identifiers are opaque values supplied by the host.
WindowId = Hashable


@dataclass(frozen=True, slots=True)
class Stack:
    """Immutable focus-centered sequence of window identifiers."""

    focus: WindowId
    up: tuple[WindowId, ...] = ()
    down: tuple[WindowId, ...] = ()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_list(cls, items: Iterable[WindowId]) -> Optional[Stack]:
        """Build a Stack focused on the first item, or None if empty."""
        items = list(items)
        if not items:
            return None
        return cls(items[0], (), tuple(items[1:]))

    @classmethod
    def single(cls, window: WindowId) -> Stack:
        return cls(window)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def flatten(self) -> list[WindowId]:
        """Plain ordered list: above (reversed), focus, below."""
        return list(reversed(self.up)) + [self.focus] + list(self.down)

    def unfocused(self) -> list[WindowId]:
        """Every member except the focus."""
        return list(self.up) + list(self.down)

    def __contains__(self, window: object) -> bool:
        return window == self.focus or window in self.up or window in self.down

    def __iter__(self) -> Iterator[WindowId]:
        return iter(self.flatten())

    def __len__(self) -> int:
        return 1 + len(self.up) + len(self.down)

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------
    def filter(self, pred: Callable[[WindowId], bool]) -> Optional[Stack]:
        """
        Keep only the members that satisfy *pred*.

        If the focus survives it stays focused.  Otherwise the first
        surviving element below it takes the focus, then the nearest
        surviving element above it.  Returns None when nothing survives.
        """
        up = tuple(w for w in self.up if pred(w))
        down = tuple(w for w in self.down if pred(w))
        if pred(self.focus):
            return Stack(self.focus, up, down)
        if down:
            return Stack(down[0], up, down[1:])
        if up:
            return Stack(up[0], up[1:], ())
        return None

    def delete(self, window: WindowId) -> Optional[Stack]:
        return self.filter(lambda w: w != window)

    # ------------------------------------------------------------------
    # Focus movement
    # ------------------------------------------------------------------
    def focus_up(self) -> Stack:
        """Move focus one element up, wrapping to the bottom."""
        if self.up:
            return Stack(self.up[0], self.up[1:], (self.focus,) + self.down)
        if not self.down:
            return self
        rest = list(reversed((self.focus,) + self.down))
        return Stack(rest[0], tuple(rest[1:]), ())

    def focus_down(self) -> Stack:
        """Move focus one element down, wrapping to the top."""
        if self.down:
            return Stack(self.down[0], (self.focus,) + self.up, self.down[1:])
        if not self.up:
            return self
        rest = list(reversed((self.focus,) + self.up))
        return Stack(rest[0], (), tuple(rest[1:]))

    def focus_on(self, window: WindowId) -> Optional[Stack]:
        """Rotate focus down until *window* is focused; None if absent."""
        if window not in self:
            return None
        st = self
        while st.focus != window:
            st = st.focus_down()
        return st

    def focus_master(self) -> Stack:
        """Focus the first element, keeping the flattened order."""
        first, *rest = self.flatten()
        return Stack(first, (), tuple(rest))

    def swap_master(self) -> Stack:
        """Move the focused element to the top, keeping it focused."""
        return Stack(self.focus, (), tuple(reversed(self.up)) + self.down)

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------
    def insert_up(self, window: WindowId) -> Stack:
        """Insert *window* directly above the focus and focus it."""
        if window in self:
            return self
        return Stack(window, self.up, (self.focus,) + self.down)

    def __str__(self) -> str:
        parts = [f"*{w}*" if w == self.focus else str(w) for w in self.flatten()]
        return "[" + " ".join(parts) + "]"


# ============================================================================
# Helpers over optional stacks
# ============================================================================
def flatten(stack: Optional[Stack]) -> list[WindowId]:
    """Flatten a possibly-absent stack (empty list when None)."""
    return stack.flatten() if stack is not None else []


def insert_up(stack: Optional[Stack], window: WindowId) -> Stack:
    """Insert into a possibly-absent stack."""
    if stack is None:
        return Stack(window)
    return stack.insert_up(window)


def filter_stack(
    stack: Optional[Stack], pred: Callable[[WindowId], bool]
) -> Optional[Stack]:
    return stack.filter(pred) if stack is not None else None
