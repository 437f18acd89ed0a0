"""
sublayouts.core.messages - Message vocabulary.

Two families of messages travel through a workspace:

  - Layout messages, understood by arrangements (NextLayout, Shrink, ...).
  - Group commands, understood by the Sublayout modifier (Merge, UnMerge,
    SubMessage, ...).

Every concrete message class is registered by name on definition so
that queued messages can be saved and restored (see
sublayouts.tiling.persistence).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

from sublayouts.core.stack import Stack, WindowId

# name -> message class, filled by Message.__init_subclass__
MESSAGE_TYPES: dict[str, type[Message]] = {}


class Message:
    """Base class for everything that can be sent to a layout."""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        MESSAGE_TYPES[cls.__name__] = cls


# ============================================================================
# Layout messages
# ============================================================================
class LayoutMessage(Message):
    """Messages meant for arrangements."""


@dataclass(frozen=True, slots=True)
class NextLayout(LayoutMessage):
    """Cycle to the next configured variant."""


@dataclass(frozen=True, slots=True)
class PrevLayout(LayoutMessage):
    """Cycle to the previous configured variant."""


@dataclass(frozen=True, slots=True)
class JumpToLayout(LayoutMessage):
    """Select a variant by its LayoutType value (e.g. "tall")."""

    name: str


@dataclass(frozen=True, slots=True)
class Shrink(LayoutMessage):
    """Shrink the master area."""

    step: float = 0.05


@dataclass(frozen=True, slots=True)
class Expand(LayoutMessage):
    """Expand the master area."""

    step: float = 0.05


@dataclass(frozen=True, slots=True)
class IncMasterN(LayoutMessage):
    """Change the number of windows in the master area."""

    delta: int = 1


@dataclass(frozen=True, slots=True)
class IncGap(LayoutMessage):
    """Change the gap between windows (negative to decrease)."""

    delta: int = 2


# ============================================================================
# Group commands
# ============================================================================
class GroupMessage(Message):
    """Commands handled by the Sublayout modifier itself."""


@dataclass(frozen=True, slots=True)
class SubMessage(GroupMessage):
    """Deliver *message* to the inner arrangement of *window*'s group."""

    message: Message
    window: WindowId


@dataclass(frozen=True, slots=True)
class Broadcast(GroupMessage):
    """Deliver *message* to every inner arrangement."""

    message: Message


# Stack transform applied by WithGroup.  Returning None means "no change".
GroupTransform = Callable[[Stack], Optional[Stack]]


@dataclass(frozen=True, slots=True)
class WithGroup(GroupMessage):
    """Apply *transform* to the Stack of the group that owns *window*."""

    transform: GroupTransform
    window: WindowId


@dataclass(frozen=True, slots=True)
class Merge(GroupMessage):
    """Merge the group of *target* into the group of *source*.

    The resulting group is keyed by *source*; the members of *target*'s
    group are appended below it.
    """

    source: WindowId
    target: WindowId


@dataclass(frozen=True, slots=True)
class UnMerge(GroupMessage):
    """Free *window* from its group."""

    window: WindowId


@dataclass(frozen=True, slots=True)
class MergeAll(GroupMessage):
    """Make one large group, keeping *window* focused."""

    window: WindowId


@dataclass(frozen=True, slots=True)
class UnMergeAll(GroupMessage):
    """Explode every group into singleton groups."""

    window: Optional[WindowId] = None

