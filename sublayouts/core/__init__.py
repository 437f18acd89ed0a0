"""
sublayouts.core - Core values and commands.

This package contains:
    - stack        : Stack, the focus-centered sequence of windows
    - messages     : Layout messages and group commands
    - commands     : CommandDispatcher and the named group commands
    - combo_parser : Key combo strings for keymaps
"""

from sublayouts.core.stack import Stack, WindowId
from sublayouts.core.messages import (
    Broadcast,
    Merge,
    MergeAll,
    Message,
    SubMessage,
    UnMerge,
    UnMergeAll,
    WithGroup,
)
from sublayouts.core.commands import CommandDispatcher, build_group_commands

__all__ = [
    "Stack", "WindowId",
    "Message", "SubMessage", "Broadcast", "WithGroup",
    "Merge", "UnMerge", "MergeAll", "UnMergeAll",
    "CommandDispatcher", "build_group_commands",
]
