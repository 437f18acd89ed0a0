"""
sublayouts.core.commands - Named group commands.

Maps command name strings to group operations on a workspace, so that a
keymap can say "pull_group_left" or "group_next_layout" without knowing
which messages implement them.

The CommandDispatcher is the central registry:
    dispatcher = CommandDispatcher()
    build_group_commands(dispatcher, workspace)
    dispatcher.execute("merge_all")

It can also be used as a decorator:
    @dispatcher.command("unmerge", category="group")
    def unmerge() -> bool:
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from sublayouts.core.messages import (
    Expand,
    IncMasterN,
    MergeAll,
    NextLayout,
    PrevLayout,
    Shrink,
    UnMerge,
    UnMergeAll,
)
from sublayouts.core.stack import Stack

if TYPE_CHECKING:
    from sublayouts.tiling.workspace import Workspace

log = logging.getLogger(__name__)


# A command takes no arguments and reports whether it changed anything.
# Returning None counts as success.
CommandFn = Callable[[], Optional[bool]]


@dataclass(frozen=True, slots=True)
class Command:
    """Metadata for a registered command."""

    name: str
    fn: CommandFn
    description: str
    category: str


class CommandDispatcher:
    """Registry that maps command name strings to callables."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    @property
    def count(self) -> int:
        return len(self._commands)

    @property
    def command_names(self) -> list[str]:
        return sorted(self._commands)

    def register(
        self,
        name: str,
        fn: CommandFn,
        description: str = "",
        category: str = "general",
    ) -> None:
        """
        Register *fn* under *name*, replacing any previous command with
        the same name.
        """
        if name in self._commands:
            log.info("Command replaced: %s", name)
        self._commands[name] = Command(name, fn, description, category)
        log.debug("Command registered: %s (%s)", name, category)

    def execute(self, name: str) -> bool:
        """
        Run the command registered as *name*.

        Returns:
            False if the command is unknown, raised, or reported no
            change; True otherwise.
        """
        cmd = self._commands.get(name)
        if cmd is None:
            log.warning("Unknown command: %s", name)
            return False

        log.debug("Executing command: %s", name)
        try:
            result = cmd.fn()
        except Exception:
            log.exception("Error executing command: %s", name)
            return False

        return result is not False

    def get(self, name: str) -> Command | None:
        return self._commands.get(name)

    def has(self, name: str) -> bool:
        return name in self._commands

    def command(
        self,
        name: str,
        description: str = "",
        category: str = "general",
    ) -> Callable[[CommandFn], CommandFn]:
        """Decorator form of register()."""

        def decorator(fn: CommandFn) -> CommandFn:
            self.register(name, fn, description=description, category=category)
            return fn

        return decorator

    def list_commands(self, category: str | None = None) -> list[Command]:
        commands = list(self._commands.values())
        if category is not None:
            commands = [c for c in commands if c.category == category]
        return sorted(commands, key=lambda c: c.name)

    def dump_state(self) -> str:
        lines = [f"=== CommandDispatcher: {len(self._commands)} commands ===", ""]
        for cmd in self.list_commands():
            desc = f"  {cmd.description}" if cmd.description else ""
            lines.append(f"  [{cmd.category}] {cmd.name}{desc}")
        return "\n".join(lines)


def build_group_commands(dispatcher: CommandDispatcher, ws: Workspace) -> None:
    """
    Register the group commands for *ws* into *dispatcher*.

    Commands that need a focused window do nothing (and report False)
    on an empty workspace.
    """
    from sublayouts.tiling.directional import (
        Direction,
        on_group,
        pull_group,
        pull_window,
        push_group,
        push_window,
        to_subl,
    )

    # -- Directional merges --------------------------------------------
    def _make_dir(fn: Callable[[Workspace, Direction], bool], direction: Direction) -> CommandFn:
        return lambda: fn(ws, direction)

    for _name, _fn, _desc in (
        ("pull_group", pull_group, "Merge the neighbour's group into ours"),
        ("push_group", push_group, "Merge our group into the neighbour's"),
        ("pull_window", pull_window, "Pull the neighbour window into our group"),
        ("push_window", push_window, "Push the focused window into the neighbour's group"),
    ):
        for _dir in Direction:
            dispatcher.register(
                f"{_name}_{_dir.value}",
                _make_dir(_fn, _dir),
                description=f"{_desc} ({_dir.value})",
                category="merge",
            )

    # -- Whole-workspace grouping --------------------------------------
    @dispatcher.command("merge_all", description="Put every window in one group", category="merge")
    def merge_all() -> bool:
        focused = ws.focused
        return focused is not None and ws.send_message(MergeAll(focused))

    @dispatcher.command("unmerge", description="Take the focused window out of its group", category="merge")
    def unmerge() -> bool:
        focused = ws.focused
        return focused is not None and ws.send_message(UnMerge(focused))

    @dispatcher.command("unmerge_all", description="Split every group into single windows", category="merge")
    def unmerge_all() -> bool:
        return ws.send_message(UnMergeAll(ws.focused))

    # -- Focus and order inside the focused group ----------------------
    @dispatcher.command("group_focus_down", description="Next tab in the group", category="group")
    def group_focus_down() -> bool:
        return on_group(ws, Stack.focus_down)

    @dispatcher.command("group_focus_up", description="Previous tab in the group", category="group")
    def group_focus_up() -> bool:
        return on_group(ws, Stack.focus_up)

    @dispatcher.command("group_focus_master", description="First tab in the group", category="group")
    def group_focus_master() -> bool:
        return on_group(ws, Stack.focus_master)

    @dispatcher.command("group_swap_master", description="Move the focused tab first", category="group")
    def group_swap_master() -> bool:
        return on_group(ws, Stack.swap_master)

    # -- Inner layout of the focused group -----------------------------
    @dispatcher.command("group_next_layout", description="Next inner layout", category="sublayout")
    def group_next_layout() -> bool:
        return to_subl(ws, NextLayout())

    @dispatcher.command("group_prev_layout", description="Previous inner layout", category="sublayout")
    def group_prev_layout() -> bool:
        return to_subl(ws, PrevLayout())

    @dispatcher.command("group_shrink", description="Shrink the inner master area", category="sublayout")
    def group_shrink() -> bool:
        return to_subl(ws, Shrink())

    @dispatcher.command("group_expand", description="Expand the inner master area", category="sublayout")
    def group_expand() -> bool:
        return to_subl(ws, Expand())

    @dispatcher.command("group_inc_master", description="One more inner master window", category="sublayout")
    def group_inc_master() -> bool:
        return to_subl(ws, IncMasterN(1))

    @dispatcher.command("group_dec_master", description="One less inner master window", category="sublayout")
    def group_dec_master() -> bool:
        return to_subl(ws, IncMasterN(-1))

    # -- Outer layout and workspace focus ------------------------------
    @dispatcher.command("next_layout", description="Next outer layout", category="layout")
    def next_layout() -> bool:
        return ws.next_layout()

    @dispatcher.command("prev_layout", description="Previous outer layout", category="layout")
    def prev_layout() -> bool:
        return ws.prev_layout()

    @dispatcher.command("focus_down", description="Focus the next group", category="focus")
    def focus_down() -> bool:
        return ws.focus_down() is not None

    @dispatcher.command("focus_up", description="Focus the previous group", category="focus")
    def focus_up() -> bool:
        return ws.focus_up() is not None

    log.info("Group commands registered: %d", dispatcher.count)
