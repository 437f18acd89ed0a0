import logging

import pytest

from sublayouts.config.keymap import (
    DEFAULT_GROUP_KEYMAP,
    DEFAULT_MERGE_KEYMAP,
    build_keymap,
    press,
)
from sublayouts.core.combo_parser import (
    ComboParseError,
    Modifier,
    combo_to_str,
    is_valid_combo,
    parse_combo,
)
from sublayouts.core.commands import CommandDispatcher, build_group_commands
from sublayouts.core.messages import Shrink
from sublayouts.core.stack import Stack


# ----------------------------------------------------------------------
# Dispatcher
# ----------------------------------------------------------------------
def test_execute_results():
    dispatcher = CommandDispatcher()
    calls = []

    dispatcher.register("ok", lambda: calls.append("ok"))
    dispatcher.register("nothing", lambda: False)

    @dispatcher.command("boom", category="test")
    def boom():
        raise RuntimeError("boom")

    assert dispatcher.execute("ok")
    assert calls == ["ok"]
    assert not dispatcher.execute("nothing")
    assert not dispatcher.execute("boom")
    assert not dispatcher.execute("missing")
    assert dispatcher.count == 3
    assert [c.name for c in dispatcher.list_commands("test")] == ["boom"]


def test_register_replaces_existing_command():
    dispatcher = CommandDispatcher()
    dispatcher.register("x", lambda: False)
    dispatcher.register("x", lambda: True)
    assert dispatcher.count == 1
    assert dispatcher.execute("x")


def test_group_commands_are_registered(tall_workspace):
    dispatcher = CommandDispatcher()
    build_group_commands(dispatcher, tall_workspace)

    names = dispatcher.command_names
    for prefix in ("pull_group", "push_group", "pull_window", "push_window"):
        for direction in ("left", "right", "up", "down"):
            assert f"{prefix}_{direction}" in names
    for name in ("merge_all", "unmerge", "unmerge_all", "group_next_layout", "focus_down"):
        assert name in names
    assert "=== CommandDispatcher" in dispatcher.dump_state()


def test_merge_and_unmerge_all_commands(tall_workspace):
    ws = tall_workspace
    dispatcher = CommandDispatcher()
    build_group_commands(dispatcher, ws)

    assert dispatcher.execute("merge_all")
    assert set(ws.modifier.group_of("c")) == {"a", "b", "c"}
    assert ws.modifier.group_of("c").focus == "c"

    assert dispatcher.execute("unmerge_all")
    assert len(ws.modifier.table) == 3
    assert not dispatcher.execute("unmerge_all")


def test_group_focus_and_sublayout_commands(tall_workspace):
    ws = tall_workspace
    dispatcher = CommandDispatcher()
    build_group_commands(dispatcher, ws)

    dispatcher.execute("merge_all")
    assert dispatcher.execute("group_focus_down")
    assert ws.focused == ws.modifier.group_of("c").focus != "c"

    assert dispatcher.execute("group_shrink")
    assert ws.modifier.queue == [(Shrink(), ws.focused)]


def test_group_commands_on_empty_workspace():
    from sublayouts.tiling.workspace import Workspace

    dispatcher = CommandDispatcher()
    build_group_commands(dispatcher, Workspace(3))
    for name in ("merge_all", "unmerge", "group_focus_down", "group_shrink", "pull_group_left"):
        assert not dispatcher.execute(name)


# ----------------------------------------------------------------------
# Combos
# ----------------------------------------------------------------------
@pytest.mark.parametrize(
    "combo, expected",
    [
        ("mod+j", (Modifier.SUPER, "j")),
        ("Win+Shift+Tab", (Modifier.SUPER | Modifier.SHIFT, "tab")),
        ("super+ctrl+,", (Modifier.SUPER | Modifier.CONTROL, "comma")),
        ("mod+enter", (Modifier.SUPER, "return")),
        ("alt+f4", (Modifier.ALT, "f4")),
    ],
)
def test_parse_combo(combo, expected):
    assert parse_combo(combo) == expected


@pytest.mark.parametrize("combo", ["", "mod+", "mod+shift", "mod+j+k", "ctrl+ctrl+j", "hyper+j"])
def test_parse_combo_errors(combo):
    with pytest.raises(ComboParseError):
        parse_combo(combo)
    assert not is_valid_combo(combo)


def test_combo_to_str():
    assert combo_to_str(Modifier.SUPER | Modifier.SHIFT, "tab") == "Mod+Shift+Tab"
    assert combo_to_str(Modifier.SUPER | Modifier.CONTROL, "m") == "Mod+Ctrl+M"


# ----------------------------------------------------------------------
# Keymaps
# ----------------------------------------------------------------------
def test_default_keymaps_resolve(tall_workspace):
    dispatcher = CommandDispatcher()
    build_group_commands(dispatcher, tall_workspace)

    assert len(build_keymap(dispatcher, DEFAULT_MERGE_KEYMAP)) == len(DEFAULT_MERGE_KEYMAP)
    assert len(build_keymap(dispatcher, DEFAULT_GROUP_KEYMAP)) == len(DEFAULT_GROUP_KEYMAP)


def test_build_keymap_skips_bad_entries(caplog):
    dispatcher = CommandDispatcher()
    dispatcher.register("known", lambda: True)

    with caplog.at_level(logging.WARNING, logger="sublayouts.config.keymap"):
        keymap = build_keymap(
            dispatcher,
            [("mod+x", "known"), ("mod+nope", "known"), ("mod+y", "unknown")],
        )

    assert keymap == {(Modifier.SUPER, "x"): "known"}
    assert "mod+nope" in caplog.text
    assert "unknown" in caplog.text


def test_press_runs_bound_command(tall_workspace):
    ws = tall_workspace
    dispatcher = CommandDispatcher()
    build_group_commands(dispatcher, ws)
    keymap = build_keymap(dispatcher, DEFAULT_MERGE_KEYMAP)

    assert press(dispatcher, keymap, *parse_combo("mod+ctrl+l"))
    assert set(ws.modifier.group_of("c")) == {"b", "c"}
    assert not press(dispatcher, keymap, Modifier.NONE, "q")
    assert ws.modifier.group_of("a") == Stack("a")
