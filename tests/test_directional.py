from sublayouts.core.messages import Shrink, SubMessage
from sublayouts.core.stack import Stack
from sublayouts.tiling.directional import (
    Direction,
    find_nearest_window,
    merge_dir,
    on_group,
    pull_group,
    push_group,
    push_window,
    to_subl,
)
from sublayouts.tiling.rect import Rect
from sublayouts.tiling.workspace import Workspace


GRID = {
    "tl": Rect(0, 0, 100, 100),
    "tr": Rect(100, 0, 100, 100),
    "bl": Rect(0, 100, 100, 100),
    "br": Rect(100, 100, 100, 100),
}


def test_find_nearest_window_in_each_direction():
    assert find_nearest_window("tl", GRID, Direction.RIGHT) == "tr"
    assert find_nearest_window("tl", GRID, Direction.DOWN) == "bl"
    assert find_nearest_window("br", GRID, Direction.LEFT) == "bl"
    assert find_nearest_window("br", GRID, Direction.UP) == "tr"
    assert find_nearest_window("tl", GRID, Direction.LEFT) is None


def test_find_nearest_window_prefers_aligned_candidates():
    rects = {
        "me": Rect(0, 100, 100, 100),
        "far": Rect(300, 100, 100, 100),
        "near_but_off": Rect(120, 0, 100, 100),
    }
    assert find_nearest_window("me", rects, Direction.RIGHT) == "near_but_off"
    rects["aligned"] = Rect(120, 100, 100, 100)
    assert find_nearest_window("me", rects, Direction.RIGHT) == "aligned"


def test_find_nearest_window_unknown_focus():
    assert find_nearest_window("zz", GRID, Direction.RIGHT) is None


def test_pull_group_merges_neighbour_into_focused_group(tall_workspace, screen):
    ws = tall_workspace
    assert pull_group(ws, Direction.RIGHT)
    ws.redraw(screen)

    assert ws.modifier.group_of("c") == Stack("c", ("b",), ())
    assert ws.windows == ["b", "c", "a"]
    assert ws.focused == "c"
    assert ws.rect_of("b") == ws.rect_of("c") == Rect(0, 0, 550, 600)
    assert ws.rect_of("a") == Rect(550, 0, 450, 600)


def test_pull_group_without_neighbour(tall_workspace):
    assert not pull_group(tall_workspace, Direction.LEFT)
    assert len(tall_workspace.modifier.table) == 3


def test_push_group_merges_focused_group_into_neighbour(tall_workspace, screen):
    ws = tall_workspace
    assert push_group(ws, Direction.RIGHT)
    ws.redraw(screen)

    group = ws.modifier.group_of("b")
    assert set(group) == {"b", "c"}
    assert ws.modifier.group_of("a") == Stack("a")


def test_push_window_moves_only_the_focused_window(tall_workspace, screen):
    ws = tall_workspace
    pull_group(ws, Direction.RIGHT)
    ws.redraw(screen)

    assert push_window(ws, Direction.RIGHT)

    assert set(ws.modifier.group_of("c")) == {"c", "a"}
    assert ws.modifier.group_of("b") == Stack("b")
    assert ws.focused == "c"


def test_merge_dir_merges_with_next_group_down(tall_workspace):
    ws = tall_workspace
    assert ws.send_message(merge_dir(ws, Stack.focus_down, "c"))
    assert ws.modifier.group_of("c") == Stack("c", (), ("a",))
    assert ws.modifier.group_of("b") == Stack("b")


def test_on_group_moves_focus_inside_group(tall_workspace):
    ws = tall_workspace
    ws.send_message(merge_dir(ws, Stack.focus_down, "c"))

    assert on_group(ws, Stack.focus_down)
    assert ws.modifier.group_of("c").focus == "a"
    assert ws.focused == "a"


def test_to_subl_queues_for_the_focused_group(tall_workspace):
    ws = tall_workspace
    assert to_subl(ws, Shrink())
    assert ws.modifier.queue == [(Shrink(), "c")]


def test_helpers_on_empty_workspace():
    ws = Workspace(9)
    assert not on_group(ws, Stack.focus_down)
    assert not to_subl(ws, Shrink())
    assert not pull_group(ws, Direction.LEFT)
    assert not ws.send_message(SubMessage(Shrink(), "nobody"))
