import pytest

from sublayouts.core.messages import NextLayout, Shrink
from sublayouts.core.stack import Stack
from sublayouts.tiling.allocator import (
    LayoutDefaults,
    Slot,
    SlotPairing,
    advance,
    allocate,
)
from sublayouts.tiling.groups import GroupTable
from sublayouts.tiling.layouts import (
    LayoutCycle,
    MonocleLayout,
    TallLayout,
    WideLayout,
)
from sublayouts.tiling.rect import Rect

R0 = Rect(0, 0, 300, 600)
R1 = Rect(300, 0, 300, 600)
R2 = Rect(600, 0, 400, 600)


@pytest.fixture
def cycle():
    return LayoutCycle([MonocleLayout(gap=0), TallLayout(gap=0)])


def test_fresh_instances_follow_advance_directive(cycle):
    defaults = LayoutDefaults(advance_counts=(0, 1), base=cycle)
    table = GroupTable.singletons(["a", "b", "c"])

    result = allocate([("a", R0), ("b", R1), ("c", R2)], table, [], [], defaults)

    layouts = [slot.layout for slot in result.slots]
    assert layouts[0] == cycle
    assert layouts[1] == cycle.handle_message(NextLayout())
    assert layouts[1].index == 1
    assert layouts[2] == cycle


def test_advance_keeps_layout_that_rejects_cycling():
    tall = TallLayout()
    assert advance(tall, 3) is tall


def test_previous_instances_are_reused_by_position():
    previous = [Slot(TallLayout(gap=0), Stack("x"))]
    table = GroupTable.singletons(["a", "b"])

    result = allocate([("a", R0), ("b", R1)], table, previous, [], LayoutDefaults())

    assert isinstance(result.slots[0].layout, TallLayout)
    assert isinstance(result.slots[1].layout, MonocleLayout)
    assert [s.stack for s in result.slots] == [Stack("a"), Stack("b")]


def test_group_pairing_follows_group_identity():
    previous = [Slot(TallLayout(), Stack("b")), Slot(WideLayout(), Stack("a"))]
    table = GroupTable.singletons(["a", "b"])

    result = allocate(
        [("a", R0), ("b", R1)], table, previous, [], LayoutDefaults(), SlotPairing.GROUP
    )

    assert isinstance(result.slots[0].layout, WideLayout)
    assert isinstance(result.slots[1].layout, TallLayout)


def test_queue_is_replayed_only_on_target_group():
    base = TallLayout(master_ratio=0.5, gap=0)
    defaults = LayoutDefaults(base=base)
    table = GroupTable([Stack("a", (), ("b",)), Stack("c")])
    queue = [(Shrink(0.1), "b"), (Shrink(0.1), "b")]

    result = allocate([("a", R0), ("c", R2)], table, [], queue, defaults)

    assert result.slots[0].layout.master_ratio == pytest.approx(0.3)
    assert result.slots[1].layout.master_ratio == pytest.approx(0.5)


def test_rejected_messages_keep_instance():
    table = GroupTable.singletons(["a"])
    result = allocate([("a", R0)], table, [], [(Shrink(), "a")], LayoutDefaults())
    assert result.slots[0].layout == MonocleLayout(gap=0)


def test_placements_concatenate_in_outer_order():
    table = GroupTable([Stack("a", (), ("b",)), Stack("c")])
    result = allocate([("c", R2), ("a", R0)], table, [], [], LayoutDefaults())
    assert result.placements == [("c", R2), ("a", R0), ("b", R0)]


def test_representative_without_group_gets_no_placements():
    table = GroupTable.singletons(["a"])
    result = allocate([("z", R0), ("a", R1)], table, [], [], LayoutDefaults())
    assert result.placements == [("a", R1)]
    assert len(result.slots) == 1


def test_allocation_is_deterministic(cycle):
    defaults = LayoutDefaults(advance_counts=(1,), base=cycle)
    table = GroupTable([Stack("a", (), ("b",)), Stack("c")])
    previous = [Slot(TallLayout(), Stack("c"))]
    queue = [(NextLayout(), "a"), (Shrink(), "c")]
    arrangement = [("a", R0), ("c", R1)]

    first = allocate(arrangement, table, previous, queue, defaults)
    second = allocate(arrangement, table, previous, queue, defaults)

    assert first.placements == second.placements
    assert first.slots == second.slots
