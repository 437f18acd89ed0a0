import logging

import pytest

from sublayouts.core.messages import Broadcast, IncGap, Shrink, SubMessage, WithGroup
from sublayouts.core.stack import Stack
from sublayouts.tiling import persistence
from sublayouts.tiling.allocator import LayoutDefaults, Slot, SlotPairing
from sublayouts.tiling.groups import GroupTable
from sublayouts.tiling.layouts import LayoutCycle, MonocleLayout, TallLayout
from sublayouts.tiling.sublayout import Sublayout


@pytest.fixture
def populated():
    return Sublayout(
        LayoutDefaults((1,), LayoutCycle([MonocleLayout(gap=0), TallLayout(gap=0)])),
        SlotPairing.GROUP,
        GroupTable([Stack("a", (), ("b",)), Stack("c")]),
        [Slot(TallLayout(gap=0), Stack("a", (), ("b",))), Slot(MonocleLayout(gap=0), Stack("c"))],
        [(Shrink(0.1), "a"), (Broadcast(IncGap(2)), "c")],
    )


def test_round_trip_through_json(populated):
    restored = persistence.loads(persistence.dumps(populated))

    assert restored.table == populated.table
    assert restored.slots == populated.slots
    assert restored.queue == populated.queue
    assert restored.defaults == populated.defaults
    assert restored.pairing is SlotPairing.GROUP


def test_nested_messages_survive_encoding():
    message = SubMessage(Broadcast(IncGap(-2)), "w")
    data = persistence.encode_message(message)
    assert data == {
        "type": "SubMessage",
        "message": {"type": "Broadcast", "message": {"type": "IncGap", "delta": -2}},
        "window": "w",
    }
    assert persistence.decode_message(data) == message


def test_unencodable_queue_entries_are_dropped(caplog):
    sub = Sublayout(
        table=GroupTable([Stack("a")]),
        queue=[(WithGroup(lambda st: st, "a"), "a"), (Shrink(), "a")],
    )
    with caplog.at_level(logging.WARNING, logger="sublayouts.tiling.persistence"):
        data = persistence.dump_sublayout(sub)

    assert data["queue"] == [{"message": {"type": "Shrink", "step": 0.05}, "window": "a"}]
    assert "WithGroup" in caplog.text


def test_non_scalar_window_group_is_dropped():
    sub = Sublayout(table=GroupTable([Stack(("x", 1)), Stack("y")]))
    data = persistence.dump_sublayout(sub)
    assert data["groups"] == [{"focus": "y", "up": [], "down": []}]


@pytest.mark.parametrize(
    "data",
    [
        None,
        "garbage",
        {"version": 2, "groups": []},
        {"groups": [{"focus": "a"}, {"focus": "b", "down": ["a"]}]},
        {"groups": [{"up": ["a"]}]},
        {"groups": [], "queue": [{"message": {"type": "NoSuchMessage"}, "window": "a"}]},
        {"groups": [], "slots": [{"layout": {"type": "spiral"}, "stack": {"focus": "a"}}]},
        {"groups": [], "pairing": "sideways"},
        {"groups": [{"focus": "a"}], "queue": [{"message": {"type": "Shrink", "step": "x"}, "window": "a"}]},
        {"groups": [{"focus": "a"}], "queue": [{"message": {"type": "IncGap", "delta": True}, "window": "a"}]},
        {"groups": [{"focus": "a"}], "queue": [{"message": {"type": "SubMessage", "message": "Shrink", "window": "a"}, "window": "a"}]},
        {"groups": [{"focus": "a"}, {"focus": "a", "down": ["b"]}]},
    ],
)
def test_invalid_state_gives_empty_modifier(data):
    defaults = LayoutDefaults((2,))
    sub = persistence.restore_sublayout(data, defaults)

    assert len(sub.table) == 0
    assert sub.slots == []
    assert sub.queue == []
    assert sub.defaults is defaults


def test_loads_rejects_bad_json(caplog):
    with caplog.at_level(logging.WARNING, logger="sublayouts.tiling.persistence"):
        sub = persistence.loads("{not json")
    assert len(sub.table) == 0
    assert "JSON" in caplog.text


def test_decode_stack_rejects_nested_windows():
    with pytest.raises(persistence.StateRestoreError):
        persistence.decode_stack({"focus": ["a"], "up": [], "down": []})
    with pytest.raises(persistence.StateRestoreError):
        persistence.decode_stack({"focus": None})


def test_duplicate_group_keys_are_reported(caplog):
    data = {"groups": [{"focus": "a"}, {"focus": "a", "down": ["b"]}]}
    with caplog.at_level(logging.WARNING, logger="sublayouts.tiling.persistence"):
        sub = persistence.restore_sublayout(data)
    assert len(sub.table) == 0
    assert "'a'" in caplog.text


def test_decode_message_checks_field_types():
    assert persistence.decode_message({"type": "Shrink", "step": 1}) == Shrink(1)
    assert persistence.decode_message({"type": "UnMergeAll", "window": None}).window is None
    with pytest.raises(persistence.StateRestoreError):
        persistence.decode_message({"type": "Shrink", "step": "x"})
    with pytest.raises(persistence.StateRestoreError):
        persistence.decode_message({"type": "Merge", "source": ["a"], "target": "b"})
