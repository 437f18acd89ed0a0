from sublayouts.core.stack import Stack, flatten, insert_up


def test_from_list_focuses_first_item():
    assert Stack.from_list(["a", "b", "c"]) == Stack("a", (), ("b", "c"))
    assert Stack.from_list([]) is None


def test_flatten_reverses_up():
    st = Stack("c", ("b", "a"), ("d",))
    assert st.flatten() == ["a", "b", "c", "d"]
    assert list(st) == ["a", "b", "c", "d"]
    assert len(st) == 4
    assert "d" in st and "x" not in st


def test_filter_keeps_surviving_focus():
    st = Stack("b", ("a",), ("c",))
    assert st.filter(lambda w: w != "a") == Stack("b", (), ("c",))


def test_filter_moves_focus_to_next_below():
    st = Stack("b", ("a",), ("c", "d"))
    assert st.filter(lambda w: w != "b") == Stack("c", ("a",), ("d",))


def test_filter_falls_back_to_nearest_above():
    st = Stack("c", ("b", "a"), ())
    assert st.filter(lambda w: w != "c") == Stack("b", ("a",), ())


def test_filter_to_nothing_is_none():
    assert Stack("a", (), ("b",)).filter(lambda w: False) is None
    assert Stack("a").delete("a") is None


def test_focus_down_wraps_to_top():
    st = Stack("c", ("b", "a"), ())
    down = st.focus_down()
    assert down.focus == "a"
    assert down.flatten() == ["a", "b", "c"]


def test_focus_up_wraps_to_bottom():
    st = Stack("a", (), ("b", "c"))
    up = st.focus_up()
    assert up.focus == "c"
    assert up.flatten() == ["a", "b", "c"]


def test_focus_moves_on_single_stack_are_noops():
    st = Stack("a")
    assert st.focus_up() == st
    assert st.focus_down() == st


def test_focus_on_keeps_order():
    st = Stack.from_list(["a", "b", "c"])
    on_c = st.focus_on("c")
    assert on_c.focus == "c"
    assert on_c.flatten() == ["a", "b", "c"]
    assert st.focus_on("x") is None


def test_insert_up_puts_new_window_above_focus():
    st = Stack("b", ("a",), ("c",)).insert_up("x")
    assert st == Stack("x", ("a",), ("b", "c"))
    assert st.flatten() == ["a", "x", "b", "c"]
    assert st.insert_up("a") == st


def test_swap_master_and_focus_master():
    st = Stack("c", ("b", "a"), ("d",))
    assert st.swap_master() == Stack("c", (), ("a", "b", "d"))
    assert st.focus_master() == Stack("a", (), ("b", "c", "d"))


def test_unfocused_members():
    assert sorted(Stack("b", ("a",), ("c",)).unfocused()) == ["a", "c"]


def test_helpers_accept_missing_stack():
    assert flatten(None) == []
    assert insert_up(None, "a") == Stack("a")


def test_str_marks_focus():
    assert str(Stack("b", ("a",), ())) == "[a *b*]"
