"""Tests for cursor, selection, expansion and filtering state."""

from navigation import MessageLevel, NavigationState, Prompt


def test_focus_starts_on_first_record(make_index) -> None:
    assert NavigationState(make_index(["a", "b"])).focus == 0
    assert NavigationState(make_index([])).focus is None


def test_movement_is_clamped_at_both_ends(make_index) -> None:
    state = NavigationState(make_index(["a", "b", "c"]))
    state.previous()
    assert state.focus == 0
    state.next()
    state.next()
    state.next()
    assert state.focus == 2


def test_movement_skips_hidden_records(make_index) -> None:
    state = NavigationState(make_index(["alpha", "beta", "alphabeta", "gamma"]))
    state.apply_filter("alpha")
    state.next()
    assert state.focus == 2
    state.next()
    assert state.focus == 2
    state.previous()
    assert state.focus == 0


def test_filter_moves_focus_off_hidden_record(make_index) -> None:
    state = NavigationState(make_index(["alpha", "beta", "gamma"]))
    state.next()
    state.apply_filter("gamma")
    assert state.focus == 2


def test_filter_matching_nothing_clears_focus(make_index) -> None:
    state = NavigationState(make_index(["alpha", "beta"]))
    assert state.apply_filter("zzz") == 0
    assert state.focus is None
    state.next()
    state.toggle_expanded()
    assert state.expanded == set()
    state.apply_filter("")
    assert state.focus == 0


def test_select_current_does_not_duplicate(make_index) -> None:
    state = NavigationState(make_index(["a", "b"]))
    state.select_current()
    state.select_current()
    assert state.selected == [0]


def test_range_mode_selects_pre_move_focus(make_index) -> None:
    state = NavigationState(make_index(["a", "b", "c", "d"]))
    state.next()
    state.start_select_range()
    assert state.range_mode
    assert state.selected == [1]
    state.next()
    state.next()
    assert state.selected == [1, 2]
    assert state.focus == 3
    state.start_select_range()
    assert not state.range_mode


def test_reset_selected_leaves_range_mode(make_index) -> None:
    state = NavigationState(make_index(["a", "b"]))
    state.start_select_range()
    state.reset_selected()
    assert state.selected == []
    assert not state.range_mode


def test_toggle_expanded(make_index) -> None:
    state = NavigationState(make_index(["a", "b"]))
    state.toggle_expanded()
    assert state.expanded == {0}
    state.toggle_expanded()
    assert state.expanded == set()


def test_selection_and_expansion_survive_filtering(make_index) -> None:
    state = NavigationState(make_index(["alpha", "beta", "alphabeta"]))
    state.next()
    state.select_current()
    state.toggle_expanded()

    state.apply_filter("alpha")
    assert state.hidden == {1}
    assert state.selected == [1]
    assert state.expanded == {1}

    state.apply_filter("")
    assert state.hidden == set()
    assert state.selected == [1]
    assert state.expanded == {1}


def test_prompt_backspace_keeps_seed_character() -> None:
    prompt = Prompt()
    prompt.begin(":")
    prompt.push("t")
    prompt.pop()
    prompt.pop()
    prompt.pop()
    assert prompt.text == ":"
    assert prompt.editing


def test_prompt_show_leaves_edit_mode() -> None:
    prompt = Prompt()
    prompt.begin("/")
    prompt.show("careful", MessageLevel.WARNING)
    assert not prompt.editing
    assert prompt.text == "careful"
    assert prompt.level is MessageLevel.WARNING
