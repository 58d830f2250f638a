import pytest

from snipdeck import MANUAL_COPY_HINT, NavState, initial_state, navigate, state_payload

SNIPPETS = [
    {"id": "1", "command": "git status", "keywords": ["git"], "description": ""},
    {"id": "2", "command": "git log", "keywords": ["git"], "description": ""},
    {"id": "3", "command": "docker ps", "keywords": ["docker"], "description": ""},
]


def loaded(auto_copy=False):
    return initial_state(SNIPPETS, {"autoCopy": auto_copy})


def test_initial_state_selects_first():
    state = loaded()
    assert state.filtered == tuple(SNIPPETS)
    assert state.selected_index == 0
    assert state.auto_copy is False


def test_empty_load_has_no_selection():
    state, effects = navigate(NavState(), {"type": "load", "snippets": []})
    assert state.selected_index == -1
    assert effects == []


def test_search_resets_selection():
    state, _ = navigate(loaded(), {"type": "down"})
    state, _ = navigate(state, {"type": "down"})
    assert state.selected_index == 2
    state, _ = navigate(state, {"type": "search", "query": "git"})
    assert [s["id"] for s in state.filtered] == ["1", "2"]
    assert state.selected_index == 0


def test_search_with_no_results():
    state, _ = navigate(loaded(), {"type": "search", "query": "nothing-here"})
    assert state.filtered == ()
    assert state.selected_index == -1


def test_reload_keeps_query_and_resets_selection():
    state, _ = navigate(loaded(), {"type": "search", "query": "git"})
    state, _ = navigate(state, {"type": "down"})
    state, _ = navigate(state, {"type": "load", "snippets": SNIPPETS[1:]})
    assert [s["id"] for s in state.filtered] == ["2"]
    assert state.selected_index == 0


def test_down_clamps_at_end():
    state = loaded()
    for _ in range(5):
        state, effects = navigate(state, {"type": "down"})
        assert 0 <= state.selected_index < len(state.filtered)
        assert effects == []
    assert state.selected_index == 2
    again, _ = navigate(state, {"type": "down"})
    assert again == state


def test_up_clamps_at_start():
    state, _ = navigate(loaded(), {"type": "up"})
    assert state.selected_index == 0
    state, _ = navigate(state, {"type": "down"})
    state, _ = navigate(state, {"type": "up"})
    assert state.selected_index == 0


def test_moves_are_noops_without_results():
    state, _ = navigate(loaded(), {"type": "search", "query": "zzz"})
    for kind in ("up", "down"):
        moved, effects = navigate(state, {"type": kind})
        assert moved.selected_index == -1
        assert effects == []


def test_pick_without_auto_copy():
    state, effects = navigate(loaded(), {"type": "pick", "index": 2})
    assert state.selected_index == 2
    assert effects == []


def test_pick_with_auto_copy_copies():
    state, effects = navigate(loaded(auto_copy=True), {"type": "pick", "index": 1})
    assert state.selected_index == 1
    assert effects == [("copy", "git log")]


def test_confirm_with_auto_copy_copies_selected():
    state, _ = navigate(loaded(auto_copy=True), {"type": "down"})
    _, effects = navigate(state, {"type": "confirm"})
    assert effects == [("copy", "git log")]


def test_confirm_without_auto_copy_marks_and_hints():
    state, _ = navigate(loaded(), {"type": "down"})
    after, effects = navigate(state, {"type": "confirm"})
    assert after == state
    assert effects == [("mark", 1), ("notify", MANUAL_COPY_HINT)]


def test_confirm_without_selection_does_nothing():
    state, _ = navigate(loaded(auto_copy=True), {"type": "search", "query": "zzz"})
    _, effects = navigate(state, {"type": "confirm"})
    assert effects == []


def test_toggle_auto_copy_saves_and_notifies():
    state, effects = navigate(loaded(), {"type": "toggle_auto_copy", "enabled": True})
    assert state.auto_copy is True
    assert effects == [("save_settings", {"autoCopy": True}), ("notify", "Auto-copy enabled")]
    state, effects = navigate(state, {"type": "toggle_auto_copy", "enabled": False})
    assert state.auto_copy is False
    assert effects[1] == ("notify", "Auto-copy disabled")


def test_settings_without_flag_mean_no_auto_copy():
    state, _ = navigate(NavState(auto_copy=True), {"type": "settings", "settings": {}})
    assert state.auto_copy is False


def test_unknown_action():
    with pytest.raises(ValueError):
        navigate(loaded(), {"type": "explode"})


def test_state_payload_shape():
    payload = state_payload(loaded(auto_copy=True))
    assert payload["selectedIndex"] == 0
    assert payload["autoCopy"] is True
    assert payload["snippets"] == SNIPPETS
    assert payload["filtered"] == SNIPPETS
    assert payload["query"] == ""
