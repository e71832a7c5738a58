# tests/test_saved_state.py

from __future__ import annotations

from pathlib import Path

from taskflow.core.saved_state import SavedStateHandle, load_saved_state, save_saved_state


def test_state_flow_mirrors_key() -> None:
    handle = SavedStateHandle()
    flow = handle.get_state_flow("searchQuery", "")

    assert handle.get("searchQuery") == ""
    handle.set("searchQuery", "milk")
    assert flow.value == "milk"


def test_state_flow_starts_from_stored_value() -> None:
    handle = SavedStateHandle({"searchQuery": "bread"})

    assert handle.get_state_flow("searchQuery", "").value == "bread"


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "state" / "saved.json"
    save_saved_state(path, {"tasks": SavedStateHandle({"searchQuery": " a "}), "add_edit": SavedStateHandle()})

    restored = load_saved_state(path)

    assert set(restored) == {"tasks", "add_edit"}
    assert restored["tasks"].get("searchQuery") == " a "


def test_missing_or_corrupt_file_loads_nothing(tmp_path: Path) -> None:
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("[1, 2", "utf-8")

    assert load_saved_state(tmp_path / "missing.json") == {}
    assert load_saved_state(corrupt) == {}
