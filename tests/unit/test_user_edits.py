"""Tests for the user-edit tracker."""

import json
from pathlib import Path

import pytest

from catalyst.filemanager import UserEditTracker


@pytest.mark.unit
def test_mark_and_query():
    tracker = UserEditTracker()
    info = tracker.mark_edited("/p/src/components/Button.jsx", component_id="button", content_hash="abc")

    assert info.filepath == "/p/src/components/Button.jsx"
    assert info.detected_at
    assert tracker.is_edited("/p/src/components/Button.jsx")
    assert Path("/p/src/components/Button.jsx") in tracker
    assert tracker.get("/p/src/components/Button.jsx").content_hash == "abc"
    assert tracker.edited_files() == ["/p/src/components/Button.jsx"]
    assert len(tracker) == 1


@pytest.mark.unit
def test_path_normalized():
    tracker = UserEditTracker()
    tracker.mark_edited(Path("/p/src/App.jsx"))
    assert tracker.is_edited("/p/src/App.jsx")


@pytest.mark.unit
def test_mark_twice_overwrites():
    tracker = UserEditTracker()
    tracker.mark_edited("/p/a.jsx", component_id="a")
    tracker.mark_edited("/p/a.jsx", component_id="b")

    assert len(tracker) == 1
    assert tracker.get("/p/a.jsx").component_id == "b"


@pytest.mark.unit
def test_clear():
    tracker = UserEditTracker()
    tracker.mark_edited("/p/a.jsx")

    assert tracker.clear_edited("/p/a.jsx") is True
    assert tracker.clear_edited("/p/a.jsx") is False
    assert not tracker.is_edited("/p/a.jsx")


@pytest.mark.unit
def test_persist_round_trip(tmp_path):
    sidecar = tmp_path / ".catalyst" / "user-edits.json"
    tracker = UserEditTracker(sidecar, persist=True)
    tracker.mark_edited("/p/a.jsx", component_id="a")
    tracker.mark_edited("/p/b.jsx")

    data = json.loads(sidecar.read_text())
    assert data["schema_version"] == "1.0.0"
    assert set(data["edits"]) == {"/p/a.jsx", "/p/b.jsx"}

    restored = UserEditTracker(sidecar)
    assert restored.load_from_disk() == 2
    assert restored.get("/p/a.jsx").component_id == "a"


@pytest.mark.unit
def test_clear_persists(tmp_path):
    sidecar = tmp_path / "user-edits.json"
    tracker = UserEditTracker(sidecar, persist=True)
    tracker.mark_edited("/p/a.jsx")
    tracker.clear_edited("/p/a.jsx")

    assert json.loads(sidecar.read_text())["edits"] == {}


@pytest.mark.unit
def test_no_persist_without_flag(tmp_path):
    sidecar = tmp_path / "user-edits.json"
    UserEditTracker(sidecar).mark_edited("/p/a.jsx")
    assert not sidecar.exists()


@pytest.mark.unit
def test_load_missing(tmp_path):
    assert UserEditTracker(tmp_path / "missing.json").load_from_disk() == 0
    assert UserEditTracker().load_from_disk() == 0


@pytest.mark.unit
@pytest.mark.parametrize("content", ["{oops", '{"edits": {"a": {"filepath": 1}}}'])
def test_load_corrupt(tmp_path, content):
    sidecar = tmp_path / "user-edits.json"
    sidecar.write_text(content)
    tracker = UserEditTracker(sidecar)

    assert tracker.load_from_disk() == 0
    assert len(tracker) == 0


@pytest.mark.unit
def test_persist_failure_is_logged_not_raised(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    tracker = UserEditTracker(blocker / "user-edits.json", persist=True)

    tracker.mark_edited("/p/a.jsx")

    assert tracker.is_edited("/p/a.jsx")
