"""Tests for the CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from excalidraw_store.cli import app
from excalidraw_store.services import open_store

runner = CliRunner()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "drawings.db"


@pytest.fixture
def seeded(db_path: Path, clock) -> dict:
    """Populate a database with one drawing and two snapshots."""
    store = open_store(db_path, clock=clock)
    try:
        drawing_id = store.drawings.save("Floor plan", '{"elements": []}')
        first = store.snapshots.save("r1", "{}", name="first")
        clock.advance()
        second = store.snapshots.save("r1", "{}", name="second")
    finally:
        store.close()
    return {"drawing": drawing_id, "snapshots": [first, second]}


def _invoke(db_path: Path, *args: str):
    return runner.invoke(app, ["--db", str(db_path), *args])


class TestCli:

    def test_path(self, db_path: Path):
        result = _invoke(db_path, "path")
        assert result.exit_code == 0
        assert "argument" in result.output

    def test_drawings_list_json(self, db_path: Path, seeded: dict):
        result = _invoke(db_path, "drawings", "list", "--format", "json")
        assert result.exit_code == 0

        payload = json.loads(result.output)
        assert [d["id"] for d in payload["drawings"]] == [seeded["drawing"]]
        assert "data" not in payload["drawings"][0]

    def test_drawings_show_json(self, db_path: Path, seeded: dict):
        result = _invoke(db_path, "drawings", "show", seeded["drawing"])
        assert result.exit_code == 0
        assert json.loads(result.output)["name"] == "Floor plan"

    def test_drawings_show_missing(self, db_path: Path):
        result = _invoke(db_path, "drawings", "show", "missing")
        assert result.exit_code == 1
        assert "Drawing not found" in result.output

    def test_drawings_delete(self, db_path: Path, seeded: dict):
        result = _invoke(db_path, "drawings", "delete", seeded["drawing"])
        assert result.exit_code == 0

        payload = json.loads(_invoke(db_path, "drawings", "list", "-f", "json").output)
        assert payload["drawings"] == []

    def test_snapshots_list_json(self, db_path: Path, seeded: dict):
        result = _invoke(db_path, "snapshots", "list", "r1", "-f", "json")
        assert result.exit_code == 0

        payload = json.loads(result.output)
        assert [s["name"] for s in payload["snapshots"]] == ["second", "first"]

    def test_snapshots_list_text(self, db_path: Path, seeded: dict):
        result = _invoke(db_path, "snapshots", "list", "r1")
        assert result.exit_code == 0
        assert "second" in result.output

    def test_snapshots_rename(self, db_path: Path, seeded: dict):
        snapshot_id = seeded["snapshots"][0]
        result = _invoke(db_path, "snapshots", "rename", snapshot_id, "--name", "renamed", "-d", "note")
        assert result.exit_code == 0

        payload = json.loads(_invoke(db_path, "snapshots", "show", snapshot_id).output)
        assert payload["name"] == "renamed"
        assert payload["description"] == "note"

    def test_snapshots_delete(self, db_path: Path, seeded: dict):
        result = _invoke(db_path, "snapshots", "delete", seeded["snapshots"][1])
        assert result.exit_code == 0

        payload = json.loads(_invoke(db_path, "snapshots", "list", "r1", "-f", "json").output)
        assert [s["name"] for s in payload["snapshots"]] == ["first"]

    def test_settings_get_default(self, db_path: Path):
        result = _invoke(db_path, "settings", "get", "r9", "-f", "json")
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "room_id": "r9",
            "max_snapshots": 10,
            "auto_save_interval": 60,
        }

    def test_settings_set(self, db_path: Path):
        result = _invoke(db_path, "settings", "set", "r1", "--max-snapshots", "3", "--interval", "30")
        assert result.exit_code == 0

        result = _invoke(db_path, "settings", "get", "r1")
        assert "Max snapshots: 3" in result.output
        assert "30s" in result.output

    def test_settings_set_rejects_zero(self, db_path: Path):
        result = _invoke(db_path, "settings", "set", "r1", "-m", "0", "-i", "30")
        assert result.exit_code == 1
        assert "positive" in result.output

    def test_drawings_show_text(self, db_path: Path, seeded: dict):
        result = _invoke(db_path, "drawings", "show", seeded["drawing"], "-f", "text")
        assert result.exit_code == 0
        assert f"Floor plan ({seeded['drawing']})" in result.output
        assert "Payload: 16 chars" in result.output

    def test_snapshots_list_marks_autosave(self, db_path: Path, seeded: dict):
        store = open_store(db_path)
        try:
            store.snapshots.save_autosave("r1", "{}")
        finally:
            store.close()

        payload = json.loads(_invoke(db_path, "snapshots", "list", "r1", "-f", "json").output)
        assert [s["is_autosave"] for s in payload["snapshots"]].count(True) == 1

        result = _invoke(db_path, "snapshots", "list", "r1")
        assert "autosave" in result.output

    def test_snapshots_latest_prefers_autosave(self, db_path: Path, seeded: dict, clock):
        store = open_store(db_path, clock=clock)
        try:
            autosave_id = store.snapshots.save_autosave("r1", '{"v": 1}')
            clock.advance()
            store.snapshots.save("r1", "{}", name="third")
        finally:
            store.close()

        result = _invoke(db_path, "snapshots", "latest", "r1")
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["id"] == autosave_id
        assert payload["is_autosave"] is True

    def test_snapshots_latest_text(self, db_path: Path, seeded: dict):
        result = _invoke(db_path, "snapshots", "latest", "r1", "-f", "text")
        assert result.exit_code == 0
        assert f"second ({seeded['snapshots'][1]})" in result.output

    def test_snapshots_latest_empty_room(self, db_path: Path):
        result = _invoke(db_path, "snapshots", "latest", "empty")
        assert result.exit_code == 1
        assert "No snapshots for room" in result.output

    def test_snapshots_count(self, db_path: Path, seeded: dict):
        result = _invoke(db_path, "snapshots", "count", "r1")
        assert result.exit_code == 0
        assert "r1: 2 snapshot(s), 2/10 in history" in result.output

        payload = json.loads(_invoke(db_path, "snapshots", "count", "r1", "-f", "json").output)
        assert payload == {"room_id": "r1", "count": 2, "history_count": 2, "max_snapshots": 10}

    def test_info(self, db_path: Path, seeded: dict):
        result = _invoke(db_path, "info", "-f", "json")
        assert result.exit_code == 0

        payload = json.loads(result.output)
        assert payload["db_path"] == str(db_path)
        assert {"drawings", "snapshots", "room_settings"} <= set(payload["tables"])
        assert payload["drawing_count"] == 1

        result = _invoke(db_path, "info")
        assert "Drawings: 1" in result.output

    def test_unusable_db_directory(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        result = _invoke(blocker / "drawings.db", "drawings", "list")
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_unreadable_config_file(self, db_path: Path, tmp_path: Path, monkeypatch):
        home = tmp_path / "home"
        (home / ".excalidraw").mkdir(parents=True)
        (home / ".excalidraw" / "config.json").write_bytes(b"\xff\xfe")
        monkeypatch.setenv("HOME", str(home))

        result = _invoke(db_path, "path")
        assert result.exit_code == 1
        assert "Cannot read config file" in result.output
