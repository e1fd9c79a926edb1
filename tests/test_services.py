"""Tests for the command surface."""

from pathlib import Path

import pytest

from excalidraw_store import services
from excalidraw_store.services import Store, open_store
from excalidraw_store.config import StoreConfig


@pytest.fixture
def store(tmp_path: Path, clock) -> Store:
    store = open_store(tmp_path / "drawings.db", clock=clock)
    yield store
    store.close()


class TestDrawingCommands:

    def test_round_trip(self, store: Store, clock):
        result = services.save_drawing(store, "A", "X")
        assert result["success"] is True
        drawing_id = result["id"]

        loaded = services.load_drawing(store, drawing_id)["drawing"]
        assert loaded["name"] == "A"
        assert loaded["data"] == "X"
        assert loaded["created_at"] == loaded["updated_at"]

        clock.advance()
        assert services.update_drawing(store, drawing_id, "B", "Y") == {"success": True}
        loaded = services.load_drawing(store, drawing_id)["drawing"]
        assert loaded["name"] == "B"
        assert loaded["updated_at"] > loaded["created_at"]

    def test_load_missing_returns_not_found(self, store: Store):
        result = services.load_drawing(store, "missing")
        assert result["error"] == "not_found"
        assert "missing" in result["message"]

    def test_list_and_delete(self, store: Store):
        drawing_id = services.save_drawing(store, "A", "X")["id"]
        assert [d["id"] for d in services.list_drawings(store)["drawings"]] == [drawing_id]

        assert services.delete_drawing(store, drawing_id) == {"success": True}
        assert services.delete_drawing(store, drawing_id) == {"success": True}
        assert services.list_drawings(store)["drawings"] == []

    def test_storage_failure_is_flattened(self, store: Store):
        with store.db.connection() as conn:
            conn.execute("DROP TABLE drawings")

        result = services.save_drawing(store, "A", "X")
        assert result["error"] == "storage_error"
        assert "drawings" in result["message"]

    def test_unencodable_name_is_storage_error(self, store: Store):
        result = services.save_drawing(store, "\ud800", "{}")
        assert result["error"] == "storage_error"
        assert services.list_drawings(store)["drawings"] == []


class TestSnapshotCommands:

    def test_retention_scenario(self, store: Store, clock):
        services.update_room_settings(store, "r1", 2, 60)

        ids = []
        for name in ("s1", "s2", "s3"):
            ids.append(services.save_snapshot(store, "r1", "{}", name=name)["id"])
            clock.advance()

        listing = services.list_snapshots(store, "r1")["snapshots"]
        assert [s["name"] for s in listing] == ["s3", "s2"]
        assert all("data" not in s for s in listing)
        assert services.load_snapshot(store, ids[0])["error"] == "not_found"

    def test_autosave_twice_same_id(self, store: Store):
        first = services.save_autosave_snapshot(store, "r1", "v1")["id"]
        second = services.save_autosave_snapshot(store, "r1", "v2", name="Custom")["id"]

        assert first == second
        snapshot = services.load_snapshot(store, first)["snapshot"]
        assert snapshot["data"] == "v2"
        assert snapshot["name"] == "Custom"

    def test_update_metadata_and_delete(self, store: Store):
        snapshot_id = services.save_snapshot(store, "r1", "{}")["id"]

        assert services.update_snapshot_metadata(store, snapshot_id, "n", "d") == {"success": True}
        snapshot = services.load_snapshot(store, snapshot_id)["snapshot"]
        assert (snapshot["name"], snapshot["description"]) == ("n", "d")

        assert services.delete_snapshot(store, snapshot_id) == {"success": True}
        assert services.list_snapshots(store, "r1")["snapshots"] == []

    def test_load_latest_prefers_autosave(self, store: Store, clock):
        services.save_snapshot(store, "r1", "history")
        clock.advance()
        autosave_id = services.save_autosave_snapshot(store, "r1", "auto")["id"]
        clock.advance()
        services.save_snapshot(store, "r1", "newer history")

        snapshot = services.load_latest_snapshot(store, "r1")["snapshot"]
        assert snapshot["id"] == autosave_id
        assert snapshot["is_autosave"] is True

    def test_load_latest_empty_room(self, store: Store):
        result = services.load_latest_snapshot(store, "empty")
        assert result["error"] == "not_found"

    def test_count_snapshots(self, store: Store):
        services.update_room_settings(store, "r1", 5, 60)
        services.save_snapshot(store, "r1", "{}")
        services.save_autosave_snapshot(store, "r1", "{}")

        assert services.count_snapshots(store, "r1") == {
            "success": True,
            "room_id": "r1",
            "count": 2,
            "history_count": 1,
            "max_snapshots": 5,
        }

    def test_count_snapshots_unknown_room(self, store: Store):
        result = services.count_snapshots(store, "fresh")
        assert (result["count"], result["max_snapshots"]) == (0, 10)


class TestRoomSettingsCommands:

    def test_get_defaults_without_writing(self, store: Store):
        result = services.get_room_settings(store, "fresh")
        assert result["settings"] == {"room_id": "fresh", "max_snapshots": 10, "auto_save_interval": 60}
        assert store.settings.find("fresh") is None

    def test_update_then_get(self, store: Store):
        assert services.update_room_settings(store, "r1", 4, 15) == {"success": True}
        assert services.get_room_settings(store, "r1")["settings"]["max_snapshots"] == 4

    @pytest.mark.parametrize(
        "max_snapshots, interval",
        [(0, 60), (-1, 60), (10, 0), (10, -30)],
    )
    def test_rejects_non_positive(self, store: Store, max_snapshots, interval):
        result = services.update_room_settings(store, "r1", max_snapshots, interval)
        assert result["error"] == "invalid_input"
        assert store.settings.find("r1") is None

    @pytest.mark.parametrize(
        "max_snapshots, interval",
        [(2**63, 60), (10, 2**63), (True, 60)],
    )
    def test_rejects_out_of_range(self, store: Store, max_snapshots, interval):
        result = services.update_room_settings(store, "r1", max_snapshots, interval)
        assert result["error"] == "invalid_input"
        assert store.settings.find("r1") is None

    def test_accepts_largest_integer(self, store: Store):
        largest = 2**63 - 1
        assert services.update_room_settings(store, "r1", largest, largest) == {"success": True}
        assert store.settings.get("r1").max_snapshots == largest


class TestOpenStore:

    def test_accepts_config(self, tmp_path: Path):
        config = StoreConfig(db_path=tmp_path / "nested" / "drawings.db")
        store = open_store(config)
        try:
            assert (tmp_path / "nested" / "drawings.db").exists()
            assert store.drawings.db is store.snapshots.db is store.settings.db
        finally:
            store.close()

    def test_in_memory(self):
        store = open_store(":memory:")
        try:
            assert services.list_drawings(store) == {"success": True, "drawings": []}
        finally:
            store.close()

    def test_store_info(self, store: Store):
        services.save_drawing(store, "A", "X")

        info = services.store_info(store)
        assert info["success"] is True
        assert info["db_path"] == str(store.db.db_path)
        assert set(info["tables"]) >= {"drawings", "snapshots", "room_settings"}
        assert info["drawing_count"] == 1
