"""Database schema definitions for excalidraw-store local storage."""

SCHEMA = """
-- ============================================================
-- DRAWINGS
-- Standalone named documents, independent of any room
-- ============================================================
CREATE TABLE IF NOT EXISTS drawings (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    data TEXT NOT NULL,                     -- Serialized scene payload
    created_at INTEGER NOT NULL,            -- Epoch seconds
    updated_at INTEGER NOT NULL
);

-- ============================================================
-- SNAPSHOTS
-- Timestamped captures of a room, bounded per room by room_settings
-- ============================================================
CREATE TABLE IF NOT EXISTS snapshots (
    id TEXT PRIMARY KEY,
    room_id TEXT NOT NULL,                  -- Implicit room key, no rooms table
    name TEXT,
    description TEXT,
    thumbnail TEXT,
    created_by TEXT,                        -- '__autosave__' marks the autosave slot
    created_at INTEGER NOT NULL,
    data TEXT NOT NULL
);

-- ============================================================
-- ROOM SETTINGS
-- Absent rows mean compiled-in defaults
-- ============================================================
CREATE TABLE IF NOT EXISTS room_settings (
    room_id TEXT PRIMARY KEY,
    max_snapshots INTEGER DEFAULT 10,
    auto_save_interval INTEGER DEFAULT 60
);

-- ============================================================
-- INDEXES
-- ============================================================
CREATE INDEX IF NOT EXISTS idx_drawings_updated ON drawings(updated_at);
CREATE INDEX IF NOT EXISTS idx_snapshots_room ON snapshots(room_id, created_at);
CREATE INDEX IF NOT EXISTS idx_snapshots_created_by ON snapshots(room_id, created_by);
"""

TABLES = ("drawings", "snapshots", "room_settings")
