"""Configuration for excalidraw-store.

## Storage Location

All data lives in one SQLite file under the user's home directory:

```
~/.excalidraw/
├── drawings.db          # Drawings, snapshots, room settings
└── config.json          # Optional overrides
```

### config.json Structure

```json
{
  "db_path": "/data/excalidraw/drawings.db",
  "log_level": "DEBUG"
}
```

### Resolution Order

1. Explicit arguments (e.g. the CLI ``--db`` option)
2. Environment: ``EXCALIDRAW_DB_PATH``, ``EXCALIDRAW_LOG_LEVEL``
3. ``~/.excalidraw/config.json``
4. Built-in default ``~/.excalidraw/drawings.db``

The home directory is ``$HOME``, then ``$USERPROFILE``, then the current
directory.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import InvalidInputError

APP_DIR_NAME = ".excalidraw"
DB_FILE_NAME = "drawings.db"
CONFIG_FILE_NAME = "config.json"

DB_PATH_ENV = "EXCALIDRAW_DB_PATH"
LOG_LEVEL_ENV = "EXCALIDRAW_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class StoreConfig:
    """Resolved storage configuration."""

    db_path: Path
    log_level: str = DEFAULT_LOG_LEVEL
    config_source: str = "default"  # "argument", "env", "file", "default"


def get_home_dir() -> Path:
    """Home directory used for the app folder."""
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE")
    return Path(home) if home else Path(".")


def get_app_dir() -> Path:
    return get_home_dir() / APP_DIR_NAME


def get_default_db_path() -> Path:
    """Default database location: <home>/.excalidraw/drawings.db."""
    return get_app_dir() / DB_FILE_NAME


def load_config_file(config_path: Optional[Path] = None) -> dict:
    """Load the optional JSON config file.

    Returns:
        Parsed settings, or an empty dict if the file does not exist

    Raises:
        InvalidInputError: If the file cannot be read or is not a JSON object
    """
    config_path = config_path or get_app_dir() / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"Invalid config file {config_path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidInputError(f"Cannot read config file {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidInputError(f"Invalid config file {config_path}: expected an object")
    return data


def load_config(
    db_path: Optional[Path] = None,
    log_level: Optional[str] = None,
    config_path: Optional[Path] = None,
) -> StoreConfig:
    """Resolve configuration from arguments, environment and config file.

    Args:
        db_path: Explicit database path (highest priority)
        log_level: Explicit log level name
        config_path: Config file to read instead of ~/.excalidraw/config.json

    Returns:
        StoreConfig with every field resolved
    """
    file_config = load_config_file(config_path)

    if db_path:
        resolved_path, source = Path(db_path), "argument"
    elif os.environ.get(DB_PATH_ENV):
        resolved_path, source = Path(os.environ[DB_PATH_ENV]), "env"
    elif file_config.get("db_path"):
        resolved_path, source = Path(file_config["db_path"]), "file"
    else:
        resolved_path, source = get_default_db_path(), "default"

    level = (
        log_level
        or os.environ.get(LOG_LEVEL_ENV)
        or file_config.get("log_level")
        or DEFAULT_LOG_LEVEL
    )

    return StoreConfig(
        db_path=resolved_path.expanduser(),
        log_level=str(level).upper(),
        config_source=source,
    )
