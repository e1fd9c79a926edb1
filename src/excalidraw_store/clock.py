"""Timestamp source shared by the managers."""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], int]


def now() -> int:
    """Current time in whole epoch seconds."""
    return int(time.time())
