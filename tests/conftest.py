"""Shared fixtures."""

import pytest


class FakeClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000):
        self.current = start

    def __call__(self) -> int:
        return self.current

    def advance(self, seconds: int = 1) -> int:
        self.current += seconds
        return self.current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
