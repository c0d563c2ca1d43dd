"""Pytest fixtures and helpers for engine tests."""
from collections.abc import Iterable
from typing import Any

import pytest

from clusterpays.logic.models import Symbol
from clusterpays.logic.rng import RNGBase
from clusterpays.telemetry import TelemetryService


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (long seeded simulations)"
    )


class ScriptedRNG(RNGBase):
    """RNG that replays fixed randint results and counts calls."""

    def __init__(self, values: Iterable[int]):
        self._values = list(values)
        self.calls = 0

    def randint(self, a: int, b: int) -> int:
        value = self._values[self.calls]
        self.calls += 1
        assert a <= value <= b, f"scripted value {value} outside [{a}, {b}]"
        return value


class ScriptedSampler:
    """Sampler that hands out a fixed sequence of symbols."""

    def __init__(self, symbols: Iterable[Symbol]):
        self._symbols = list(symbols)
        self.draws = 0

    def draw(self) -> Symbol:
        symbol = self._symbols[self.draws]
        self.draws += 1
        return symbol


class RecordingSink:
    """Telemetry sink that keeps every emitted event."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))


class FailingSink:
    """Telemetry sink that always raises."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        raise RuntimeError("sink down")


def checkerboard(
    rows: int = 8,
    cols: int = 8,
    a: Symbol = Symbol.L5,
    b: Symbol = Symbol.L6,
) -> list[list[Symbol]]:
    """Alternating two-symbol pattern: no two orthogonal neighbours match."""
    return [[a if (r + c) % 2 == 0 else b for c in range(cols)] for r in range(rows)]


@pytest.fixture
def board() -> list[list[Symbol]]:
    """Fresh 8x8 checkerboard with no clusters."""
    return checkerboard()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def recording_telemetry(recording_sink: RecordingSink) -> TelemetryService:
    return TelemetryService(sink=recording_sink)
