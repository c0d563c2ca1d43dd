"""Game engine and telemetry tests."""
import pytest

from clusterpays.config_hash import get_config_hash
from clusterpays.errors import ErrorCode, GameError
from clusterpays.logic.engine import (
    WIN_TIER_BIG,
    WIN_TIER_EPIC,
    WIN_TIER_MEGA,
    GameEngine,
    win_tier_for,
)
from clusterpays.logic.models import Symbol
from clusterpays.logic.rng import SeededRNG
from clusterpays.telemetry import TelemetryService
from tests.conftest import FailingSink


class TestSpin:
    """One wagered round per spin."""

    def test_total_win_scales_with_bet(self, recording_telemetry):
        small = GameEngine(rng=SeededRNG(seed=8), telemetry=recording_telemetry).spin(1.0)
        large = GameEngine(rng=SeededRNG(seed=8), telemetry=recording_telemetry).spin(5.0)
        assert small.total_win_x == large.total_win_x
        assert large.total_win == pytest.approx(small.total_win_x * 5.0)

    def test_win_equals_sum_of_rounds(self, recording_telemetry):
        engine = GameEngine(rng=SeededRNG(seed=3), telemetry=recording_telemetry)
        for _ in range(50):
            result = engine.spin(1.0)
            assert result.total_win_x == sum(r.win for r in result.game.rounds)
            assert result.cascades == len(result.game.rounds)

    def test_final_grid_is_full(self, recording_telemetry):
        engine = GameEngine(rng=SeededRNG(seed=4), telemetry=recording_telemetry)
        for _ in range(20):
            result = engine.spin(1.0)
            assert len(result.initial_grid) == 8
            for row in result.final_grid:
                assert Symbol.EMPTY not in row

    def test_each_spin_uses_a_fresh_grid(self, recording_telemetry):
        engine = GameEngine(rng=SeededRNG(seed=12), telemetry=recording_telemetry)
        first = engine.spin(1.0)
        second = engine.spin(1.0)
        assert first.initial_grid != second.initial_grid
        assert first.game is not second.game

    @pytest.mark.parametrize("bet", [0, -1.0, 0.37, 3.0])
    def test_invalid_bet_rejected(self, bet, recording_sink, recording_telemetry):
        engine = GameEngine(rng=SeededRNG(seed=1), telemetry=recording_telemetry)
        with pytest.raises(GameError) as exc_info:
            engine.spin(bet)
        assert exc_info.value.code == ErrorCode.INVALID_BET
        assert exc_info.value.recoverable is True
        assert recording_sink.events == []


class TestWinTier:
    """Session win classification."""

    @pytest.mark.parametrize(
        "win_x, tier",
        [
            (0.0, "none"),
            (WIN_TIER_BIG - 0.01, "none"),
            (WIN_TIER_BIG, "big"),
            (WIN_TIER_MEGA, "mega"),
            (WIN_TIER_EPIC, "epic"),
            (WIN_TIER_EPIC * 10, "epic"),
        ],
    )
    def test_thresholds(self, win_x, tier):
        assert win_tier_for(win_x) == tier


class TestTelemetry:
    """session_resolved emission."""

    def test_event_emitted_per_spin(self, recording_sink, recording_telemetry):
        engine = GameEngine(rng=SeededRNG(seed=21), telemetry=recording_telemetry)
        result = engine.spin(2.0)

        assert len(recording_sink.events) == 1
        name, data = recording_sink.events[0]
        assert name == "session_resolved"
        assert data["config_hash"] == get_config_hash()
        assert data["bet_amount"] == 2.0
        assert data["cascades"] == result.cascades
        assert data["clusters"] == result.game.clusters
        assert data["total_win"] == result.total_win
        assert data["win_tier"] == result.win_tier

    def test_sink_failure_does_not_break_spin(self):
        telemetry = TelemetryService(sink=FailingSink())
        engine = GameEngine(rng=SeededRNG(seed=2), telemetry=telemetry)
        result = engine.spin(1.0)
        assert result.total_win >= 0
        assert telemetry.sink_errors == 1

    def test_disabled_service_emits_nothing(self, recording_sink):
        telemetry = TelemetryService(sink=recording_sink, enabled=False)
        GameEngine(rng=SeededRNG(seed=2), telemetry=telemetry).spin(1.0)
        assert recording_sink.events == []
