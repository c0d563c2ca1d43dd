"""Session telemetry."""
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from clusterpays.config import settings


logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    """Protocol for telemetry sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Emit a telemetry event."""
        ...


class LoggingTelemetrySink:
    """Default sink that logs telemetry events."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Log telemetry event."""
        logger.info("TELEMETRY %s: %s", event_name, data)


@dataclass
class SessionResolvedEvent:
    """session_resolved telemetry event, one per wagered round."""

    config_hash: str
    bet_amount: float
    cascades: int
    clusters: int
    cells_destroyed: int
    total_win_x: float
    total_win: float
    win_tier: str  # "none" | "big" | "mega" | "epic"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "config_hash": self.config_hash,
            "bet_amount": self.bet_amount,
            "cascades": self.cascades,
            "clusters": self.clusters,
            "cells_destroyed": self.cells_destroyed,
            "total_win_x": self.total_win_x,
            "total_win": self.total_win,
            "win_tier": self.win_tier,
        }


class TelemetryService:
    """Service for emitting session telemetry events."""

    def __init__(self, sink: TelemetrySink | None = None, enabled: bool = True):
        self._sink = sink or LoggingTelemetrySink()
        self._sink_errors = 0  # Counter for sink failures
        self.enabled = enabled

    @property
    def sink_errors(self) -> int:
        return self._sink_errors

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """
        Emit event with exception safety.

        Sink failures MUST NOT break a spin.
        """
        if not self.enabled:
            return
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Telemetry sink error (count=%d): %s - %s",
                self._sink_errors,
                event_name,
                str(e),
            )

    def emit_session_resolved(self, event: SessionResolvedEvent) -> None:
        """Emit session_resolved event."""
        self._safe_emit("session_resolved", event.to_dict())


# Global instance
telemetry_service = TelemetryService(enabled=settings.telemetry_enabled)
