"""Error codes and exceptions for the cascade engine."""
from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes raised by the engine."""

    INVALID_WEIGHTS = "INVALID_WEIGHTS"
    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_BET = "INVALID_BET"
    INVALID_GRID = "INVALID_GRID"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"


# Configuration problems and invariant violations are fatal to the session;
# a bad bet can be corrected by the caller and retried.
ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.INVALID_WEIGHTS: False,
    ErrorCode.INVALID_CONFIG: False,
    ErrorCode.INVALID_BET: True,
    ErrorCode.INVALID_GRID: False,
    ErrorCode.INVARIANT_VIOLATION: False,
}


class ErrorBody(BaseModel):
    """Serializable error shape for callers that log or forward errors."""

    code: str
    message: str
    recoverable: bool


class GameError(Exception):
    """Base game error carrying an ErrorCode."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or f"Error: {code.value}"
        self.recoverable = ERROR_RECOVERABLE[code]
        super().__init__(self.message)

    def to_body(self) -> ErrorBody:
        return ErrorBody(
            code=self.code.value,
            message=self.message,
            recoverable=self.recoverable,
        )


def invariant_violation(message: str) -> GameError:
    """Build the error raised when detection/destruction state is corrupt."""
    return GameError(ErrorCode.INVARIANT_VIOLATION, message)
