"""Input validators for the game engine."""
from clusterpays.config import settings
from clusterpays.errors import ErrorCode, GameError


def validate_bet(bet_amount: float) -> None:
    """
    Validate a wager.

    Raises INVALID_BET if the amount is not one of the configured bet levels.
    """
    if bet_amount not in settings.allowed_bets:
        raise GameError(
            ErrorCode.INVALID_BET,
            f"Bet amount {bet_amount} not allowed. Allowed: {settings.allowed_bets}",
        )
