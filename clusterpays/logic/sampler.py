"""Weighted symbol sampling."""
from collections.abc import Mapping

from clusterpays.config import settings
from clusterpays.errors import ErrorCode, GameError
from clusterpays.logic.models import DRAWABLE_SYMBOLS, Symbol
from clusterpays.logic.rng import ProductionRNG, RNGBase


def default_weights() -> dict[Symbol, int]:
    """
    Build the weight map from settings.

    Every drawable symbol (eight ordinary symbols, wild, blocker) receives
    settings.default_symbol_weight unless settings.symbol_weights names it.
    """
    weights = {symbol: settings.default_symbol_weight for symbol in DRAWABLE_SYMBOLS}
    for name, weight in settings.symbol_weights.items():
        try:
            symbol = Symbol[name]
        except KeyError:
            raise GameError(
                ErrorCode.INVALID_WEIGHTS,
                f"Unknown symbol in symbol_weights: {name!r}",
            ) from None
        weights[symbol] = weight
    return weights


class WeightedSampler:
    """Draws symbols with probability weight / total weight."""

    def __init__(
        self,
        weights: Mapping[Symbol, int] | None = None,
        rng: RNGBase | None = None,
    ):
        weights = default_weights() if weights is None else dict(weights)
        self._validate(weights)
        # Walk order is catalog declaration order, independent of mapping order
        self._entries = sorted(weights.items(), key=lambda item: item[0].value)
        self.total_weight = sum(weights.values())
        self.rng = rng or ProductionRNG()

    @staticmethod
    def _validate(weights: dict[Symbol, int]) -> None:
        if not weights:
            raise GameError(ErrorCode.INVALID_WEIGHTS, "Weight map is empty.")
        if Symbol.EMPTY in weights:
            raise GameError(
                ErrorCode.INVALID_WEIGHTS, "EMPTY cannot be assigned a weight."
            )
        for symbol, weight in weights.items():
            if weight < 0:
                raise GameError(
                    ErrorCode.INVALID_WEIGHTS,
                    f"Weight for {symbol.name} must not be negative: {weight}",
                )
        if sum(weights.values()) <= 0:
            raise GameError(ErrorCode.INVALID_WEIGHTS, "Total weight is zero.")

    @property
    def weights(self) -> dict[Symbol, int]:
        return dict(self._entries)

    def draw(self) -> Symbol:
        """Consume one RNG draw and return the selected symbol."""
        pick = self.rng.randbelow(self.total_weight)
        cumulative = 0
        for symbol, weight in self._entries:
            cumulative += weight
            if pick < cumulative:
                return symbol
        raise GameError(
            ErrorCode.INVARIANT_VIOLATION,
            f"Draw {pick} outside total weight {self.total_weight}",
        )
