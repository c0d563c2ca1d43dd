"""Cluster payout table and size tiers."""
from clusterpays.logic.models import Symbol


# Upper bound (inclusive) of each size tier; larger clusters fall in the last tier
TIER_BREAKPOINTS: tuple[int, ...] = (8, 12, 16, 20)

# Multipliers indexed [symbol.payout_index][tier]
PAYOUT_TABLE: tuple[tuple[float, ...], ...] = (
    (5, 6, 7, 8, 10),   # H1
    (4, 5, 6, 7, 9),    # H2
    (4, 5, 6, 7, 9),    # H3
    (3, 4, 5, 6, 7),    # H4
    (1, 2, 3, 4, 5),    # L5
    (1, 2, 3, 4, 5),    # L6
    (1, 2, 3, 4, 5),    # L7
    (1, 2, 3, 4, 5),    # L8
)


def size_tier(size: int) -> int:
    """Map a cluster size to its payout tier."""
    for tier, upper in enumerate(TIER_BREAKPOINTS):
        if size <= upper:
            return tier
    return len(TIER_BREAKPOINTS)


def payout_for(symbol: Symbol, size: int) -> float:
    """
    Payout multiplier for a cluster of `size` cells anchored on `symbol`.

    Wild, blocker and empty never pay.
    """
    if not symbol.is_ordinary:
        return 0.0
    return float(PAYOUT_TABLE[symbol.payout_index][size_tier(size)])
