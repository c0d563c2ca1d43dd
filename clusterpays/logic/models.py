"""Symbol catalog and round/session result models."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Symbol(int, Enum):
    """Grid symbols in catalog declaration order."""
    H1 = 0
    H2 = 1
    H3 = 2
    H4 = 3
    L5 = 4
    L6 = 5
    L7 = 6
    L8 = 7
    WR = 8
    BLOCKER = 9
    EMPTY = 10

    @property
    def is_ordinary(self) -> bool:
        """True for the eight paying symbols."""
        return self.value < Symbol.WR.value

    @property
    def is_wild(self) -> bool:
        return self is Symbol.WR

    @property
    def payout_index(self) -> int:
        """Row of this symbol in the payout table (ordinary symbols only)."""
        if not self.is_ordinary:
            raise ValueError(f"{self.name} has no payout index")
        return self.value

    @property
    def label(self) -> str:
        if self is Symbol.BLOCKER:
            return "##"
        if self is Symbol.EMPTY:
            return "  "
        return self.name


ORDINARY_SYMBOLS: tuple[Symbol, ...] = tuple(s for s in Symbol if s.is_ordinary)

# Everything the sampler may produce
DRAWABLE_SYMBOLS: tuple[Symbol, ...] = tuple(s for s in Symbol if s is not Symbol.EMPTY)

Coordinate = tuple[int, int]
GridSnapshot = tuple[tuple[Symbol, ...], ...]


class DestroyedSymbol(BaseModel):
    """A single cell removed during destruction."""

    model_config = ConfigDict(frozen=True)

    symbol: Symbol
    row: int
    col: int

    def describe(self) -> str:
        return f"{self.symbol.label} at ({self.row},{self.col})"


class RoundResult(BaseModel):
    """
    Outcome of one resolution step.

    Snapshot is taken after avalanche and refill and is an independent
    copy of the grid at that moment.
    """

    model_config = ConfigDict(frozen=True)

    round_number: int
    destroyed: tuple[DestroyedSymbol, ...] = ()
    win: float = 0.0
    clusters: int = 0
    grid_snapshot: GridSnapshot = ()

    def destroyed_descriptions(self) -> list[str]:
        return [d.describe() for d in self.destroyed]


class GameResult(BaseModel):
    """Aggregated results of a session (one wager, all cascades)."""
    rounds: list[RoundResult] = Field(default_factory=list)
    total_win: float = 0.0

    def log_round(self, round_result: RoundResult) -> None:
        """Append a completed round and add its win to the total."""
        self.rounds.append(round_result)
        self.total_win += round_result.win

    @property
    def cascades(self) -> int:
        return len(self.rounds)

    @property
    def clusters(self) -> int:
        return sum(r.clusters for r in self.rounds)
