"""Cluster-pays grid: detection, destruction, avalanche, refill and resolution."""
import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

from clusterpays.config import settings
from clusterpays.errors import ErrorCode, GameError, invariant_violation
from clusterpays.logic.models import (
    Coordinate,
    DestroyedSymbol,
    GameResult,
    GridSnapshot,
    RoundResult,
    Symbol,
)
from clusterpays.logic.paytable import payout_for
from clusterpays.logic.rng import RNGBase
from clusterpays.logic.sampler import WeightedSampler


logger = logging.getLogger(__name__)

Cluster = list[Coordinate]

# Flood fill directions: down, up, right, left
FILL_DIRECTIONS: tuple[Coordinate, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))

# Blocker check order around a destroyed cell: right, down, left, up
BLOCKER_DIRECTIONS: tuple[Coordinate, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


class SymbolSource(Protocol):
    """Anything that yields one symbol per call."""

    def draw(self) -> Symbol:
        ...


class Grid:
    """
    Mutable rows x cols symbol matrix for one wagered round.

    Implements:
    - Initial generation from a weighted sampler
    - Cluster detection (4-directional, wild substitution)
    - Payout per cluster
    - Destruction including adjacent blockers
    - Avalanche and refill
    - Full cascade resolution
    """

    def __init__(
        self,
        sampler: SymbolSource | None = None,
        rows: int | None = None,
        cols: int | None = None,
        min_cluster_size: int | None = None,
    ):
        self.rows = settings.grid_rows if rows is None else rows
        self.cols = settings.grid_cols if cols is None else cols
        self.min_cluster_size = (
            settings.min_cluster_size if min_cluster_size is None else min_cluster_size
        )
        if self.rows <= 0 or self.cols <= 0:
            raise GameError(
                ErrorCode.INVALID_CONFIG,
                f"Grid dimensions must be positive, got {self.rows}x{self.cols}",
            )
        if self.min_cluster_size <= 0:
            raise GameError(
                ErrorCode.INVALID_CONFIG,
                f"Minimum cluster size must be positive, got {self.min_cluster_size}",
            )
        self.sampler = sampler or WeightedSampler()
        self.cells: list[list[Symbol]] = [
            [Symbol.EMPTY] * self.cols for _ in range(self.rows)
        ]

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Symbol]],
        sampler: SymbolSource | None = None,
        min_cluster_size: int | None = None,
    ) -> "Grid":
        """Build a grid with fixed contents (row-major)."""
        if not rows or not rows[0]:
            raise GameError(ErrorCode.INVALID_GRID, "Grid must have at least one cell.")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise GameError(ErrorCode.INVALID_GRID, "All grid rows must have equal length.")
        grid = cls(
            sampler=sampler,
            rows=len(rows),
            cols=width,
            min_cluster_size=min_cluster_size,
        )
        grid.cells = [[Symbol(s) for s in row] for row in rows]
        return grid

    def __getitem__(self, coord: Coordinate) -> Symbol:
        row, col = coord
        return self.cells[row][col]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    # === Generation ===

    def generate_initial_grid(self) -> None:
        """Fill every cell with an independent sampler draw."""
        for col in range(self.cols):
            for row in range(self.rows):
                self.cells[row][col] = self.sampler.draw()

    # === Detection ===

    def find_winning_clusters(self) -> list[Cluster]:
        """
        Find all clusters of at least min_cluster_size cells.

        Scans row-major. Only ordinary symbols anchor a fill; wilds are
        absorbed by fills but never seed one. Cells collected by any fill,
        winning or not, are not revisited.
        """
        visited = [[False] * self.cols for _ in range(self.rows)]
        clusters: list[Cluster] = []

        for row in range(self.rows):
            for col in range(self.cols):
                if visited[row][col] or not self.cells[row][col].is_ordinary:
                    continue
                cluster = self._flood_fill(row, col, visited)
                if len(cluster) >= self.min_cluster_size:
                    clusters.append(cluster)

        return clusters

    def _flood_fill(
        self, row: int, col: int, visited: list[list[bool]]
    ) -> Cluster:
        """Collect cells reachable from (row, col) matching its symbol or wild."""
        target = self.cells[row][col]
        cluster: Cluster = []
        stack: list[Coordinate] = [(row, col)]

        while stack:
            r, c = stack.pop()
            if not self.in_bounds(r, c) or visited[r][c]:
                continue
            current = self.cells[r][c]
            if current is not target and not current.is_wild:
                continue
            visited[r][c] = True
            cluster.append((r, c))
            # Reversed so the first direction is explored first
            for dr, dc in reversed(FILL_DIRECTIONS):
                stack.append((r + dr, c + dc))

        for r, c in cluster:
            if self.cells[r][c] in (Symbol.BLOCKER, Symbol.EMPTY):
                raise invariant_violation(
                    f"Cluster at ({row},{col}) contains {self.cells[r][c].name} at ({r},{c})"
                )
        return cluster

    # === Payout ===

    def calculate_payout(self, cluster: Cluster) -> float:
        """
        Payout multiplier for one cluster.

        Base symbol is the first non-wild cell. All-wild clusters, and
        any cluster whose base is not an ordinary symbol, pay 0.
        """
        base: Symbol | None = None
        for row, col in cluster:
            if not self.cells[row][col].is_wild:
                base = self.cells[row][col]
                break
        if base is None:
            return 0.0
        return payout_for(base, len(cluster))

    # === Destruction / gravity / refill ===

    def destroy_clusters(self, clusters: Iterable[Cluster]) -> list[DestroyedSymbol]:
        """
        Empty every cluster cell plus any blocker orthogonally adjacent to one.

        Blocker entries follow immediately after the cell that removed them.
        """
        destroyed: list[DestroyedSymbol] = []
        for cluster in clusters:
            for row, col in cluster:
                if not self.in_bounds(row, col):
                    raise invariant_violation(
                        f"Destroyed cell ({row},{col}) outside {self.rows}x{self.cols} grid"
                    )
                destroyed.append(
                    DestroyedSymbol(symbol=self.cells[row][col], row=row, col=col)
                )
                self.cells[row][col] = Symbol.EMPTY

                for dr, dc in BLOCKER_DIRECTIONS:
                    nr, nc = row + dr, col + dc
                    if self.in_bounds(nr, nc) and self.cells[nr][nc] is Symbol.BLOCKER:
                        destroyed.append(
                            DestroyedSymbol(symbol=Symbol.BLOCKER, row=nr, col=nc)
                        )
                        self.cells[nr][nc] = Symbol.EMPTY
        return destroyed

    def apply_avalanche(self) -> None:
        """Let non-empty symbols fall to the bottom of each column, keeping order."""
        for col in range(self.cols):
            target_row = self.rows - 1
            for row in range(self.rows - 1, -1, -1):
                if self.cells[row][col] is not Symbol.EMPTY:
                    self.cells[target_row][col] = self.cells[row][col]
                    target_row -= 1
            while target_row >= 0:
                self.cells[target_row][col] = Symbol.EMPTY
                target_row -= 1

    def refill_grid(self) -> None:
        """Draw a fresh symbol for every empty cell (column-major)."""
        for col in range(self.cols):
            for row in range(self.rows):
                if self.cells[row][col] is Symbol.EMPTY:
                    self.cells[row][col] = self.sampler.draw()

    # === Snapshots ===

    def snapshot(self) -> GridSnapshot:
        """Immutable copy of the current cells."""
        return tuple(tuple(row) for row in self.cells)

    def render(self) -> str:
        """Tab-separated text rendering, one line per row."""
        return "\n".join("\t".join(s.label for s in row) for row in self.cells)

    # === Resolution loop ===

    def resolve(self) -> tuple[float, list[RoundResult]]:
        """
        Run cascades until no winning cluster remains.

        Each round: detect, pay, destroy, avalanche, refill, record.
        Refilled symbols take part in the next round's detection.

        Returns (total_win, rounds).
        """
        game = self.resolve_session()
        return game.total_win, list(game.rounds)

    def resolve_session(self) -> GameResult:
        """Same as resolve() but returns the session GameResult."""
        game = GameResult()
        round_number = 1

        while True:
            clusters = self.find_winning_clusters()
            if not clusters:
                break

            round_win = sum(self.calculate_payout(cluster) for cluster in clusters)
            destroyed = self.destroy_clusters(clusters)
            self.apply_avalanche()
            self.refill_grid()

            game.log_round(
                RoundResult(
                    round_number=round_number,
                    destroyed=tuple(destroyed),
                    win=round_win,
                    clusters=len(clusters),
                    grid_snapshot=self.snapshot(),
                )
            )
            logger.debug(
                "Round %d: %d clusters, %d cells destroyed, win %.2f",
                round_number,
                len(clusters),
                len(destroyed),
                round_win,
            )
            round_number += 1

        return game


def new_grid(rng: RNGBase | None = None) -> Grid:
    """Create a default-sized grid with the default equal-weight sampler."""
    return Grid(sampler=WeightedSampler(rng=rng))
