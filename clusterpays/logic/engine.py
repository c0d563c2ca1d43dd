"""Game engine: one wagered round = one fresh grid resolved to completion."""
import logging

from pydantic import BaseModel, Field

from clusterpays.config_hash import get_config_hash
from clusterpays.logic.grid import new_grid
from clusterpays.logic.models import GameResult, GridSnapshot
from clusterpays.logic.rng import ProductionRNG, RNGBase
from clusterpays.telemetry import SessionResolvedEvent, TelemetryService, telemetry_service
from clusterpays.validators import validate_bet


logger = logging.getLogger(__name__)

# Win tiers (multiples of the bet)
WIN_TIER_BIG = 20.0
WIN_TIER_MEGA = 200.0
WIN_TIER_EPIC = 1000.0


class SpinResult(BaseModel):
    """Result of one wagered round."""
    bet_amount: float
    initial_grid: GridSnapshot = ()
    game: GameResult = Field(default_factory=GameResult)
    total_win_x: float = 0.0
    total_win: float = 0.0
    win_tier: str = "none"

    @property
    def cascades(self) -> int:
        return self.game.cascades

    @property
    def final_grid(self) -> GridSnapshot:
        if self.game.rounds:
            return self.game.rounds[-1].grid_snapshot
        return self.initial_grid


def win_tier_for(total_win_x: float) -> str:
    """Classify a session win by its bet multiple."""
    if total_win_x >= WIN_TIER_EPIC:
        return "epic"
    if total_win_x >= WIN_TIER_MEGA:
        return "mega"
    if total_win_x >= WIN_TIER_BIG:
        return "big"
    return "none"


class GameEngine:
    """
    Runs wagered rounds.

    Each spin creates its own Grid (never reused across rounds), generates
    it, resolves every cascade, and scales the multiplier total by the bet.
    The RNG is shared by consecutive spins of one engine, sequentially.
    """

    def __init__(
        self,
        rng: RNGBase | None = None,
        telemetry: TelemetryService | None = None,
    ):
        self.rng = rng or ProductionRNG()
        self.telemetry = telemetry or telemetry_service

    def spin(self, bet_amount: float) -> SpinResult:
        """
        Play one wagered round.

        Args:
            bet_amount: Stake for this round, must be positive

        Returns:
            SpinResult with initial grid, round log and scaled win
        """
        validate_bet(bet_amount)

        grid = new_grid(rng=self.rng)
        grid.generate_initial_grid()
        initial_grid = grid.snapshot()

        game = grid.resolve_session()
        total_win_x = game.total_win
        total_win = total_win_x * bet_amount

        result = SpinResult(
            bet_amount=bet_amount,
            initial_grid=initial_grid,
            game=game,
            total_win_x=total_win_x,
            total_win=total_win,
            win_tier=win_tier_for(total_win_x),
        )
        logger.debug(
            "Spin resolved: bet=%.2f cascades=%d win_x=%.2f",
            bet_amount,
            game.cascades,
            total_win_x,
        )

        self.telemetry.emit_session_resolved(
            SessionResolvedEvent(
                config_hash=get_config_hash(),
                bet_amount=bet_amount,
                cascades=game.cascades,
                clusters=game.clusters,
                cells_destroyed=sum(len(r.destroyed) for r in game.rounds),
                total_win_x=total_win_x,
                total_win=total_win,
                win_tier=result.win_tier,
            )
        )
        return result
