#!/usr/bin/env python3
"""
Headless cascade simulation.

Plays many seeded wagered rounds and writes a one-row summary CSV.

Usage:
    python -m scripts.audit_sim --rounds 100000 --seed AUDIT_2025 --out out/audit.csv
"""
import argparse
import csv
import hashlib
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from clusterpays.config_hash import get_config_hash
from clusterpays.errors import GameError
from clusterpays.logic.engine import GameEngine
from clusterpays.logic.rng import SeededRNG
from clusterpays.telemetry import TelemetryService
from clusterpays.validators import validate_bet


logger = logging.getLogger(__name__)


@dataclass
class SimulationStats:
    """Statistics accumulated during simulation."""
    total_wagered: float = 0.0
    total_won: float = 0.0
    rounds: int = 0
    wins: int = 0
    total_cascades: int = 0
    max_cascades: int = 0
    total_clusters: int = 0
    win_x_values: list[float] = field(default_factory=list)
    max_win_x_observed: float = 0.0
    tier_counts: dict[str, int] = field(
        default_factory=lambda: {"none": 0, "big": 0, "mega": 0, "epic": 0}
    )

    @property
    def rtp(self) -> float:
        return (self.total_won / self.total_wagered * 100) if self.total_wagered > 0 else 0.0

    @property
    def hit_freq(self) -> float:
        return (self.wins / self.rounds * 100) if self.rounds > 0 else 0.0

    @property
    def avg_cascades(self) -> float:
        return self.total_cascades / self.rounds if self.rounds > 0 else 0.0


def get_timestamp_iso() -> str:
    """Get ISO 8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def seed_to_int(seed_str: str) -> int:
    """Convert string seed to integer deterministically."""
    return int(hashlib.sha256(seed_str.encode()).hexdigest(), 16) % (2**31)


def run_simulation(
    rounds: int,
    seed_str: str,
    bet_amount: float = 1.0,
    verbose: bool = False,
) -> SimulationStats:
    """
    Run headless simulation.

    Args:
        rounds: Number of wagered rounds to simulate
        seed_str: Seed string for reproducibility
        bet_amount: Stake per round
        verbose: Print progress

    Returns:
        SimulationStats with aggregated results

    Raises:
        GameError: INVALID_BET if bet_amount is not an allowed bet level
    """
    validate_bet(bet_amount)
    rng = SeededRNG(seed=seed_to_int(seed_str))
    engine = GameEngine(rng=rng, telemetry=TelemetryService(enabled=False))

    stats = SimulationStats()
    progress_interval = max(1, rounds // 100)

    for round_count in range(rounds):
        if verbose and round_count % progress_interval == 0:
            pct = (round_count / rounds) * 100
            print(f"\rProgress: {pct:.1f}%", end="", flush=True)

        result = engine.spin(bet_amount)

        stats.total_wagered += bet_amount
        stats.total_won += result.total_win
        stats.rounds += 1
        if result.total_win > 0:
            stats.wins += 1

        stats.total_cascades += result.cascades
        stats.max_cascades = max(stats.max_cascades, result.cascades)
        stats.total_clusters += result.game.clusters
        stats.tier_counts[result.win_tier] += 1

        stats.win_x_values.append(result.total_win_x)
        if result.total_win_x > stats.max_win_x_observed:
            stats.max_win_x_observed = result.total_win_x

    if verbose:
        print("\rProgress: 100.0%")

    return stats


def calculate_percentile(values: list[float], percentile: float) -> float:
    """Calculate percentile from sorted list."""
    if not values:
        return 0.0
    sorted_vals = sorted(values)
    idx = int(len(sorted_vals) * percentile / 100)
    idx = min(idx, len(sorted_vals) - 1)
    return sorted_vals[idx]


def build_row(rounds: int, seed_str: str, stats: SimulationStats) -> dict[str, str | int]:
    """Build the CSV row for a finished simulation."""
    return {
        "timestamp": get_timestamp_iso(),
        "config_hash": get_config_hash(),
        "rounds": rounds,
        "seed": seed_str,
        "rtp": f"{stats.rtp:.4f}",
        "hit_freq": f"{stats.hit_freq:.4f}",
        "avg_cascades": f"{stats.avg_cascades:.4f}",
        "max_cascades": stats.max_cascades,
        "total_clusters": stats.total_clusters,
        "p95_win_x": f"{calculate_percentile(stats.win_x_values, 95):.2f}",
        "p99_win_x": f"{calculate_percentile(stats.win_x_values, 99):.2f}",
        "max_win_x": f"{stats.max_win_x_observed:.2f}",
        "big_wins": stats.tier_counts["big"],
        "mega_wins": stats.tier_counts["mega"],
        "epic_wins": stats.tier_counts["epic"],
    }


def generate_csv(
    rounds: int,
    seed_str: str,
    stats: SimulationStats,
    output_path: str,
) -> None:
    """Write the simulation summary CSV."""
    row = build_row(rounds, seed_str, stats)

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=row.keys())
        writer.writeheader()
        writer.writerow(row)

    logger.info("CSV written to: %s", output_path)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Headless cluster-pays simulation")
    parser.add_argument(
        "--rounds",
        type=int,
        required=True,
        help="Number of wagered rounds to simulate",
    )
    parser.add_argument(
        "--seed",
        type=str,
        required=True,
        help="Seed string for reproducibility",
    )
    parser.add_argument(
        "--bet",
        type=float,
        default=1.0,
        help="Stake per round",
    )
    parser.add_argument(
        "--out",
        type=str,
        required=True,
        help="Output CSV path",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show progress",
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    print(f"Running simulation: rounds={args.rounds}, seed={args.seed}")
    print(f"Config hash: {get_config_hash()}")

    try:
        stats = run_simulation(
            rounds=args.rounds,
            seed_str=args.seed,
            bet_amount=args.bet,
            verbose=args.verbose,
        )
    except GameError as err:
        logger.error("Simulation aborted: %s", err.to_body().model_dump())
        return 2

    generate_csv(
        rounds=args.rounds,
        seed_str=args.seed,
        stats=stats,
        output_path=args.out,
    )

    print(f"\nSummary:")
    print(f"  Rounds: {stats.rounds}")
    print(f"  Total wagered: {stats.total_wagered:.2f}")
    print(f"  Total won: {stats.total_won:.2f}")
    print(f"  RTP: {stats.rtp:.4f}%")
    print(f"  Hit frequency: {stats.hit_freq:.4f}%")
    print(f"  Avg cascades: {stats.avg_cascades:.4f}")
    print(f"  Max cascades: {stats.max_cascades}")
    print(f"  Max win: {stats.max_win_x_observed:.2f}x")

    return 0


if __name__ == "__main__":
    sys.exit(main())
