"""Config hash computation.

Shared by:
- scripts/audit_sim.py (CSV audit)
- telemetry.py (session_resolved event)

The hash MUST be computed identically in both locations.
"""
import hashlib
import json

from clusterpays.config import settings
from clusterpays.logic.paytable import PAYOUT_TABLE, TIER_BREAKPOINTS
from clusterpays.logic.sampler import default_weights


def get_config_hash() -> str:
    """
    Generate hash of the game-relevant configuration.

    Returns 16-char hex hash of config snapshot.
    """
    config_snapshot = {
        "grid_rows": settings.grid_rows,
        "grid_cols": settings.grid_cols,
        "min_cluster_size": settings.min_cluster_size,
        "weights": {s.name: w for s, w in default_weights().items()},
        "payout_table": [list(row) for row in PAYOUT_TABLE],
        "tier_breakpoints": list(TIER_BREAKPOINTS),
    }
    canonical = json.dumps(config_snapshot, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]
