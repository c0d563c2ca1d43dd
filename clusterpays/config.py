"""Application configuration with environment overrides."""
from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Game settings; override with CLUSTERPAYS_* environment variables."""

    model_config = ConfigDict(env_prefix="CLUSTERPAYS_")

    # Grid
    grid_rows: int = Field(default=8, gt=0)
    grid_cols: int = Field(default=8, gt=0)
    min_cluster_size: int = Field(default=5, gt=0)

    # Sampling - every drawable symbol gets the default weight unless
    # overridden by name, e.g. CLUSTERPAYS_SYMBOL_WEIGHTS='{"BLOCKER": 50}'
    default_symbol_weight: int = 100
    symbol_weights: dict[str, int] = {}

    # Accepted stakes; GameEngine.spin and the simulation reject anything else
    allowed_bets: list[float] = [0.10, 0.20, 0.50, 1.00, 2.00, 5.00, 10.00]

    telemetry_enabled: bool = True


settings = Settings()
