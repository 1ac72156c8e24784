from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Load .env for local/dev environments only for values missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Engine settings pulled from MAPREGIONS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MAPREGIONS_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Tessellation
    sample_resolution: float = Field(
        default=0.5, gt=0, description="Grid step used to sample the canvas"
    )
    adjacency_threshold: float = Field(
        default=15.0, gt=0, description="Sample distance under which two cells are neighbors"
    )

    # Region rendering
    edge_match_decimals: int = Field(
        default=1, ge=0, description="Rounding used when matching shared cell edges"
    )
    chain_tolerance: float = Field(
        default=0.5, gt=0, description="Manhattan tolerance when stitching exposed edges"
    )
    closure_tolerance: float = Field(
        default=0.01, gt=0, description="Tolerance for treating a ring as closed"
    )

    # Region adjacency
    region_adjacency_threshold: float = Field(
        default=25.0, gt=0, description="Seed distance under which two regions are adjacent"
    )

    # Editing session
    recompute_debounce_seconds: float = Field(
        default=0.01, ge=0, description="Quiet period before a scheduled recompute runs"
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Logging format (console or json)")


# Instantiate singleton settings object
settings = Settings()
