"""
Application configuration settings.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional

from dropsim.core.constants import DEFAULT_TARGET_ITEM, MAX_TRIAL_TICKS


class Settings(BaseSettings):
    """Simulation and API settings."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Simulation
    DEFAULT_TRIAL_COUNT: int = 10000
    MAX_TRIAL_COUNT: int = 100000
    DEFAULT_SEED: Optional[int] = None
    MAX_TRIAL_TICKS: int = MAX_TRIAL_TICKS
    # Per-trial tick limit for API requests (100 hours)
    API_MAX_TRIAL_TICKS: int = 600_000
    IS_MEMBERS: bool = True
    TARGET_ITEM: str = DEFAULT_TARGET_ITEM

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
