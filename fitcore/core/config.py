import logging

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional

class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False

    # Database & Cache
    DATABASE_URL: Optional[str] = None
    TEST_DATABASE_URL: Optional[str] = None
    REDIS_URL: Optional[str] = None

    # ExerciseDB (RapidAPI)
    EXERCISE_DB_API_URL: str = "https://exercisedb.p.rapidapi.com/exercises"
    EXERCISE_DB_API_KEY: Optional[str] = None
    EXERCISE_DB_API_HOST: str = "exercisedb.p.rapidapi.com"
    EXERCISE_DB_TIMEOUT_SECONDS: float = 15.0
    EXERCISE_CATALOG_TTL_DAYS: int = 7
    EXERCISE_CATALOG_LIMIT: int = 1000

    # Calendar used for streaks, weekends and time-of-day counts
    FITCORE_TIMEZONE: str = "UTC"

    # Coins
    DOUBLE_COIN_BOOST_HOURS: int = 24
    DOUBLE_COIN_MULTIPLIER: int = 2
    STREAK_SAVER_PROTECTION_DAYS: int = 3

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate recommended configuration.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    Secrets are not logged, only missing keys.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("fitcore")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    required_keys = [
        "DATABASE_URL",
        "EXERCISE_DB_API_KEY",
    ]

    missing = [key for key in required_keys if not getattr(cfg, key, None)]
    if missing:
        message = f"Missing required configuration: {', '.join(missing)}"
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)

    return True
