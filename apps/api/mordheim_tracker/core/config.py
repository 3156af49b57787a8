"""Runtime settings, read from the environment once per call to load_settings()."""
from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_DATABASE_URL = "sqlite:///./data/app.db"


@dataclass(frozen=True)
class Settings:
    app_version: str
    database_url: str
    log_level: str
    recent_results_limit: int


def load_settings() -> Settings:
    limit_raw = os.getenv("RECENT_RESULTS_LIMIT", "3")
    return Settings(
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        recent_results_limit=max(int(limit_raw), 1),
    )
