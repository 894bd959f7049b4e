"""
FILE: jot/config.py
PURPOSE: Settings loaded from environment variables
EXPORTS:
  - Settings (frozen dataclass)
  - get_settings() -> Settings
DEPENDENCIES:
  - os, pathlib, dataclasses (stdlib)
NOTES:
  - All variables use the JOT_ prefix
  - JOT_HOME (default ~/.jot) holds the database and saved view state
  - JOT_DB_PATH / JOT_STATE_PATH override individual files
  - JOT_LOG_LEVEL defaults to WARNING so one-shot commands stay quiet
"""

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "JOT"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    home_dir: Path
    db_path: Path
    state_path: Path
    log_level: str

    @staticmethod
    def from_env() -> "Settings":
        home_dir = _env_path(_k("HOME"), Path.home() / ".jot")
        return Settings(
            home_dir=home_dir,
            db_path=_env_path(_k("DB_PATH"), home_dir / "jot.db"),
            state_path=_env_path(_k("STATE_PATH"), home_dir / "view_state.json"),
            log_level=_env(_k("LOG_LEVEL"), "WARNING").upper(),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
