"""
Environment-driven configuration.

Library defaults for inserted jobs (queue, priority, max attempts) are
constants and aren't configurable here; this only covers how a process
connects and logs.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .logger import StructuredLogger, get_logger, reset_logger

DATABASE_URL_DEFAULT = "sqlite:///jobriver.db"
LOG_LEVEL_DEFAULT = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_env(env_path: Optional[Path] = None) -> bool:
    """Load .env from the working directory (or `env_path`) if present.

    Variables already set in the environment win.

    Returns:
        True if a file was loaded
    """
    env_path = env_path or Path.cwd() / ".env"
    if not env_path.exists():
        return False
    return load_dotenv(dotenv_path=env_path, override=False)


@dataclass(frozen=True)
class Settings:
    database_url: str = DATABASE_URL_DEFAULT
    log_level: str = LOG_LEVEL_DEFAULT
    log_dir: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Read settings from JOBRIVER_* environment variables.

        Raises:
            ValueError: If JOBRIVER_LOG_LEVEL isn't a known level
        """
        level = os.environ.get("JOBRIVER_LOG_LEVEL", LOG_LEVEL_DEFAULT).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"JOBRIVER_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}")

        log_dir = os.environ.get("JOBRIVER_LOG_DIR")
        return cls(
            database_url=os.environ.get("JOBRIVER_DATABASE_URL", DATABASE_URL_DEFAULT),
            log_level=level,
            log_dir=Path(log_dir) if log_dir else None,
        )

    def configure_logger(self) -> StructuredLogger:
        """Replace the global logger with one built from these settings."""
        reset_logger()
        return get_logger(
            level=self.log_level,
            log_dir=self.log_dir,
            enable_file=self.log_dir is not None,
        )


def get_settings() -> Settings:
    """Load .env, then read settings from the environment."""
    load_env()
    return Settings.from_env()
