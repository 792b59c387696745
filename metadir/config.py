"""Runtime settings for the metadata service, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``METADIR_*`` environment variables."""
        port = os.environ.get("METADIR_PORT", str(DEFAULT_PORT))
        try:
            port_number = int(port)
        except ValueError:
            raise ValueError(f"METADIR_PORT must be an integer, got {port!r}")

        log_level = os.environ.get("METADIR_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"METADIR_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

        return cls(
            host=os.environ.get("METADIR_HOST", DEFAULT_HOST),
            port=port_number,
            log_level=log_level,
        )
