"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_DB_PATH = Path("data/requests.db")
DEFAULT_PUBLIC_DIR = Path("public")
DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "https://deepnorth.app",
    "https://api.deepnorth.app",
)


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    """Service settings.

    Every field maps to one environment variable, see ``from_env``.
    """

    db_path: Path = DEFAULT_DB_PATH
    public_dir: Path = DEFAULT_PUBLIC_DIR
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        """Build settings from the environment.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Settings with unset variables left at their defaults.

        Raises:
            ValueError: If PORT is not an integer.
        """
        env = os.environ if environ is None else environ
        settings = cls()

        if env.get("MEDIADESK_DB_PATH"):
            settings.db_path = Path(env["MEDIADESK_DB_PATH"])
        if env.get("MEDIADESK_PUBLIC_DIR"):
            settings.public_dir = Path(env["MEDIADESK_PUBLIC_DIR"])
        if env.get("MEDIADESK_CORS_ORIGINS"):
            settings.cors_origins = _split_origins(env["MEDIADESK_CORS_ORIGINS"])
        if env.get("HOST"):
            settings.host = env["HOST"]
        if env.get("PORT"):
            settings.port = int(env["PORT"])
        if env.get("MEDIADESK_LOG_LEVEL"):
            settings.log_level = env["MEDIADESK_LOG_LEVEL"].upper()

        return settings
