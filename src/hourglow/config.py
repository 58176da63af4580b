"""Configuration for Hourglow."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    db_path: Path = field(
        default_factory=lambda: Path.home() / ".cache" / "hourglow" / "hourglow.db"
    )
    api_host: str = "127.0.0.1"
    api_port: int = 8770
    api_url: str = ""
    ui_host: str = "127.0.0.1"
    ui_port: int = 8765
    log_level: str = "INFO"

    @property
    def endpoint_url(self) -> str:
        """Base URL the store client talks to."""
        return (self.api_url or f"http://{self.api_host}:{self.api_port}").rstrip("/")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Build a config from ``HOURGLOW_*`` environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            db_path=Path(env["HOURGLOW_DB_PATH"]).expanduser()
            if env.get("HOURGLOW_DB_PATH")
            else defaults.db_path,
            api_host=env.get("HOURGLOW_API_HOST", defaults.api_host),
            api_port=_int(env.get("HOURGLOW_API_PORT"), defaults.api_port),
            api_url=env.get("HOURGLOW_API_URL", defaults.api_url),
            ui_host=env.get("HOURGLOW_UI_HOST", defaults.ui_host),
            ui_port=_int(env.get("HOURGLOW_UI_PORT"), defaults.ui_port),
            log_level=env.get("LOG_LEVEL", defaults.log_level).upper(),
        )


def _int(value: str | None, default: int) -> int:
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        msg = f"Expected an integer port, got {value!r}"
        raise ValueError(msg) from None
