"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
import os
from pathlib import Path

DEFAULT_ARANGO_URL = "http://127.0.0.1:8529"
DEFAULT_ARANGO_DATABASE = "directory"
DEFAULT_ARANGO_USERNAME = "root"
DEFAULT_STORAGE_DIR = "storage"
DEFAULT_MAX_UPLOAD_BYTES = 5_000_000
DEFAULT_LOG_LEVEL = "INFO"


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw)


def redact_secret(secret: str) -> str:
    """Return a non-recoverable placeholder for sensitive values."""
    if not secret:
        return "<empty>"
    return "<redacted>"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the database connection, uploads and logging."""

    arango_url: str
    arango_database: str
    arango_username: str
    arango_password: str
    storage_dir: Path
    max_upload_bytes: int
    log_level: str

    def safe_for_logging(self) -> dict[str, str | int]:
        """Return settings safe for logs."""
        return {
            "arango_url": self.arango_url,
            "arango_database": self.arango_database,
            "arango_username": self.arango_username,
            "arango_password": redact_secret(self.arango_password),
            "storage_dir": str(self.storage_dir),
            "max_upload_bytes": self.max_upload_bytes,
            "log_level": self.log_level,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from the environment."""
    return Settings(
        arango_url=os.getenv("DIRECTORY_ARANGO_URL", DEFAULT_ARANGO_URL),
        arango_database=os.getenv("DIRECTORY_ARANGO_DATABASE", DEFAULT_ARANGO_DATABASE),
        arango_username=os.getenv("DIRECTORY_ARANGO_USERNAME", DEFAULT_ARANGO_USERNAME),
        arango_password=os.getenv("DIRECTORY_ARANGO_PASSWORD", ""),
        storage_dir=Path(os.getenv("DIRECTORY_STORAGE_DIR", DEFAULT_STORAGE_DIR)).resolve(),
        max_upload_bytes=_get_int_env("DIRECTORY_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        log_level=os.getenv("DIRECTORY_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )


def configure_logging(settings: Settings) -> None:
    """Apply the configured level to the root logger once per process."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
