"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables via ``Settings.from_env``.  The resulting
object is handed to ``create_app`` and kept on ``app.state`` so that
the shared secret, storage handles and origin list are threaded
through the application explicitly instead of living in module
globals.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def resolve_path(value: str) -> str:
    """Return ``value`` as an absolute path, relative to the project root."""
    if os.path.isabs(value):
        return value
    return str((PROJECT_ROOT / value).resolve())


@dataclass
class Settings:
    """Application settings."""

    project_name: str = "Request Analytics"
    api_version: str = "1.0.0"
    log_level: str = "INFO"
    log_file: str = ""

    # Shared secret compared verbatim against the ``Authorization``
    # header on ingestion routes.  When empty every ingestion is
    # rejected.
    auth_key: str = ""

    # ``table`` (SQLite) or ``blob`` (single JSON object).
    store_backend: str = "table"

    # Path for the SQLite database.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = "analytics.db"

    # Blob store: ``file`` keeps objects under ``blob_root`` on the
    # local disk, ``s3`` stores them in ``s3_bucket``.
    blob_backend: str = "file"
    blob_root: str = "data"
    blob_key: str = "analytics/requests.json"
    s3_bucket: str = ""

    # Origins allowed to read responses from a browser.  Empty means
    # ``Access-Control-Allow-Origin: *``.
    allowed_origins: List[str] = field(default_factory=list)

    # Header set by the edge proxy with the client's country code.
    country_header: str = "CF-IPCountry"
    ipinfo_token: str = ""
    ipinfo_timeout: float = 5.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        return cls(
            project_name=os.getenv("PROJECT_NAME", cls.project_name),
            api_version=os.getenv("API_VERSION", cls.api_version),
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            log_file=os.getenv("LOG_FILE", cls.log_file),
            auth_key=os.getenv("AUTH_KEY", cls.auth_key),
            store_backend=os.getenv("STORE_BACKEND", cls.store_backend).lower(),
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            blob_backend=os.getenv("BLOB_BACKEND", cls.blob_backend).lower(),
            blob_root=os.getenv("BLOB_ROOT", cls.blob_root),
            blob_key=os.getenv("BLOB_KEY", cls.blob_key),
            s3_bucket=os.getenv("S3_BUCKET", cls.s3_bucket),
            allowed_origins=_split_csv(os.getenv("ALLOWED_ORIGINS", "")),
            country_header=os.getenv("COUNTRY_HEADER", cls.country_header),
            ipinfo_token=os.getenv("IPINFO_TOKEN", cls.ipinfo_token),
            ipinfo_timeout=float(os.getenv("IPINFO_TIMEOUT", str(cls.ipinfo_timeout))),
        )
