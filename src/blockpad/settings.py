from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

SUPPORTED_LOCALES = ("en", "ko")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    if val in {"1", "true", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclass(frozen=True)
class Settings:
    """Static settings for the editor engine.

    Everything here is read once from the environment; hosts that need
    different values per session pass them to the session directly.
    """

    locale: str = os.environ.get("BLOCKPAD_LOCALE", "en")

    # Image uploads: multipart POST to {upload_url}/upload/
    upload_url: str = os.environ.get("BLOCKPAD_UPLOAD_URL", "http://localhost:8000/api")
    upload_token: str | None = os.environ.get("BLOCKPAD_UPLOAD_TOKEN")
    upload_timeout_seconds: float = float(
        os.environ.get("BLOCKPAD_UPLOAD_TIMEOUT_SECONDS", "30")
    )
    # Return a data: URL when the upload endpoint is unavailable.
    upload_data_url_fallback: bool = _env_bool("BLOCKPAD_UPLOAD_DATA_URL_FALLBACK", True)

    log_level: str = os.environ.get("BLOCKPAD_LOG_LEVEL", "INFO")
    log_path: Path | None = (
        Path(os.environ["BLOCKPAD_LOG_PATH"]) if os.environ.get("BLOCKPAD_LOG_PATH") else None
    )
    log_max_bytes: int = int(os.environ.get("BLOCKPAD_LOG_MAX_BYTES", str(1_000_000)))
    log_backup_count: int = int(os.environ.get("BLOCKPAD_LOG_BACKUP_COUNT", "3"))


settings = Settings()
