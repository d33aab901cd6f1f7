from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


DEFAULT_BATCH_LIMIT = 500
MAX_BATCH_LIMIT = 5000


@dataclass(frozen=True)
class TaggerSettings:
    database_url: Optional[str] = None
    country_id: Optional[int] = None
    overwrite: bool = False
    batch_limit: int = DEFAULT_BATCH_LIMIT
    log_level: str = "INFO"


def _env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    v = (os.getenv(name) or "").strip()
    if not v:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def load_settings_from_env() -> TaggerSettings:
    """Load settings from environment (.env is read but never overrides real env)."""
    load_dotenv(override=False)

    limit = max(1, min(_env_int("TAG_BATCH_LIMIT", DEFAULT_BATCH_LIMIT), MAX_BATCH_LIMIT))

    return TaggerSettings(
        database_url=os.getenv("DATABASE_URL") or None,
        country_id=_env_int("TAG_COUNTRY_ID", None),
        overwrite=_env_bool("TAG_OVERWRITE", False),
        batch_limit=limit,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    )
