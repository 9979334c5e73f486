"""Settings read from the environment."""

import os
from dataclasses import dataclass
from typing import Optional

from envelopes.database.factories import DB_PATH_ENV

OWNER_ENV = "ENVELOPES_OWNER"
LOG_LEVEL_ENV = "ENVELOPES_LOG_LEVEL"
LOG_JSON_ENV = "ENVELOPES_LOG_JSON"

DEFAULT_OWNER = "default"
DEFAULT_LOG_LEVEL = "WARNING"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Runtime settings. Command-line options take precedence over these."""

    db_path: Optional[str] = None
    owner: str = DEFAULT_OWNER
    log_level: str = DEFAULT_LOG_LEVEL
    log_json: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            db_path=os.getenv(DB_PATH_ENV) or None,
            owner=os.getenv(OWNER_ENV, DEFAULT_OWNER).strip() or DEFAULT_OWNER,
            log_level=os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper(),
            log_json=_env_bool(LOG_JSON_ENV),
        )
