from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from mozdef_search.core.errors import ConfigError


ES_HOST_ENV = "MOZDEFESHOST"


def load_env_file(path: Path | None = None) -> bool:
    # override=False: real environment variables win over .env
    env_path = path if path is not None else Path.cwd() / ".env"
    if not env_path.exists():
        return False
    return load_dotenv(env_path, override=False)


@dataclass(frozen=True)
class Settings:
    es_host: str
    log_level: str = "WARNING"
    request_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "Settings":
        es_host = os.getenv(ES_HOST_ENV, "").strip()
        if not es_host:
            raise ConfigError(f"{ES_HOST_ENV} environment variable not set")

        raw_timeout = os.getenv("MOZDEF_REQUEST_TIMEOUT", "30").strip()
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigError(f"invalid MOZDEF_REQUEST_TIMEOUT: {raw_timeout!r}") from None

        return cls(
            es_host=es_host,
            log_level=os.getenv("LOG_LEVEL", "WARNING"),
            request_timeout=timeout,
        )
