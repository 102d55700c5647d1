"""Runtime settings read from the environment (after .env loading)."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_API_URL = "http://localhost:3000"


def _optional_path(value: Optional[str]) -> Optional[Path]:
    return Path(value) if value else None


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    db_path: Optional[Path] = None
    environment: str = "production"
    api_url: str = DEFAULT_API_URL

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        port = env.get("HIRESCORE_PORT") or env.get("PORT") or "3000"
        try:
            port_num = int(port)
        except ValueError:
            raise ValueError(f"Invalid port: {port!r}") from None
        return cls(
            host=env.get("HIRESCORE_HOST", "0.0.0.0"),
            port=port_num,
            log_level=env.get("HIRESCORE_LOG_LEVEL", "INFO").upper(),
            log_dir=_optional_path(env.get("HIRESCORE_LOG_DIR")),
            db_path=_optional_path(env.get("HIRESCORE_DB_PATH")),
            environment=env.get("HIRESCORE_ENV", "production"),
            api_url=env.get("HIRESCORE_API_URL", DEFAULT_API_URL),
        )
