from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from mood_ring.models import Credentials

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Either naming works; spotipy's own variables win when both are set.
_CLIENT_ID_VARS = ("SPOTIPY_CLIENT_ID", "CLIENT_ID")
_CLIENT_SECRET_VARS = ("SPOTIPY_CLIENT_SECRET", "CLIENT_SECRET")


def load_local_env_file(env_path: str = ".env") -> None:
    """Load key=value pairs from a local .env file into process env.

    Existing environment variables are preserved and not overwritten.
    """

    path = Path(env_path)
    if not path.exists():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")

        if key and key not in os.environ:
            os.environ[key] = value


def env_int(name: str, fallback: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback


def _first_env(names: tuple[str, ...]) -> str:
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return ""


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


@dataclass(frozen=True, slots=True)
class Settings:
    client_id: str = ""
    client_secret: str = ""
    market: str = "US"
    requests_timeout: int = 5
    log_level: str = "INFO"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            client_id=_first_env(_CLIENT_ID_VARS),
            client_secret=_first_env(_CLIENT_SECRET_VARS),
            market=os.getenv("MOOD_RING_MARKET", "").strip().upper() or "US",
            requests_timeout=max(1, env_int("MOOD_RING_TIMEOUT", 5)),
            log_level=os.getenv("MOOD_RING_LOG_LEVEL", "").strip() or "INFO",
            port=env_int("PORT", 8000),
        )

    def credentials(self) -> Credentials:
        missing = [
            names[0]
            for names, value in ((_CLIENT_ID_VARS, self.client_id), (_CLIENT_SECRET_VARS, self.client_secret))
            if not value
        ]
        if missing:
            missing_list = ", ".join(missing)
            raise ValueError(
                f"Missing Spotify credentials: {missing_list}. "
                "Set them in environment variables or local .env file."
            )
        return Credentials(client_id=self.client_id, client_secret=self.client_secret)
