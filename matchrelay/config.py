from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_PORT = 8080


@dataclass(frozen=True, slots=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def _load_dotenv() -> None:
    # Real environment variables win over `.env`.
    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


def load_settings() -> Settings:
    """Build settings from the environment (`HOST`, `PORT`, `LOG_LEVEL`)."""

    _load_dotenv()

    raw_port = os.environ.get("PORT", str(DEFAULT_PORT))
    try:
        port = int(raw_port)
    except ValueError as e:
        raise ValueError(f"PORT must be an integer, got {raw_port!r}") from e
    if not 0 <= port <= 65535:
        raise ValueError(f"PORT out of range: {port}")

    return Settings(
        host=os.environ.get("HOST", "0.0.0.0"),
        port=port,
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
