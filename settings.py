# viewer/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_DATA_URL = "https://report-flame.vercel.app/test.json"


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration, read from the environment (and .env if present).

    Environment variables:
      - DATA_URL               dataset fetched when a session starts
      - OPENAI_MODEL           model used for chart descriptions
      - FETCH_TIMEOUT_SECONDS  dataset fetch timeout; empty or 0 disables it
      - DESCRIPTION_MAX_POINTS points sent to the description service
      - LOG_LEVEL
    OPENAI_API_KEY is read by the OpenAI SDK directly.
    """

    data_url: str = DEFAULT_DATA_URL
    openai_model: str = "gpt-4o-mini"
    fetch_timeout: Optional[float] = 60.0
    description_max_points: int = 50
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        if env is None:
            load_dotenv()
            env = os.environ

        return cls(
            data_url=env.get("DATA_URL") or DEFAULT_DATA_URL,
            openai_model=env.get("OPENAI_MODEL") or cls.openai_model,
            fetch_timeout=_timeout(env, "FETCH_TIMEOUT_SECONDS", cls.fetch_timeout),
            description_max_points=_positive_int(
                env, "DESCRIPTION_MAX_POINTS", cls.description_max_points
            ),
            log_level=(env.get("LOG_LEVEL") or cls.log_level).upper(),
        )


def _timeout(
    env: Mapping[str, str], name: str, default: Optional[float]
) -> Optional[float]:
    raw = env.get(name)
    if raw is None:
        return default
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value or None


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value
