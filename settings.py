from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Mapping, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_API_BASE = "https://pokeapi.co/api/v2"
DEFAULT_CANDIDATE_LIMIT = 10000
DEFAULT_TIMEOUT = 10.0
DEFAULT_BLUR_DELAY = 0.1
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    api_base: str = DEFAULT_API_BASE
    candidate_limit: int = DEFAULT_CANDIDATE_LIMIT
    timeout: float = DEFAULT_TIMEOUT
    blur_delay: float = DEFAULT_BLUR_DELAY
    log_level: str = DEFAULT_LOG_LEVEL


def _env_value(env: Mapping[str, str], key: str, default: T, cast: Callable[[str], T]) -> T:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %r", key, raw, default)
        return default
    if isinstance(value, (int, float)) and value < 0:
        logger.warning("Ignoring negative %s=%r, using %r", key, raw, default)
        return default
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Read ``POKEDEX_*`` environment variables into a :class:`Settings`."""
    env = os.environ if env is None else env
    api_base = (env.get("POKEDEX_API_BASE") or DEFAULT_API_BASE).strip().rstrip("/")
    log_level = (env.get("POKEDEX_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        logger.warning("Ignoring unknown POKEDEX_LOG_LEVEL=%r", log_level)
        log_level = DEFAULT_LOG_LEVEL
    return Settings(
        api_base=api_base or DEFAULT_API_BASE,
        candidate_limit=_env_value(env, "POKEDEX_CANDIDATE_LIMIT", DEFAULT_CANDIDATE_LIMIT, int),
        timeout=_env_value(env, "POKEDEX_TIMEOUT", DEFAULT_TIMEOUT, float),
        blur_delay=_env_value(env, "POKEDEX_BLUR_DELAY", DEFAULT_BLUR_DELAY, float),
        log_level=log_level,
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    # Streamlit re-executes the script on every interaction; install once.
    root = logging.getLogger()
    if any(getattr(h, "_pokedex_handler", False) for h in root.handlers):
        root.setLevel(level)
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._pokedex_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)
