"""Runtime configuration read from the environment or a .env file."""

import dataclasses
import os
from typing import Mapping, Optional

from dotenv import load_dotenv

from cocktail_matcher.remote.client import DEFAULT_API_URL

MATCH_MODES = ("indexed", "federated")


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from e


def _get_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be a number, got {raw!r}") from e


@dataclasses.dataclass(frozen=True)
class Settings:
    recipes_path: str = "./data/recipes.json"
    users_path: str = "./data/users.json"
    max_ingredients_per_user: int = 20
    max_results_to_show: int = 10
    match_mode: str = "indexed"
    api_url: str = DEFAULT_API_URL
    request_delay: float = 0.5
    request_timeout: float = 30
    max_workers: int = 1
    session_cache_size: int = 1000
    session_ttl: float = 3600
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.match_mode not in MATCH_MODES:
            raise ValueError(f"match_mode must be one of {MATCH_MODES}, got {self.match_mode!r}")
        for name in ("max_ingredients_per_user", "max_results_to_show", "max_workers", "session_cache_size"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.request_delay < 0:
            raise ValueError("request_delay must not be negative")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "Settings":
        """Build settings from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ``.
            dotenv: Load a ``.env`` file into ``os.environ`` first. Ignored
                when ``env`` is given.

        Raises:
            ValueError: If a value can't be parsed or is out of range.
        """
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ

        return cls(
            recipes_path=env.get("COCKTAIL_RECIPES_PATH", "./data/recipes.json"),
            users_path=env.get("COCKTAIL_USERS_PATH", "./data/users.json"),
            max_ingredients_per_user=_get_int(env, "COCKTAIL_MAX_INGREDIENTS", 20),
            max_results_to_show=_get_int(env, "COCKTAIL_MAX_RESULTS", 10),
            match_mode=env.get("COCKTAIL_MATCH_MODE", "indexed").strip().lower(),
            api_url=env.get("COCKTAIL_API_URL", DEFAULT_API_URL),
            request_delay=_get_float(env, "COCKTAIL_REQUEST_DELAY", 0.5),
            request_timeout=_get_float(env, "COCKTAIL_REQUEST_TIMEOUT", 30),
            max_workers=_get_int(env, "COCKTAIL_MAX_WORKERS", 1),
            session_cache_size=_get_int(env, "COCKTAIL_SESSION_CACHE_SIZE", 1000),
            session_ttl=_get_float(env, "COCKTAIL_SESSION_TTL", 3600),
            log_level=env.get("COCKTAIL_LOG_LEVEL", "WARNING").upper(),
        )
