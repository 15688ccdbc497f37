"""Configuration from environment variables (and a .env file at the repo root).

Variables:
    PEOPLEBOOK_STORE         json | memory | neo4j (default json)
    PEOPLEBOOK_DATA_DIR      directory of people.json (default <repo>/.data)
    PEOPLEBOOK_SEED          write sample people into a new JSON store (default true)
    PEOPLEBOOK_PHONE_REGION  region for numbers without country code (default DE)
    PEOPLEBOOK_ANIMATION_MS  list exit animation / message delay (default 500)
    PEOPLEBOOK_MAX_SESSIONS  view-models kept per chat or REST client (default 1000)
    NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD
    TELEGRAM_BOT_TOKEN
    LOG_LEVEL                (default INFO)
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[2]

STORES = ("json", "memory", "neo4j")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class ConfigError(Exception):
    """Raised when an environment variable has an unusable value."""


@dataclass(frozen=True)
class Settings:
    store: str = "json"
    data_dir: Path = ROOT / ".data"
    seed: bool = True
    phone_region: str | None = "DE"
    animation_duration: float = 0.5
    max_sessions: int = 1000
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "password"
    telegram_bot_token: str = ""
    log_level: str = "INFO"


def load_env() -> None:
    """Load .env from the repo root or the current directory (first found)."""
    for path in (ROOT / ".env", Path.cwd() / ".env"):
        if path.exists():
            load_dotenv(path)
            break


def _env(name: str, default: str) -> str:
    return (os.environ.get(name) or "").strip() or default


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.environ.get(name) or "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def load_settings() -> Settings:
    """Build Settings from the environment. Call load_env() first to honour .env."""
    store = _env("PEOPLEBOOK_STORE", "json").lower()
    if store not in STORES:
        raise ConfigError(f"PEOPLEBOOK_STORE must be one of {', '.join(STORES)}, got {store!r}")

    animation_raw = _env("PEOPLEBOOK_ANIMATION_MS", "500")
    try:
        animation_ms = int(animation_raw)
    except ValueError as e:
        raise ConfigError(f"PEOPLEBOOK_ANIMATION_MS must be an integer, got {animation_raw!r}") from e
    if animation_ms < 0:
        raise ConfigError("PEOPLEBOOK_ANIMATION_MS must not be negative")

    sessions_raw = _env("PEOPLEBOOK_MAX_SESSIONS", "1000")
    try:
        max_sessions = int(sessions_raw)
    except ValueError as e:
        raise ConfigError(f"PEOPLEBOOK_MAX_SESSIONS must be an integer, got {sessions_raw!r}") from e
    if max_sessions < 1:
        raise ConfigError("PEOPLEBOOK_MAX_SESSIONS must be at least 1")

    log_level = _env("LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    region = _env("PEOPLEBOOK_PHONE_REGION", "DE").upper()
    return Settings(
        store=store,
        data_dir=Path(_env("PEOPLEBOOK_DATA_DIR", str(ROOT / ".data"))).expanduser(),
        seed=_env_bool("PEOPLEBOOK_SEED", True),
        phone_region=None if region == "NONE" else region,
        animation_duration=animation_ms / 1000,
        max_sessions=max_sessions,
        neo4j_uri=_env("NEO4J_URI", "bolt://localhost:7687"),
        neo4j_user=_env("NEO4J_USER", "neo4j"),
        neo4j_password=_env("NEO4J_PASSWORD", "password"),
        telegram_bot_token=_env("TELEGRAM_BOT_TOKEN", ""),
        log_level=log_level,
    )
