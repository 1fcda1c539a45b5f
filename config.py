"""Central config: env vars, planner model, executor timings and logging."""
import os
import sys
from typing import List

from loguru import logger

# Optional: load .env from project root (system env vars still take precedence)
try:
    from dotenv import load_dotenv
    _root = os.path.dirname(os.path.abspath(__file__))
    load_dotenv(os.path.join(_root, ".env"), override=False)
except ImportError:
    pass


def _read_api_key() -> str:
    return os.getenv("ANTHROPIC_API_KEY") or os.getenv("API-KEY") or ""


# Read once at process start; never rotated while running.
_API_KEY = _read_api_key()


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def _bool_env(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def get_api_key() -> str:
    return _API_KEY


def get_planner_model() -> str:
    return os.getenv("PLANNER_MODEL", "claude-haiku-4-5-20251001")


def get_planner_max_tokens() -> int:
    return _int_env("PLANNER_MAX_TOKENS", 1024)


def planner_validation_enabled() -> bool:
    """Strict mode: reject plans whose descriptors are missing required fields."""
    return _bool_env("PLANNER_VALIDATE")


# Executor timings (milliseconds)

def get_locator_timeout_ms() -> int:
    return _int_env("LOCATOR_TIMEOUT_MS", 10000)


def get_type_delay_ms() -> int:
    return _int_env("TYPE_DELAY_MS", 100)


def get_settle_ms() -> int:
    return _int_env("SETTLE_MS", 2000)


def get_default_wait_ms() -> int:
    return _int_env("DEFAULT_WAIT_MS", 2000)


# Browser sessions

def get_headless() -> bool:
    return _bool_env("HEADLESS")


def get_keep_open_ms() -> int:
    """How long a window stays up after a successful run before it is closed."""
    return max(0, _int_env("KEEP_BROWSER_OPEN_MS", 0))


def get_max_sessions() -> int:
    return max(1, _int_env("MAX_BROWSER_SESSIONS", 2))


# Server

def get_host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def get_port() -> int:
    return _int_env("PORT", 3000)


def get_allow_origins() -> List[str]:
    raw = os.getenv("ALLOW_ORIGINS", "http://localhost:3000")
    return [o.strip() for o in raw.split(",") if o.strip()]


def setup_logging(level: str = "") -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
    )
