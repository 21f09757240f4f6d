"""
Environment-driven configuration helpers.

Values are read on call, so tests can monkeypatch the environment without
reloading modules.
"""

from __future__ import annotations

import os


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO")


def pool_min_size() -> int:
    return max(env_int("DB_POOL_MIN_SIZE", 1), 0)


def pool_max_size() -> int:
    return max(env_int("DB_POOL_MAX_SIZE", 5), pool_min_size(), 1)


def command_timeout_s() -> int:
    return env_int("DB_COMMAND_TIMEOUT_S", 30)


def cors_allow_origins() -> list[str]:
    return env_list(
        "CORS_ALLOW_ORIGINS",
        ["http://localhost:5173", "http://127.0.0.1:5173"],
    )
