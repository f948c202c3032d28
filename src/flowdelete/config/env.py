"""Environment variable loaders for configuration."""

from __future__ import annotations

import os

from .errors import InvalidConfigurationError


def optional_env_var(name: str) -> str | None:
    """Return the environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_seconds(name: str, default: float) -> float:
    """Return a positive duration in seconds from the environment."""

    raw = optional_env_var(name)
    if raw is None:
        return default
    try:
        seconds = float(raw)
    except ValueError as exc:
        raise InvalidConfigurationError(f"{name} must be a number of seconds, got {raw!r}") from exc
    if seconds <= 0:
        raise InvalidConfigurationError(f"{name} must be positive, got {raw!r}")
    return seconds
