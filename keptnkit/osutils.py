"""Environment variable helpers."""

from __future__ import annotations

import os


def get_os_env(key: str) -> str:
    """Return the variable's value, or an empty string when unset."""
    return os.environ.get(key, "")


def get_os_env_or_default(key: str, default: str) -> str:
    """Return the variable's value, or ``default`` when unset or empty."""
    return get_os_env(key) or default


def get_and_compare_os_env(key: str, compare: str) -> bool:
    """Return whether the variable is set, non-empty and equal to ``compare``."""
    value = get_os_env(key)
    return bool(value) and value == compare