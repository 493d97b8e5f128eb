"""Helpers for sequences."""

from __future__ import annotations

from collections.abc import Iterable


def contains_str(values: Iterable[str], value: str) -> bool:
    """Return whether ``value`` is among ``values``."""
    return value in values