"""Sleepers that pause execution, with a no-op variant for tests."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class Sleeper(Protocol):
    """Anything that can pause execution."""

    def sleep(self) -> None:
        """Pause execution."""


class ConfigurableSleeper:
    """Sleeps for a fixed duration in seconds."""

    def __init__(self, duration: float, sleep: Callable[[float], None] = time.sleep) -> None:
        self.duration = duration
        self._sleep_func = sleep

    def sleep(self) -> None:
        """Pause for the configured duration."""
        self._sleep_func(self.duration)


class FakeSleeper:
    """A sleeper that returns immediately."""

    def sleep(self) -> None:
        """Do nothing."""
        return None