"""Run an operation repeatedly until it succeeds."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import TypeVar

DEFAULT_NUMBER_OF_RETRIES = 20
DEFAULT_DELAY_BETWEEN_RETRIES = 5.0

T = TypeVar("T")


class RetryError(Exception):
    """Raised when an operation never succeeded or retrying was cancelled."""


def retry(
    func: Callable[[], T],
    *,
    number_of_retries: int = DEFAULT_NUMBER_OF_RETRIES,
    delay_between_retries: float = DEFAULT_DELAY_BETWEEN_RETRIES,
    cancel: threading.Event | None = None,
) -> T:
    """Call ``func`` until it returns without raising.

    Waits ``delay_between_retries`` seconds after each failure; setting
    ``cancel`` aborts the wait and raises :class:`RetryError`.
    """
    attempts = 0
    last_error: Exception | None = None
    while attempts < number_of_retries:
        try:
            return func()
        except Exception as exc:  # noqa: BLE001 - any failure triggers a retry
            last_error = exc
        if cancel is not None:
            if cancel.wait(delay_between_retries):
                raise RetryError("retry cancelled") from last_error
        else:
            time.sleep(delay_between_retries)
        attempts += 1
    raise RetryError(f"operation unsuccessful after {attempts} retry") from last_error