"""Polling the event store and handing out new events as they appear."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Protocol

from ..cloudevent import KeptnContextExtendedCE
from ..timeutils import get_keptn_timestamp
from .base import APIError
from .events import EventFilter

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 10.0


class _EventSource(Protocol):
    def get_events(self, event_filter: EventFilter) -> list[Any]: ...


def sort_by_time(events: list[KeptnContextExtendedCE]) -> None:
    """Sort events in place from oldest to newest; unset times come first."""
    events.sort(key=lambda event: (event.time is not None, event.time))


class EventWatcher:
    """Queries for events repeatedly, each time from the newest one seen."""

    def __init__(
        self,
        event_handler: _EventSource,
        event_filter: EventFilter | None = None,
        start_time: datetime | None = None,
        interval: float = DEFAULT_INTERVAL,
        timeout: float | None = None,
    ) -> None:
        self._event_handler = event_handler
        self._event_filter = event_filter if event_filter is not None else EventFilter()
        self._next_fetch_time = start_time if start_time is not None else datetime.now(timezone.utc)
        self._interval = interval
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._cancelled = threading.Event()

    def watch(self) -> Iterator[list[KeptnContextExtendedCE]]:
        """Yield each batch of events until cancelled or timed out."""
        while True:
            yield self._query_events(self._event_filter)
            wait = self._interval
            if self._deadline is not None:
                remaining = self._deadline - time.monotonic()
                if remaining <= 0:
                    return
                if remaining <= wait:
                    self._cancelled.wait(remaining)
                    return
            if self._cancelled.wait(wait):
                return

    def cancel(self) -> None:
        """Stop watching; a running :meth:`watch` ends after its current batch."""
        self._cancelled.set()

    def _query_events(self, event_filter: EventFilter) -> list[KeptnContextExtendedCE]:
        query = replace(event_filter, from_time=get_keptn_timestamp(self._next_fetch_time))
        try:
            events = list(self._event_handler.get_events(query) or [])
        except APIError as exc:
            logger.warning("Unable to fetch events: %s", exc.message)
            events = []
        sort_by_time(events)
        if events:
            newest = events[-1].time
            if newest is not None and newest > self._next_fetch_time:
                self._next_fetch_time = newest
        return events