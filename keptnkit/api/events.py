"""Querying events stored in the event datastore."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import requests

from ..cloudevent import Events, KeptnContextExtendedCE
from ..models import Error
from .auth import _strip_scheme
from .base import APIClient, APIError, _decode_body, new_insecure_session
from .client import _trim_base_url

MONGODB_DATASTORE_BASE_URL = "mongodb-datastore"


@dataclass
class EventFilter:
    """Properties events must match; empty values are not filtered on."""

    project: str = ""
    stage: str = ""
    service: str = ""
    event_type: str = ""
    keptn_context: str = ""
    event_id: str = ""
    page_size: str = ""
    number_of_pages: int = 0
    from_time: str = ""


def _page_number(key: str) -> int:
    try:
        return int(key)
    except ValueError:
        return 0


def _collect_pages(
    client: APIClient,
    url: str,
    params: dict[str, str],
    page_model: type,
    items_attr: str,
    number_of_pages: int = 0,
) -> list[Any]:
    """GET every page of a paged listing and return all items in order.

    Stops when the server reports no further page, or once the page key
    reaches ``number_of_pages`` when that is positive.
    """
    items: list[Any] = []
    next_page_key = ""
    while True:
        query = dict(params)
        if next_page_key:
            query["nextPageKey"] = next_page_key
        ordered = {name: query[name] for name in sorted(query)}
        response = client._request("GET", url, params=ordered or None)
        body = response.content
        if response.status_code != 200:
            error = _decode_body(Error, body, details=False)
            raise APIError(error.message or "", error.code)
        page = _decode_body(page_model, body, details=False)
        items.extend(getattr(page, items_attr))
        key = page.next_page_key
        if key in ("", "0"):
            return items
        if number_of_pages > 0 and _page_number(key) >= number_of_pages:
            return items
        next_page_key = key


class EventHandler(APIClient):
    """Reads events from the datastore."""

    @classmethod
    def create(cls, base_url: str) -> EventHandler:
        """Create an unauthenticated handler using plain HTTP."""
        return cls(_strip_scheme(base_url))

    @classmethod
    def authenticated(
        cls,
        base_url: str,
        auth_token: str = "",
        auth_header: str = "",
        session: requests.Session | None = None,
        scheme: str = "http",
    ) -> EventHandler:
        """Create a handler for the datastore behind ``base_url``."""
        return cls(
            _trim_base_url(base_url, MONGODB_DATASTORE_BASE_URL),
            auth_token,
            auth_header,
            new_insecure_session(session),
            scheme,
        )

    def get_events(self, event_filter: EventFilter) -> list[KeptnContextExtendedCE | None]:
        """Return all events matching ``event_filter``."""
        candidates = {
            "project": event_filter.project,
            "stage": event_filter.stage,
            "service": event_filter.service,
            "keptnContext": event_filter.keptn_context,
            "eventID": event_filter.event_id,
            "type": event_filter.event_type,
            "pageSize": event_filter.page_size,
            "fromTime": event_filter.from_time,
        }
        params = {name: value for name, value in candidates.items() if value}
        return _collect_pages(
            self, self._url("/event"), params, Events, "events", event_filter.number_of_pages
        )

    def get_events_with_retry(
        self, event_filter: EventFilter, max_retries: int, retry_sleep_time: float
    ) -> list[KeptnContextExtendedCE | None]:
        """Query up to ``max_retries`` times until at least one event matches."""
        for _ in range(max_retries):
            try:
                events = self.get_events(event_filter)
            except APIError:
                events = []
            if events:
                return events
            time.sleep(retry_sleep_time)
        raise APIError(f"could not find matching event after {max_retries} x {retry_sleep_time}s")