"""Reading open triggered events from the shipyard controller."""

from __future__ import annotations

import requests

from ..cloudevent import Events, KeptnContextExtendedCE
from .auth import _strip_scheme
from .base import APIClient, new_insecure_session
from .client import SHIPYARD_CONTROLLER_BASE_URL, V1_EVENT_PATH, _trim_base_url
from .events import EventFilter, _collect_pages


class ShipyardControllerHandler(APIClient):
    """Talks to the shipyard controller in the control plane."""

    @classmethod
    def create(cls, base_url: str) -> ShipyardControllerHandler:
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
    ) -> ShipyardControllerHandler:
        """Create a handler for the control plane behind ``base_url``."""
        return cls(
            _trim_base_url(base_url, SHIPYARD_CONTROLLER_BASE_URL),
            auth_token,
            auth_header,
            new_insecure_session(session),
            scheme,
        )

    def get_open_triggered_events(self, event_filter: EventFilter) -> list[KeptnContextExtendedCE | None]:
        """Return the open triggered events of the filter's event type."""
        candidates = {
            "project": event_filter.project,
            "service": event_filter.service,
            "stage": event_filter.stage,
        }
        params = {name: value for name, value in candidates.items() if value}
        url = self._url(f"{V1_EVENT_PATH}/triggered/{event_filter.event_type}")
        return _collect_pages(self, url, params, Events, "events", event_filter.number_of_pages)