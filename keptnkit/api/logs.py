"""Collecting integration logs locally and syncing them to the control plane."""

from __future__ import annotations

import logging
import threading
from typing import Any
from urllib.parse import urlencode

import requests

from ..models import CreateLogsRequest, Error, GetLogsParams, GetLogsResponse, LogEntry, LogFilter
from .auth import _strip_scheme
from .base import APIClient, APIError, _decode_body, new_insecure_session
from .client import SHIPYARD_CONTROLLER_BASE_URL, _trim_base_url

logger = logging.getLogger(__name__)

V1_LOG_PATH = "/v1/log"
DEFAULT_SYNC_INTERVAL = 60.0


def _get_ok(client: APIClient, url: str, model: type, params: dict[str, str] | None = None) -> Any:
    """GET ``url`` and decode a 200 reply into ``model``; other replies raise :class:`APIError`."""
    ordered = {name: params[name] for name in sorted(params)} if params else None
    response = client._request("GET", url, params=ordered)
    body = response.content
    if response.status_code != 200:
        error = _decode_body(Error, body, details=False)
        raise APIError(error.message or "", error.code)
    return _decode_body(model, body, details=False)


def _filter_params(log_filter: LogFilter) -> dict[str, str]:
    candidates = {
        "integrationId": log_filter.integration_id,
        "fromTime": log_filter.from_time,
        "beforeTime": log_filter.before_time,
    }
    return {name: value for name, value in candidates.items() if value}


class LogHandler(APIClient):
    """Buffers log entries and sends them to the control plane in batches."""

    def __init__(
        self,
        base_url: str,
        auth_token: str = "",
        auth_header: str = "",
        session: requests.Session | None = None,
        scheme: str = "http",
        sync_interval: float = DEFAULT_SYNC_INTERVAL,
    ) -> None:
        super().__init__(base_url, auth_token, auth_header, session, scheme)
        self.log_cache: list[LogEntry] = []
        self.sync_interval = sync_interval
        self._lock = threading.Lock()

    @classmethod
    def create(cls, base_url: str) -> LogHandler:
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
    ) -> LogHandler:
        """Create a handler for the control plane behind ``base_url``."""
        return cls(
            _trim_base_url(base_url, SHIPYARD_CONTROLLER_BASE_URL),
            auth_token,
            auth_header,
            new_insecure_session(session),
            scheme,
        )

    def log(self, logs: list[LogEntry]) -> None:
        """Add entries to the local cache; they are sent on the next flush."""
        with self._lock:
            self.log_cache.extend(logs)

    def get_logs(self, params: GetLogsParams) -> GetLogsResponse:
        """Return stored log entries matching ``params``."""
        query = _filter_params(params)
        if params.page_size:
            query["pageSize"] = str(params.page_size)
        return _get_ok(self, self._url(V1_LOG_PATH), GetLogsResponse, query)

    def delete_logs(self, params: LogFilter) -> None:
        """Delete stored log entries matching ``params``."""
        query = _filter_params(params)
        url = self._url(V1_LOG_PATH)
        if query:
            url += "?" + urlencode(sorted(query.items()))
        self.delete(url)

    def start(self, stop_event: threading.Event) -> threading.Thread:
        """Flush the cache every ``sync_interval`` seconds until ``stop_event`` is set."""

        def run() -> None:
            while not stop_event.wait(self.sync_interval):
                try:
                    self.flush()
                except APIError as exc:
                    logger.warning("Could not send logs: %s", exc.message)

        thread = threading.Thread(target=run, name="log-sync", daemon=True)
        thread.start()
        return thread

    def flush(self) -> None:
        """Send all cached entries; the cache is cleared only on success."""
        with self._lock:
            if not self.log_cache:
                return
            payload = CreateLogsRequest(logs=list(self.log_cache)).to_json()
            self.post(self._url(V1_LOG_PATH), payload)
            self.log_cache = []