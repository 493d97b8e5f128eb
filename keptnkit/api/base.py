"""Shared HTTP plumbing for the Keptn API handlers."""

from __future__ import annotations

import json
from typing import Any

import requests

from ..models import Error, EventContext

_DETAILS = "\n-----DETAILS-----"


class APIError(Exception):
    """An error reported by the Keptn API or raised while talking to it."""

    def __init__(self, message: str = "", code: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


def new_insecure_session(session: requests.Session | None = None) -> requests.Session:
    """Return ``session`` (or a new one) with TLS verification disabled."""
    if session is None:
        session = requests.Session()
    session.verify = False
    return session


def _text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


def _decode_body(model: type, body: bytes, *, details: bool = True) -> Any:
    """Decode a JSON body into ``model``, raising :class:`APIError` on failure."""
    try:
        payload = json.loads(body)
        return model() if payload is None else model.from_dict(payload)
    except ValueError as exc:
        message = f"{exc}{_DETAILS}{_text(body)}" if details else str(exc)
        raise APIError(message) from exc


class APIClient:
    """Connection settings plus the request helpers all handlers share."""

    def __init__(
        self,
        base_url: str,
        auth_token: str = "",
        auth_header: str = "",
        session: requests.Session | None = None,
        scheme: str = "http",
    ) -> None:
        self.base_url = base_url
        self.auth_token = auth_token
        self.auth_header = auth_header
        self.session = session if session is not None else new_insecure_session()
        self.scheme = scheme

    def _url(self, path: str) -> str:
        return f"{self.scheme}://{self.base_url}{path}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.auth_header and self.auth_token:
            headers[self.auth_header] = self.auth_token
        return headers

    def _request(
        self,
        method: str,
        uri: str,
        data: bytes | str | None = None,
        params: dict[str, str] | None = None,
    ) -> requests.Response:
        try:
            return self.session.request(method, uri, data=data, params=params, headers=self._headers())
        except requests.RequestException as exc:
            raise APIError(str(exc)) from exc

    def _exchange(self, method: str, uri: str, data: bytes | str | None = None) -> bytes:
        response = self._request(method, uri, data)
        body = response.content
        last_ok = 299 if method == "DELETE" else 204
        if 200 <= response.status_code <= last_ok:
            return body
        if body or method == "DELETE":
            error = _decode_body(Error, body)
            raise APIError(error.message or "", error.code)
        raise APIError(
            f"Received unexpected response: {response.status_code} "
            f"{response.status_code} {response.reason}"
        )

    def _with_event_context(self, method: str, uri: str, data: bytes | str | None = None) -> EventContext | None:
        body = self._exchange(method, uri, data)
        if not body:
            return None
        context = _decode_body(EventContext, body)
        if method != "DELETE" and context.keptn_context is not None:
            print("ID of Keptn context: " + context.keptn_context)
        return context

    def put_with_event_context(self, uri: str, data: bytes | str | None) -> EventContext | None:
        """PUT ``data`` and return the event context in the reply, if any."""
        return self._with_event_context("PUT", uri, data)

    def put(self, uri: str, data: bytes | str | None) -> str:
        """PUT ``data`` and return the reply body."""
        return _text(self._exchange("PUT", uri, data))

    def post_with_event_context(self, uri: str, data: bytes | str | None) -> EventContext | None:
        """POST ``data`` and return the event context in the reply, if any."""
        return self._with_event_context("POST", uri, data)

    def post(self, uri: str, data: bytes | str | None) -> str:
        """POST ``data`` and return the reply body."""
        return _text(self._exchange("POST", uri, data))

    def delete_with_event_context(self, uri: str) -> EventContext | None:
        """DELETE ``uri`` and return the event context in the reply, if any."""
        return self._with_event_context("DELETE", uri)

    def delete(self, uri: str) -> str:
        """DELETE ``uri`` and return the reply body."""
        return _text(self._exchange("DELETE", uri))