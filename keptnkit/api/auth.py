"""Authentication check against the Keptn API."""

from __future__ import annotations

import requests

from ..models import EventContext
from .base import APIClient, new_insecure_session
from .client import _trim_base_url


def _strip_scheme(base_url: str) -> str:
    if "https://" in base_url:
        return base_url.removeprefix("https://")
    if "http://" in base_url:
        return base_url.removeprefix("http://")
    return base_url


class AuthHandler(APIClient):
    """Verifies that the configured credentials are accepted."""

    @classmethod
    def create(cls, base_url: str) -> AuthHandler:
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
    ) -> AuthHandler:
        """Create a handler that sends ``auth_token`` in the ``auth_header`` header."""
        return cls(_trim_base_url(base_url), auth_token, auth_header, new_insecure_session(session), scheme)

    def authenticate(self) -> EventContext | None:
        """Authenticate against the server."""
        return self.post_with_event_context(self._url("/v1/auth"), None)