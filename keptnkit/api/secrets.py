"""Managing secrets through the secret service."""

from __future__ import annotations

import requests

from ..models import GetSecretsResponse, Secret
from .auth import _strip_scheme
from .base import APIClient, new_insecure_session
from .client import _trim_base_url
from .logs import _get_ok

SECRET_SERVICE_BASE_URL = "secrets"
V1_SECRET_PATH = "/v1/secret"


class SecretHandler(APIClient):
    """Creates, updates, deletes and lists secrets."""

    @classmethod
    def create(cls, base_url: str) -> SecretHandler:
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
    ) -> SecretHandler:
        """Create a handler for the secret service behind ``base_url``."""
        return cls(
            _trim_base_url(base_url, SECRET_SERVICE_BASE_URL),
            auth_token,
            auth_header,
            new_insecure_session(session),
            scheme,
        )

    def create_secret(self, secret: Secret) -> None:
        """Create a new secret."""
        self.post(self._url(V1_SECRET_PATH), secret.to_json())

    def update_secret(self, secret: Secret) -> None:
        """Update an existing secret."""
        self.put(self._url(V1_SECRET_PATH), secret.to_json())

    def delete_secret(self, secret_name: str, secret_scope: str) -> None:
        """Delete the secret with the given name and scope."""
        self.delete(self._url(f"{V1_SECRET_PATH}?name={secret_name}&scope={secret_scope}"))

    def get_secrets(self) -> GetSecretsResponse:
        """Return the metadata of all secrets."""
        return _get_ok(self, self._url(V1_SECRET_PATH), GetSecretsResponse)