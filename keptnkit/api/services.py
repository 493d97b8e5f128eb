"""Service management through the control plane."""

from __future__ import annotations

import requests

from ..models import EventContext, Service, Services
from .auth import _strip_scheme
from .base import APIClient, new_insecure_session
from .client import SHIPYARD_CONTROLLER_BASE_URL, V1_PROJECT_PATH, _trim_base_url
from .events import _collect_pages
from .logs import _get_ok


class ServiceHandler(APIClient):
    """Creates, reads and deletes services of a stage."""

    @classmethod
    def create(cls, base_url: str) -> ServiceHandler:
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
    ) -> ServiceHandler:
        """Create a handler for the control plane behind ``base_url``."""
        return cls(
            _trim_base_url(base_url, SHIPYARD_CONTROLLER_BASE_URL),
            auth_token,
            auth_header,
            new_insecure_session(session),
            scheme,
        )

    def _services_url(self, project: str, stage: str, service: str | None = None) -> str:
        path = f"{V1_PROJECT_PATH}/{project}/stage/{stage}/service"
        if service is not None:
            path += f"/{service}"
        return self._url(path)

    def create_service_in_stage(self, project: str, stage: str, service_name: str) -> EventContext | None:
        """Create a service in a stage of a project."""
        body = Service(service_name=service_name).to_json()
        return self.post_with_event_context(self._services_url(project, stage), body)

    def delete_service_from_stage(self, project: str, stage: str, service_name: str) -> EventContext | None:
        """Delete a service from a stage of a project."""
        return self.delete_with_event_context(self._services_url(project, stage, service_name))

    def get_service(self, project: str, stage: str, service: str) -> Service:
        """Return a single service."""
        return _get_ok(self, self._services_url(project, stage, service), Service)

    def get_all_services(self, project: str, stage: str) -> list[Service | None]:
        """Return all services of a stage, following the server's paging."""
        return _collect_pages(self, self._services_url(project, stage), {}, Services, "services")