"""Client for the Keptn API gateway: events, evaluations, projects and services."""

from __future__ import annotations

import json
from typing import Any

import requests

from ..cloudevent import KeptnContextExtendedCE
from ..models import (
    CreateProject,
    CreateService,
    DeleteProjectResponse,
    DeleteServiceResponse,
    Error,
    Evaluation,
    EventContext,
    Metadata,
    Project,
)
from .base import APIClient, APIError, _decode_body, new_insecure_session

V1_EVENT_PATH = "/v1/event"
V1_METADATA_PATH = "/v1/metadata"
V1_PROJECT_PATH = "/v1/project"
SHIPYARD_CONTROLLER_BASE_URL = "controlPlane"


def _trim_base_url(base_url: str, suffix: str | None = None) -> str:
    """Strip the HTTP scheme and, if ``suffix`` is given, make the URL end with it."""
    base_url = base_url.removeprefix("http://").removeprefix("https://")
    if suffix is None:
        return base_url
    base_url = base_url.rstrip("/")
    if not base_url.endswith(suffix):
        base_url += "/" + suffix
    return base_url


def _get_object(client: APIClient, uri: str, model: type) -> Any:
    """GET ``uri`` and decode a 2xx body into ``model``; ``None`` for an empty body."""
    response = client._request("GET", uri)
    body = response.content
    if 200 <= response.status_code < 300:
        return _decode_body(model, body, details=False) if body else None
    error = _decode_body(Error, body, details=False)
    raise APIError(error.message or "", error.code)


def _decode_reply(model: type, text: str) -> Any:
    try:
        payload = json.loads(text)
        return model() if payload is None else model.from_dict(payload)
    except ValueError as exc:
        raise APIError(f"Could not decode {model.__name__}: {exc}") from exc


class APIHandler(APIClient):
    """Talks to the API gateway and the control plane behind it."""

    @classmethod
    def authenticated(
        cls,
        base_url: str,
        auth_token: str = "",
        auth_header: str = "",
        session: requests.Session | None = None,
        scheme: str = "http",
    ) -> APIHandler:
        """Create a handler that sends ``auth_token`` in the ``auth_header`` header."""
        return cls(_trim_base_url(base_url), auth_token, auth_header, new_insecure_session(session), scheme)

    def _project_url(self, path: str = "") -> str:
        return self._url(f"/{SHIPYARD_CONTROLLER_BASE_URL}{V1_PROJECT_PATH}{path}")

    def send_event(self, event: KeptnContextExtendedCE) -> EventContext | None:
        """Send an event to Keptn."""
        return self.post_with_event_context(self._url(V1_EVENT_PATH), event.to_json())

    def trigger_evaluation(
        self, project: str, stage: str, service: str, evaluation: Evaluation
    ) -> EventContext | None:
        """Trigger a new evaluation for a service."""
        path = f"/{project}/stage/{stage}/service/{service}/evaluation"
        return self.post_with_event_context(self._project_url(path), evaluation.to_json())

    def create_project(self, project: CreateProject) -> str:
        """Create a project and return the reply body."""
        return self.post(self._project_url(), project.to_json())

    def update_project(self, project: CreateProject) -> str:
        """Update a project and return the reply body."""
        return self.put(self._project_url(), project.to_json())

    def delete_project(self, project: Project) -> DeleteProjectResponse:
        """Delete a project."""
        reply = self.delete(self._project_url(f"/{project.project_name}"))
        return _decode_reply(DeleteProjectResponse, reply)

    def create_service(self, project: str, service: CreateService) -> str:
        """Create a service in a project and return the reply body."""
        return self.post(self._project_url(f"/{project}/service"), service.to_json())

    def delete_service(self, project: str, service: str) -> DeleteServiceResponse:
        """Delete a service from a project."""
        reply = self.delete(self._project_url(f"/{project}/service/{service}"))
        return _decode_reply(DeleteServiceResponse, reply)

    def get_metadata(self) -> Metadata | None:
        """Return information about the Keptn installation."""
        return _get_object(self, self._url(V1_METADATA_PATH), Metadata)