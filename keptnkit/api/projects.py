"""Project management through the control plane."""

from __future__ import annotations

import requests

from ..httputils import trim_http_scheme
from ..models import Error, EventContext, Project, Projects
from .base import APIClient, APIError, _decode_body, new_insecure_session
from .client import SHIPYARD_CONTROLLER_BASE_URL, V1_PROJECT_PATH, _get_object, _trim_base_url


class ProjectHandler(APIClient):
    """Creates, reads, updates and deletes projects."""

    @classmethod
    def create(cls, base_url: str) -> ProjectHandler:
        """Create an unauthenticated handler using plain HTTP."""
        return cls(trim_http_scheme(base_url))

    @classmethod
    def authenticated(
        cls,
        base_url: str,
        auth_token: str = "",
        auth_header: str = "",
        session: requests.Session | None = None,
        scheme: str = "http",
    ) -> ProjectHandler:
        """Create a handler for the control plane behind ``base_url``."""
        return cls(
            _trim_base_url(base_url, SHIPYARD_CONTROLLER_BASE_URL),
            auth_token,
            auth_header,
            new_insecure_session(session),
            scheme,
        )

    def _project_url(self, name: str | None = None) -> str:
        path = V1_PROJECT_PATH if name is None else f"{V1_PROJECT_PATH}/{name}"
        return self._url(path)

    def create_project(self, project: Project) -> EventContext | None:
        """Create a project."""
        return self.post_with_event_context(self._project_url(), project.to_json())

    def delete_project(self, project: Project) -> EventContext | None:
        """Delete a project."""
        return self.delete_with_event_context(self._project_url(project.project_name))

    def get_project(self, project: Project) -> Project | None:
        """Return the stored project with the same name."""
        return _get_object(self, self._project_url(project.project_name), Project)

    def get_all_projects(self) -> list[Project | None]:
        """Return all projects, following the server's paging."""
        projects: list[Project | None] = []
        next_page_key = ""
        while True:
            params = {"nextPageKey": next_page_key} if next_page_key else None
            response = self._request("GET", self._project_url(), params=params)
            body = response.content
            if response.status_code != 200:
                error = _decode_body(Error, body, details=False)
                raise APIError(error.message or "", error.code)
            page = _decode_body(Projects, body, details=False)
            projects.extend(page.projects)
            if page.next_page_key in ("", "0"):
                return projects
            next_page_key = page.next_page_key

    def update_configuration_service_project(self, project: Project) -> EventContext | None:
        """Replace the stored project with ``project``."""
        return self.put_with_event_context(self._project_url(project.project_name), project.to_json())