"""Stage management through the control plane."""

from __future__ import annotations

import requests

from ..models import EventContext, Stage, Stages
from .auth import _strip_scheme
from .base import APIClient, new_insecure_session
from .client import SHIPYARD_CONTROLLER_BASE_URL, _trim_base_url
from .events import _collect_pages


class StageHandler(APIClient):
    """Creates and lists stages of a project."""

    @classmethod
    def create(cls, base_url: str) -> StageHandler:
        """Create an unauthenticated handler using plain HTTP with TLS verification."""
        return cls(_strip_scheme(base_url), session=requests.Session())

    @classmethod
    def authenticated(
        cls,
        base_url: str,
        auth_token: str = "",
        auth_header: str = "",
        session: requests.Session | None = None,
        scheme: str = "http",
    ) -> StageHandler:
        """Create a handler for the control plane behind ``base_url``."""
        return cls(
            _trim_base_url(base_url, SHIPYARD_CONTROLLER_BASE_URL),
            auth_token,
            auth_header,
            new_insecure_session(session),
            scheme,
        )

    def _stages_url(self, project: str) -> str:
        return self._url(f"/v1/project/{project}/stage")

    def create_stage(self, project: str, stage_name: str) -> EventContext | None:
        """Create a stage named ``stage_name`` in ``project``."""
        body = Stage(stage_name=stage_name).to_json()
        return self.post_with_event_context(self._stages_url(project), body)

    def get_all_stages(self, project: str) -> list[Stage | None]:
        """Return all stages of ``project``, following the server's paging."""
        return _collect_pages(self, self._stages_url(project), {}, Stages, "stages")