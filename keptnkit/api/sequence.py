"""Controlling running sequences (pause, resume, abort)."""

from __future__ import annotations

import json
from dataclasses import dataclass

import requests

from ..httputils import trim_http_scheme
from .base import APIClient, new_insecure_session
from .client import SHIPYARD_CONTROLLER_BASE_URL, _trim_base_url


@dataclass
class SequenceControlParams:
    """Which sequence to control and the state to put it in."""

    project: str = ""
    keptn_context: str = ""
    stage: str = ""
    state: str = ""

    def validate(self) -> None:
        """Raise ``ValueError`` if project, context or state is missing."""
        missing = []
        if not self.project:
            missing.append("project parameter not set")
        if not self.keptn_context:
            missing.append("keptn context parameter not set")
        if not self.state:
            missing.append("sequence state parameter not set")
        if missing:
            raise ValueError("failed to validate sequence control parameters: " + ",".join(missing))


@dataclass
class SequenceControlBody:
    """Request body of a sequence control call."""

    stage: str = ""
    state: str = ""

    def to_json(self) -> str:
        """Serialise to a JSON document."""
        return json.dumps({"stage": self.stage, "state": self.state})


class SequenceControlHandler(APIClient):
    """Sends sequence control requests to the control plane."""

    @classmethod
    def create(cls, base_url: str) -> SequenceControlHandler:
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
    ) -> SequenceControlHandler:
        """Create a handler for the control plane behind ``base_url``."""
        return cls(
            _trim_base_url(base_url, SHIPYARD_CONTROLLER_BASE_URL),
            auth_token,
            auth_header,
            new_insecure_session(session),
            scheme,
        )

    def control_sequence(self, params: SequenceControlParams) -> None:
        """Change the state of the sequence described by ``params``."""
        params.validate()
        path = f"/v1/sequence/{params.project}/{params.keptn_context}/control"
        body = SequenceControlBody(stage=params.stage, state=params.state)
        self.post(self._url(path), body.to_json())