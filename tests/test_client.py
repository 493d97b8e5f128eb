import json

import pytest
import responses

from keptnkit.api.base import APIError
from keptnkit.api.client import (
    SHIPYARD_CONTROLLER_BASE_URL,
    V1_EVENT_PATH,
    V1_METADATA_PATH,
    V1_PROJECT_PATH,
    APIHandler,
)
from keptnkit.cloudevent import KeptnContextExtendedCE
from keptnkit.models import CreateProject, CreateService, Evaluation, Project

HOST = "keptn.example.com"
PROJECT_URL = f"http://{HOST}/{SHIPYARD_CONTROLLER_BASE_URL}{V1_PROJECT_PATH}"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


@pytest.fixture
def handler():
    return APIHandler.authenticated(f"http://{HOST}", "token", "x-token")


def test_authenticated_strips_scheme_and_disables_verification():
    api = APIHandler.authenticated(f"https://{HOST}", "token", "x-token", None, "https")
    assert api.base_url == HOST
    assert api.scheme == "https"
    assert api.session.verify is False


def test_send_event_posts_event_and_returns_context(rsps, handler, capsys):
    rsps.add(responses.POST, f"http://{HOST}{V1_EVENT_PATH}", json={"keptnContext": "ctx-1"})
    event = KeptnContextExtendedCE(id="id-1", source="src", type="my-type", data={"a": 1})
    context = handler.send_event(event)
    assert context.keptn_context == "ctx-1"
    sent = json.loads(rsps.calls[0].request.body)
    assert sent["type"] == "my-type"
    assert sent["data"] == {"a": 1}
    assert rsps.calls[0].request.headers["x-token"] == "token"
    assert "ID of Keptn context: ctx-1" in capsys.readouterr().out


def test_trigger_evaluation_url(rsps, handler):
    url = f"{PROJECT_URL}/p1/stage/s1/service/svc/evaluation"
    rsps.add(responses.POST, url, json={"keptnContext": "ctx-2"})
    context = handler.trigger_evaluation("p1", "s1", "svc", Evaluation(timeframe="5m"))
    assert context.keptn_context == "ctx-2"
    assert json.loads(rsps.calls[0].request.body) == {"timeframe": "5m"}


def test_create_project_returns_body(rsps, handler):
    rsps.add(responses.POST, PROJECT_URL, body="created")
    assert handler.create_project(CreateProject(name="p1", shipyard="abc")) == "created"
    sent = json.loads(rsps.calls[0].request.body)
    assert sent["name"] == "p1"


def test_update_project_uses_put(rsps, handler):
    rsps.add(responses.PUT, PROJECT_URL, body="")
    assert handler.update_project(CreateProject(name="p1", shipyard="abc")) == ""
    assert rsps.calls[0].request.method == "PUT"


def test_error_body_raises_api_error(rsps, handler):
    rsps.add(responses.POST, PROJECT_URL, status=400, json={"code": 0, "message": "oops"})
    with pytest.raises(APIError) as info:
        handler.create_project(CreateProject(name="p1"))
    assert info.value.message == "oops"


def test_delete_project_decodes_reply(rsps, handler):
    rsps.add(responses.DELETE, f"{PROJECT_URL}/p1", json={"message": "deleted"})
    reply = handler.delete_project(Project(project_name="p1"))
    assert reply.message == "deleted"


def test_delete_project_undecodable_reply(rsps, handler):
    rsps.add(responses.DELETE, f"{PROJECT_URL}/p1", body="not json")
    with pytest.raises(APIError) as info:
        handler.delete_project(Project(project_name="p1"))
    assert info.value.message.startswith("Could not decode DeleteProjectResponse")


def test_create_and_delete_service(rsps, handler):
    rsps.add(responses.POST, f"{PROJECT_URL}/p1/service", body="ok")
    rsps.add(responses.DELETE, f"{PROJECT_URL}/p1/service/svc", json={"message": "gone"})
    assert handler.create_service("p1", CreateService(service_name="svc")) == "ok"
    assert json.loads(rsps.calls[0].request.body) == {"serviceName": "svc"}
    assert handler.delete_service("p1", "svc").message == "gone"


def test_get_metadata(rsps, handler):
    rsps.add(responses.GET, f"http://{HOST}{V1_METADATA_PATH}", json={"namespace": "keptn"})
    assert handler.get_metadata().namespace == "keptn"


def test_get_metadata_empty_body_returns_none(rsps, handler):
    rsps.add(responses.GET, f"http://{HOST}{V1_METADATA_PATH}", body="")
    assert handler.get_metadata() is None


def test_get_metadata_error(rsps, handler):
    rsps.add(responses.GET, f"http://{HOST}{V1_METADATA_PATH}", status=500, json={"code": 500, "message": "oops"})
    with pytest.raises(APIError) as info:
        handler.get_metadata()
    assert info.value.code == 500