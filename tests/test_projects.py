import json

import pytest
import responses

from keptnkit.api.base import APIError
from keptnkit.api.client import SHIPYARD_CONTROLLER_BASE_URL, V1_PROJECT_PATH
from keptnkit.api.projects import ProjectHandler
from keptnkit.models import Project

HOST = "keptn.example.com"
URL = f"http://{HOST}{V1_PROJECT_PATH}"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


@pytest.fixture
def handler():
    return ProjectHandler.create(f"http://{HOST}")


def test_create_trims_scheme(handler):
    assert handler.base_url == HOST
    assert handler.scheme == "http"


def test_authenticated_appends_control_plane():
    handler = ProjectHandler.authenticated(f"https://{HOST}//", "token", "x-token")
    assert handler.base_url == f"{HOST}/{SHIPYARD_CONTROLLER_BASE_URL}"


def test_authenticated_keeps_existing_suffix():
    base = f"{HOST}/{SHIPYARD_CONTROLLER_BASE_URL}"
    assert ProjectHandler.authenticated(base).base_url == base


def test_create_project(rsps, handler):
    rsps.add(responses.POST, URL, json={"keptnContext": "ctx"})
    assert handler.create_project(Project(project_name="p1")).keptn_context == "ctx"
    assert json.loads(rsps.calls[0].request.body)["projectName"] == "p1"


def test_delete_project(rsps, handler):
    rsps.add(responses.DELETE, f"{URL}/p1", json={"keptnContext": "ctx"})
    assert handler.delete_project(Project(project_name="p1")).keptn_context == "ctx"


def test_get_project(rsps, handler):
    rsps.add(responses.GET, f"{URL}/p1", json={"projectName": "p1", "stages": [{"stageName": "dev"}]})
    project = handler.get_project(Project(project_name="p1"))
    assert project.project_name == "p1"
    assert project.stages[0].stage_name == "dev"


def test_get_project_error(rsps, handler):
    rsps.add(responses.GET, f"{URL}/p1", status=404, json={"code": 404, "message": "oops"})
    with pytest.raises(APIError) as info:
        handler.get_project(Project(project_name="p1"))
    assert info.value.message == "oops"


def test_get_all_projects_follows_pages(rsps, handler):
    rsps.add(responses.GET, URL, json={"projects": [{"projectName": "a"}], "nextPageKey": "1"})
    rsps.add(responses.GET, URL, json={"projects": [{"projectName": "b"}], "nextPageKey": "0"})
    projects = handler.get_all_projects()
    assert [p.project_name for p in projects] == ["a", "b"]
    assert len(rsps.calls) == 2
    assert "nextPageKey=1" in rsps.calls[1].request.url


def test_get_all_projects_error(rsps, handler):
    rsps.add(responses.GET, URL, status=500, json={"code": 500, "message": "oops"})
    with pytest.raises(APIError) as info:
        handler.get_all_projects()
    assert info.value.message == "oops"


def test_update_configuration_service_project(rsps, handler):
    rsps.add(responses.PUT, f"{URL}/p1", body="")
    assert handler.update_configuration_service_project(Project(project_name="p1")) is None
    assert rsps.calls[0].request.method == "PUT"