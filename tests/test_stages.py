import json
from urllib.parse import parse_qs, urlsplit

import pytest
import responses

from keptnkit.api.base import APIError
from keptnkit.api.stages import StageHandler

URL = "http://localhost/controlPlane/v1/project/p1/stage"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_create_keeps_tls_verification():
    handler = StageHandler.create("https://example.com")
    assert handler.base_url == "example.com"
    assert handler.session.verify is True


def test_authenticated_disables_tls_verification():
    handler = StageHandler.authenticated("https://example.com", "token", "x-token")
    assert handler.base_url == "example.com/controlPlane"
    assert handler.session.verify is False


def test_create_stage_posts_stage_name(mocked):
    mocked.add(responses.POST, URL, json={"keptnContext": "ctx1"})
    handler = StageHandler.authenticated("http://localhost", "token", "x-token")
    context = handler.create_stage("p1", "dev")
    assert context.keptn_context == "ctx1"
    sent = json.loads(mocked.calls[0].request.body)
    assert sent["stageName"] == "dev"
    assert mocked.calls[0].request.headers["x-token"] == "token"


def test_create_stage_error(mocked):
    mocked.add(responses.POST, URL, status=400, json={"code": 400, "message": "oops"})
    handler = StageHandler.authenticated("http://localhost")
    with pytest.raises(APIError) as info:
        handler.create_stage("p1", "dev")
    assert info.value.message == "oops"


def test_get_all_stages_follows_pages(mocked):
    mocked.add(responses.GET, URL, json={"stages": [{"stageName": "dev"}], "nextPageKey": "1"})
    mocked.add(responses.GET, URL, json={"stages": [{"stageName": "prod"}], "nextPageKey": "0"})
    handler = StageHandler.authenticated("http://localhost")
    stages = handler.get_all_stages("p1")
    assert [stage.stage_name for stage in stages] == ["dev", "prod"]
    assert parse_qs(urlsplit(mocked.calls[1].request.url).query)["nextPageKey"] == ["1"]


def test_get_all_stages_error(mocked):
    mocked.add(responses.GET, URL, status=404, json={"code": 404, "message": "not found"})
    handler = StageHandler.authenticated("http://localhost")
    with pytest.raises(APIError) as info:
        handler.get_all_stages("p1")
    assert info.value.message == "not found"
    assert info.value.code == 404