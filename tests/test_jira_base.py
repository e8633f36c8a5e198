import json

import pytest
import requests
import responses

from atlassian_dc.config import ServiceConfig
from atlassian_dc.jira_base import JiraClientBase, JiraRequestError, set_query_param

BASE = "https://jira.example.com"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


@pytest.fixture
def client():
    return JiraClientBase(ServiceConfig(url=BASE + "/", token="token"), requests.Session())


def test_set_query_param_skips_invalid_values():
    params = {}
    set_query_param(params, "startAt", 0, 0)
    set_query_param(params, "name", "", "")
    set_query_param(params, "validateQuery", False, False)
    set_query_param(params, "fields", None, None)
    assert params == {}


def test_set_query_param_formats_values():
    params = {}
    set_query_param(params, "maxResults", 25, 0)
    set_query_param(params, "validateQuery", True, False)
    set_query_param(params, "fields", ["id", "key"], None)
    set_query_param(params, "name", "board", "")
    assert params == {
        "maxResults": ["25"],
        "validateQuery": ["true"],
        "fields": ["id,key"],
        "name": ["board"],
    }


def test_set_query_param_replaces_existing_value():
    params = {"expand": ["old"]}
    set_query_param(params, "expand", "new", "")
    assert params == {"expand": ["new"]}


def test_get_sends_bearer_token_and_query(rsps, client):
    rsps.add(responses.GET, BASE + "/rest/api/2/issue/ABC-1", json={"key": "ABC-1"})
    result = client._request("GET", ["rest", "api", "2", "issue", "ABC-1"], {"fields": ["summary"]})
    assert result == {"key": "ABC-1"}
    sent = rsps.calls[0].request
    assert sent.headers["Authorization"] == "Bearer token"
    assert sent.url == BASE + "/rest/api/2/issue/ABC-1?fields=summary"


def test_path_segments_are_escaped(rsps, client):
    rsps.add(responses.GET, BASE + "/rest/api/2/user/a%2Fb%20c", json={})
    assert client._request("GET", ["rest", "api", "2", "user", "a/b c"]) == {}
    assert rsps.calls[0].request.url == BASE + "/rest/api/2/user/a%2Fb%20c"


def test_post_sends_json_body(rsps, client):
    rsps.add(responses.POST, BASE + "/rest/api/2/issue", json={"id": "1"}, status=201)
    payload = {"fields": {"summary": "hello"}}
    assert client._request("POST", ["rest", "api", "2", "issue"], body=payload) == {"id": "1"}
    sent = rsps.calls[0].request
    assert json.loads(sent.body) == payload
    assert sent.headers["Content-Type"] == "application/json"


def test_empty_response_returns_none(rsps, client):
    rsps.add(responses.POST, BASE + "/rest/api/2/issue/ABC-1/transitions", status=204)
    assert client._request("POST", ["rest", "api", "2", "issue", "ABC-1", "transitions"], body={}) is None


def test_error_status_raises(rsps, client):
    rsps.add(
        responses.GET,
        BASE + "/rest/api/2/issue/INVALID-99999999",
        json={"errorMessages": ["Issue Does Not Exist"]},
        status=404,
    )
    with pytest.raises(JiraRequestError) as info:
        client._request("GET", ["rest", "api", "2", "issue", "INVALID-99999999"])
    assert info.value.status_code == 404
    assert "Issue Does Not Exist" in info.value.body


def test_connection_error_raises(rsps, client):
    rsps.add(
        responses.GET,
        BASE + "/rest/api/2/myself",
        body=requests.ConnectionError("refused"),
    )
    with pytest.raises(JiraRequestError, match="failed to send request") as info:
        client._request("GET", ["rest", "api", "2", "myself"])
    assert info.value.status_code is None


def test_invalid_json_raises(rsps, client):
    rsps.add(responses.GET, BASE + "/rest/api/2/priority", body="not json", status=200)
    with pytest.raises(JiraRequestError, match="failed to decode response"):
        client._request("GET", ["rest", "api", "2", "priority"])