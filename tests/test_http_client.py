"""Tests for HttpClient retries, error mapping and paging."""

import json

import pytest
import requests

from tenantlic.http import client as http_client
from tenantlic.http.client import HttpClient
from tenantlic.http.errors import NetworkError, NotFoundError, ServerError, ThrottleError, UnauthorizedError
from tenantlic.http.throttle import compute_sleep_seconds


class FakeResponse:
    def __init__(self, status_code=200, body=None, headers=None):
        self.status_code = status_code
        self.text = json.dumps(body) if body is not None else ""
        self.headers = headers or {}


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, headers=None, params=None, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json})
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    slept = []
    monkeypatch.setattr(http_client, "sleep_backoff", slept.append)
    return slept


def make_client(responses, max_retries=2):
    session = FakeSession(responses)
    return HttpClient(base_url="https://graph.example", max_retries=max_retries, session=session), session


def test_relative_and_absolute_urls():
    c, session = make_client([FakeResponse(body={"a": 1}), FakeResponse(body={})])
    assert c.get_json("/v1.0/x") == {"a": 1}
    c.get_json("https://other.example/y")
    assert session.calls[0]["url"] == "https://graph.example/v1.0/x"
    assert session.calls[1]["url"] == "https://other.example/y"


def test_empty_body_is_empty_dict():
    c, _ = make_client([FakeResponse(204)])
    assert c.patch_json("/v1.0/users/u", json={"usageLocation": "US"}) == {}


def test_retries_throttle_then_succeeds(no_sleep):
    c, session = make_client([
        FakeResponse(429, headers={"Retry-After": "3"}),
        FakeResponse(503),
        FakeResponse(body={"ok": True}),
    ])
    assert c.get_json("/v1.0/x") == {"ok": True}
    assert len(session.calls) == 3
    assert no_sleep[0] == 3


def test_throttle_after_retries_raises():
    c, session = make_client([FakeResponse(429)] * 3, max_retries=2)
    with pytest.raises(ThrottleError):
        c.get_json("/v1.0/x")
    assert len(session.calls) == 3


def test_network_errors_retried_then_raise():
    c, _ = make_client([requests.exceptions.ConnectionError("boom")] * 3, max_retries=2)
    with pytest.raises(NetworkError):
        c.get_json("/v1.0/x")


def test_maps_status_codes_with_graph_message():
    body = {"error": {"code": "Request_ResourceNotFound", "message": "Resource 'x' does not exist."}}
    c, _ = make_client([FakeResponse(404, body=body), FakeResponse(401), FakeResponse(500)], max_retries=0)
    with pytest.raises(NotFoundError) as ei:
        c.get_json("/v1.0/users/x")
    assert "does not exist" in str(ei.value)
    assert ei.value.status == 404
    with pytest.raises(UnauthorizedError):
        c.get_json("/v1.0/users/x")
    with pytest.raises(ServerError):
        c.get_json("/v1.0/users/x")


def test_paging_follows_next_link():
    c, session = make_client([
        FakeResponse(body={"value": [1, 2], "@odata.nextLink": "https://graph.example/v1.0/x?$skiptoken=a"}),
        FakeResponse(body={"value": [3]}),
    ])
    pages = list(c.get_paged("/v1.0/x", params={"$top": 2}))
    assert [p["value"] for p in pages] == [[1, 2], [3]]
    assert session.calls[0]["params"] == {"$top": 2}
    assert session.calls[1]["params"] is None


def test_backoff_honours_retry_after_and_caps():
    assert compute_sleep_seconds(0, "7") == 7
    assert compute_sleep_seconds(10, None) <= 8 * 1.4
