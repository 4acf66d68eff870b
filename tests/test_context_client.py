"""Tests for the Context API client and its retrying HTTP transport."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest
import requests

# Ensure the repository's src/ directory is importable without installation.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from context_demo.core import http_client  # noqa: E402
from context_demo.core.apis.context_client import ContextApiClient, ContextApiError  # noqa: E402
from context_demo.core.http_client import RetryableHTTPClient  # noqa: E402
from context_demo.core.models import QueryMode, QueryType  # noqa: E402


class FakeResponse:
    def __init__(self, status_code=200, payload=None, headers=None, bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    """Replays scripted responses (or raises scripted exceptions) for POSTs."""

    def __init__(self, script):
        self.script = list(script)
        self.posts = []
        self.closed = False

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        result = self.script.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr(http_client.time, "sleep", lambda s: sleeps.append(s))
    return sleeps


def _client(script, max_retries=3):
    session = FakeSession(script)
    http = RetryableHTTPClient(rps=100.0, max_retries=max_retries, timeout=5, session=session)
    return ContextApiClient("https://api.example.com/", "KEY", "SESSION", http=http), session


def test_search_entities_posts_credentials_and_decodes():
    payload = {"results": [
        {"entityID": "E1", "entityType": "COMPANY", "displayName": "Apple", "description": "Tech"},
    ]}
    client, session = _client([FakeResponse(payload=payload)])

    entities = client.search_entities("AAPL", True, 20)

    assert [e.entity_id for e in entities] == ["E1"]
    assert entities[0].name == "Apple"
    post = session.posts[0]
    assert post["url"] == "https://api.example.com/api/v1/dds/search"
    assert post["json"] == {
        "authToken": "KEY", "sessionID": "SESSION", "query": "AAPL", "exact": True, "limit": 20,
    }
    assert post["timeout"] == 5


def test_query_content_body_and_bare_list_response():
    client, session = _client([FakeResponse(payload=[{"contentID": "c1"}, {"contentID": "c2"}])])

    items = client.query_content(QueryType.RECOMMENDATION, QueryMode.UPDATE, 10, ["E1", "E2"])

    assert [i.content_id for i in items] == ["c1", "c2"]
    body = session.posts[0]["json"]
    assert body["queryType"] == "RECOMMENDATION"
    assert body["mode"] == "UPDATE"
    assert body["batchSize"] == 10
    assert body["contextEntities"] == ["E1", "E2"]


def test_entitled_sources():
    client, _ = _client([FakeResponse(payload={"sources": ["Reuters", "Twitter"]})])
    assert client.query_entitled_sources() == ["Reuters", "Twitter"]


def test_missing_list_key_means_empty():
    client, _ = _client([FakeResponse(payload={"contentItems": None})])
    assert client.query_content(QueryType.FEED, QueryMode.INITIAL, 10, []) == []


def test_malformed_payload_raises():
    client, _ = _client([FakeResponse(payload={"contentItems": "oops"})])
    with pytest.raises(ContextApiError):
        client.query_content(QueryType.FEED, QueryMode.INITIAL, 10, ["E1"])


def test_invalid_json_raises():
    client, _ = _client([FakeResponse(bad_json=True)])
    with pytest.raises(ContextApiError):
        client.query_entitled_sources()


def test_malformed_entity_raises():
    client, _ = _client([FakeResponse(payload={"results": [{"displayName": "no id"}]})])
    with pytest.raises(ContextApiError):
        client.search_entities("x", False, 20)


def test_server_errors_retried_then_succeed(no_sleep):
    client, session = _client([
        FakeResponse(status_code=503, headers={"Retry-After": "2"}),
        FakeResponse(status_code=500),
        FakeResponse(payload={"sources": []}),
    ])
    assert client.query_entitled_sources() == []
    assert len(session.posts) == 3
    # Retry-After honored first, then exponential backoff (rate-limit sleeps are sub-second)
    assert [s for s in no_sleep if s >= 1] == [2.0, 2.0]


def test_connection_errors_exhaust_retries_and_raise(no_sleep):
    error = requests.ConnectionError("refused")
    client, session = _client([error, error, error])
    with pytest.raises(ContextApiError) as excinfo:
        client.query_content(QueryType.FEED, QueryMode.UPDATE, 10, ["E1"])
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)
    assert len(session.posts) == 3


def test_retryable_status_on_last_attempt_raises():
    client, session = _client([FakeResponse(status_code=503)], max_retries=1)
    with pytest.raises(ContextApiError):
        client.query_entitled_sources()
    assert len(session.posts) == 1


def test_client_errors_not_retried():
    client, session = _client([FakeResponse(status_code=401), FakeResponse(payload=[])])
    with pytest.raises(ContextApiError):
        client.query_entitled_sources()
    assert len(session.posts) == 1


def test_close_closes_session():
    client, session = _client([])
    with client:
        pass
    assert session.closed
