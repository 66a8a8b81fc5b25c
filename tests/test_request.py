import json
from dataclasses import dataclass

import httpx
import pytest

from apirequest import (
    DirectDiscoverer,
    InvalidBodyError,
    MalformedURLError,
    NotRegisteredError,
    Request,
    Requester,
    SerializationError,
)
from apirequest.request import join_url


@dataclass
class Body:
    test: str


@pytest.fixture
def requester() -> Requester:
    transport = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    requester = Requester("test", transport)
    requester.register_api("test", DirectDiscoverer("http://127.0.0.1"))
    return requester


@pytest.mark.parametrize(
    ("base_url", "path", "expected"),
    [
        ("http://h/", "/a/b", "http://h/a/b"),
        ("http://h", "a/b", "http://h/a/b"),
        ("http://h/", "a/b", "http://h/a/b"),
        ("http://h", "/a/b", "http://h/a/b"),
        ("http://h/api/", "/v1/items/", "http://h/api/v1/items/"),
        ("http://h//", "//a", "http://h/a"),
        ("http://h", "", "http://h/"),
    ],
)
def test_join_url_uses_single_separator(base_url: str, path: str, expected: str) -> None:
    assert join_url(base_url, path) == expected


@pytest.mark.parametrize(
    ("method", "path", "expected_url"),
    [
        ("GET", "/foo/bar", "http://127.0.0.1/foo/bar"),
        ("POST", "foo/bar", "http://127.0.0.1/foo/bar"),
        ("GET", "", "http://127.0.0.1/"),
    ],
)
def test_new_request(requester: Requester, method: str, path: str, expected_url: str) -> None:
    request = requester.new_request("test", method, path)

    assert str(request.url) == expected_url
    assert request.method == method
    assert request.content is None
    assert request.query_params == {}
    assert request.headers["User-Agent"] == "apirequest (for test)"


def test_new_request_unknown_api(requester: Requester) -> None:
    with pytest.raises(NotRegisteredError) as exc:
        requester.new_request("notanapi", "GET", "")

    assert exc.value.api_name == "notanapi"
    assert "notanapi" in str(exc.value)


@pytest.mark.parametrize(
    "base_url",
    ["", "127.0.0.1", "ftp://127.0.0.1", "http://"],
)
def test_new_request_rejects_malformed_url(base_url: str) -> None:
    requester = Requester("test", httpx.Client())
    requester.register_api("broken", DirectDiscoverer(base_url))

    with pytest.raises(MalformedURLError):
        requester.new_request("broken", "GET", "/foo")


def test_set_body_encodes_json(requester: Requester) -> None:
    request = requester.new_request("test", "POST", "foo/bar")
    request.set_header("Content-Type", "text/plain")

    request.set_body(Body(test="test"))

    assert request.headers["Content-Type"] == "application/json"
    assert request.content == b'{"test":"test"}'
    assert json.loads(request.content) == {"test": "test"}


def test_set_body_rejects_none(requester: Requester) -> None:
    request = requester.new_request("test", "POST", "foo/bar")

    with pytest.raises(InvalidBodyError):
        request.set_body(None)

    assert request.content is None
    assert "Content-Type" not in request.headers


@pytest.mark.parametrize("body", [lambda: None, object()])
def test_set_body_rejects_unserializable(requester: Requester, body: object) -> None:
    request = requester.new_request("test", "POST", "foo/bar")

    with pytest.raises(SerializationError):
        request.set_body(body)

    assert request.content is None
    assert "Content-Type" not in request.headers


def test_set_body_rejects_cyclic_payload(requester: Requester) -> None:
    payload: dict[str, object] = {}
    payload["self"] = payload
    request = requester.new_request("test", "POST", "foo/bar")

    with pytest.raises(SerializationError):
        request.set_body(payload)


def test_set_body_accepts_empty_containers(requester: Requester) -> None:
    request = requester.new_request("test", "POST", "foo/bar")

    request.set_body({})

    assert request.content == b"{}"


@pytest.mark.parametrize(
    "params",
    [
        {"one": ["onev"]},
        {"one": ["onev"], "two": ["twov"]},
        {"multi": ["a", "b"], "other": ["c"]},
    ],
)
def test_set_query_params(requester: Requester, params: dict[str, list[str]]) -> None:
    request = requester.new_request("test", "GET", "foo/bar")

    request.set_query_params(params)

    assert request.query_params == params


def test_set_query_params_sorts_keys_and_encodes(requester: Requester) -> None:
    request = requester.new_request("test", "GET", "foo/bar")

    request.set_query_params({"zeta": "last", "alpha": ["b", "c&d"], "mid": ["a b"]})

    query = request.url.query.decode()
    assert query.startswith("alpha=b&alpha=c%26d&mid=")
    assert query.endswith("&zeta=last")
    assert request.query_params == {"alpha": ["b", "c&d"], "mid": ["a b"], "zeta": ["last"]}


def test_set_query_params_replaces_existing(requester: Requester) -> None:
    request = requester.new_request("test", "GET", "foo/bar")
    request.set_query_params({"one": ["onev"]})

    request.set_query_params({"two": ["twov"]})
    assert request.query_params == {"two": ["twov"]}

    request.set_query_params({})
    assert request.query_params == {}
    assert str(request.url) == "http://127.0.0.1/foo/bar"


@pytest.mark.parametrize("user_agent", ["", "custom-agent/1.0"])
def test_set_user_agent(requester: Requester, user_agent: str) -> None:
    request = requester.new_request("test", "GET", "foo/bar")

    request.set_user_agent(user_agent)

    assert request.headers["User-Agent"] == user_agent


def test_request_can_be_built_directly() -> None:
    request = Request("patch", "https://example.com/items/1", user_agent="direct")

    assert request.method == "PATCH"
    assert request.url.host == "example.com"
    assert repr(request) == "<Request('PATCH', 'https://example.com/items/1')>"
