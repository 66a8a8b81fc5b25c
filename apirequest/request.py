"""
Mutable request handle returned by ``Requester.new_request``.

A ``Request`` is built once, adjusted (query string, JSON body, headers) and
handed to ``execute`` exactly once. It carries no locking and should stay on
the call path that created it.
"""

import logging
from typing import Any, Mapping, Sequence

import httpx
from pydantic_core import PydanticSerializationError, to_json

from apirequest.errors import InvalidBodyError, MalformedURLError, SerializationError

logger = logging.getLogger(__name__)

USER_AGENT_IDENTITY = "apirequest"
JSON_CONTENT_TYPE = "application/json"
_SUPPORTED_SCHEMES = frozenset({"http", "https"})

QueryParams = Mapping[str, Sequence[str] | str]


def join_url(base_url: str, path: str) -> str:
    """Join a base URL and a relative path with exactly one slash between them."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def default_user_agent(requester_name: str) -> str:
    return f"{USER_AGENT_IDENTITY} (for {requester_name})"


def _parse_url(raw_url: str) -> httpx.URL:
    try:
        url = httpx.URL(raw_url)
    except httpx.InvalidURL as exc:
        raise MalformedURLError(raw_url, str(exc)) from exc
    if url.scheme not in _SUPPORTED_SCHEMES:
        raise MalformedURLError(raw_url, f"unsupported scheme {url.scheme!r}")
    if not url.host:
        raise MalformedURLError(raw_url, "missing host")
    return url


class Request:
    """A single pending HTTP call against a resolved API URL."""

    def __init__(self, method: str, url: str, *, user_agent: str) -> None:
        self._method = method.upper()
        self._url = _parse_url(url)
        self._headers = httpx.Headers({"User-Agent": user_agent})
        self._content: bytes | None = None

    @property
    def method(self) -> str:
        return self._method

    @property
    def url(self) -> httpx.URL:
        return self._url

    @property
    def headers(self) -> httpx.Headers:
        return self._headers

    @property
    def content(self) -> bytes | None:
        """Encoded JSON body, or ``None`` when no body was set."""
        return self._content

    @property
    def query_params(self) -> dict[str, list[str]]:
        params = self._url.params
        return {key: params.get_list(key) for key in params.keys()}

    def set_query_params(self, params: QueryParams) -> None:
        """
        Replace the query string with ``params``.

        Keys are serialized in sorted order; multiple values for a key keep the
        order they were given in. An empty mapping removes the query string.
        """
        items: list[tuple[str, str]] = []
        for key in sorted(params):
            values = params[key]
            if isinstance(values, str):
                values = [values]
            items.extend((key, value) for value in values)
        self._url = self._url.copy_with(params=items)

    def set_body(self, payload: Any) -> None:
        """Encode ``payload`` as JSON and use it as the request body."""
        if payload is None:
            raise InvalidBodyError("body must not be None")
        try:
            encoded = to_json(payload)
        except (PydanticSerializationError, ValueError, TypeError) as exc:
            raise SerializationError(
                f"unable to encode {type(payload).__name__} body as JSON: {exc}"
            ) from exc
        self._content = encoded
        self._headers["Content-Type"] = JSON_CONTENT_TYPE

    def set_user_agent(self, user_agent: str) -> None:
        """Overwrite the User-Agent header. An empty value is sent as-is."""
        self._headers["User-Agent"] = user_agent

    def set_header(self, name: str, value: str) -> None:
        self._headers[name] = value

    def __repr__(self) -> str:
        return f"<Request({self._method!r}, {str(self._url)!r})>"
