"""
Requesters build and execute requests against named APIs.

A requester maps API names to discoverers, resolves the base URL on every
``new_request`` call and executes requests through an injected httpx client.
``execute`` decodes the response body into the success or error type chosen by
the caller, depending on the status code.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Generic, Mapping, Protocol, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from apirequest.discoverers import Discoverer, DirectDiscoverer
from apirequest.errors import DecodeError, RawServerError, TransportError
from apirequest.http_client import create_async_transport, create_transport, default_transport
from apirequest.registry import APIRegistry
from apirequest.request import Request, default_user_agent, join_url
from apirequest.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E")

_LOG_SNIPPET_LIMIT = 512


@dataclass(frozen=True)
class ExecuteResult(Generic[T, E]):
    """
    Outcome of a completed HTTP exchange.

    ``ok`` is False for status codes >= 400. ``data`` holds the decoded success
    body and ``error`` the decoded error body when the matching type was given.
    """

    ok: bool
    status_code: int
    data: T | None = None
    error: E | None = None


class RequesterProtocol(Protocol):
    """Operations shared by requesters and their test doubles."""

    def register_api(self, name: str, discoverer: Discoverer) -> None: ...

    def new_request(self, api_name: str, method: str, path: str) -> Request: ...

    def execute(
        self,
        request: Request,
        success_type: type[T] | None = None,
        error_type: type[E] | None = None,
    ) -> ExecuteResult[T, E]: ...


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _decode(response: httpx.Response, target: Any, *, ok: bool) -> Any:
    try:
        return _adapter(target).validate_json(response.content)
    except ValidationError as exc:
        raise DecodeError(response.status_code, ok, response.text, str(exc)) from exc


def _interpret(
    request: Request,
    response: httpx.Response,
    success_type: Any,
    error_type: Any,
) -> ExecuteResult[Any, Any]:
    """Map a fully read response onto a result, decoding the relevant body."""
    status_code = response.status_code
    if status_code >= 400:
        if error_type is None:
            snippet = response.text.strip()
            if len(snippet) > _LOG_SNIPPET_LIMIT:
                snippet = f"{snippet[:_LOG_SNIPPET_LIMIT]}..."
            logger.debug(
                "API responded with unhandled error",
                extra={
                    "method": request.method,
                    "url": str(request.url),
                    "status_code": status_code,
                    "content": snippet,
                },
            )
            raise RawServerError(status_code, response.text)
        return ExecuteResult(
            ok=False,
            status_code=status_code,
            error=_decode(response, error_type, ok=False),
        )

    if success_type is None:
        return ExecuteResult(ok=True, status_code=status_code)
    return ExecuteResult(
        ok=True,
        status_code=status_code,
        data=_decode(response, success_type, ok=True),
    )


def _transport_error(request: Request, exc: httpx.RequestError) -> TransportError:
    method, url = request.method, str(request.url)
    if isinstance(exc, httpx.TimeoutException):
        message = f"request timed out ({exc!s})"
    else:
        message = str(exc) or type(exc).__name__
    logger.debug(
        "API request failed",
        extra={"method": method, "url": url, "error": message},
    )
    return TransportError(method, url, message)


def _log_close_failure(request: Request, exc: Exception) -> None:
    logger.warning(
        "Failed to release response",
        extra={"method": request.method, "url": str(request.url)},
        exc_info=exc,
    )


class _BaseRequester:
    """Registration and request construction shared by sync and async requesters."""

    def __init__(self, name: str, apis: Mapping[str, Discoverer] | None = None) -> None:
        self._name = name
        self._registry = APIRegistry(apis)

    @property
    def name(self) -> str:
        return self._name

    @property
    def apis(self) -> APIRegistry:
        return self._registry

    def register_api(self, name: str, discoverer: Discoverer) -> None:
        """
        Register ``discoverer`` for ``name``.

        Registering a name twice raises ``DuplicateAPIError``; this is a startup
        misconfiguration and is not meant to be handled.
        """
        self._registry.register(name, discoverer)

    def freeze(self) -> None:
        """Close the registration phase."""
        self._registry.freeze()

    def new_request(self, api_name: str, method: str, path: str) -> Request:
        """Build a request for ``path`` on the current base URL of ``api_name``."""
        discoverer = self._registry.resolve(api_name)
        request = Request(
            method,
            join_url(discoverer.url(), path),
            user_agent=default_user_agent(self._name),
        )
        logger.debug(
            "Built request",
            extra={"api": api_name, "method": request.method, "url": str(request.url)},
        )
        return request

    def _register_from_settings(self, settings: Settings) -> None:
        for api_name, base_url in settings.apis:
            self.register_api(api_name, DirectDiscoverer(base_url))
        self.freeze()


def _build_http_request(
    transport: httpx.Client | httpx.AsyncClient, request: Request
) -> httpx.Request:
    return transport.build_request(
        request.method,
        request.url,
        headers=request.headers,
        content=request.content,
    )


class Requester(_BaseRequester):
    """Blocking requester backed by a shared ``httpx.Client``."""

    def __init__(
        self,
        name: str,
        transport: httpx.Client | None = None,
        *,
        apis: Mapping[str, Discoverer] | None = None,
    ) -> None:
        super().__init__(name, apis)
        self._transport = transport if transport is not None else default_transport()

    @classmethod
    def from_settings(cls, settings: Settings) -> "Requester":
        """Build a requester with its own transport and the APIs listed in Settings."""
        requester = cls(settings.requester_name, create_transport(settings))
        requester._register_from_settings(settings)
        return requester

    @property
    def transport(self) -> httpx.Client:
        return self._transport

    def execute(
        self,
        request: Request,
        success_type: type[T] | None = None,
        error_type: type[E] | None = None,
    ) -> ExecuteResult[T, E]:
        """
        Send ``request`` and decode the response.

        Status codes >= 400 decode into ``error_type`` and return a result with
        ``ok=False``; without an ``error_type`` they raise ``RawServerError``.
        Other status codes decode into ``success_type`` when one is given.
        Transport failures raise ``TransportError`` and decoding failures raise
        ``DecodeError``.
        """
        http_request = _build_http_request(self._transport, request)
        logger.debug(
            "Sending request",
            extra={"method": request.method, "url": str(request.url)},
        )
        try:
            response = self._transport.send(http_request, stream=True)
        except httpx.RequestError as exc:
            raise _transport_error(request, exc) from exc

        try:
            try:
                response.read()
            except httpx.RequestError as exc:
                raise _transport_error(request, exc) from exc
            return _interpret(request, response, success_type, error_type)
        finally:
            try:
                response.close()
            except (httpx.HTTPError, OSError) as exc:
                _log_close_failure(request, exc)


class AsyncRequester(_BaseRequester):
    """
    Requester backed by an ``httpx.AsyncClient``.

    Without an explicit transport the requester creates its own client and
    closes it in ``aclose``.
    """

    def __init__(
        self,
        name: str,
        transport: httpx.AsyncClient | None = None,
        *,
        apis: Mapping[str, Discoverer] | None = None,
    ) -> None:
        super().__init__(name, apis)
        self._owns_transport = transport is None
        self._transport = (
            transport if transport is not None else httpx.AsyncClient(follow_redirects=True)
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "AsyncRequester":
        """Async counterpart of ``Requester.from_settings``; owns its transport."""
        requester = cls(settings.requester_name, create_async_transport(settings))
        requester._owns_transport = True
        requester._register_from_settings(settings)
        return requester

    @property
    def transport(self) -> httpx.AsyncClient:
        return self._transport

    async def aclose(self) -> None:
        """Close the transport if this requester created it."""
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> "AsyncRequester":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def execute(
        self,
        request: Request,
        success_type: type[T] | None = None,
        error_type: type[E] | None = None,
    ) -> ExecuteResult[T, E]:
        """Send ``request`` and decode the response. See ``Requester.execute``."""
        http_request = _build_http_request(self._transport, request)
        logger.debug(
            "Sending request",
            extra={"method": request.method, "url": str(request.url)},
        )
        try:
            response = await self._transport.send(http_request, stream=True)
        except httpx.RequestError as exc:
            raise _transport_error(request, exc) from exc

        try:
            try:
                await response.aread()
            except httpx.RequestError as exc:
                raise _transport_error(request, exc) from exc
            return _interpret(request, response, success_type, error_type)
        finally:
            try:
                await response.aclose()
            except (httpx.HTTPError, OSError) as exc:
                _log_close_failure(request, exc)
