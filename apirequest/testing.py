"""
Test double for code that depends on a requester.

``MockRequester`` delegates every operation to a caller-supplied callable and
records the calls it received, so tests can control outcomes without a
transport.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from apirequest.client import ExecuteResult
from apirequest.discoverers import Discoverer
from apirequest.request import Request


@dataclass
class MockRequester:
    """Requester stand-in with scripted behaviour and call tracking."""

    register_api_fn: Callable[[str, Discoverer], None] | None = None
    new_request_fn: Callable[[str, str, str], Request] | None = None
    execute_fn: Callable[[Request, Any, Any], ExecuteResult[Any, Any]] | None = None
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    @property
    def register_api_called(self) -> bool:
        return self._was_called("register_api")

    @property
    def new_request_called(self) -> bool:
        return self._was_called("new_request")

    @property
    def execute_called(self) -> bool:
        return self._was_called("execute")

    def register_api(self, name: str, discoverer: Discoverer) -> None:
        self.calls.append(("register_api", (name, discoverer)))
        self._require(self.register_api_fn, "register_api")(name, discoverer)

    def new_request(self, api_name: str, method: str, path: str) -> Request:
        self.calls.append(("new_request", (api_name, method, path)))
        return self._require(self.new_request_fn, "new_request")(api_name, method, path)

    def execute(
        self,
        request: Request,
        success_type: Any = None,
        error_type: Any = None,
    ) -> ExecuteResult[Any, Any]:
        self.calls.append(("execute", (request, success_type, error_type)))
        return self._require(self.execute_fn, "execute")(request, success_type, error_type)

    def _was_called(self, operation: str) -> bool:
        return any(name == operation for name, _ in self.calls)

    @staticmethod
    def _require(fn: Callable[..., Any] | None, operation: str) -> Callable[..., Any]:
        if fn is None:
            raise AssertionError(f"MockRequester.{operation} called without a configured {operation}_fn")
        return fn
