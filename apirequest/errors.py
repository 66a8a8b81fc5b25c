"""Exception types raised by the request helpers."""


class ApiRequestError(RuntimeError):
    """Base class for recoverable failures while building or executing a request."""


class NotRegisteredError(ApiRequestError):
    """Raised when a request targets an API name that was never registered."""

    def __init__(self, api_name: str) -> None:
        super().__init__(f"api [{api_name}] not registered")
        self.api_name = api_name


class MalformedURLError(ApiRequestError):
    """Raised when the resolved request URL is not a usable absolute URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"invalid request URL {url!r}: {reason}")
        self.url = url


class InvalidBodyError(ApiRequestError, ValueError):
    """Raised when a request body is missing."""


class SerializationError(ApiRequestError):
    """Raised when a request body cannot be encoded as JSON."""


class TransportError(ApiRequestError):
    """Wraps failures reported by the HTTP transport (connect, timeout, TLS, ...)."""

    def __init__(self, method: str, url: str, message: str) -> None:
        super().__init__(f"{method} {url} failed: {message}")
        self.method = method
        self.url = url


class DecodeError(ApiRequestError):
    """
    Raised when a response body cannot be decoded into the requested type.

    ``ok`` reports the HTTP-level outcome: a 2xx/3xx response whose body did not
    match the success type still has ``ok=True``.
    """

    def __init__(self, status_code: int, ok: bool, body: str, message: str) -> None:
        super().__init__(f"unable to decode {status_code} response: {message}")
        self.status_code = status_code
        self.ok = ok
        self.body = body


class RawServerError(ApiRequestError):
    """Raised for error responses when the caller supplied no error type."""

    ok = False

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"{status_code}:{body}")
        self.status_code = status_code
        self.body = body


class ProgrammingError(RuntimeError):
    """Startup contract violations. These are not meant to be caught."""


class DuplicateAPIError(ProgrammingError):
    """Raised when the same API name is registered twice."""

    def __init__(self, api_name: str) -> None:
        super().__init__(f"api [{api_name}] already registered")
        self.api_name = api_name


class RegistryFrozenError(ProgrammingError):
    """Raised when registering an API after the registry was frozen."""

    def __init__(self, api_name: str) -> None:
        super().__init__(f"cannot register api [{api_name}]: registry is frozen")
        self.api_name = api_name
