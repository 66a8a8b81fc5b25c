"""
Helpers for calling named HTTP+JSON APIs.

Register each API with a discoverer that yields its base URL, build requests by
API name and relative path, then execute them with optional typed decoding of
success and error bodies.
"""

from apirequest.client import AsyncRequester, ExecuteResult, Requester, RequesterProtocol
from apirequest.discoverers import DirectDiscoverer, Discoverer
from apirequest.errors import (
    ApiRequestError,
    DecodeError,
    DuplicateAPIError,
    InvalidBodyError,
    MalformedURLError,
    NotRegisteredError,
    ProgrammingError,
    RawServerError,
    RegistryFrozenError,
    SerializationError,
    TransportError,
)
from apirequest.request import Request
from apirequest.settings import Settings

__all__ = [
    "ApiRequestError",
    "AsyncRequester",
    "DecodeError",
    "DirectDiscoverer",
    "Discoverer",
    "DuplicateAPIError",
    "ExecuteResult",
    "InvalidBodyError",
    "MalformedURLError",
    "NotRegisteredError",
    "ProgrammingError",
    "RawServerError",
    "RegistryFrozenError",
    "Request",
    "Requester",
    "RequesterProtocol",
    "SerializationError",
    "Settings",
    "TransportError",
]
