"""API name to discoverer mapping with a one-way registration phase."""

import logging
from types import MappingProxyType
from typing import Iterator, Mapping

from apirequest.discoverers import Discoverer
from apirequest.errors import DuplicateAPIError, NotRegisteredError, RegistryFrozenError

logger = logging.getLogger(__name__)


class APIRegistry:
    """
    Collects discoverers during startup, then serves read-only lookups.

    Registration is not synchronized; it is expected to finish on one thread
    before requests are built from others.
    """

    def __init__(self, apis: Mapping[str, Discoverer] | None = None) -> None:
        self._apis: dict[str, Discoverer] = {}
        self._view: Mapping[str, Discoverer] = MappingProxyType(self._apis)
        self._frozen = False
        for name, discoverer in (apis or {}).items():
            self.register(name, discoverer)

    def register(self, name: str, discoverer: Discoverer) -> None:
        if self._frozen:
            raise RegistryFrozenError(name)
        if name in self._apis:
            raise DuplicateAPIError(name)
        if not isinstance(discoverer, Discoverer):
            raise TypeError(
                f"discoverer for api [{name}] must provide url(), got {type(discoverer).__name__}"
            )
        self._apis[name] = discoverer
        logger.debug("Registered API", extra={"api": name})

    def freeze(self) -> None:
        """End the registration phase. Further ``register`` calls fail."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._view)

    def resolve(self, name: str) -> Discoverer:
        try:
            return self._view[name]
        except KeyError:
            raise NotRegisteredError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._view

    def __iter__(self) -> Iterator[str]:
        return iter(self._view)

    def __len__(self) -> int:
        return len(self._view)
