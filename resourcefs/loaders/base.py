"""Loader contract: turns a byte stream into one in-memory resource."""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import BinaryIO


class ResourceLoader(ABC):
    """Loads resources for a single scheme.

    A loader is identified by its scheme alone: two loaders with the same
    scheme (ignoring case) compare equal. A loader may declare a fallback
    identifier; the registry loads it at registration time and returns it
    whenever a resource of this scheme cannot be found.

    Subclasses set `resource_type` to the type `load` produces. The registry
    rejects a loaded object of any other type.
    """

    resource_type: type = object

    def __init__(self, scheme: str, fallback: str | None = None):
        if not scheme:
            raise ValueError("Loader scheme must not be empty")
        self._scheme = scheme
        self._fallback = fallback

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def fallback(self) -> str | None:
        return self._fallback

    @abstractmethod
    def load(self, stream: BinaryIO) -> Any:
        """Read the whole stream and return the loaded resource (never None)."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourceLoader):
            return NotImplemented
        return self._scheme.casefold() == other._scheme.casefold()

    def __hash__(self) -> int:
        return hash(self._scheme.casefold())

    def __repr__(self) -> str:
        fallback = f", fallback={self._fallback!r}" if self._fallback else ""
        return f"{type(self).__name__}({self._scheme!r}{fallback})"
