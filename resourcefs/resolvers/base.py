"""Path resolver contract.

A path resolver answers three questions for a (host, path) pair against one
storage backend: does something exist there, give me a byte stream for it,
and what leaf entries live under it. The registry asks its resolvers in order
and the first one that answers wins.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import BinaryIO

from ..identifiers import ResourceIdentifier


class PathResolver(ABC):
    """Base class for storage backends consulted by the ResourceRegistry.

    Subclasses implement the host/path methods. The identifier-valued
    conveniences forward an identifier's host and path.
    """

    @abstractmethod
    def exists_in_path(self, host: str, path: str) -> bool:
        """Return True if a resource or directory exists at host/path.

        Must return False (not raise) when the backing container is missing.
        """

    @abstractmethod
    def get_stream(self, host: str, path: str) -> BinaryIO | None:
        """Return an open binary stream positioned at the start, or None if absent.

        The caller owns the returned stream and must close it.
        """

    @abstractmethod
    def list_entries(self, host: str, path: str) -> list[str]:
        """Return names of the direct, non-directory entries under path.

        Raises:
            ContainerNotFoundError: If the backing container does not exist
        """

    def exists(self, identifier: str | ResourceIdentifier) -> bool:
        identifier = ResourceIdentifier.coerce(identifier)
        return self.exists_in_path(identifier.host, identifier.path)

    def open(self, identifier: str | ResourceIdentifier) -> BinaryIO | None:
        identifier = ResourceIdentifier.coerce(identifier)
        return self.get_stream(identifier.host, identifier.path)

    def entries(self, identifier: str | ResourceIdentifier) -> list[str]:
        identifier = ResourceIdentifier.coerce(identifier)
        return self.list_entries(identifier.host, identifier.path)
