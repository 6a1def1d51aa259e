"""Error taxonomy for resource resolution and loading.

Every error raised by the registry or a resolver derives from ResourceError and
carries the identifier or scheme needed to diagnose it.
"""

from __future__ import annotations

from typing import Any


class ResourceError(Exception):
    """Base class for all resourcefs errors."""


class MalformedIdentifierError(ResourceError, ValueError):
    """Raised when a string cannot be parsed as scheme://host/path."""

    def __init__(self, value: Any, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid resource identifier {value!r}: {reason}")


class LoaderNotFoundError(ResourceError):
    """Raised when no loader is registered for a scheme."""

    def __init__(self, scheme: str):
        self.scheme = scheme
        super().__init__(f"No loader registered for scheme '{scheme}'")


class ResourceNotFoundError(ResourceError):
    """Raised when no path resolver can produce a stream for an identifier."""

    def __init__(self, identifier: Any, message: str | None = None):
        self.identifier = identifier
        super().__init__(message or f"No resource found at {identifier}")


class ContainerNotFoundError(ResourceError):
    """Raised when a resolver's backing container (archive or host directory) is missing."""

    def __init__(self, container: Any):
        self.container = container
        super().__init__(f"Resource container does not exist: {container}")


class ResourceLoadError(ResourceError):
    """Raised when reading a resource fails with an I/O error."""

    def __init__(self, identifier: Any, message: str | None = None):
        self.identifier = identifier
        super().__init__(message or f"An I/O error occurred while loading {identifier}")


class ConfigurationError(ResourceError):
    """Raised for setup defects: broken fallbacks, loaders returning None, bad settings."""


class NoFallbackError(ResourceNotFoundError, ConfigurationError):
    """Raised when a resource is missing and its scheme's loader declares no fallback."""

    def __init__(self, identifier: Any, scheme: str):
        self.scheme = scheme
        super().__init__(
            identifier,
            f"No resource found at {identifier} and scheme '{scheme}' has no fallback resource",
        )


class DuplicateLoaderError(ConfigurationError):
    """Raised when a second loader is registered for an existing scheme."""

    def __init__(self, scheme: str):
        self.scheme = scheme
        super().__init__(
            f"A loader for scheme '{scheme}' is already registered. Pass replace=True to override it."
        )


class ResourceTypeMismatchError(ResourceError, TypeError):
    """Raised when a resource is not of the type the caller expected."""

    def __init__(self, identifier: Any, expected: type, actual: type):
        self.identifier = identifier
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Resource {identifier} is a {actual.__name__}, expected {expected.__name__}. "
            f"Scheme '{getattr(identifier, 'scheme', '?')}' does not produce the requested type."
        )
