"""Resource registry - resolution, loading and caching of resources.

The registry owns three things:
- loaders, one per scheme (case-insensitive)
- an ordered list of path resolvers (first stream wins)
- a cache from identifier to loaded resource (entries are never evicted)

Resolution order for get_resource():
1. Cached resource for the identifier
2. Fresh load: loader for the scheme, then the first resolver with a stream
3. Loader's fallback, which must already be cached (loaded at registration)
"""

from __future__ import annotations

import logging
import threading
from typing import Any
from typing import BinaryIO

from .exceptions import ConfigurationError
from .exceptions import DuplicateLoaderError
from .exceptions import LoaderNotFoundError
from .exceptions import MalformedIdentifierError
from .exceptions import NoFallbackError
from .exceptions import ResourceLoadError
from .exceptions import ResourceNotFoundError
from .exceptions import ResourceTypeMismatchError
from .identifiers import ResourceIdentifier
from .loaders.base import ResourceLoader
from .resolvers.base import PathResolver

logger = logging.getLogger(__name__)

_MISSING = object()


class ResourceRegistry:
    """Maps resource identifiers to loaded, cached objects.

    Mutations (registration, resolver changes, loads) are serialised by one
    re-entrant lock. Reading an already-cached resource does not take the
    lock. A cache miss re-checks under the lock, so concurrent first reads of
    one identifier load it once.

    Example:
        registry = ResourceRegistry()
        registry.add_path_resolver(DirectoryPathResolver("/res"))
        registry.register_loader(TextLoader())
        greeting = registry.get_resource("text://lang/en/hello.txt", str)
    """

    def __init__(self) -> None:
        self._loaders: dict[str, ResourceLoader] = {}
        self._resolvers: list[PathResolver] = []
        self._cache: dict[ResourceIdentifier, Any] = {}
        self._requested_installations: dict[str, ResourceIdentifier] = {}
        self._lock = threading.RLock()

    # ----- Loaders -----

    def get_loaders(self) -> tuple[ResourceLoader, ...]:
        """Return all registered loaders in registration order."""
        with self._lock:
            return tuple(self._loaders.values())

    def get_loader(self, scheme: str) -> ResourceLoader | None:
        """Return the loader for a scheme (case-insensitive), or None."""
        return self._loaders.get(scheme.casefold())

    def register_loader(self, loader: ResourceLoader, *, replace: bool = False) -> None:
        """Register a loader and eagerly load its fallback resource.

        Args:
            loader: Loader to register
            replace: Replace an existing loader for the same scheme instead of failing

        Raises:
            DuplicateLoaderError: A loader for the scheme exists and replace is False
            ConfigurationError: The loader's fallback could not be loaded. The
                registration is rolled back.
        """
        key = loader.scheme.casefold()
        with self._lock:
            previous = self._loaders.get(key)
            if previous is not None and not replace:
                raise DuplicateLoaderError(loader.scheme)

            self._loaders[key] = loader
            try:
                self._load_fallback(loader)
            except Exception:
                if previous is None:
                    del self._loaders[key]
                else:
                    self._loaders[key] = previous
                raise

        if previous is not None:
            logger.info(f"Replaced loader for scheme '{loader.scheme}': {previous!r} -> {loader!r}")
        else:
            logger.debug(f"Registered {loader!r}")

    def _load_fallback(self, loader: ResourceLoader) -> None:
        """Load a loader's fallback so it is cached before any request needs it."""
        fallback = loader.fallback
        if fallback is None:
            return

        try:
            self.load_resource(fallback)
        except ConfigurationError:
            raise
        except MalformedIdentifierError as e:
            raise ConfigurationError(
                f"Fallback {fallback!r} for scheme '{loader.scheme}' is not a valid identifier"
            ) from e
        except LoaderNotFoundError as e:
            raise ConfigurationError(
                f"Fallback {fallback} for scheme '{loader.scheme}' has no associated loader"
            ) from e
        except ResourceNotFoundError as e:
            raise ConfigurationError(f"Fallback {fallback} for scheme '{loader.scheme}' does not exist") from e
        except Exception as e:
            raise ConfigurationError(f"Error while loading fallback {fallback} for scheme '{loader.scheme}'") from e

    # ----- Path resolvers -----

    def get_path_resolvers(self) -> tuple[PathResolver, ...]:
        """Return the resolvers in the order they are consulted."""
        with self._lock:
            return tuple(self._resolvers)

    def add_path_resolver(self, resolver: PathResolver) -> None:
        """Append a resolver; earlier resolvers take precedence."""
        with self._lock:
            self._resolvers.append(resolver)
        logger.debug(f"Added path resolver {resolver!r}")

    def remove_path_resolver(self, resolver: PathResolver) -> bool:
        """Remove a resolver.

        Returns:
            True if the resolver was registered and has been removed
        """
        with self._lock:
            try:
                self._resolvers.remove(resolver)
            except ValueError:
                return False
        logger.debug(f"Removed path resolver {resolver!r}")
        return True

    # ----- Streams and loading -----

    def get_resource_stream(self, identifier: str | ResourceIdentifier) -> BinaryIO:
        """Return a stream from the first resolver that has the resource.

        The caller owns the stream and must close it.

        Raises:
            MalformedIdentifierError: identifier does not parse
            ResourceNotFoundError: No resolver produced a stream
        """
        identifier = ResourceIdentifier.coerce(identifier)
        for resolver in self.get_path_resolvers():
            stream = resolver.get_stream(identifier.host, identifier.path)
            if stream is not None:
                logger.debug(f"[resource:resolve] {identifier} -> {resolver!r}")
                return stream
        raise ResourceNotFoundError(identifier)

    def load_resource(self, identifier: str | ResourceIdentifier) -> Any:
        """Load a resource, bypassing and then overwriting the cache.

        Raises:
            MalformedIdentifierError: identifier does not parse
            LoaderNotFoundError: No loader for the scheme (checked before any I/O)
            ResourceNotFoundError: No resolver produced a stream
            ConfigurationError: The loader returned None
            ResourceTypeMismatchError: The result is not the loader's resource_type
            OSError: Reading or closing the stream failed
        """
        identifier = ResourceIdentifier.coerce(identifier)

        # Checked first so fallback handling can rely on a loader existing
        loader = self.get_loader(identifier.scheme)
        if loader is None:
            raise LoaderNotFoundError(identifier.scheme)

        with self._lock:
            stream = self.get_resource_stream(identifier)
            resource = self._read_stream(loader, stream, identifier)
            self._cache[identifier] = resource

        logger.debug(f"Loaded {identifier} with {loader!r}")
        return resource

    def _read_stream(self, loader: ResourceLoader, stream: BinaryIO, identifier: ResourceIdentifier) -> Any:
        """Run the loader over a stream and close the stream on every path."""
        try:
            resource = loader.load(stream)
        except BaseException as e:
            try:
                stream.close()
            except OSError as close_error:
                logger.warning(f"Failed to close stream for {identifier} after load error: {close_error}")
                e.add_note(f"Closing the stream for {identifier} also failed: {close_error!r}")
            raise
        stream.close()

        if resource is None:
            raise ConfigurationError(f"Loader for scheme '{loader.scheme}' returned None for {identifier}")
        if not isinstance(resource, loader.resource_type):
            raise ResourceTypeMismatchError(identifier, loader.resource_type, type(resource))
        return resource

    # ----- Cached access -----

    def get_resource(self, identifier: str | ResourceIdentifier, expected_type: type | None = None) -> Any:
        """Return a resource, loading and caching it on first use.

        When no resolver has the resource, the scheme loader's fallback
        (cached at registration time) is returned instead and cached under
        the requested identifier.

        Args:
            identifier: Identifier or identifier string
            expected_type: If given, the resource must be an instance of it

        Raises:
            MalformedIdentifierError: identifier does not parse
            LoaderNotFoundError: No loader for the scheme
            ResourceLoadError: I/O error while loading
            NoFallbackError: Resource missing and the loader has no fallback
            ConfigurationError: Fallback invalid or not loaded, or loader returned None
            ResourceTypeMismatchError: Resource is not an expected_type
        """
        identifier = ResourceIdentifier.coerce(identifier)

        resource = self._cache.get(identifier, _MISSING)
        if resource is _MISSING:
            with self._lock:
                resource = self._cache.get(identifier, _MISSING)
                if resource is _MISSING:
                    resource = self._load_or_fallback(identifier)

        return self._check_type(identifier, resource, expected_type)

    def _load_or_fallback(self, identifier: ResourceIdentifier) -> Any:
        try:
            return self.load_resource(identifier)
        except ResourceNotFoundError as e:
            return self._use_fallback(identifier, e)
        except OSError as e:
            raise ResourceLoadError(identifier) from e

    def _use_fallback(self, identifier: ResourceIdentifier, error: ResourceNotFoundError) -> Any:
        loader = self.get_loader(identifier.scheme)
        fallback = loader.fallback if loader is not None else None
        if fallback is None:
            raise NoFallbackError(identifier, identifier.scheme) from error

        logger.warning(f"No resource found at {identifier}, using fallback {fallback}")
        try:
            fallback_id = ResourceIdentifier.parse(fallback)
        except MalformedIdentifierError as e:
            config_error = ConfigurationError(f"Fallback name for scheme '{identifier.scheme}' is invalid: {fallback!r}")
            config_error.add_note(f"Original lookup failure: {error}")
            raise config_error from e

        resource = self._cache.get(fallback_id, _MISSING)
        if resource is _MISSING:
            raise ConfigurationError(
                f"Fallback {fallback_id} for scheme '{identifier.scheme}' has not been loaded"
            ) from error

        self._cache[identifier] = resource
        return resource

    @staticmethod
    def _check_type(identifier: ResourceIdentifier, resource: Any, expected_type: type | None) -> Any:
        if expected_type is not None and not isinstance(resource, expected_type):
            raise ResourceTypeMismatchError(identifier, expected_type, type(resource))
        return resource

    def get_resources(self, identifier: str | ResourceIdentifier, expected_type: type | None = None) -> list[Any]:
        """Return every resource directly under a directory-like identifier.

        The first resolver that reports the prefix as existing supplies the
        listing; each listed name is then fetched with get_resource().

        Raises:
            ResourceNotFoundError: No resolver has the prefix
            ContainerNotFoundError: The claiming resolver's container vanished
        """
        return [self.get_resource(child, expected_type) for child in self.list_identifiers(identifier)]

    def list_identifiers(self, identifier: str | ResourceIdentifier) -> list[ResourceIdentifier]:
        """Return identifiers of the entries directly under a directory-like identifier.

        Raises:
            ResourceNotFoundError: No resolver has the prefix
            ContainerNotFoundError: The claiming resolver's container vanished
        """
        identifier = ResourceIdentifier.coerce(identifier)

        resolver = self.find_path_resolver(identifier)
        if resolver is None:
            raise ResourceNotFoundError(identifier, f"Could not resolve path '{identifier}'")

        names = resolver.list_entries(identifier.host, identifier.path)
        return [identifier.child(name) for name in names]

    def find_path_resolver(self, identifier: str | ResourceIdentifier) -> PathResolver | None:
        """Return the first resolver reporting that the identifier exists, or None."""
        identifier = ResourceIdentifier.coerce(identifier)
        for resolver in self.get_path_resolvers():
            if resolver.exists_in_path(identifier.host, identifier.path):
                return resolver
        return None

    # ----- Introspection -----

    def is_loaded(self, identifier: str | ResourceIdentifier) -> bool:
        """Check whether a resource is cached."""
        return ResourceIdentifier.coerce(identifier) in self._cache

    def cached_identifiers(self) -> tuple[ResourceIdentifier, ...]:
        """Return the identifiers currently cached."""
        with self._lock:
            return tuple(self._cache)

    # ----- Requested installations -----

    def request_installation(self, name: str, identifier: str | ResourceIdentifier) -> None:
        """Record a named request for a resource (bookkeeping only)."""
        with self._lock:
            self._requested_installations[name] = ResourceIdentifier.coerce(identifier)

    @property
    def requested_installations(self) -> dict[str, ResourceIdentifier]:
        with self._lock:
            return dict(self._requested_installations)

    def __repr__(self) -> str:
        return (
            f"ResourceRegistry(loaders={len(self._loaders)}, "
            f"resolvers={len(self._resolvers)}, cached={len(self._cache)})"
        )
