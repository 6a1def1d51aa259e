"""Registry construction helpers.

Centralizes how settings entries become resolvers and loaders, so the CLI
and applications build registries the same way.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Literal

from .loaders import create_loader
from .registry import ResourceRegistry
from .resolvers import DirectoryPathResolver
from .resolvers import JarPathResolver
from .resolvers import PathResolver
from .resolvers import ZipPathResolver
from .settings import LoaderSettings
from .settings import ResolverSettings
from .settings import ResourceSettings

logger = logging.getLogger(__name__)

ResolverType = Literal["directory", "zip", "jar"]

_RESOLVER_TYPES: dict[str, type[PathResolver]] = {
    "directory": DirectoryPathResolver,
    "zip": ZipPathResolver,
    "jar": JarPathResolver,
}


def create_path_resolver(resolver_type: ResolverType, root: str | Path) -> PathResolver:
    """Create a path resolver for a backend type.

    Args:
        resolver_type: "directory", "zip" or "jar"
        root: Root directory of the backend

    Returns:
        PathResolver instance

    Raises:
        ValueError: Unknown resolver type
    """
    resolver_class = _RESOLVER_TYPES.get(resolver_type)
    if resolver_class is None:
        raise ValueError(f"Invalid resolver type '{resolver_type}'. Available: {', '.join(_RESOLVER_TYPES)}")
    return resolver_class(root)


def create_registry(
    settings: ResourceSettings | None = None,
    extra_resolvers: Iterable[tuple[ResolverType, str | Path]] = (),
    *,
    use_settings: bool = True,
) -> ResourceRegistry:
    """Build a registry from settings plus explicitly given resolvers.

    Resolvers are added before loaders, so loader fallbacks can be resolved
    during registration. Settings resolvers come first, then extra_resolvers
    in the order given. If no loaders are configured, the built-in text,
    bytes, json and yaml loaders are registered.

    Args:
        settings: Settings to read (default: standard scope paths)
        extra_resolvers: (type, root) pairs appended after configured resolvers
        use_settings: Ignore settings files entirely when False

    Returns:
        Populated ResourceRegistry

    Raises:
        ConfigurationError: Invalid settings or a broken loader fallback
    """
    registry = ResourceRegistry()

    resolver_entries: list[ResolverSettings] = []
    loader_entries: list[LoaderSettings] = []
    if use_settings:
        settings = settings or ResourceSettings()
        resolver_entries = settings.get_resolvers()
        loader_entries = settings.get_loaders()

    for entry in resolver_entries:
        registry.add_path_resolver(create_path_resolver(entry.type, entry.root))
    for resolver_type, root in extra_resolvers:
        registry.add_path_resolver(create_path_resolver(resolver_type, root))

    if not loader_entries:
        loader_entries = [LoaderSettings(type=kind) for kind in ("text", "bytes", "json", "yaml")]
    for entry in loader_entries:
        registry.register_loader(create_loader(entry.type, entry.scheme, entry.fallback, entry.encoding))

    logger.debug(f"Created {registry!r}")
    return registry
