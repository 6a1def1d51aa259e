"""Built-in loaders for common formats.

These cover the formats the CLI and settings-driven registries need out of
the box. Applications register their own loaders for anything else.
"""

from __future__ import annotations

import json
from typing import Any
from typing import BinaryIO

import yaml

from ..exceptions import ConfigurationError
from .base import ResourceLoader


class TextLoader(ResourceLoader):
    """Decodes the stream as text."""

    resource_type = str

    def __init__(self, scheme: str = "text", fallback: str | None = None, encoding: str = "utf-8"):
        super().__init__(scheme, fallback)
        self.encoding = encoding

    def load(self, stream: BinaryIO) -> str:
        return stream.read().decode(self.encoding)


class BytesLoader(ResourceLoader):
    """Returns the raw bytes of the stream."""

    resource_type = bytes

    def __init__(self, scheme: str = "bytes", fallback: str | None = None):
        super().__init__(scheme, fallback)

    def load(self, stream: BinaryIO) -> bytes:
        return stream.read()


class JsonLoader(ResourceLoader):
    """Parses the stream as a JSON document."""

    resource_type = object

    def __init__(self, scheme: str = "json", fallback: str | None = None):
        super().__init__(scheme, fallback)

    def load(self, stream: BinaryIO) -> Any:
        return json.load(stream)


class YamlLoader(ResourceLoader):
    """Parses the stream as a YAML document. An empty document loads as {}."""

    resource_type = object

    def __init__(self, scheme: str = "yaml", fallback: str | None = None):
        super().__init__(scheme, fallback)

    def load(self, stream: BinaryIO) -> Any:
        data = yaml.safe_load(stream)
        return {} if data is None else data


BUILTIN_LOADERS: dict[str, type[ResourceLoader]] = {
    "text": TextLoader,
    "bytes": BytesLoader,
    "json": JsonLoader,
    "yaml": YamlLoader,
}


def create_loader(
    kind: str,
    scheme: str | None = None,
    fallback: str | None = None,
    encoding: str | None = None,
) -> ResourceLoader:
    """Create a built-in loader by kind.

    Args:
        kind: One of "text", "bytes", "json", "yaml"
        scheme: Scheme to register under (default: same as kind)
        fallback: Optional fallback identifier
        encoding: Text encoding (text loaders only)

    Returns:
        ResourceLoader instance

    Raises:
        ConfigurationError: Unknown kind, or encoding given for a non-text loader
    """
    loader_class = BUILTIN_LOADERS.get(kind)
    if loader_class is None:
        raise ConfigurationError(
            f"Unknown loader type '{kind}'. Available: {', '.join(sorted(BUILTIN_LOADERS))}"
        )

    if loader_class is TextLoader:
        return TextLoader(scheme or kind, fallback, encoding or "utf-8")

    if encoding is not None:
        raise ConfigurationError(f"Loader type '{kind}' does not accept an encoding")
    return loader_class(scheme or kind, fallback)
