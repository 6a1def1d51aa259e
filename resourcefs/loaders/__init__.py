"""Resource loaders - scheme-specific decoders from bytes to objects."""

from .base import ResourceLoader
from .builtin import BUILTIN_LOADERS
from .builtin import BytesLoader
from .builtin import JsonLoader
from .builtin import TextLoader
from .builtin import YamlLoader
from .builtin import create_loader

__all__ = [
    "BUILTIN_LOADERS",
    "BytesLoader",
    "JsonLoader",
    "ResourceLoader",
    "TextLoader",
    "YamlLoader",
    "create_loader",
]
