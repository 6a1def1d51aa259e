"""Path resolvers - storage backends for the resource registry.

- DirectoryPathResolver: <root>/<host>/<path>
- ZipPathResolver: entries of <root>/<host>.zip
- JarPathResolver: entries of <root>/<host>.jar
"""

from .archive import ArchivePathResolver
from .archive import JarPathResolver
from .archive import ZipPathResolver
from .base import PathResolver
from .directory import DirectoryPathResolver

__all__ = [
    "ArchivePathResolver",
    "DirectoryPathResolver",
    "JarPathResolver",
    "PathResolver",
    "ZipPathResolver",
]
