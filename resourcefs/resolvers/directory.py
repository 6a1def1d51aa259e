"""Plain directory backend: <root>/<host>/<path>."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO

from ..exceptions import ContainerNotFoundError
from .base import PathResolver

logger = logging.getLogger(__name__)


class DirectoryPathResolver(PathResolver):
    """Resolves resources from a directory tree.

    The host selects a subdirectory of the root and the path is resolved
    relative to it. Paths that would escape the host directory are treated as
    absent.
    """

    def __init__(self, root: str | Path):
        """Initialize with the root directory.

        Args:
            root: Directory containing one subdirectory per host. A "file://"
                prefix is accepted and stripped.
        """
        if isinstance(root, str) and root.startswith("file://"):
            root = root[7:]
        self.root = Path(os.path.normpath(Path(root).expanduser().absolute()))

    def get_host_dir(self, host: str) -> Path:
        """Return the directory backing a host."""
        return self.root / host

    def get_file(self, host: str, path: str) -> Path | None:
        """Map host/path to a filesystem path, or None if it escapes the host directory."""
        host_dir = Path(os.path.normpath(self.get_host_dir(host)))
        candidate = Path(os.path.normpath(host_dir / path.lstrip("/")))

        if not host_dir.is_relative_to(self.root) or host_dir == self.root:
            logger.warning(f"Path traversal attempt blocked: host={host!r}")
            return None
        if not candidate.is_relative_to(host_dir):
            logger.warning(f"Path traversal attempt blocked: {host}{path}")
            return None

        return candidate

    def exists_in_path(self, host: str, path: str) -> bool:
        file = self.get_file(host, path)
        return file is not None and file.exists()

    def get_stream(self, host: str, path: str) -> BinaryIO | None:
        file = self.get_file(host, path)
        if file is None or not file.is_file():
            return None

        try:
            return file.open("rb")
        except OSError as e:
            logger.error(f"Could not open {file}: {e}")
            return None

    def list_entries(self, host: str, path: str) -> list[str]:
        host_dir = self.get_host_dir(host)
        if not host_dir.is_dir():
            raise ContainerNotFoundError(host_dir)

        directory = self.get_file(host, path)
        if directory is None or not directory.is_dir():
            return []

        try:
            # Directories cannot be loaded, so only regular files are listed
            return sorted(entry.name for entry in directory.iterdir() if entry.is_file())
        except OSError as e:
            logger.error(f"Could not list {directory}: {e}")
            return []

    def __repr__(self) -> str:
        return f"DirectoryPathResolver({self.root})"
