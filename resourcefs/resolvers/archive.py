"""Archive backends: <root>/<host>.zip and <root>/<host>.jar.

Every operation opens the archive, answers, and closes it again. Streams are
read into memory before the archive is closed, so no archive handle outlives
a call.
"""

from __future__ import annotations

import io
import logging
import os
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from ..exceptions import ContainerNotFoundError
from .base import PathResolver

logger = logging.getLogger(__name__)

MANIFEST_NAME = "META-INF/MANIFEST.MF"


class ArchivePathResolver(PathResolver):
    """Resolves resources from zip-format archives named after the host.

    Entry names are the identifier path with its leading "/" removed.
    """

    extension = ".zip"

    def __init__(self, root: str | Path, extension: str | None = None):
        """Initialize with the directory holding the archives.

        Args:
            root: Directory containing <host><extension> files
            extension: Archive file extension (default: class extension)
        """
        self.root = Path(os.path.normpath(Path(root).expanduser().absolute()))
        if extension is not None:
            self.extension = extension if extension.startswith(".") else f".{extension}"

    def get_archive_path(self, host: str) -> Path:
        """Return the archive file backing a host."""
        return self.root / f"{host}{self.extension}"

    @contextmanager
    def open_archive(self, host: str) -> Iterator[zipfile.ZipFile | None]:
        """Open the host's archive for the duration of the block.

        Yields None when the archive file does not exist.
        """
        archive_path = self.get_archive_path(host)
        if not archive_path.is_file():
            yield None
            return

        with zipfile.ZipFile(archive_path) as archive:
            yield archive

    def exists_in_path(self, host: str, path: str) -> bool:
        name = path.lstrip("/")
        try:
            with self.open_archive(host) as archive:
                if archive is None:
                    return False
                return self._has_entry(archive, name)
        except (zipfile.BadZipFile, OSError) as e:
            logger.error(f"Could not read archive {self.get_archive_path(host)}: {e}")
            return False

    def get_stream(self, host: str, path: str) -> BinaryIO | None:
        name = path.lstrip("/")
        try:
            with self.open_archive(host) as archive:
                if archive is None:
                    return None
                try:
                    info = archive.getinfo(name)
                except KeyError:
                    return None
                if info.is_dir():
                    return None
                return io.BytesIO(archive.read(info))
        except (zipfile.BadZipFile, OSError) as e:
            logger.error(f"Could not read {name} from {self.get_archive_path(host)}: {e}")
            return None

    def list_entries(self, host: str, path: str) -> list[str]:
        prefix = path.lstrip("/")
        if prefix and not prefix.endswith("/"):
            prefix += "/"

        try:
            with self.open_archive(host) as archive:
                if archive is None:
                    raise ContainerNotFoundError(self.get_archive_path(host))

                names = []
                for info in archive.infolist():
                    # Directories cannot be loaded, so only file entries are listed
                    if info.is_dir() or not info.filename.startswith(prefix):
                        continue
                    name = info.filename[len(prefix) :]
                    if name and "/" not in name:
                        names.append(name)
                return names
        except (zipfile.BadZipFile, OSError) as e:
            logger.error(f"Could not list {prefix!r} in {self.get_archive_path(host)}: {e}")
            return []

    @staticmethod
    def _has_entry(archive: zipfile.ZipFile, name: str) -> bool:
        """Check for an exact entry, or a directory implied by entries beneath it."""
        if not name:
            return True
        try:
            archive.getinfo(name)
            return True
        except KeyError:
            pass
        directory = name if name.endswith("/") else f"{name}/"
        return any(entry.startswith(directory) for entry in archive.namelist())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.root}, '*{self.extension}')"


class ZipPathResolver(ArchivePathResolver):
    """Resolves resources from <root>/<host>.zip."""

    extension = ".zip"


class JarPathResolver(ArchivePathResolver):
    """Resolves resources from <root>/<host>.jar."""

    extension = ".jar"

    def get_manifest(self, host: str) -> dict[str, str]:
        """Read the main attributes of the jar's META-INF/MANIFEST.MF.

        Args:
            host: Jar name without extension

        Returns:
            Attribute name -> value for the main section ({} if there is no manifest)

        Raises:
            ContainerNotFoundError: If the jar does not exist
        """
        with self.open_archive(host) as archive:
            if archive is None:
                raise ContainerNotFoundError(self.get_archive_path(host))
            try:
                raw = archive.read(MANIFEST_NAME)
            except KeyError:
                return {}

        return parse_manifest(raw.decode("utf-8"))


def parse_manifest(text: str) -> dict[str, str]:
    """Parse the main section of a jar manifest.

    Lines starting with a single space continue the previous value. The main
    section ends at the first blank line.
    """
    attributes: dict[str, str] = {}
    last_key: str | None = None

    for line in text.splitlines():
        if not line:
            break
        if line.startswith(" ") and last_key is not None:
            attributes[last_key] += line[1:]
            continue
        key, sep, value = line.partition(":")
        if not sep:
            logger.debug(f"Skipping malformed manifest line: {line!r}")
            continue
        last_key = key.strip()
        attributes[last_key] = value.strip()

    return attributes
