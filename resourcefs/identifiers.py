"""Resource identifiers: parsed scheme://host/path values.

The scheme selects a loader; host and path are handed to path resolvers
without interpretation. Identifiers are immutable and hashable so they can key
the registry cache.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote
from urllib.parse import unquote
from urllib.parse import urlsplit

from .exceptions import MalformedIdentifierError

_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


@dataclass(frozen=True)
class ResourceIdentifier:
    """A resource location of the form scheme://host/path.

    Attributes:
        scheme: Lower-cased scheme, used to pick a loader
        host: Top-level container name (directory under a root, or archive stem)
        path: Decoded path inside the host, with its leading "/" (may be empty)

    The string form percent-encodes the path, so str() output parses back to
    an equal identifier.
    """

    scheme: str
    host: str
    path: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "scheme", self.scheme.lower())

    @classmethod
    def parse(cls, value: str) -> ResourceIdentifier:
        """Parse a URI-like string into an identifier.

        Args:
            value: String such as "text://lang/en/hello.txt"

        Returns:
            ResourceIdentifier

        Raises:
            MalformedIdentifierError: If the string is not a valid identifier
        """
        if not isinstance(value, str):
            raise MalformedIdentifierError(value, "identifier must be a string")
        if not value:
            raise MalformedIdentifierError(value, "identifier is empty")
        if any(ch.isspace() for ch in value):
            raise MalformedIdentifierError(value, "identifier contains whitespace")
        if "?" in value or "#" in value:
            raise MalformedIdentifierError(value, "query strings and fragments are not supported")

        try:
            parts = urlsplit(value)
        except ValueError as e:
            raise MalformedIdentifierError(value, str(e)) from e

        if not parts.scheme or not _SCHEME_PATTERN.match(parts.scheme):
            raise MalformedIdentifierError(value, "missing or invalid scheme")
        if not value[len(parts.scheme) + 1 :].startswith("//"):
            raise MalformedIdentifierError(value, "expected '//' after the scheme")
        if not parts.netloc:
            raise MalformedIdentifierError(value, "missing host")

        return cls(scheme=parts.scheme, host=parts.netloc, path=unquote(parts.path))

    @classmethod
    def coerce(cls, value: str | ResourceIdentifier) -> ResourceIdentifier:
        """Return value unchanged if it is an identifier, otherwise parse it."""
        if isinstance(value, ResourceIdentifier):
            return value
        return cls.parse(value)

    def child(self, name: str) -> ResourceIdentifier:
        """Identifier of an entry named `name` inside this directory-like identifier."""
        base = self.path if self.path.endswith("/") else f"{self.path}/"
        return ResourceIdentifier(self.scheme, self.host, f"{base}{name}")

    @property
    def is_directory(self) -> bool:
        """True when the path names a directory (empty or ending in "/")."""
        return not self.path or self.path.endswith("/")

    def __str__(self) -> str:
        return f"{self.scheme}://{self.host}{quote(self.path, safe='/')}"
