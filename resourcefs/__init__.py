"""resourcefs - virtual resource loading.

Maps identifiers like text://lang/en/hello.txt to loaded, cached objects.
Raw bytes come from an ordered chain of path resolvers (directories, zip and
jar archives); a loader registered for the identifier's scheme turns them
into an object.
"""

from .exceptions import ConfigurationError
from .exceptions import ContainerNotFoundError
from .exceptions import DuplicateLoaderError
from .exceptions import LoaderNotFoundError
from .exceptions import MalformedIdentifierError
from .exceptions import NoFallbackError
from .exceptions import ResourceError
from .exceptions import ResourceLoadError
from .exceptions import ResourceNotFoundError
from .exceptions import ResourceTypeMismatchError
from .identifiers import ResourceIdentifier
from .loaders import BytesLoader
from .loaders import JsonLoader
from .loaders import ResourceLoader
from .loaders import TextLoader
from .loaders import YamlLoader
from .registry import ResourceRegistry
from .resolvers import DirectoryPathResolver
from .resolvers import JarPathResolver
from .resolvers import PathResolver
from .resolvers import ZipPathResolver

__all__ = [
    "BytesLoader",
    "ConfigurationError",
    "ContainerNotFoundError",
    "DirectoryPathResolver",
    "DuplicateLoaderError",
    "JarPathResolver",
    "JsonLoader",
    "LoaderNotFoundError",
    "MalformedIdentifierError",
    "NoFallbackError",
    "PathResolver",
    "ResourceError",
    "ResourceIdentifier",
    "ResourceLoadError",
    "ResourceLoader",
    "ResourceNotFoundError",
    "ResourceRegistry",
    "ResourceTypeMismatchError",
    "TextLoader",
    "YamlLoader",
    "ZipPathResolver",
]
