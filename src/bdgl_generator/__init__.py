"""bdgl generator - single-header OpenGL loader generator."""

__version__ = "0.1.0"

from .errors import ConsistencyError, RegistryError, StructuralError
from .linker import (
    Api,
    ApiExtension,
    ApiVersion,
    link,
    link_all_versions,
    link_api,
    link_extensions,
    resolve,
)
from .parser import RegistryParser, parse_registry_file, parse_registry_string
from .registry import Registry
from .types import (
    ApiSlice,
    Command,
    Extension,
    Feature,
    Parameter,
    Prototype,
    TypeRef,
)

__all__ = [
    "Api",
    "ApiExtension",
    "ApiSlice",
    "ApiVersion",
    "Command",
    "ConsistencyError",
    "Extension",
    "Feature",
    "Parameter",
    "Prototype",
    "Registry",
    "RegistryError",
    "RegistryParser",
    "StructuralError",
    "TypeRef",
    "link",
    "link_all_versions",
    "link_api",
    "link_extensions",
    "parse_registry_file",
    "parse_registry_string",
    "resolve",
]
