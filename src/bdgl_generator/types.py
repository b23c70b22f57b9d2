"""Data types for OpenGL registry parsing."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class TypeRef:
    """A parsed type mention, e.g. ``const GLuint *``."""

    base_name: str  # "GLuint"
    is_const: bool = False
    is_pointer: bool = False
    is_pointer_to_pointer: bool = False

    def __post_init__(self) -> None:
        if self.is_pointer_to_pointer and not self.is_pointer:
            raise ValueError(f"{self.base_name}: pointer-to-pointer must be a pointer")

    @property
    def is_void(self) -> bool:
        """True for a plain ``void`` (no pointer), i.e. nothing is returned."""
        return self.base_name == "void" and not self.is_pointer

    def to_c(self) -> str:
        """Serialize back to C declaration syntax."""
        text = f"const {self.base_name}" if self.is_const else self.base_name
        if self.is_pointer:
            text += "*"
        if self.is_pointer_to_pointer:
            text += "*"
        return text

    def __str__(self) -> str:
        return self.to_c()


@dataclass(frozen=True)
class Prototype:
    """Return type and name of a command."""

    return_type: TypeRef
    name: str  # "glClear"

    def __str__(self) -> str:
        return f"{self.return_type} {self.name}"


@dataclass(frozen=True)
class Parameter:
    """Represents a function parameter."""

    type: TypeRef
    name: str  # "target"
    length_ref: Optional[str] = None  # len="count", "COMPSIZE(type,stride)"
    group: Optional[str] = None  # "AccumOp"
    kind: Optional[str] = None  # "Coord"


@dataclass(frozen=True)
class Command:
    """Represents an OpenGL function/command."""

    prototype: Prototype
    parameters: tuple[Parameter, ...] = ()

    @property
    def name(self) -> str:
        return self.prototype.name


@dataclass
class ApiSlice:
    """A bag of type/enum/command names (references, not definitions)."""

    profile: Optional[str] = None  # None applies to every profile
    types: set[str] = field(default_factory=set)
    enums: set[str] = field(default_factory=set)
    commands: set[str] = field(default_factory=set)

    def applies_to(self, profile: Optional[str]) -> bool:
        return self.profile is None or self.profile == profile

    def add_all(self, other: "ApiSlice") -> None:
        # Types are never overwritten once present; enums and commands are plain unions
        for type_name in other.types:
            if type_name not in self.types:
                self.types.add(type_name)
        self.enums |= other.enums
        self.commands |= other.commands

    def remove_all(self, other: "ApiSlice") -> None:
        self.types -= other.types
        self.enums -= other.enums
        self.commands -= other.commands

    def copy(self) -> "ApiSlice":
        return ApiSlice(
            profile=self.profile,
            types=set(self.types),
            enums=set(self.enums),
            commands=set(self.commands),
        )

    def is_empty(self) -> bool:
        return not (self.types or self.enums or self.commands)


@dataclass(frozen=True)
class Feature:
    """A numbered API version: ``<feature api="gl" name="GL_VERSION_3_3" number="3.3">``."""

    api: str  # "gl", "gles2"
    name: str  # "GL_VERSION_3_3"
    number: str  # "3.3"
    number_major: int
    number_minor: int
    requires: tuple[ApiSlice, ...] = ()
    removes: tuple[ApiSlice, ...] = ()

    @property
    def version_key(self) -> tuple[int, int]:
        return (self.number_major, self.number_minor)


@dataclass(frozen=True)
class Extension:
    """``<extension name="GL_QCOM_tiled_rendering" supported="gles1|gles2">``."""

    name: str
    supported: str  # pipe-delimited api names
    requires: tuple[ApiSlice, ...] = ()

    @property
    def supported_apis(self) -> list[str]:
        return self.supported.split("|") if self.supported else []

    def supports(self, api_name: str) -> bool:
        return api_name in self.supported_apis
