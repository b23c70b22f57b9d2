"""In-memory model of a parsed OpenGL registry."""

from typing import Optional

from .types import Command, Extension, Feature

# GL type name -> C type used in the generated header
PRIMITIVE_TYPE_ALIASES = {
    "GLboolean": "uint8_t",
    "GLchar": "char",
    "GLbyte": "int8_t",
    "GLubyte": "uint8_t",
    "GLshort": "int16_t",
    "GLushort": "uint16_t",
    "GLenum": "unsigned int",
    "GLuint": "unsigned int",
    "GLint": "int",
    "GLbitfield": "unsigned int",
    "GLsizei": "int",
    "GLintptr": "intptr_t",
    "GLsizeiptr": "intptr_t",
    "GLuint64": "uint64_t",
    "GLint64": "int64_t",
    "GLfloat": "float",
    "GLdouble": "double",
    "GLsync": "struct __GLsync*",
}


class Registry:
    """Everything parsed out of a registry document.

    Built once by ``RegistryParser`` and only read afterwards.
    """

    def __init__(self) -> None:
        self.type_aliases: dict[str, str] = dict(PRIMITIVE_TYPE_ALIASES)
        self.enum_values: dict[str, str] = {}  # "GL_DEPTH_BUFFER_BIT" -> "0x00000100"
        self.features: dict[str, Feature] = {}  # "GL_VERSION_1_0" -> Feature
        self.extensions: dict[str, Extension] = {}
        self.commands: dict[str, Command] = {}

    def has_type(self, type_name: str) -> bool:
        return type_name == "void" or type_name in self.type_aliases

    def get_command(self, name: str) -> Optional[Command]:
        return self.commands.get(name)

    def __repr__(self) -> str:
        return (
            f"Registry(enums={len(self.enum_values)}, commands={len(self.commands)}, "
            f"features={len(self.features)}, extensions={len(self.extensions)})"
        )
