"""Entity parser for the OpenGL registry (gl.xml).

Every ``parse_*`` method expects the stream cursor on the start tag of the
element it parses and returns with the cursor on that element's end tag.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .errors import StructuralError
from .registry import Registry
from .tokens import Token, TokenStream
from .types import (
    ApiSlice,
    Command,
    Extension,
    Feature,
    Parameter,
    Prototype,
    TypeRef,
)

_VERSION_NUMBER_RE = re.compile(r"[0-9]\.[0-9]")


class ElementKind(Enum):
    """Element names the parser recognizes. Anything else is UNKNOWN and skipped."""

    REGISTRY = "registry"
    TYPES = "types"
    ENUMS = "enums"
    ENUM = "enum"
    COMMANDS = "commands"
    COMMAND = "command"
    PROTO = "proto"
    PARAM = "param"
    PTYPE = "ptype"
    NAME = "name"
    FEATURE = "feature"
    REQUIRE = "require"
    REMOVE = "remove"
    TYPE = "type"
    EXTENSIONS = "extensions"
    EXTENSION = "extension"
    UNKNOWN = "?"

    @classmethod
    def of(cls, token: Token) -> "ElementKind":
        try:
            return cls(token.name)
        except ValueError:
            return cls.UNKNOWN


def parse_version_number(number: Optional[str]) -> tuple[int, int]:
    """Split a ``D.D`` feature number into (major, minor).

    >>> parse_version_number("4.6")
    (4, 6)
    """
    if number is None or not _VERSION_NUMBER_RE.fullmatch(number):
        raise StructuralError(f"invalid number format: {number!r}", element="feature")
    return int(number[0]), int(number[2])


def parse_type_text(text: str) -> TypeRef:
    """Decompose an accumulated type string into a TypeRef.

    The registry always writes ``const`` before the base name and the
    pointer stars after it, so the prefix is stripped first.
    """
    is_const = False
    is_pointer = False
    is_pointer_to_pointer = False

    text = text.lstrip()
    if text.startswith("const "):
        is_const = True
        text = text[len("const ") :]

    text = text.rstrip()
    if text.endswith("*"):
        is_pointer = True
        text = text[:-1]
    if text.endswith("*"):
        is_pointer_to_pointer = True
        text = text[:-1]

    base_name = text.strip()
    if not base_name:
        raise StructuralError("empty type name")

    return TypeRef(
        base_name=base_name,
        is_const=is_const,
        is_pointer=is_pointer,
        is_pointer_to_pointer=is_pointer_to_pointer,
    )


class RegistryParser:
    """Builds a ``Registry`` from a token stream."""

    def __init__(self, stream: TokenStream) -> None:
        self.stream = stream

    def _advance(self, inside: str) -> Token:
        token = self.stream.advance()
        if token is None:
            raise StructuralError(
                f"missing end '{inside}' tag", self.stream.position, element=inside
            )
        return token

    def _expect_name(self, inside: str) -> str:
        token = self.stream.current
        if not token.is_start("name"):
            found = token.name if not token.is_text else "text"
            raise StructuralError(
                f"expected 'name' in '{inside}', found '{found}'",
                token.offset,
                element=inside,
            )
        return self.stream.element_text()

    def _finish(self, name: str) -> None:
        """Skip whatever remains of the element ``name``."""
        for token in self.stream.children(name):
            if token.is_start():
                self.stream.skip_element()

    def parse_type(self, inside: str) -> TypeRef:
        # Forms:
        #   void <name>glAccum</name>
        #   <ptype>GLenum</ptype> <name>op</name>
        #   const <ptype>GLuint</ptype> *<name>programs</name>
        #   const void *<name>pointer</name>
        parts = []
        token = self.stream.current

        if token.is_text:
            parts.append(token.text)
            token = self._advance(inside)

        if token.is_start("ptype"):
            parts.append(self.stream.element_text())
            token = self._advance(inside)
            # trailing '*' / '**'
            while token.is_text:
                parts.append(token.text)
                token = self._advance(inside)

        try:
            return parse_type_text("".join(parts))
        except StructuralError as e:
            raise StructuralError(e.message, token.offset, element=inside) from e

    def parse_prototype(self) -> Prototype:
        self._advance("proto")
        return_type = self.parse_type("proto")
        name = self._expect_name("proto")
        self._finish("proto")
        return Prototype(return_type=return_type, name=name)

    def parse_parameter(self) -> Parameter:
        start = self.stream.current
        self._advance("param")
        param_type = self.parse_type("param")
        name = self._expect_name("param")
        self._finish("param")
        return Parameter(
            type=param_type,
            name=name,
            length_ref=start.get("len"),
            group=start.get("group"),
            kind=start.get("kind"),
        )

    def parse_command(self) -> Command:
        # <command>
        #    <proto>void <name>glAccum</name></proto>
        #    <param group="AccumOp"><ptype>GLenum</ptype> <name>op</name></param>
        #    <glx type="render" opcode="137"/>
        # </command>
        start = self.stream.current
        prototype = None
        parameters = []

        for token in self.stream.children("command"):
            if not token.is_start():
                continue
            kind = ElementKind.of(token)
            if kind is ElementKind.PROTO:
                prototype = self.parse_prototype()
            elif kind is ElementKind.PARAM:
                parameters.append(self.parse_parameter())
            else:
                self.stream.skip_element()

        if prototype is None:
            raise StructuralError("command without 'proto'", start.offset, "command")
        return Command(prototype=prototype, parameters=tuple(parameters))

    def parse_commands(self) -> dict[str, Command]:
        commands: dict[str, Command] = {}
        for token in self.stream.children("commands"):
            if not token.is_start():
                continue
            if ElementKind.of(token) is ElementKind.COMMAND:
                command = self.parse_command()
                commands[command.name] = command
            else:
                self.stream.skip_element()
        return commands

    def parse_enums(self) -> dict[str, str]:
        # <enums namespace="GL" start="0x96F0" end="0x96FF" vendor="ARM">
        #     <enum value="0x96F0" name="GL_SHADER_CORE_COUNT_ARM"/>
        #     <unused start="0x96F7" end="0x96FF" vendor="ARM"/>
        enums: dict[str, str] = {}
        for token in self.stream.children("enums"):
            if not token.is_start():
                continue
            if ElementKind.of(token) is ElementKind.ENUM:
                name = self._required(token, "name")
                enums[name] = self._required(token, "value")
            self.stream.skip_element()
        return enums

    def _required(self, token: Token, attribute: str) -> str:
        value = token.get(attribute)
        if value is None:
            raise StructuralError(
                f"missing '{attribute}' attribute", token.offset, element=token.name
            )
        return value

    def parse_slice(self, closing: str) -> ApiSlice:
        """Parse a <require> or <remove> block."""
        block = ApiSlice(profile=self.stream.current.get("profile"))

        for token in self.stream.children(closing):
            if not token.is_start():
                continue
            kind = ElementKind.of(token)
            if kind is ElementKind.ENUM:
                block.enums.add(self._required(token, "name"))
            elif kind is ElementKind.TYPE:
                block.types.add(self._required(token, "name"))
            elif kind is ElementKind.COMMAND:
                block.commands.add(self._required(token, "name"))
            self.stream.skip_element()
        return block

    def parse_feature(self) -> Feature:
        # <feature api="gl" name="GL_VERSION_1_0" number="1.0">
        start = self.stream.current
        number = start.get("number")
        try:
            major, minor = parse_version_number(number)
        except StructuralError as e:
            raise StructuralError(e.message, start.offset, element="feature") from e

        requires = []
        removes = []
        for token in self.stream.children("feature"):
            if not token.is_start():
                continue
            kind = ElementKind.of(token)
            if kind is ElementKind.REQUIRE:
                requires.append(self.parse_slice("require"))
            elif kind is ElementKind.REMOVE:
                removes.append(self.parse_slice("remove"))
            else:
                self.stream.skip_element()

        return Feature(
            api=self._required(start, "api"),
            name=self._required(start, "name"),
            number=number,
            number_major=major,
            number_minor=minor,
            requires=tuple(requires),
            removes=tuple(removes),
        )

    def parse_extension(self) -> Extension:
        # <extension name="GL_QCOM_tiled_rendering" supported="gles1|gles2">
        start = self.stream.current
        requires = []
        for token in self.stream.children("extension"):
            if not token.is_start():
                continue
            if ElementKind.of(token) is ElementKind.REQUIRE:
                requires.append(self.parse_slice("require"))
            else:
                self.stream.skip_element()

        return Extension(
            name=self._required(start, "name"),
            supported=start.get("supported") or "",
            requires=tuple(requires),
        )

    def parse_extensions(self) -> dict[str, Extension]:
        extensions: dict[str, Extension] = {}
        for token in self.stream.children("extensions"):
            if not token.is_start():
                continue
            if ElementKind.of(token) is ElementKind.EXTENSION:
                extension = self.parse_extension()
                extensions[extension.name] = extension
            else:
                self.stream.skip_element()
        return extensions

    def parse_registry(self) -> Registry:
        registry = Registry()

        for token in self.stream.children("registry"):
            if not token.is_start():
                continue
            kind = ElementKind.of(token)
            if kind is ElementKind.ENUMS:
                registry.enum_values.update(self.parse_enums())
            elif kind is ElementKind.COMMANDS:
                registry.commands.update(self.parse_commands())
            elif kind is ElementKind.FEATURE:
                feature = self.parse_feature()
                registry.features[feature.name] = feature
            elif kind is ElementKind.EXTENSIONS:
                registry.extensions.update(self.parse_extensions())
            elif kind is ElementKind.EXTENSION:
                extension = self.parse_extension()
                registry.extensions[extension.name] = extension
            else:
                # <types>, <groups>, <kinds>, <comment>, ...
                self.stream.skip_element()

        return registry

    def parse(self) -> Registry:
        """Find the <registry> element and parse it."""
        while True:
            token = self.stream.advance()
            if token is None:
                raise StructuralError("no 'registry' tag found", self.stream.position)
            if token.is_start("registry"):
                return self.parse_registry()


def parse_registry_string(xml_text: str) -> Registry:
    return RegistryParser(TokenStream.from_string(xml_text)).parse()


def parse_registry_file(xml_path: Union[str, Path]) -> Registry:
    """Parse a gl.xml file into a Registry."""
    return RegistryParser(TokenStream.from_file(xml_path)).parse()
