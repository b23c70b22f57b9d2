from collections.abc import Callable
from pathlib import Path

import pytest

from bdgl_generator import Registry, parse_registry_string
from bdgl_generator.parser import RegistryParser
from bdgl_generator.tokens import TokenStream

MINIMAL_GL_XML = """<?xml version="1.0" encoding="UTF-8"?>
<registry>
    <comment>Test registry</comment>
    <types>
        <type>typedef unsigned int <name>GLenum</name>;</type>
        <type>typedef unsigned int <name>GLbitfield</name>;</type>
    </types>
    <enums namespace="GL" group="ClearBufferMask">
        <enum value="0x00004000" name="GL_COLOR_BUFFER_BIT"/>
        <enum value="0x00000100" name="GL_DEPTH_BUFFER_BIT"/>
        <enum value="0x1F03" name="GL_EXTENSIONS"/>
        <enum value="0x0B00" name="GL_CURRENT_COLOR"/>
        <enum value="0x8B8D" name="GL_CURRENT_PROGRAM"/>
        <unused start="0x96F7" end="0x96FF" vendor="ARM"/>
    </enums>
    <commands namespace="GL">
        <command>
            <proto>void <name>glClear</name></proto>
            <param group="ClearBufferMask"><ptype>GLbitfield</ptype> <name>mask</name></param>
            <glx type="render" opcode="127"/>
        </command>
        <command>
            <proto>const <ptype>GLubyte</ptype> *<name>glGetString</name></proto>
            <param group="StringName"><ptype>GLenum</ptype> <name>name</name></param>
        </command>
        <command>
            <proto>void <name>glBegin</name></proto>
            <param group="PrimitiveType"><ptype>GLenum</ptype> <name>mode</name></param>
        </command>
        <command>
            <proto>void <name>glUseProgram</name></proto>
            <param><ptype>GLuint</ptype> <name>program</name></param>
        </command>
        <command>
            <proto>void <name>glTiledRenderingQCOM</name></proto>
            <param><ptype>GLuint</ptype> <name>x</name></param>
        </command>
    </commands>
    <feature api="gl" name="GL_VERSION_2_0" number="2.0">
        <require>
            <enum name="GL_CURRENT_PROGRAM"/>
            <command name="glUseProgram"/>
        </require>
    </feature>
    <feature api="gl" name="GL_VERSION_1_0" number="1.0">
        <require>
            <enum name="GL_COLOR_BUFFER_BIT"/>
            <enum name="GL_DEPTH_BUFFER_BIT"/>
            <enum name="GL_EXTENSIONS"/>
            <enum name="GL_CURRENT_COLOR"/>
            <command name="glClear"/>
            <command name="glGetString"/>
            <command name="glBegin"/>
        </require>
    </feature>
    <feature api="gl" name="GL_VERSION_3_2" number="3.2">
        <require>
            <command name="glClear"/>
        </require>
        <remove profile="core">
            <enum name="GL_CURRENT_COLOR"/>
            <command name="glBegin"/>
        </remove>
    </feature>
    <feature api="gles2" name="GL_ES_VERSION_2_0" number="2.0">
        <require>
            <enum name="GL_COLOR_BUFFER_BIT"/>
            <command name="glClear"/>
        </require>
    </feature>
    <extensions>
        <extension name="GL_QCOM_tiled_rendering" supported="gles1|gles2">
            <require>
                <command name="glTiledRenderingQCOM"/>
            </require>
        </extension>
        <extension name="GL_ARB_texture_border_clamp" supported="gl|glcore">
            <require>
                <enum name="GL_EXTENSIONS"/>
            </require>
        </extension>
    </extensions>
</registry>
"""


@pytest.fixture
def stream_at() -> Callable[[str], TokenStream]:
    """Tokenize an XML fragment and position the cursor on its root start tag."""

    def _stream_at(xml_text: str) -> TokenStream:
        stream = TokenStream.from_string(xml_text)
        stream.advance()
        return stream

    return _stream_at


@pytest.fixture
def parser_at(stream_at: Callable[[str], TokenStream]) -> Callable[[str], RegistryParser]:
    def _parser_at(xml_text: str) -> RegistryParser:
        return RegistryParser(stream_at(xml_text))

    return _parser_at


@pytest.fixture
def make_registry() -> Callable[[str], Registry]:
    def _make_registry(inner_xml: str) -> Registry:
        return parse_registry_string(f"<registry>{inner_xml}</registry>")

    return _make_registry


@pytest.fixture
def minimal_registry() -> Registry:
    return parse_registry_string(MINIMAL_GL_XML)


@pytest.fixture
def gl_xml(tmp_path: Path) -> Path:
    path = tmp_path / "gl.xml"
    path.write_text(MINIMAL_GL_XML, encoding="utf-8")
    return path
