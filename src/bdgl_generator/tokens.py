"""Forward-only token stream over the registry XML.

The parser never sees the element tree itself. It reads a flat sequence of
start / end / text tokens, the same shape a streaming XML reader produces,
so text interleaved with child elements (``const <ptype>GLuint</ptype> *``)
arrives in document order.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from .errors import StructuralError


class TokenKind(Enum):
    START = "start"
    END = "end"
    TEXT = "text"


@dataclass(frozen=True)
class Token:
    """A single structural event."""

    kind: TokenKind
    name: str = ""  # element name, empty for text
    attributes: dict[str, str] = field(default_factory=dict)
    text: str = ""  # character content, only for TEXT
    offset: int = 0

    def is_start(self, name: Optional[str] = None) -> bool:
        return self.kind is TokenKind.START and (name is None or self.name == name)

    def is_end(self, name: Optional[str] = None) -> bool:
        return self.kind is TokenKind.END and (name is None or self.name == name)

    @property
    def is_text(self) -> bool:
        return self.kind is TokenKind.TEXT

    def get(self, attribute: str) -> Optional[str]:
        """Return an attribute value of a start token, or None."""
        return self.attributes.get(attribute)


def iter_element_tokens(element: ET.Element) -> Iterator[Token]:
    """Walk an element depth-first, yielding its tokens in document order.

    Offsets are left at zero; ``TokenStream`` numbers tokens as it reads them.
    """
    yield Token(TokenKind.START, name=element.tag, attributes=dict(element.attrib))
    if element.text:
        yield Token(TokenKind.TEXT, text=element.text)
    for child in element:
        yield from iter_element_tokens(child)
        if child.tail:
            yield Token(TokenKind.TEXT, text=child.tail)
    yield Token(TokenKind.END, name=element.tag)


class TokenStream:
    """Cursor over a token sequence.

    ``current`` is the token the cursor sits on. Nothing is ever pushed back.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = iter(tokens)
        self._current: Optional[Token] = None
        self._position = -1

    @classmethod
    def from_string(cls, xml_text: str) -> "TokenStream":
        """Tokenize an XML document held in memory."""
        try:
            root = ET.fromstring(xml_text)
        except ET.ParseError as e:
            raise _parse_error(e) from e
        return cls(iter_element_tokens(root))

    @classmethod
    def from_file(cls, xml_path: Union[str, Path]) -> "TokenStream":
        """Tokenize an XML document on disk."""
        try:
            root = ET.parse(xml_path).getroot()
        except ET.ParseError as e:
            raise _parse_error(e) from e
        return cls(iter_element_tokens(root))

    @property
    def current(self) -> Token:
        if self._current is None:
            raise StructuralError("token stream has no current token", self._position)
        return self._current

    @property
    def position(self) -> int:
        return self._position

    def advance(self) -> Optional[Token]:
        """Move to the next token. Returns None once the stream is exhausted."""
        try:
            token = next(self._tokens)
        except StopIteration:
            self._current = None
            return None

        self._position += 1
        # Stamp the stream position so errors can report where they happened
        self._current = Token(
            token.kind,
            name=token.name,
            attributes=token.attributes,
            text=token.text,
            offset=self._position,
        )
        return self._current

    def children(self, name: str) -> Iterator[Token]:
        """Yield each token up to the end tag ``name``.

        On return the cursor sits on that end tag.
        """
        while True:
            token = self.advance()
            if token is None:
                raise StructuralError(
                    f"missing end '{name}' tag", self._position, element=name
                )
            if token.is_end(name):
                return
            yield token

    def element_text(self) -> str:
        """Read the text of the current element, leaving the cursor on its end tag."""
        start = self.current
        if not start.is_start():
            raise StructuralError(
                "expected an element start", start.offset, element=start.name or None
            )

        parts = []
        for token in self.children(start.name):
            if not token.is_text:
                raise StructuralError(
                    f"unexpected element inside text-only '{start.name}'",
                    token.offset,
                    element=token.name,
                )
            parts.append(token.text)
        return "".join(parts)

    def skip_element(self) -> None:
        """Consume the current element and everything nested inside it."""
        start = self.current
        if not start.is_start():
            return

        depth = 1
        while depth:
            token = self.advance()
            if token is None:
                raise StructuralError(
                    f"missing end '{start.name}' tag", self._position, element=start.name
                )
            if token.kind is TokenKind.START:
                depth += 1
            elif token.kind is TokenKind.END:
                depth -= 1


def _parse_error(error: ET.ParseError) -> StructuralError:
    line, column = error.position
    return StructuralError(f"malformed XML at line {line}, column {column}: {error}")
