"""Exceptions raised while parsing and linking the OpenGL registry."""

from typing import Optional


class RegistryError(Exception):
    """Base class for registry parse and link failures."""


class StructuralError(RegistryError):
    """The token stream does not match the registry grammar."""

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        element: Optional[str] = None,
    ) -> None:
        self.message = message
        self.offset = offset  # token index in the stream
        self.element = element

        context = []
        if element is not None:
            context.append(f"element '{element}'")
        if offset is not None:
            context.append(f"token {offset}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class ConsistencyError(RegistryError):
    """A parsed cross-reference names something the registry does not define."""

    def __init__(
        self, message: str, name: Optional[str] = None, owner: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.name = name  # the missing / conflicting symbol
        self.owner = owner  # feature or extension that references it
