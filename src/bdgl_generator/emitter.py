"""C header generation from a linked API version."""

from importlib import resources
from pathlib import Path
from typing import Iterable, Optional

from .errors import ConsistencyError
from .linker import ApiExtension, ApiVersion
from .registry import Registry
from .types import ApiSlice, Command

# Loader runtime wrapped around every generated body
PREFIX_TEMPLATE = "bdgl_prefix.h"
SUFFIX_TEMPLATE = "bdgl_suffix.h"


def read_runtime(name: str) -> str:
    """Read a bundled runtime template from the package's ``templates`` directory."""
    return (resources.files("bdgl_generator") / "templates" / name).read_text()


def sorted_names(names: Iterable[str]) -> list[str]:
    """Case-insensitive order, which also fixes each command's table index."""
    return sorted(names, key=lambda name: (name.lower(), name))


def format_names(names: list[str]) -> str:
    """The NUL-separated name list a table is loaded from, one literal per line."""
    if not names:
        return '""'
    return "".join(f'\n"{name}\\0"' for name in names)


def format_command(command: Command, table: str, index: int) -> str:
    """One ``bdgl_def``/``bdgl_defv`` macro line for a command, e.g.

    ``bdgl_defv(glClear,(GLbitfield mask),GL_VERSION_1_0,3,(mask))``
    """
    signature = ",".join(f"{p.type.to_c()} {p.name}" for p in command.parameters)
    call = ",".join(p.name for p in command.parameters)
    return_type = command.prototype.return_type

    if return_type.is_void:
        head = f"bdgl_defv({command.name}"
    else:
        head = f"bdgl_def({command.name},{return_type.to_c()}"
    return f"{head},({signature}),{table},{index},({call}))"


class HeaderEmitter:
    """Formats linked versions and extensions into the single-header loader."""

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def _command(self, name: str, owner: str) -> Command:
        command = self.registry.get_command(name)
        if command is None:
            raise ConsistencyError(
                f"'{owner}' references non-existent command: {name}",
                name=name,
                owner=owner,
            )
        return command

    def _enum_lines(self, symbols: ApiSlice, owner: str) -> list[str]:
        lines = []
        for enum_name in sorted_names(symbols.enums):
            value = self.registry.enum_values.get(enum_name)
            if value is None:
                raise ConsistencyError(
                    f"'{owner}' references non-existent enum: {enum_name}",
                    name=enum_name,
                    owner=owner,
                )
            lines.append(f"#define {enum_name} {value}")
        return lines

    def _command_lines(self, names: list[str], owner: str) -> list[str]:
        return [
            format_command(self._command(name, owner), owner, index)
            for index, name in enumerate(names)
        ]

    def type_lines(self) -> list[str]:
        return [
            f"typedef {c_type} {gl_type};"
            for gl_type, c_type in self.registry.type_aliases.items()
        ]

    def version_lines(self, version: ApiVersion) -> list[str]:
        feature = version.feature
        name = feature.name
        commands = sorted_names(version.profile.commands)

        content = ["", f"//{name}"]
        content.extend(self._enum_lines(version.profile, name))
        content.extend(
            [
                "",
                "#ifdef BDGL_IMPL",
                f"void* (*bdgl_fp_{name}[{len(commands)}])();",
                f"bdgl_Version bdgl_{name} = {{",
                f"  .major = {feature.number_major},",
                f"  .minor = {feature.number_minor},",
                "  .loaded = 0,",
                f"  .names = {format_names(commands)},",
                f"  .funcs = (void**)bdgl_fp_{name},",
                "};",
                "#else",
                f"extern bdgl_Version bdgl_{name};",
                "#endif",
            ]
        )
        content.extend(self._command_lines(commands, name))
        return content

    def extension_lines(self, extension: ApiExtension) -> list[str]:
        name = extension.name
        commands = sorted_names(extension.requires.commands)

        content = ["", f"//{name}"]
        content.extend(self._enum_lines(extension.requires, name))
        content.extend(["", "#ifdef BDGL_IMPL"])

        if commands:
            content.append(f"void* (*bdgl_fp_{name}[{len(commands)}])();")
        content.extend([f"bdgl_Extension bdgl_{name} = {{", "  .loaded = 0,"])
        if commands:
            content.append(f"  .names = {format_names(commands)},")
            content.append(f"  .funcs = (void**)bdgl_fp_{name},")
        else:
            # No function table: empty name list and a null table pointer
            content.append('  .names = "",')
            content.append("  .funcs = 0,")
        content.extend(
            ["};", "#else", f"extern bdgl_Extension bdgl_{name};", "#endif"]
        )

        content.extend(self._command_lines(commands, name))
        return content

    def loader_lines(self, version: ApiVersion) -> list[str]:
        content = ["#ifdef BDGL_IMPL", "int bdgl_load_all(bdgl_loadproc loadproc) {"]
        content.append("  return 0")
        for linked in version.chain():
            content.append(
                f"    + bdgl_load_version(&bdgl_{linked.feature.name},loadproc)"
            )
        content.extend([";", "}", "#endif"])
        return content

    def generate(
        self,
        version: ApiVersion,
        extensions: Iterable[ApiExtension] = (),
        prefix: Optional[str] = None,
        suffix: Optional[str] = None,
    ) -> str:
        """Build the complete header text.

        ``prefix`` and ``suffix`` default to the bundled loader runtime; pass
        an empty string to leave them out.
        """
        if prefix is None:
            prefix = read_runtime(PREFIX_TEMPLATE)
        if suffix is None:
            suffix = read_runtime(SUFFIX_TEMPLATE)

        content = self.type_lines()
        for linked in version.oldest_first():
            content.extend(self.version_lines(linked))
        for extension in extensions:
            content.extend(self.extension_lines(extension))

        body = "\n".join(content) + "\n"
        return prefix + body + suffix + "\n".join(self.loader_lines(version)) + "\n"

    def write(
        self,
        output_path: Path,
        version: ApiVersion,
        extensions: Iterable[ApiExtension] = (),
        prefix: Optional[str] = None,
        suffix: Optional[str] = None,
    ) -> None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate(version, extensions, prefix, suffix))
