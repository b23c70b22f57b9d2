"""Generator settings collected from the command line."""

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import StructuralError
from .parser import parse_version_number

VALID_ERROR_CODES = {"INVALID_VERSION", "PATH_NOT_FOUND", "CONFLICT_EXT_FLAGS"}


class ConfigError(Exception):
    def __init__(self, code: str, message: str, suggestion: Optional[str] = None):
        if code not in VALID_ERROR_CODES:
            raise ValueError(f"Unknown config error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion


@dataclass(frozen=True)
class GeneratorConfig:
    gl_xml: Path
    output: Path
    api: str = "gl"
    version: str = "3.3"
    profile: Optional[str] = "core"
    extensions: Optional[frozenset[str]] = frozenset()  # None means every extension
    prefix: Optional[Path] = None
    suffix: Optional[Path] = None
    download: bool = False
    force: bool = False
    list_apis: bool = False


def default_output(api: str, version: str, profile: Optional[str]) -> Path:
    """``generated/gl33core.h`` for gl 3.3 core."""
    return Path("generated") / f"{api}{version.replace('.', '')}{profile or ''}.h"


def validate_version(raw: str) -> str:
    try:
        parse_version_number(raw)
    except StructuralError as err:
        raise ConfigError(
            "INVALID_VERSION",
            f"Invalid version: {raw}",
            "Versions are written major.minor with single digits, e.g. 3.3 or 4.6.",
        ) from err
    return raw


def validate_optional_file(path: Optional[Path], flag: str) -> Optional[Path]:
    if path is None or path.is_file():
        return path
    raise ConfigError(
        "PATH_NOT_FOUND",
        f"Path for {flag} does not exist: {path}",
        "Provide an existing file for this flag.",
    )


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Validate parsed arguments into a GeneratorConfig."""
    version = validate_version(args.version)
    profile = args.profile or None

    if args.all_extensions and args.extension:
        raise ConfigError(
            "CONFLICT_EXT_FLAGS",
            "--extension and --all-extensions cannot be combined",
            "Use --all-extensions alone, or list extensions with --extension.",
        )
    if args.all_extensions:
        extensions = None
    else:
        extensions = frozenset(args.extension or ())

    return GeneratorConfig(
        gl_xml=args.gl_xml,
        output=args.output or default_output(args.api, version, profile),
        api=args.api,
        version=version,
        profile=profile,
        extensions=extensions,
        prefix=validate_optional_file(args.prefix, "--prefix"),
        suffix=validate_optional_file(args.suffix, "--suffix"),
        download=args.download,
        force=args.force,
        list_apis=args.list_apis,
    )
