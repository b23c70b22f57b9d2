"""Command line interface for the bdgl header generator."""

import argparse
import sys
import urllib.request
from pathlib import Path
from typing import Optional, Sequence

from .config import ConfigError, GeneratorConfig, build_config
from .emitter import HeaderEmitter
from .errors import RegistryError
from .linker import link, link_api, link_extensions
from .parser import parse_registry_file

GL_XML_URL = (
    "https://raw.githubusercontent.com/KhronosGroup/OpenGL-Registry/main/xml/gl.xml"
)


def download_gl_xml(output_path: Path, force: bool = False) -> None:
    """Download the latest gl.xml from Khronos registry."""
    if output_path.exists() and not force:
        print(f"gl.xml already exists at {output_path}. Use --force to re-download.")
        return

    print(f"Downloading gl.xml from {GL_XML_URL}...")

    try:
        urllib.request.urlretrieve(GL_XML_URL, output_path)
        print(f"Downloaded gl.xml to {output_path}")
    except OSError as e:
        print(f"Failed to download gl.xml: {e}")
        sys.exit(1)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a single-header OpenGL loader from gl.xml"
    )
    parser.add_argument("--api", default="gl", help="Target api (default: gl)")
    parser.add_argument(
        "--version", default="3.3", help="Target version (default: 3.3)"
    )
    parser.add_argument(
        "--profile",
        default="core",
        help="Target profile (default: core, empty for profile-less)",
    )
    parser.add_argument(
        "--extension",
        action="append",
        default=None,
        metavar="NAME",
        help="Include an extension (repeatable)",
    )
    parser.add_argument(
        "--all-extensions",
        action="store_true",
        help="Include every extension compatible with the api",
    )
    parser.add_argument(
        "--output", type=Path, default=None, help="Output header path"
    )
    parser.add_argument(
        "--prefix",
        type=Path,
        default=None,
        help="File copied before the generated body (default: bundled runtime)",
    )
    parser.add_argument(
        "--suffix",
        type=Path,
        default=None,
        help="File copied after the generated body (default: bundled runtime)",
    )
    parser.add_argument(
        "--gl-xml", type=Path, default=Path("gl.xml"), help="Path to gl.xml file"
    )
    parser.add_argument(
        "--download",
        action="store_true",
        help="Download latest gl.xml from Khronos registry",
    )
    parser.add_argument(
        "--force", action="store_true", help="Force re-download of gl.xml"
    )
    parser.add_argument(
        "--list-apis",
        action="store_true",
        help="List the apis and profiles in gl.xml and exit",
    )
    return parser


def run(config: GeneratorConfig) -> int:
    """Parse, link and emit. Returns the process exit status."""
    registry = parse_registry_file(config.gl_xml)
    apis = link(registry)

    if config.list_apis:
        print("Discovered APIs:")
        for api_name, api in sorted(apis.items()):
            print(f" {api_name}")
            print(f"  versions: {', '.join(f.number for f in api.features)}")
            print(f"  profiles: {', '.join(sorted(api.profiles())) or '-'}")
        return 0

    api = apis.get(config.api)
    if api is None:
        print(f"Error: api '{config.api}' not found in {config.gl_xml}")
        return 1

    profile_label = config.profile or "(no profile)"
    print(f"Generating {config.api} {config.version} {profile_label} header...")

    version = link_api(api, config.version, config.profile)
    if version is None:
        available = ", ".join(f.number for f in api.features)
        print(f"Error: version {config.version} not found for api '{config.api}'")
        print(f"Hint: available versions are {available}")
        return 1

    extensions = link_extensions(api, config.profile, config.extensions)
    if extensions:
        print("Compatible extensions:")
        for extension in extensions:
            print(
                f" {extension.name}: {len(extension.requires.enums)} enums, "
                f"{len(extension.requires.commands)} commands"
            )

    prefix = config.prefix.read_text() if config.prefix else None
    suffix = config.suffix.read_text() if config.suffix else None
    HeaderEmitter(registry).write(config.output, version, extensions, prefix, suffix)

    command_count = sum(len(v.profile.commands) for v in version.chain())
    print(
        f"Generated bindings for {command_count} {config.api} {config.version} functions"
    )
    print(f"Output written to: {config.output}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_argument_parser().parse_args(argv)

    try:
        config = build_config(args)
    except ConfigError as err:
        print(f"Config error [{err.code}]: {err.message}")
        if err.suggestion:
            print(f"Hint: {err.suggestion}")
        raise SystemExit(1) from err

    # Download gl.xml if requested
    if config.download or not config.gl_xml.exists():
        download_gl_xml(config.gl_xml, config.force)

    if not config.gl_xml.exists():
        print(f"gl.xml not found at {config.gl_xml}. Use --download to fetch it.")
        raise SystemExit(1)

    try:
        status = run(config)
    except (RegistryError, OSError) as err:
        print(f"Error: {err}")
        raise SystemExit(1) from err

    if status:
        raise SystemExit(status)


if __name__ == "__main__":
    main()
