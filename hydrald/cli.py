"""
hydrald CLI: render objects as JSON-LD from the command line.

Provides commands for:
- render: Print the JSON-LD for an object
- inspect: Show the resolved @type, @vocab and terms of an object
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from hydrald.config import ProjectConfig, SerializerConfig
from hydrald.context import TermDefinition
from hydrald.errors import HydraError
from hydrald.mapper import LdMapper


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="hydrald",
        description="hydrald: JSON-LD serialization for Python objects",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Path to a .hydrald.toml file (default: search upwards from cwd)",
    )
    parser.add_argument(
        "--profile", "-p",
        help="Configuration profile to apply",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser(
        "render",
        help="Print the JSON-LD for an object",
    )
    render_parser.add_argument(
        "target",
        help="MODULE:ATTR naming an object, class or zero-argument callable",
    )
    render_parser.add_argument(
        "--indent", "-i",
        type=int,
        help="Indent output by N spaces (overrides configuration)",
    )
    render_parser.add_argument(
        "--pretty",
        action="store_true",
        help="Print syntax-highlighted JSON",
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Show resolved JSON-LD metadata for an object",
    )
    inspect_parser.add_argument(
        "target",
        help="MODULE:ATTR naming an object, class or zero-argument callable",
    )

    args = parser.parse_args(argv)

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "render":
        return handle_render(args)
    elif args.command == "inspect":
        return handle_inspect(args)
    else:
        parser.print_help()
        return 0


def handle_render(args: argparse.Namespace) -> int:
    """Handle the render command."""
    try:
        config = load_settings(args.config, args.profile)
        if args.indent is not None:
            config = config.with_overrides(indent=args.indent or None)
        mapper = LdMapper(config)
        text = mapper.dumps(load_target(args.target))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.pretty:
        Console().print_json(text, indent=config.indent or 2)
    else:
        print(text)
    return 0


def handle_inspect(args: argparse.Namespace) -> int:
    """Handle the inspect command."""
    try:
        mapper = LdMapper(load_settings(args.config, args.profile))
        obj = load_target(args.target)
        resolver = mapper.resolver
        type_name = resolver.resolve_type(obj)
        vocab = resolver.resolve_vocab(obj)
        terms = resolver.resolve_terms(obj)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    table = Table(title=f"JSON-LD metadata: {args.target}", show_header=True, header_style="bold")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("@type", type_name)
    table.add_row("@vocab", vocab or "[dim](none)[/dim]")
    for name, value in terms.items():
        if isinstance(value, TermDefinition):
            shown = ", ".join(f"{k}={v}" for k, v in value.to_json().items())
        else:
            shown = value
        table.add_row(name, shown)

    Console().print(table)
    return 0


def load_settings(config_path: Path | None, profile: str | None) -> SerializerConfig:
    """Load serializer settings from *config_path* or the nearest config file."""
    if config_path is not None:
        if not config_path.is_file():
            raise HydraError(f"Config file not found: {config_path}")
        project = ProjectConfig.load_file(config_path)
    else:
        project = ProjectConfig.load()
    return project.resolve(profile)


def load_target(target_path: str) -> Any:
    """
    Import ``MODULE:ATTR`` and return the object it names.

    Classes and other callables are called without arguments.

    Raises:
        HydraError: If the path is malformed or the attribute does not exist.
    """
    module_name, sep, attr_path = target_path.partition(":")
    if not sep or not module_name or not attr_path:
        raise HydraError(f"Target must look like MODULE:ATTR, got {target_path!r}")

    module = importlib.import_module(module_name)
    target: Any = module
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise HydraError(f"{module_name!r} has no attribute {attr_path!r}") from None

    if callable(target):
        target = target()
    return target


if __name__ == "__main__":
    sys.exit(main())
