#!/usr/bin/env python3
"""
jsonws proxy generator CLI

Generate client proxies for a JSON-WS service description.

Usage:
    jsonws-proxy generate SOURCE   - Print (or write) a proxy for SOURCE
    jsonws-proxy languages         - List the supported target languages

SOURCE is a .yaml/.yml/.json service description, or ``module:attribute``
naming a Service (or a zero-argument callable returning one).
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path

import click

from .compiler import available_languages, get_language_proxy
from .config import configure_from_env, get_config
from .errors import InvalidArgumentError, JsonWsError
from .loader import load_service
from .metadata import Service


# Color codes for terminal output
class Colors:
    RESET = "\x1b[0m"
    GREEN = "\x1b[32m"
    RED = "\x1b[31m"


def print_error(message: str, error: Exception | None = None) -> None:
    """Print error message."""
    click.echo(f"{Colors.RED}Error:{Colors.RESET} {message}", err=True)
    if error and str(error):
        click.echo(str(error), err=True)


def print_success(message: str) -> None:
    """Print success message."""
    click.echo(f"{Colors.GREEN}[ok]{Colors.RESET} {message}")


def resolve_service(source: str) -> Service:
    """
    Resolve SOURCE to a Service.

    Raises:
        InvalidArgumentError: If SOURCE names neither a description file
            nor an importable Service
    """
    if Path(source).suffix.lower() in (".yaml", ".yml", ".json"):
        return load_service(source)

    module_name, sep, attr = source.partition(":")
    if not sep or not module_name or not attr:
        raise InvalidArgumentError(
            f"{source!r} is neither a description file nor a module:attribute reference"
        )
    try:
        target = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise InvalidArgumentError(f"cannot import {source!r}: {e}") from e
    if callable(target) and not hasattr(target, "get_metadata_snapshot"):
        target = target()
    if not hasattr(target, "get_metadata_snapshot"):
        raise InvalidArgumentError(f"{source!r} does not provide a Service")
    return target


@click.group()
@click.option("--debug", is_flag=True, help="Show debug information")
def cli(debug: bool) -> None:
    """
    jsonws - JSON-WS client proxy generator

    Use 'jsonws-proxy generate api.yaml -l JavaScript' to print a proxy.
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG)

    try:
        configure_from_env()
    except ValueError as e:
        print_error("Invalid configuration", e)
        raise SystemExit(1)


@cli.command()
@click.argument("source")
@click.option("-l", "--language", default=None, help="Target language (default: Python)")
@click.option("-n", "--name", "local_name", default=None, help="Proxy class name (default: Proxy)")
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to FILE instead of standard output",
)
def generate(source: str, language: str | None, local_name: str | None, output: Path | None) -> None:
    """Generate a client proxy for SOURCE."""
    config = get_config()
    try:
        service = resolve_service(source)
        text = get_language_proxy(service, language or config.default_language, local_name)
    except (JsonWsError, ValueError, OSError) as e:
        print_error(f"Cannot generate proxy for {source}", e)
        raise SystemExit(1)

    if output is None:
        click.echo(text, nl=False)
        return
    output.write_text(text, encoding="utf-8")
    print_success(f"Wrote {output}")


@cli.command()
def languages() -> None:
    """List the supported target languages."""
    for name in available_languages():
        click.echo(name)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
