"""CLI entry point for sfv-codec.

Invoked as::

    sfv [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m sfv.cli.main

Commands
--------
parse         Parse a field value and dump the value tree as JSON or YAML
check         Report whether a field value parses
canonicalize  Parse a field value and print its canonical serialization
serialize     Serialize a JSON or YAML value tree to a field value
grammar       Print the ABNF reference
version       Show version information
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from sfv.ast.nodes import Value

console = Console()
err_console = Console(stderr=True)

_FIELD_TYPES = ["list", "dictionary", "item"]


def _read_source(path: str) -> str:
    """Read a value tree document, exiting on error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _parse_or_exit(value: str, field_type: str) -> "Value":
    """Parse a field value, printing the error and exiting on failure."""
    from sfv.parser import ParseError, parse

    try:
        return parse(value, field_type)
    except ParseError as exc:
        err_console.print(f"[red]Parse error[/red] ({field_type}): {exc}")
        sys.exit(1)


def _serialize_or_exit(value: "Value") -> bytes | None:
    from sfv.parser import SerializationError
    from sfv.serializer import serialize

    try:
        return serialize(value)
    except SerializationError as exc:
        err_console.print(f"[red]Serialization error:[/red] {exc}")
        sys.exit(1)


def _field_type_option(func):  # type: ignore[no-untyped-def]
    return click.option(
        "--type",
        "-t",
        "field_type",
        type=click.Choice(_FIELD_TYPES, case_sensitive=False),
        default="item",
        show_default=True,
        help="Top-level structure of the field value",
    )(func)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="sfv-codec")
def cli() -> None:
    """Structured Field Values (RFC 8941) toolkit: parser and serializer."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from sfv import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]sfv-codec[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# parse command
# ---------------------------------------------------------------------------


@cli.command(name="parse")
@click.argument("value")
@_field_type_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Value tree output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def parse_command(value: str, field_type: str, output_format: str, output: str | None) -> None:
    """Parse a field value and dump the value tree.

    VALUE is the raw field value, e.g. 'text/html;q=1.0'.
    """
    from sfv.ast import TreeSerializer

    tree = _parse_or_exit(value, field_type)
    converter = TreeSerializer(indent=2)

    if output_format == "json":
        text = converter.to_json(tree)
        lang = "json"
    else:
        text = converter.to_yaml(tree)
        lang = "yaml"

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Value tree written to[/green] {output}")
    else:
        console.print(Syntax(text, lang, line_numbers=False))


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("value")
@_field_type_option
def check_command(value: str, field_type: str) -> None:
    """Report whether VALUE parses as the given field type."""
    from sfv.parser import ParseError, parse

    try:
        parse(value, field_type)
    except ParseError as exc:
        table = Table(title=f"Invalid {field_type}", show_lines=True)
        table.add_column("Kind", style="bold red", min_width=10)
        table.add_column("Offset", min_width=6)
        table.add_column("Message")
        table.add_row(exc.kind.name, str(exc.offset), exc.message)
        console.print(table)
        sys.exit(1)
    console.print(f"[green]OK[/green] valid {field_type}")


# ---------------------------------------------------------------------------
# canonicalize command
# ---------------------------------------------------------------------------


@cli.command(name="canonicalize")
@click.argument("value")
@_field_type_option
def canonicalize_command(value: str, field_type: str) -> None:
    """Parse VALUE and print its canonical serialization.

    An empty list or dictionary has no serialization; nothing is printed
    and the exit status is 0.
    """
    tree = _parse_or_exit(value, field_type)
    output = _serialize_or_exit(tree)
    if output is None:
        err_console.print("[yellow]Empty container:[/yellow] the field would be omitted")
        return
    click.echo(output.decode("ascii"))


# ---------------------------------------------------------------------------
# serialize command
# ---------------------------------------------------------------------------


@cli.command(name="serialize")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "input_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default=None,
    help="Input format (defaults to the file extension, then json)",
)
def serialize_command(file: str, input_format: str | None) -> None:
    """Serialize a value tree document to a field value.

    FILE is a JSON or YAML document in the format produced by 'sfv parse'.
    """
    from sfv.ast import TreeSerializer

    source = _read_source(file)
    if input_format is None:
        input_format = "yaml" if Path(file).suffix.lower() in (".yaml", ".yml") else "json"

    converter = TreeSerializer()
    try:
        tree = converter.from_yaml(source) if input_format == "yaml" else converter.from_json(source)
    except (json.JSONDecodeError, yaml.YAMLError, KeyError, TypeError, ValueError) as exc:
        err_console.print(f"[red]Invalid value tree[/red] in {file}: {exc}")
        sys.exit(1)

    output = _serialize_or_exit(tree)
    if output is None:
        err_console.print("[yellow]Empty container:[/yellow] the field would be omitted")
        return
    click.echo(output.decode("ascii"))


# ---------------------------------------------------------------------------
# grammar command
# ---------------------------------------------------------------------------


@cli.command(name="grammar")
@click.argument("section", required=False)
def grammar_command(section: str | None) -> None:
    """Print the ABNF grammar, or one SECTION of it."""
    from sfv.grammar import GRAMMAR_SECTIONS, full_grammar

    if section is None:
        text = full_grammar()
    elif section in GRAMMAR_SECTIONS:
        text = GRAMMAR_SECTIONS[section].strip() + "\n"
    else:
        err_console.print(
            f"[red]Error:[/red] Unknown section {section!r}. "
            f"Available: {', '.join(GRAMMAR_SECTIONS)}"
        )
        sys.exit(1)
    console.print(Syntax(text, "text", line_numbers=False))


if __name__ == "__main__":
    cli()
