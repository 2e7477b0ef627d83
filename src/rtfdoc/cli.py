"""Command-line interface for rtfdoc."""

import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table as RichTable

from rtfdoc import __version__
from rtfdoc.config import get_settings
from rtfdoc.errors import InvalidDocument
from rtfdoc.formatting.ir import Document
from rtfdoc.parsing.parser import Parser
from rtfdoc.reader import SUPPORTED_EXTENSIONS, read_document

app = typer.Typer(
    name="rtfdoc",
    help="Parse Rich Text Format files into formatted sections.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"rtfdoc v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route library log records through rich."""
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def describe_modifiers(modifiers: dict[str, Any]) -> str:
    """Render a section's modifiers as a short key=value list."""
    parts: list[str] = []
    for key, value in modifiers.items():
        if key == "table":
            parts.append(f"table({len(value.rows)} rows)")
        elif value is True:
            parts.append(key)
        else:
            parts.append(f"{key}={value}")
    return ", ".join(parts)


def render_document(document: Document) -> None:
    """Print the font table, colour table and body of a document."""
    console.print(
        f"[bold]Character set:[/bold] {document.character_set.value}  "
        f"[bold]Default font:[/bold] {document.default_font}"
    )

    fonts = RichTable(title="Font Table")
    fonts.add_column("#", justify="right")
    fonts.add_column("Name")
    fonts.add_column("Family")
    fonts.add_column("Alternate")
    for number in sorted(document.font_table):
        font = document.font_table[number]
        fonts.add_row(
            str(number),
            escape(font.name),
            font.family_command.value,
            escape(font.alternate_name),
        )
    console.print(fonts)

    colours = RichTable(title="Colour Table")
    colours.add_column("#", justify="right")
    colours.add_column("Colour")
    for idx, colour in enumerate(document.colour_table):
        colours.add_row(str(idx), str(colour))
    console.print(colours)

    body = RichTable(title="Sections")
    body.add_column("Text")
    body.add_column("Modifiers")
    for section in document.sections:
        body.add_row(
            escape(repr(section.text)), escape(describe_modifiers(section.modifiers))
        )
        table = section.table
        if table is None:
            continue
        for r_idx, row in enumerate(table.rows):
            for cell in row.cells:
                body.add_row(
                    f"  [dim]r{r_idx}c{cell.index}[/dim] {escape(repr(cell.plain_text))}",
                    f"width={cell.width}",
                )
    console.print(body)


@app.command()
def main(
    path: Path = typer.Argument(
        ...,
        help="RTF file to parse",
        exists=True,
        dir_okay=False,
    ),
    encoding: Optional[str] = typer.Option(
        None,
        "--encoding",
        "-e",
        help="Codec for \\'hh escapes (default: the document's code page)",
    ),
    input_encoding: Optional[str] = typer.Option(
        None,
        "--input-encoding",
        help="Codec used to read the file (default: utf-8)",
    ),
    text: bool = typer.Option(
        False,
        "--text",
        "-t",
        help="Print only the plain text of the document",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Do not report unknown control words",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Parse an RTF file and show its fonts, colours and formatted sections.

    Examples:

        rtfdoc letter.rtf

        rtfdoc letter.rtf --text

        rtfdoc legacy.rtf --encoding cp1251 --quiet
    """
    configure_logging(verbose, quiet)

    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        console.print(
            f"[yellow]Warning:[/yellow] {path.name} does not look like an RTF file"
        )

    settings = get_settings()
    parser = Parser(
        encoding=encoding,
        warn_unknown_controls=False if quiet else settings.warn_unknown_controls,
    )

    try:
        document = read_document(path, input_encoding, parser=parser)
    except InvalidDocument as e:
        console.print(f"[red]Invalid document:[/red] {path.name}: {e}")
        raise typer.Exit(1)
    except (OSError, LookupError) as e:
        console.print(f"[red]Error reading {path.name}:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)

    if text:
        console.print(document.plain_text, markup=False, highlight=False)
    else:
        render_document(document)


if __name__ == "__main__":
    app()
