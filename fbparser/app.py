#!/usr/bin/env python3
"""
CLI interface for the Flying Blue statement parser.
"""
import typer
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .core.detectors import language_scores, parse_header
from .core.loader import load_text
from .core.runner import parse_text
from .core.validator import get_validation_error_message, get_validation_warning_message, validate_input
from .models.schema import Language, ParserOptions

app = typer.Typer(help="Flying Blue Statement Parser")
console = Console()


def _read_statement(path: Path) -> str:
    if not path.exists():
        console.print(f"[red]Error: statement file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return load_text(path)
    except Exception as e:
        console.print(f"[red]Error reading statement: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def parse(
    path: Path = typer.Argument(..., help="Path to a .txt or .pdf statement"),
    output: Optional[Path] = typer.Option(None, "--out", "-o", help="Output JSON file path"),
    language: Optional[Language] = typer.Option(None, "--language", "-l", help="Force the statement language"),
    strict: bool = typer.Option(False, "--strict", help="Fail on unparseable posting dates"),
    lookahead: int = typer.Option(3, "--lookahead", help="Lines searched after a flight segment"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Parse a Flying Blue statement into structured JSON."""
    text = _read_statement(path)
    options = ParserOptions(debug=verbose, language=language, strict=strict, lookahead_lines=lookahead)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console
    ) as progress:
        progress.add_task("Parsing statement...", total=None)
        result = parse_text(text, options)

    if not result.success:
        console.print(f"[red]Error ({result.error.code.value}): {result.error.message}[/red]")
        raise typer.Exit(1)

    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    payload = result.model_dump_json(indent=2, by_alias=True)
    if output:
        output.write_text(payload)
        data = result.data
        console.print(f"[green]✓ Parsed successfully! Output written to: {output}[/green]")
        console.print(f"Flights: {len(data.flights)}")
        console.print(f"Activities: {len(data.activity_transactions)}")
        console.print(f"Status events: {len(data.status_events)}")
    else:
        console.print(payload)


@app.command()
def detect(
    path: Path = typer.Argument(..., help="Path to a .txt or .pdf statement")
):
    """Detect the statement language and show the header."""
    text = _read_statement(path)
    header = parse_header(text)

    table = Table(title="Language scores")
    table.add_column("Language")
    table.add_column("Score", justify="right")
    for lang, score in language_scores(text).items():
        table.add_row(lang.value, str(score))
    console.print(table)

    console.print(f"[green]Detected language: {header.language.value}[/green]")
    console.print(f"Member: {header.member_name or '-'} ({header.member_number or '-'})")
    console.print(f"Status: {header.current_status.value}")
    console.print(f"Balance: {header.total_miles} Miles, {header.total_xp} XP, {header.total_uxp} UXP")
    console.print(f"Export date: {header.export_date.isoformat()}")


@app.command()
def validate(
    path: Path = typer.Argument(..., help="Path to a .txt or .pdf statement")
):
    """Check whether a file looks like a Flying Blue statement."""
    result = validate_input(_read_statement(path))

    warning = get_validation_warning_message(result)
    if warning:
        console.print(f"[yellow]{warning}[/yellow]")

    if not result.is_valid:
        console.print(f"[red]Validation failed: {get_validation_error_message(result)}[/red]")
        raise typer.Exit(1)

    console.print("[green]✓ Statement text is valid[/green]")
    if result.language:
        console.print(f"Language: {result.language.value}")


if __name__ == "__main__":
    app()
