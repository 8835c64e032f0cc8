"""CLI entry point for CV Parser AI."""

import json
import logging
import time
from pathlib import Path
from typing import Annotated, Any

from dotenv import load_dotenv

# Path: main.py -> cv_parser_ai/ -> src/ -> project root
load_dotenv(Path(__file__).parent.parent.parent / ".env.local")

import typer  # noqa: E402
from rich.console import Console  # noqa: E402
from rich.logging import RichHandler  # noqa: E402
from rich.panel import Panel  # noqa: E402
from rich.table import Table  # noqa: E402

from cv_parser_ai.config import get_settings  # noqa: E402
from cv_parser_ai.exceptions import CVParserError  # noqa: E402
from cv_parser_ai.llm.base import RECOMMENDED_MODELS  # noqa: E402
from cv_parser_ai.parser import CVParser  # noqa: E402
from cv_parser_ai.processing.compression import get_parsing_levels  # noqa: E402

app = typer.Typer(
    name="cv-parser-ai",
    help="CV Parser AI - extract structured data from CVs with an LLM",
    add_completion=False,
)
console = Console()


def format_time(seconds: float) -> str:
    """Format seconds into human-readable time."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds // 60)
    secs = seconds % 60
    return f"{minutes}m {secs:.0f}s"


def configure_logging(verbose: bool = False) -> None:
    level = "DEBUG" if verbose else get_settings().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose)],
        force=True,
    )


def write_json(data: Any, output: Path | None) -> None:
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output is None:
        console.print_json(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    console.print(f"\n[green]Result saved to:[/green] {output}")


def build_parser(provider: str | None, model: str | None, **options: Any) -> CVParser:
    try:
        return CVParser(provider=provider, model=model, **options)
    except CVParserError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command()
def parse(
    file: Annotated[Path, typer.Argument(help="CV to parse (pdf, docx, txt or md)")],
    provider: Annotated[
        str | None,
        typer.Option(
            "--provider", "-p", help="google, openai, anthropic or groq (default from settings)"
        ),
    ] = None,
    model: Annotated[
        str | None, typer.Option("--model", "-m", help="Model override for the provider")
    ] = None,
    level: Annotated[
        str | None,
        typer.Option("--level", "-l", help="low, moderate, high or ultra; omit for the full prompt"),
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write JSON here instead of stdout")
    ] = None,
    strict: Annotated[
        bool, typer.Option("--strict", help="Fail when the result violates the schema")
    ] = False,
    no_keywords: Annotated[
        bool, typer.Option("--no-keywords", help="Skip keyword extraction")
    ] = False,
    fallback: Annotated[
        bool, typer.Option("--fallback", help="Try the provider's fallback models on failure")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Parse a single CV into JSON."""
    configure_logging(verbose)
    console.print(
        Panel.fit("[bold blue]CV Parser AI[/bold blue] - Parsing CV", border_style="blue")
    )
    if not file.exists():
        console.print(f"[red]Error:[/red] File not found: {file}")
        raise typer.Exit(1)

    parser = build_parser(provider, model)
    start_time = time.time()
    try:
        outcome = parser.parse_detailed(
            file,
            parsing_level=level,
            strict_validation=strict,
            include_keywords=not no_keywords,
            model_fallback=fallback,
        )
    except CVParserError as e:
        console.print(f"\n[red]Error ({e.kind.value}):[/red] {e}")
        raise typer.Exit(1) from e

    write_json(outcome.data, output)

    score_color = (
        "green" if outcome.confidence >= 0.7 else "yellow" if outcome.confidence >= 0.5 else "red"
    )
    console.print(
        f"\n[bold]Confidence:[/bold] [{score_color}]{outcome.confidence:.0%}[/{score_color}]"
        f"  [dim]{outcome.provider}/{outcome.model}, {outcome.attempts} attempt(s), "
        f"{format_time(time.time() - start_time)}[/dim]"
    )
    if outcome.prompt_info:
        console.print(
            f"[dim]Level: {outcome.prompt_info.level}, "
            f"~{outcome.prompt_info.estimated_tokens} prompt tokens[/dim]"
        )
    if outcome.validation:
        if outcome.validation.errors:
            console.print("[yellow]Validation errors:[/yellow]")
            for error in outcome.validation.errors:
                console.print(f"  - {error}")
        if outcome.validation.warnings:
            console.print("[yellow]Warnings:[/yellow]")
            for warning in outcome.validation.warnings:
                console.print(f"  - {warning}")


@app.command()
def batch(
    files: Annotated[list[Path], typer.Argument(help="CVs to parse")],
    provider: Annotated[
        str | None,
        typer.Option(
            "--provider", "-p", help="google, openai, anthropic or groq (default from settings)"
        ),
    ] = None,
    model: Annotated[
        str | None, typer.Option("--model", "-m", help="Model override for the provider")
    ] = None,
    level: Annotated[
        str | None,
        typer.Option("--level", "-l", help="low, moderate, high or ultra; omit for the full prompt"),
    ] = None,
    workers: Annotated[
        int, typer.Option("--workers", "-w", min=1, help="Documents parsed in parallel")
    ] = 1,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write JSON here instead of stdout")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Parse several CVs; one failure does not stop the rest."""
    configure_logging(verbose)
    parser = build_parser(provider, model)

    start_time = time.time()
    result = parser.parse_batch(files, max_workers=workers, parsing_level=level)
    write_json(result.to_dict(), output)

    table = Table(title="Batch Results")
    table.add_column("File")
    table.add_column("Status")
    table.add_column("Error", style="dim")
    for item in result.results:
        status = "[green]OK[/green]" if item.success else "[red]FAILED[/red]"
        table.add_row(item.source, status, item.error or "")
    console.print(table)

    summary = result.summary
    console.print(
        f"[bold]{summary.successful}/{summary.total} parsed[/bold] "
        f"({summary.success_rate:.0%}) in {format_time(time.time() - start_time)}"
    )
    if summary.failed:
        raise typer.Exit(1)


@app.command()
def providers() -> None:
    """List providers and whether their client library is installed."""
    available = set(CVParser.get_available_providers())
    table = Table(title="Providers")
    table.add_column("Provider")
    table.add_column("Recommended model")
    table.add_column("Installed")
    for name, model in RECOMMENDED_MODELS.items():
        installed = "[green]yes[/green]" if name in available else "[red]no[/red]"
        table.add_row(name, model, installed)
    console.print(table)


@app.command()
def levels() -> None:
    """Describe the parsing levels."""
    table = Table(title="Parsing Levels")
    table.add_column("Level")
    table.add_column("Scope")
    table.add_column("Tokens")
    table.add_column("Speed")
    for name, info in get_parsing_levels().items():
        table.add_row(name, info["description"], info["tokens"], info["speed"])
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from cv_parser_ai import __version__

    console.print(f"CV Parser AI v{__version__}")


if __name__ == "__main__":
    app()
