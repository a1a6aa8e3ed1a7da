"""CLI interface for gamecheck using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from gamecheck import __description__, __version__
from gamecheck.config import LogLevel, ReportFormat, load_config
from gamecheck.engine import ArtifactValidator
from gamecheck.models import ValidationRequest
from gamecheck.report import ReportFormatter, render_report
from gamecheck.rules import PIPELINE_PASS_THRESHOLD, REFERENCE_TOTAL, get_registry

app = typer.Typer(
    name="gamecheck",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}


def _configure_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else _LOG_LEVELS.get(level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"gamecheck {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit")
    ] = None,
) -> None:
    """Validate and score generated sensor game artifacts."""


@app.command()
def validate(
    files: Annotated[
        List[Path],
        typer.Argument(help="Artifact HTML file(s) to validate")
    ],
    genre: Annotated[
        Optional[str],
        typer.Option("--genre", "-g", help="Genre label (e.g. physics, 퍼즐); unknown labels skip genre scoring")
    ] = None,
    title: Annotated[
        Optional[str],
        typer.Option("--title", "-t", help="Title used to label the report (default: document <title>, then file name)")
    ] = None,
    threshold: Annotated[
        Optional[int],
        typer.Option(
            "--threshold",
            min=0,
            max=REFERENCE_TOTAL,
            help="Pass threshold on the 130-point scale (default: from config)",
        )
    ] = None,
    pipeline: Annotated[
        bool,
        typer.Option("--pipeline", help=f"Use the generation pipeline threshold ({PIPELINE_PASS_THRESHOLD})")
    ] = False,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: text, json, table (default: from config)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .gamecheck.json)")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Validate artifact files and print a report for each."""
    valid_formats = [item.value for item in ReportFormat]

    try:
        gamecheck_config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _configure_logging(gamecheck_config.logging.level, verbose)

    output_format = format or gamecheck_config.report.format
    if output_format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{output_format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    if pipeline and threshold is not None:
        console.print("[red]Error:[/red] --pipeline and --threshold are mutually exclusive")
        raise typer.Exit(1)
    pass_threshold = PIPELINE_PASS_THRESHOLD if pipeline else threshold

    try:
        validator = ArtifactValidator(gamecheck_config, pass_threshold=pass_threshold)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    formatter = ReportFormatter(console)
    all_valid = True
    json_results = []

    for file_path in files:
        try:
            markup = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            console.print(f"[red]Error:[/red] Cannot read {file_path}: {e}")
            all_valid = False
            continue

        request = ValidationRequest(markup=markup, genre=genre, title=title)
        result = validator.validate(request)
        all_valid = all_valid and result.is_valid

        if output_format == ReportFormat.JSON.value:
            json_results.append({"file": str(file_path), **result.to_dict()})
        elif output_format == ReportFormat.TABLE.value:
            formatter.format_result(result, source=file_path.stem)
        else:
            typer.echo(render_report(
                result,
                fallback_title=file_path.stem,
                show_categories=gamecheck_config.report.show_categories,
            ))

    if json_results:
        payload = json_results[0] if len(json_results) == 1 else json_results
        typer.echo(jsonlib.dumps(payload, indent=2, ensure_ascii=False))

    raise typer.Exit(0 if all_valid else 1)


@app.command()
def genres() -> None:
    """List genre bundles and the checks they apply."""
    registry = get_registry()

    table = Table(title="Genre Bundles")
    table.add_column("Genre", style="bold cyan")
    table.add_column("Aliases", style="dim")
    table.add_column("Patterns", style="white")
    table.add_column("Features", style="white")

    for bundle in registry.genres.values():
        table.add_row(
            bundle.key,
            ", ".join(bundle.aliases),
            "\n".join(rule.label for rule in bundle.patterns),
            "\n".join(feature.name for feature in bundle.features),
        )

    console.print(table)


if __name__ == "__main__":
    app()
