"""Report rendering for validation results.

`render_report` produces the stable plain-text report handed to storage and
review consumers. `ReportFormatter` renders the same result to a rich console
for the command line.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from slugify import slugify

from .models import ValidationResult

UNTITLED = "untitled"


def report_identifier(result: ValidationResult, fallback_title: str | None = None) -> str:
    for candidate in (result.title, fallback_title):
        if candidate:
            slug = slugify(candidate)
            if slug:
                return slug
    return UNTITLED


def _section(heading: str, items: list[str]) -> list[str]:
    if not items:
        return []
    lines = ["", f"{heading} ({len(items)}):"]
    lines.extend(f"  {index}. {item}" for index, item in enumerate(items, start=1))
    return lines


def render_report(
    result: ValidationResult,
    fallback_title: str | None = None,
    show_categories: bool = True,
) -> str:
    """Render a validation result as plain text.

    Sections appear in a fixed order (header, categories, errors, warnings,
    suggestions); empty sections are omitted. Identical results always render
    to identical text.
    """
    status = "VALID" if result.is_valid else "INVALID"
    lines = [
        f"Game Validation Report: {report_identifier(result, fallback_title)}",
        f"Score: {result.score}/{result.max_score} ({result.grade.value})",
        f"Status: {status}",
    ]
    if result.genre:
        lines.append(f"Genre: {result.genre}")

    if show_categories and result.categories:
        width = max(len(category.name) for category in result.categories)
        lines.extend(["", "Categories:"])
        for category in result.categories:
            lines.append(f"  {category.name.ljust(width)}  {category.score:>3}/{category.max_score}")

    lines.extend(_section("Errors", result.errors))
    lines.extend(_section("Warnings", result.warnings))
    lines.extend(_section("Suggestions", result.suggestions))
    return "\n".join(lines) + "\n"


class ReportFormatter:
    """Formats validation results for rich console display."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def format_result(self, result: ValidationResult, source: str | None = None) -> None:
        self._format_header(result, source)
        self._format_categories(result)

        if result.genre_compliance and result.genre_compliance.recommendations:
            self._format_recommendations(result)

        self._format_findings("Errors", result.errors, "red")
        self._format_findings("Warnings", result.warnings, "yellow")
        self._format_findings("Suggestions", result.suggestions, "cyan")

    def _format_header(self, result: ValidationResult, source: str | None) -> None:
        status_color = "green" if result.is_valid else "red"
        status_text = "VALID" if result.is_valid else "INVALID"

        header_text = (
            f"[bold]{report_identifier(result, source)}[/bold]  "
            f"{result.score}/{result.max_score} [bold]{result.grade.value}[/bold]  "
            f"[{status_color}]{status_text}[/{status_color}]"
        )
        if result.genre:
            header_text += f"  [dim]genre: {result.genre}[/dim]"

        self.console.print(Panel(header_text, title="Game Validation", expand=False))

    def _format_categories(self, result: ValidationResult) -> None:
        table = Table(box=box.SIMPLE)
        table.add_column("Category", style="cyan", no_wrap=True)
        table.add_column("Score", justify="right")
        table.add_column("Max", justify="right", style="dim")

        for category in result.categories:
            ratio = category.score / category.max_score if category.max_score else 0
            color = "green" if ratio >= 0.8 else "yellow" if ratio >= 0.5 else "red"
            table.add_row(category.name, f"[{color}]{category.score}[/{color}]", str(category.max_score))

        self.console.print(table)

    def _format_recommendations(self, result: ValidationResult) -> None:
        compliance = result.genre_compliance
        table = Table(title=f"Genre: {compliance.bundle}", box=box.ROUNDED)
        table.add_column("Kind", style="bold cyan")
        table.add_column("Items", style="white")

        for recommendation in compliance.recommendations:
            table.add_row(recommendation.category, ", ".join(recommendation.items))

        self.console.print(table)

    def _format_findings(self, heading: str, items: list[str], color: str) -> None:
        if not items:
            return
        self.console.print(f"\n[{color}]{heading}:[/{color}]")
        for index, item in enumerate(items, start=1):
            self.console.print(f"  {index}. {item}", markup=False, highlight=False)
