"""CLI for the ``spend_analysis`` package.

A Typer console interface over the parser, the categorizer and the import
flow. Environment variables (``ANTHROPIC_API_KEY`` / ``OPENAI_API_KEY`` and
the ``SPEND_ANALYSIS_*`` overrides) are loaded from a local ``.env`` with
``python-dotenv`` before any command runs. Business logic lives in
:mod:`spend_analysis.api` and related modules.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .api import DEFAULT_CONCURRENCY, import_statement
from .categorize import Categorizer
from .config import CategorizerSettings
from .logging_setup import configure_logging
from .models import CategorizationResult, ImportedTransaction, ParseOutcome
from .normalizers import format_amount, parse_amount
from .parser import parse_statement
from .persistence import InMemoryTransactionStore

app = typer.Typer(
    name="spend-analysis",
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Parse bank-statement exports, categorize transactions and compute dedup keys. "
        "Loads provider credentials from a local .env before running."
    ),
)
console = Console()
err_console = Console(stderr=True)

CsvPathOption = Annotated[
    Path,
    typer.Option(
        "--csv-path",
        help="Path to a delimited statement export (comma, semicolon or tab).",
        dir_okay=False,
        file_okay=True,
    ),
]


# ---- Helpers -----------------------------------------------------------------


def _read_statement(csv_path: Path) -> str:
    try:
        return csv_path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {csv_path}")
        raise typer.Exit(1) from None
    except PermissionError:
        err_console.print(f"[red]Error:[/red] Permission denied: {csv_path}")
        raise typer.Exit(1) from None
    except UnicodeDecodeError as e:
        err_console.print(f"[red]Error:[/red] {csv_path} is not UTF-8 text: {e}")
        raise typer.Exit(1) from None


def _build_categorizer() -> Categorizer:
    try:
        settings = CategorizerSettings.from_env()
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    if not settings.remote_enabled:
        err_console.print(
            "[yellow]No ANTHROPIC_API_KEY or OPENAI_API_KEY set; using keyword rules only.[/yellow]"
        )
    return Categorizer(settings)


def _print_errors(errors: list[str]) -> None:
    for msg in errors:
        err_console.print(f"[red]•[/red] {msg}")


def _render_outcome(outcome: ParseOutcome) -> Table:
    table = Table(title=f"{len(outcome.transactions)} transaction(s)")
    table.add_column("Line", justify="right")
    table.add_column("Date")
    table.add_column("Merchant")
    table.add_column("Description")
    table.add_column("Amount", justify="right")
    for tx in outcome.transactions:
        table.add_row(
            str(tx.raw_row.line_number),
            tx.date.isoformat(),
            tx.merchant,
            tx.description,
            format_amount(tx.amount),
        )
    return table


def _render_imported(records: list[ImportedTransaction], *, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Date")
    table.add_column("Merchant")
    table.add_column("Amount", justify="right")
    table.add_column("Category")
    table.add_column("Confidence", justify="right")
    table.add_column("Key")
    for rec in records:
        c = rec.categorization
        category = f"{c.category} / {c.subcategory}" if c.subcategory else c.category
        table.add_row(
            rec.transaction.date.isoformat(),
            rec.transaction.merchant,
            format_amount(rec.transaction.amount),
            category,
            f"{c.confidence:.2f}",
            rec.dedup_key[:12],
        )
    return table


def _render_result(result: CategorizationResult) -> str:
    label = f"{result.category} / {result.subcategory}" if result.subcategory else result.category
    return (
        f"[bold]{label}[/bold] confidence={result.confidence:.2f} "
        f"source={result.source}\n{result.explanation}"
    )


# ---- Commands ----------------------------------------------------------------


@app.command("parse")
def parse_cmd(csv_path: CsvPathOption) -> None:
    """Parse a statement and show the canonical transactions and row errors."""

    outcome = parse_statement(_read_statement(csv_path))
    if outcome.transactions:
        console.print(_render_outcome(outcome))
    if outcome.errors:
        _print_errors(outcome.errors)
    if not outcome.transactions and outcome.errors:
        raise typer.Exit(1)


@app.command("categorize")
def categorize_cmd(
    merchant: Annotated[str, typer.Option(help="Merchant name as shown on the statement.")],
    amount: Annotated[str, typer.Option(help="Signed amount; negative for outflows.")],
    description: Annotated[
        str | None, typer.Option(help="Transaction description (defaults to merchant).")
    ] = None,
) -> None:
    """Categorize a single transaction."""

    try:
        value: Decimal = parse_amount(amount)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    result = _build_categorizer().categorize(merchant, description or merchant, value)
    console.print(_render_result(result))


@app.command("import")
def import_cmd(
    csv_path: CsvPathOption,
    concurrency: Annotated[
        int, typer.Option(min=1, max=32, help="Maximum categorization calls in flight.")
    ] = DEFAULT_CONCURRENCY,
) -> None:
    """Parse, categorize and dedupe a statement into an in-memory store."""

    text = _read_statement(csv_path)
    report = import_statement(
        text,
        categorizer=_build_categorizer(),
        store=InMemoryTransactionStore(),
        concurrency=concurrency,
    )
    if report.imported:
        console.print(_render_imported(report.imported, title="Imported"))
    if report.duplicates:
        console.print(_render_imported(report.duplicates, title="Duplicates (skipped)"))
    if report.errors:
        _print_errors(report.errors)
    console.print(report.summary())
    if not report.imported and not report.duplicates and report.errors:
        raise typer.Exit(1)


@app.callback()
def _root() -> None:
    """Load ``.env`` (without overriding existing variables) and set up logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    app()
