# ruff: noqa: I001
"""Typer console interface for the inbox pipeline.

Commands map one-to-one onto pipeline operations (``inbox``, ``import``,
``categorize``, ``commit``) plus the two dashboard reads (``summary``,
``networth``). ``.env`` in the working directory is loaded before settings
are read; command-line options override the environment.

Without a backend (no ``DATABASE_URL`` and no ``LEDGER_INBOX_BACKEND_CMD``)
every command runs against the in-memory fallback, which lives only for the
duration of one invocation.
"""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Awaitable, Callable
from datetime import date
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import Settings, parse_transport_mode
from .errors import ConfigError
from .logging_setup import configure_logging
from .models import InboxItem
from .pipeline import InboxPipeline, build_pipeline

T = TypeVar("T")

app = typer.Typer(
    name="ledger-inbox",
    no_args_is_help=True,
    add_completion=False,
    help="Stage bank-statement rows, categorize them, and commit them to the ledger.",
)
console = Console()
err_console = Console(stderr=True)


# ---- helpers ------------------------------------------------------------------


def _settings(ctx: typer.Context) -> Settings:
    settings = ctx.obj
    assert isinstance(settings, Settings)  # set by the root callback
    return settings


def _run(ctx: typer.Context, op: Callable[[InboxPipeline], Awaitable[T]]) -> T:
    pipeline = build_pipeline(_settings(ctx))

    async def _go() -> T:
        return await op(pipeline)

    return asyncio.run(_go())


def _render_batch(items: list[InboxItem]) -> None:
    if not items:
        console.print("Inbox is empty.")
        return
    table = Table(title=f"Inbox ({len(items)} item(s))")
    table.add_column("tempId", no_wrap=True)
    table.add_column("date")
    table.add_column("description")
    table.add_column("amount", justify="right")
    table.add_column("flow")
    table.add_column("category")
    for it in items:
        table.add_row(
            it.temp_id,
            it.date,
            it.description,
            f"{it.amount:.2f}",
            it.flow.value,
            it.suggested_category or "",
        )
    console.print(table)


# ---- commands -----------------------------------------------------------------


@app.command("inbox")
def inbox_cmd(ctx: typer.Context) -> None:
    """Show the staged batch."""

    _render_batch(_run(ctx, lambda p: p.get_inbox()))


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    csv_path: Annotated[Path, typer.Argument(help="Statement export to stage")],
) -> None:
    """Stage a statement file and show the resulting batch."""

    if not csv_path.is_file():
        err_console.print(f"[red]Error:[/red] File not found: {csv_path}")
        raise typer.Exit(1)
    _render_batch(_run(ctx, lambda p: p.import_file(csv_path)))


@app.command("categorize")
def categorize_cmd(
    ctx: typer.Context,
    temp_id: Annotated[str, typer.Argument(help="tempId of the inbox row")],
    category: Annotated[str, typer.Argument(help="Category label (any string)")],
) -> None:
    """Set the suggested category of one staged row."""

    ack = _run(ctx, lambda p: p.set_category(temp_id, category))
    if ack.ok:
        console.print(f"{temp_id}: {category}")
    else:
        console.print(f"[yellow]No inbox row with tempId {temp_id}[/yellow]")


@app.command("commit")
def commit_cmd(ctx: typer.Context) -> None:
    """Move every staged row into the ledger."""

    result = _run(ctx, lambda p: p.commit_batch())
    console.print(f"Committed {result.committed_count} transaction(s).")


@app.command("summary")
def summary_cmd(
    ctx: typer.Context,
    month: Annotated[str, typer.Option(help="Month as YYYY-MM")] = "",
) -> None:
    """Spending by category and budget usage for a month."""

    target = month or date.today().strftime("%Y-%m")
    summary = _run(ctx, lambda p: p.selector.current.get_summary(target))

    table = Table(title=f"{summary.month}: total spend {summary.total_spend:.2f}")
    table.add_column("category")
    table.add_column("spent", justify="right")
    table.add_column("cap", justify="right")
    caps = {b.category: b.cap for b in summary.budgets}
    for row in summary.by_category:
        cap = caps.get(row.category)
        table.add_row(row.category, f"{row.amount:.2f}", "" if cap is None else f"{cap:.2f}")
    console.print(table)


@app.command("networth")
def networth_cmd(ctx: typer.Context) -> None:
    """Twelve-month net-worth curve."""

    points = _run(ctx, lambda p: p.selector.current.get_networth_curve())
    table = Table(title="Net worth")
    for col in ("date", "net worth", "cash", "invested", "debt"):
        table.add_column(col, justify="right" if col != "date" else "left")
    for pt in points:
        table.add_row(
            pt.date,
            f"{pt.net_worth:.2f}",
            f"{pt.cash:.2f}",
            f"{pt.invested:.2f}",
            f"{pt.debt:.2f}",
        )
    console.print(table)


@app.callback()
def _root(
    ctx: typer.Context,
    transport: Annotated[
        str | None, typer.Option(help="Transport mode: local or remote.")
    ] = None,
    database_url: Annotated[
        str | None, typer.Option(help="Override DATABASE_URL for the reference backend.")
    ] = None,
    backend_cmd: Annotated[
        str | None, typer.Option(help="Override LEDGER_INBOX_BACKEND_CMD.")
    ] = None,
) -> None:
    """Load ``.env``, configure logging and resolve settings for subcommands."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()

    try:
        settings = Settings.from_env()
        overrides: dict[str, object] = {}
        if transport is not None:
            overrides["transport"] = parse_transport_mode(transport)
        if database_url is not None:
            overrides["database_url"] = database_url
        if backend_cmd is not None:
            overrides["backend_command"] = backend_cmd
    except ConfigError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    ctx.obj = dataclasses.replace(settings, **overrides)


if __name__ == "__main__":  # pragma: no cover
    app()
