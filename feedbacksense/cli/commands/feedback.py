"""Feedback stream commands for the FeedbackSense CLI."""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional

import typer
from rich.panel import Panel

from feedbacksense.cli.io import console
from feedbacksense.cli.renderers import render_item_panel, render_item_table
from feedbacksense.cli.utils import (
    SAMPLE_SOURCE,
    apply_log_override,
    normalize_source,
    pick_sample,
)
from feedbacksense.core.errors import AnalysisError

logger = logging.getLogger(__name__)

LOG_LEVEL_OPTION = typer.Option(
    None,
    "--log-level",
    "-l",
    help="Override logging level for this invocation (e.g., DEBUG, INFO).",
)


def _cli() -> Any:
    return sys.modules["feedbacksense.cli"]


def submit(
    text: Optional[str] = typer.Argument(
        None, help="Customer review or support ticket content to analyze."
    ),
    source: str = typer.Option(
        "Manual Entry",
        "--source",
        "-s",
        help="Where the feedback came from (e.g., Zendesk, App Store, Email).",
    ),
    sample: bool = typer.Option(
        False,
        "--sample",
        help="Analyze a built-in sample ticket instead of TEXT.",
    ),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Analyze a piece of feedback and add it to the stream."""

    apply_log_override(log_level)
    if sample:
        text = pick_sample()
        source = SAMPLE_SOURCE
    if not text or not text.strip():
        raise typer.BadParameter("Feedback text is required (or pass --sample).")

    store = _cli().get_store()
    with console.status("Analyzing feedback..."):
        try:
            item = store.submit(text, normalize_source(source))
        except AnalysisError as exc:
            logger.debug("Submit failed: %s", exc)
            console.print(f"[red]Error: {store.last_error or exc}[/]")
            raise typer.Exit(code=1) from exc

    render_item_panel(item)


def list_items(
    limit: int = typer.Option(
        0,
        "--limit",
        "-n",
        min=0,
        help="Number of most recent items to display (0 = all).",
    ),
    raw: bool = typer.Option(False, "--raw", help="Emit raw JSON instead of a table."),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Show analyzed feedback, newest first."""

    apply_log_override(log_level)
    items = _cli().get_store().items
    subset = items if limit == 0 else items[:limit]
    if raw:
        console.print_json(data=[item.as_dict() for item in subset])
        return
    render_item_table(subset, total=len(items))


def show(
    item_id: str = typer.Argument(..., help="Identifier of the feedback item."),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Show one analyzed feedback item in full."""

    apply_log_override(log_level)
    item = _cli().get_store().find(item_id)
    if item is None:
        console.print(f"[yellow]No feedback item with id {item_id}.[/]")
        raise typer.Exit(code=1)
    render_item_panel(item)


def delete(
    item_id: str = typer.Argument(..., help="Identifier of the feedback item to delete."),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Delete one feedback item (invalidates the current report)."""

    apply_log_override(log_level)
    removed = _cli().get_store().delete(item_id)
    if removed:
        console.print(f"[green]Deleted feedback item {item_id}.[/]")
    else:
        console.print(f"[yellow]No feedback item with id {item_id}.[/]")


def clear(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Clear without confirmation prompt.",
    ),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Erase all analyzed feedback and the current report."""

    apply_log_override(log_level)
    store = _cli().get_store()
    if not store.items and store.report is None:
        console.print("[yellow]History is already empty.[/]")
        return

    if not force and not typer.confirm("Are you sure you want to clear all history?"):
        console.print("[yellow]History unchanged.[/]")
        return

    store.clear_all()
    console.print(Panel("All feedback and insights cleared.", title="Clear History"))


__all__ = ["clear", "delete", "list_items", "show", "submit"]
