"""Statistics and insight report commands for the FeedbackSense CLI."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from feedbacksense.cli.commands.feedback import LOG_LEVEL_OPTION
from feedbacksense.cli.io import console
from feedbacksense.cli.renderers import render_report, render_stats
from feedbacksense.cli.reporting import build_report_payload, render_report_markdown
from feedbacksense.cli.utils import apply_log_override
from feedbacksense.core.errors import AnalysisError, InsufficientDataError

logger = logging.getLogger(__name__)


def _cli() -> Any:
    return sys.modules["feedbacksense.cli"]


def stats(
    raw: bool = typer.Option(False, "--raw", help="Emit raw JSON instead of tables."),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Show sentiment, priority and tag statistics."""

    apply_log_override(log_level)
    runtime = _cli().get_runtime()
    computed = runtime.stats_service.compute(runtime.store.items)
    if raw:
        console.print_json(data=computed.as_dict())
        return
    render_stats(computed)


def report_generate(log_level: Optional[str] = LOG_LEVEL_OPTION) -> None:
    """Synthesize a trend and theme report over all current feedback."""

    apply_log_override(log_level)
    store = _cli().get_store()
    with console.status("Generating report..."):
        try:
            report = store.request_report()
        except InsufficientDataError as exc:
            console.print(f"[yellow]{exc}[/]")
            raise typer.Exit(code=1) from exc
        except AnalysisError as exc:
            logger.debug("Report generation failed: %s", exc)
            console.print(f"[red]Error: {store.last_error or exc}[/]")
            raise typer.Exit(code=1) from exc

    if report is None:
        console.print(
            "[yellow]Feedback changed while the report was generated; "
            "the result was discarded. Run `report generate` again.[/]"
        )
        return
    render_report(report, item_count=len(store.items))


def report_show(
    raw: bool = typer.Option(False, "--raw", help="Emit raw JSON instead of panels."),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Display the current insights report, if any."""

    apply_log_override(log_level)
    store = _cli().get_store()
    if raw:
        console.print_json(data=store.report.as_dict() if store.report else None)
        return
    render_report(store.report, item_count=len(store.items))


def report_dismiss(log_level: Optional[str] = LOG_LEVEL_OPTION) -> None:
    """Discard the current insights report."""

    apply_log_override(log_level)
    store = _cli().get_store()
    if store.report is None:
        console.print("[yellow]No current report to dismiss.[/]")
        return
    store.dismiss_report()
    console.print("[green]Report dismissed.[/]")


def report_export(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the Markdown report to this file instead of the console.",
    ),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Export statistics and the current report as Markdown."""

    apply_log_override(log_level)
    runtime = _cli().get_runtime()
    snapshot = runtime.store.snapshot()
    payload = build_report_payload(
        snapshot,
        runtime.stats_service.compute(snapshot.items),
        app_name=runtime.app_name,
    )
    markdown = render_report_markdown(payload)
    if output is None:
        console.print(markdown, markup=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(markdown, encoding="utf-8")
    console.print(f"[green]Report written to {output}[/]")


__all__ = [
    "report_dismiss",
    "report_export",
    "report_generate",
    "report_show",
    "stats",
]
