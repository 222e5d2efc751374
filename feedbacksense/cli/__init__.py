"""FeedbackSense CLI package."""

from __future__ import annotations

import logging

import typer

from feedbacksense.cli.commands.feedback import clear, delete, list_items, show, submit
from feedbacksense.cli.commands.insights import (
    report_dismiss,
    report_export,
    report_generate,
    report_show,
    stats,
)
from feedbacksense.cli.io import console
from feedbacksense.cli.runtime import (
    get_runtime,
    get_store,
    initialize_runtime,
    set_runtime,
    set_runtime_level,
)
from feedbacksense.cli.state import PROJECT_ROOT, Runtime
from feedbacksense.core.llm_gateway import LLMGateway
from feedbacksense.db.durable_store import DurableStore
from feedbacksense.db.sqlite_client import SQLiteClient
from feedbacksense.services.analysis_client import AnalysisClient
from feedbacksense.services.config_service import ConfigService
from feedbacksense.services.prompt_service import PromptService
from feedbacksense.services.stats_service import StatsService

logger = logging.getLogger(__name__)

# Typer applications ---------------------------------------------------------

app = typer.Typer(
    add_completion=False, help="FeedbackSense: AI customer feedback insights."
)
report_app = typer.Typer(
    add_completion=False, help="Generate, inspect or discard the insights report."
)

# Command registration -------------------------------------------------------

app.command()(submit)
app.command("list")(list_items)
app.command()(show)
app.command()(delete)
app.command()(clear)
app.command()(stats)

report_app.command("generate")(report_generate)
report_app.command("show")(report_show)
report_app.command("dismiss")(report_dismiss)
report_app.command("export")(report_export)

app.add_typer(report_app, name="report")


def main() -> None:
    """CLI entry point."""

    app()


__all__: list[str] = [
    # Typer apps / entrypoints
    "app",
    "report_app",
    "main",
    # Console & logging
    "console",
    "logger",
    # Runtime
    "PROJECT_ROOT",
    "Runtime",
    "get_runtime",
    "get_store",
    "initialize_runtime",
    "set_runtime",
    "set_runtime_level",
    # Overridable dependencies
    "AnalysisClient",
    "ConfigService",
    "DurableStore",
    "LLMGateway",
    "PromptService",
    "SQLiteClient",
    "StatsService",
    # Commands
    "clear",
    "delete",
    "list_items",
    "report_dismiss",
    "report_export",
    "report_generate",
    "report_show",
    "show",
    "stats",
    "submit",
]
