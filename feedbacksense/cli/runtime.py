"""Runtime wiring for the FeedbackSense CLI."""

from __future__ import annotations

import logging
from typing import Any

from feedbacksense.cli.state import PROJECT_ROOT, Runtime
from feedbacksense.core.feedback_store import FeedbackStore
from feedbacksense.core.llm_gateway import LLMGateway
from feedbacksense.core.logging_setup import configure_logging
from feedbacksense.core.logging_setup import set_runtime_level
from feedbacksense.db.durable_store import DurableStore
from feedbacksense.db.sqlite_client import SQLiteClient
from feedbacksense.services.analysis_client import CLASSIFY_WORKFLOW, AnalysisClient
from feedbacksense.services.config_service import ConfigService
from feedbacksense.services.prompt_service import PromptService
from feedbacksense.services.stats_service import StatsService

logger = logging.getLogger(__name__)

_RUNTIME_CACHE: Runtime | None = None

_DEFAULT_CONFIG_SERVICE = ConfigService
_DEFAULT_SQLITE_CLIENT = SQLiteClient
_DEFAULT_DURABLE_STORE = DurableStore
_DEFAULT_LLM_GATEWAY = LLMGateway
_DEFAULT_PROMPT_SERVICE = PromptService
_DEFAULT_ANALYSIS_CLIENT = AnalysisClient
_DEFAULT_STATS_SERVICE = StatsService


def initialize_runtime() -> Runtime:
    """Initialize services and hydrate the feedback store from durable storage."""

    config_service_cls = _resolve_dependency("ConfigService", _DEFAULT_CONFIG_SERVICE)
    config_service = config_service_cls()
    configure_logging(config_service.logging_config)
    logger.debug("Runtime initialization starting.")

    db_config = config_service.database_config
    sqlite_path = db_config.get("sqlite_path", str(PROJECT_ROOT / "data" / "feedbacksense.db"))
    sqlite_cls = _resolve_dependency("SQLiteClient", _DEFAULT_SQLITE_CLIENT)
    sqlite_client = sqlite_cls(sqlite_path)
    sqlite_client.initialize_schema()
    durable_cls = _resolve_dependency("DurableStore", _DEFAULT_DURABLE_STORE)
    durable_store = durable_cls(sqlite_client=sqlite_client)

    llm_gateway_cls = _resolve_dependency("LLMGateway", _DEFAULT_LLM_GATEWAY)
    llm_gateway = llm_gateway_cls(config_service=config_service)
    prompt_service_cls = _resolve_dependency("PromptService", _DEFAULT_PROMPT_SERVICE)
    prompt_service = prompt_service_cls()
    analysis_cls = _resolve_dependency("AnalysisClient", _DEFAULT_ANALYSIS_CLIENT)
    analysis_client = analysis_cls(llm_gateway=llm_gateway, prompt_service=prompt_service)

    store = FeedbackStore.from_persistence(
        analysis_client,
        durable_store,
        min_report_items=config_service.min_report_items,
    )
    stats_cls = _resolve_dependency("StatsService", _DEFAULT_STATS_SERVICE)

    app_name = config_service.app_metadata.get("name", "FeedbackSense")
    model_label = _model_label(config_service)
    logger.debug("Runtime initialized (items=%s).", len(store.items))
    return Runtime(
        store=store,
        stats_service=stats_cls(),
        app_name=str(app_name),
        model_label=model_label,
    )


def get_runtime() -> Runtime:
    """Return the lazily-initialized runtime."""

    global _RUNTIME_CACHE
    if _RUNTIME_CACHE is None:
        _RUNTIME_CACHE = initialize_runtime()
    return _RUNTIME_CACHE


def set_runtime(runtime: Runtime | None) -> None:
    """Replace the cached runtime."""

    global _RUNTIME_CACHE
    _RUNTIME_CACHE = runtime


def get_store() -> FeedbackStore:
    return get_runtime().store


def _model_label(config_service: ConfigService) -> str | None:
    try:
        return config_service.get_workflow_model_config(CLASSIFY_WORKFLOW).model
    except (KeyError, ValueError):
        return None


def _resolve_dependency(name: str, default: Any) -> Any:
    """Return a dependency, preferring overrides on the cli package."""

    from sys import modules

    cli_module = modules.get("feedbacksense.cli")
    if cli_module is not None and hasattr(cli_module, name):
        return getattr(cli_module, name)
    return default


__all__ = [
    "get_runtime",
    "get_store",
    "initialize_runtime",
    "set_runtime",
    "set_runtime_level",
]
