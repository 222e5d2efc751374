"""CLI runtime state container."""

from __future__ import annotations

from dataclasses import dataclass

from feedbacksense.core.config_loader import PROJECT_ROOT
from feedbacksense.core.feedback_store import FeedbackStore
from feedbacksense.services.stats_service import StatsService


@dataclass
class Runtime:
    """Wired services shared by CLI commands for one process."""

    store: FeedbackStore
    stats_service: StatsService
    app_name: str = "FeedbackSense"
    model_label: str | None = None


__all__ = ["PROJECT_ROOT", "Runtime"]
