"""Utility helpers shared across CLI command modules."""

from __future__ import annotations

import logging
import random
import sys
from typing import Optional

import typer

logger = logging.getLogger(__name__)

KNOWN_SOURCES: tuple[str, ...] = (
    "Manual Entry",
    "Zendesk",
    "App Store",
    "Play Store",
    "Email",
    "Social Media",
    "Simulated Ticket",
)

SAMPLE_SOURCE = "Simulated Ticket"

SAMPLE_FEEDBACKS: tuple[str, ...] = (
    "I love the new update! The interface is much cleaner, but I'm struggling to find the export button now. Can you make it more visible?",
    "This app crashes every time I try to upload a photo larger than 5MB. It's incredibly frustrating and I might cancel my subscription if not fixed.",
    "The customer support team was helpful, but the billing process is too confusing. Why are there so many hidden fees?",
    "Great potential, but it loads very slowly on my Android device. Please optimize for mobile performance.",
)


def _cli():
    return sys.modules["feedbacksense.cli"]


def apply_log_override(log_level: Optional[str]) -> None:
    """Override logging level for the current invocation."""

    if not log_level or not isinstance(log_level, str):
        return
    try:
        _cli().set_runtime_level(log_level)
        logger.info("Log level overridden to %s", log_level.upper())
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def pick_sample(rng: random.Random | None = None) -> str:
    """Return one of the built-in sample feedback texts."""

    return (rng or random).choice(SAMPLE_FEEDBACKS)


def normalize_source(source: str) -> str:
    """Match ``source`` case-insensitively against known labels, else keep it."""

    cleaned = source.strip()
    for known in KNOWN_SOURCES:
        if known.lower() == cleaned.lower():
            return known
    return cleaned or KNOWN_SOURCES[0]


__all__ = [
    "KNOWN_SOURCES",
    "SAMPLE_FEEDBACKS",
    "SAMPLE_SOURCE",
    "apply_log_override",
    "normalize_source",
    "pick_sample",
]
