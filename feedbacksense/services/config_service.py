"""Typed access to FeedbackSense configuration.

Four files are read from the configuration directory: ``settings.yaml``
(application name, logging, report threshold), ``database.yaml``,
``models.yaml`` (per-workflow model parameters over shared ``defaults``)
and ``providers.yaml`` (credentials and endpoints).

Updates:
    v0.1.0 - 2026-10-18 - Typed views over settings, database, model and provider files.
"""

from __future__ import annotations

import os
from collections import ChainMap
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ..core.config_loader import ConfigLoader

DEFAULT_MIN_REPORT_ITEMS = 2


@dataclass(slots=True, frozen=True)
class WorkflowModelConfig:
    """Model parameters for one analysis workflow."""

    workflow: str
    model: str
    temperature: float | None = None
    provider: str | None = None
    max_tokens: int | None = None
    max_attempts: int = 1


def _mapping(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _positive_int(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{label} must be a positive integer, got {value!r}")
    return value


def _expand(value: Any, key: str | None = None) -> Any:
    """Expand ``$VAR`` references in string values, except ``api_key_env`` names."""

    if isinstance(value, Mapping):
        return {name: _expand(entry, name) for name, entry in value.items()}
    if isinstance(value, list):
        return [_expand(entry, key) for entry in value]
    if isinstance(value, str) and key != "api_key_env":
        return os.path.expandvars(value)
    return value


class ConfigService:
    """Configuration facade shared by the runtime, gateway and store."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._loader = ConfigLoader(base_path=config_path)
        self._settings = self._loader.load("settings")
        self._models = self._loader.load("models")
        self._database = self._loader.load("database", required=False)
        self._providers = self._loader.load("providers", required=False)

    @property
    def base_path(self) -> Path:
        return self._loader.base_path

    @property
    def app_metadata(self) -> dict[str, Any]:
        return _mapping(self._settings.get("app"))

    @property
    def logging_config(self) -> dict[str, Any]:
        """``level`` and ``format`` (``json`` or ``rich``) for log output."""
        return _mapping(self._settings.get("logging"))

    @property
    def database_config(self) -> dict[str, Any]:
        return _mapping(self._database.get("database"))

    @property
    def min_report_items(self) -> int:
        report = _mapping(self._settings.get("report"))
        return _positive_int(report.get("min_items", DEFAULT_MIN_REPORT_ITEMS), "report.min_items")

    @property
    def providers(self) -> dict[str, dict[str, Any]]:
        registry = _mapping(self._providers.get("providers"))
        return {name: _expand(_mapping(settings)) for name, settings in registry.items()}

    def get_workflow_model_config(self, workflow: str) -> WorkflowModelConfig:
        """Resolve ``workflow`` settings over the shared ``defaults`` block.

        ``max_tokens`` is never inherited from defaults.

        Raises:
            KeyError: If ``models.yaml`` declares no such workflow.
            ValueError: If the model name is blank or ``max_attempts`` is not
                a positive integer.
        """

        declared = _mapping(self._models.get("workflows")).get(workflow)
        if not isinstance(declared, Mapping):
            raise KeyError(f"Workflow config not found for '{workflow}'")

        merged = ChainMap(dict(declared), _mapping(self._models.get("defaults")))
        model = merged.get("model")
        if not isinstance(model, str) or not model.strip():
            raise ValueError(
                f"Workflow config for '{workflow}' requires a non-empty 'model' value."
            )

        return WorkflowModelConfig(
            workflow=workflow,
            model=model.strip(),
            temperature=merged.get("temperature"),
            provider=merged.get("provider"),
            max_tokens=declared.get("max_tokens"),
            max_attempts=_positive_int(
                merged.get("max_attempts", 1), f"{workflow}.max_attempts"
            ),
        )


__all__ = ["ConfigService", "DEFAULT_MIN_REPORT_ITEMS", "WorkflowModelConfig"]
