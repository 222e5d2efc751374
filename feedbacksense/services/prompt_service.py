"""Prompt templates for the analysis workflows.

``prompts/registry.yaml`` maps a prompt name to a template file relative to
the registry. Templates use ``string.Template`` placeholders (``$feedback``,
``$data``); a literal dollar sign is written ``$$``.

Updates:
    v0.1.0 - 2026-10-18 - Registry loader with ``string.Template`` rendering.
"""

from __future__ import annotations

import os
from pathlib import Path
from string import Template
from typing import Any, Dict

import yaml

from ..core.config_loader import PROJECT_ROOT

PROMPTS_PATH_ENV = "FEEDBACKSENSE_PROMPTS_PATH"
REGISTRY_FILE = "registry.yaml"


def default_prompts_path() -> Path:
    return Path(os.environ.get(PROMPTS_PATH_ENV, PROJECT_ROOT / "prompts"))


class PromptService:
    """Resolves named prompt templates and fills in their placeholders."""

    def __init__(self, base_path: Path | None = None) -> None:
        """
        Args:
            base_path (Path | None): Directory holding ``registry.yaml``.

        Raises:
            FileNotFoundError: If the registry file does not exist.
            ValueError: If the registry is not a mapping of names to paths.
        """

        self._base_path = (base_path or default_prompts_path()).resolve()
        registry_path = self._base_path / REGISTRY_FILE
        if not registry_path.is_file():
            raise FileNotFoundError(f"Prompt registry missing: {registry_path}")
        self._registry = self._read_registry(registry_path)

    @property
    def registry(self) -> Dict[str, Path]:
        return dict(self._registry)

    def get_prompt(self, name: str) -> str:
        """Return the raw text of template ``name``.

        Raises:
            KeyError: If ``name`` is not registered.
            FileNotFoundError: If the registered file is missing.
        """

        if name not in self._registry:
            raise KeyError(f"Prompt '{name}' is not defined in the registry.")
        return self._registry[name].read_text(encoding="utf-8")

    def render(self, name: str, **values: Any) -> str:
        """Return template ``name`` with every ``$placeholder`` substituted.

        Raises:
            KeyError: If the template uses a placeholder not given in ``values``.
        """

        template = Template(self.get_prompt(name).strip())
        return template.substitute({key: str(value) for key, value in values.items()})

    def _read_registry(self, registry_path: Path) -> Dict[str, Path]:
        entries = yaml.safe_load(registry_path.read_text(encoding="utf-8")) or {}
        if not isinstance(entries, dict):
            raise ValueError(
                f"Prompt registry must be a mapping, got {type(entries).__name__}"
            )

        resolved: Dict[str, Path] = {}
        for name, location in entries.items():
            if not isinstance(name, str) or not isinstance(location, str):
                raise ValueError(
                    f"Prompt registry entry {name!r} must map a name to a file path"
                )
            path = Path(location)
            resolved[name] = path if path.is_absolute() else self._base_path / path
        return resolved


__all__ = ["PROMPTS_PATH_ENV", "PromptService", "default_prompts_path"]
