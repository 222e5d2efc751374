"""YAML configuration files for FeedbackSense.

The configuration directory defaults to ``<project root>/config`` and can be
moved with the ``FEEDBACKSENSE_CONFIG_PATH`` environment variable.

Updates:
    v0.1.0 - 2026-10-18 - YAML loader rooted at the FeedbackSense config directory.
"""

from __future__ import annotations

import functools
import os
from pathlib import Path
from typing import Any, Dict

import yaml

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_PATH_ENV = "FEEDBACKSENSE_CONFIG_PATH"


def default_config_path() -> Path:
    return Path(os.environ.get(CONFIG_PATH_ENV, PROJECT_ROOT / "config"))


@functools.lru_cache(maxsize=None)
def _read_mapping(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


class ConfigLoader:
    """Reads named ``.yaml`` files from one configuration directory."""

    def __init__(self, base_path: Path | None = None) -> None:
        """
        Args:
            base_path (Path | None): Configuration directory; see ``default_config_path``.

        Raises:
            FileNotFoundError: If the directory does not exist.
        """

        self._base_path = (base_path or default_config_path()).resolve()
        if not self._base_path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {self._base_path}")

    @property
    def base_path(self) -> Path:
        return self._base_path

    def load(self, name: str, *, required: bool = True) -> Dict[str, Any]:
        """Return the parsed ``<name>.yaml`` mapping (cached per file path).

        Args:
            name (str): File stem such as ``settings``.
            required (bool): When ``False`` a missing file yields ``{}``.

        Raises:
            FileNotFoundError: If a required file is missing.
            ValueError: If the file's top level is not a mapping.
        """

        path = self._base_path / f"{name}.yaml"
        if not path.is_file():
            if required:
                raise FileNotFoundError(f"Config file not found: {path}")
            return {}
        return _read_mapping(path)


__all__ = ["CONFIG_PATH_ENV", "ConfigLoader", "PROJECT_ROOT", "default_config_path"]
