# PATH: config/__init__.py
"""
Configuration loading utilities for the flash-swap engine.
"""

from pathlib import Path
from typing import Any, Dict

import yaml

from core.exceptions import ConfigError


CONFIG_DIR = Path(__file__).parent


def load_yaml(filename: str | Path) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of file in config directory, or a path

    Returns:
        Parsed YAML as dict
    """
    filepath = Path(filename)
    if not filepath.is_absolute() and not filepath.exists():
        filepath = CONFIG_DIR / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(
            f"Config root must be a mapping: {filepath}",
            {"path": str(filepath), "type": type(data).__name__},
        )
    return data


def load_deployment(path: str | Path = "deployment.yaml") -> Dict[str, Any]:
    """
    Load a deployment file: the `engine` section plus the reference
    `tokens` and `pools` that local scenarios are checked against.
    """
    return load_yaml(path)


def load_scenario(path: str | Path = "scenario_local.yaml") -> Dict[str, Any]:
    """Load a local simulation scenario."""
    return load_yaml(path)
