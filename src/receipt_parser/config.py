"""YAML configuration for batch processing."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'input_patterns': ['*.txt'],
    'max_workers': 4,
    'encoding': 'utf-8',
    'review': {
        'tolerance': 0.01,
    },
    'log_level': 'INFO',
}


class ConfigError(Exception):
    """Raised when a configuration file is missing or malformed."""


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration, merged over the defaults.

    Args:
        path: YAML file to read; None returns the defaults

    Returns:
        Configuration dictionary (unknown keys are kept)
    """
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    logger.info(f"Loaded config from {path}")
    return _merge(DEFAULT_CONFIG, loaded)
