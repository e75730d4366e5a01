"""Config I/O utilities (JSON or YAML, picked by file suffix)."""

from __future__ import annotations

import json
import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pydantic
import yaml

from .models import Settings
from ..core.paths import expand_home, get_program_dir
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "HACK_DOWNLOADER_CONFIG"
DEFAULT_CONFIG_NAME = "config.json"
_YAML_SUFFIXES = (".yaml", ".yml")


def get_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(expand_home(override))
    return get_program_dir() / DEFAULT_CONFIG_NAME


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in _YAML_SUFFIXES


def _parse(path: Path, raw: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(raw) if _is_yaml(path) else json.loads(raw)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Config file is not valid: {exc}", file_path=str(path)) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a mapping", file_path=str(path))
    return data


def load_config(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings; a missing file yields the defaults."""
    path = Path(config_path) if config_path is not None else get_config_path()
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return Settings()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file: {exc}", file_path=str(path)) from exc

    try:
        return Settings.model_validate(_parse(path, raw))
    except pydantic.ValidationError as exc:
        logger.warning("Config validation failed for %s", path)
        raise ConfigurationError(f"Invalid settings: {exc}", file_path=str(path)) from exc


def save_config(settings: Settings, config_path: Optional[Union[str, Path]] = None) -> Path:
    path = Path(config_path) if config_path is not None else get_config_path()
    data = settings.model_dump(mode="json")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            if _is_yaml(path):
                yaml.safe_dump(data, f, sort_keys=False)
            else:
                json.dump(data, f, indent=2)
    except OSError as exc:
        raise ConfigurationError(f"Cannot write config file: {exc}", file_path=str(path)) from exc
    return path
