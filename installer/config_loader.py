# installer/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the pod setup.

Handles loading settings from Pydantic model defaults, environment
variables, a YAML file and command-line arguments, applying this order of
precedence (later wins):
1. Pydantic Model Defaults
2. Environment Variables (read by Pydantic's BaseSettings)
3. YAML Configuration File
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from installer import config as static_config
from installer.config_models import AppSettings

module_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.yaml"

# CLI argument name -> (settings section or None for top level, field name)
CLI_ARGUMENT_MAP: Dict[str, tuple] = {
    "log_prefix": (None, "log_prefix"),
    "workspace_dir": ("repo", "workspace_dir"),
    "repo_slug": ("repo", "slug"),
    "model": ("ollama", "model"),
    "ollama_host": ("ollama", "host"),
    "bin_dir": ("launchers", "bin_dir"),
}


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates `source` with values from `overrides`. Nested
    dictionaries are merged; None values in `overrides` never replace an
    existing value.

    Returns:
        The updated `source` dictionary.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def _resolve_config_path(config_file_path: str) -> Path:
    """
    An absolute path or a file present relative to the working directory is
    used as given. Otherwise the file is looked up in the project root.
    """
    candidate = Path(config_file_path)
    if candidate.is_absolute() or candidate.exists():
        return candidate
    return static_config.PROJECT_ROOT / config_file_path


def _load_yaml_file(
    yaml_config_path: Path, logger_to_use: logging.Logger
) -> Dict[str, Any]:
    if not (yaml_config_path.exists() and yaml_config_path.is_file()):
        logger_to_use.info(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}

    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except IOError as e:
        logger_to_use.warning(
            f"Could not read config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}

    logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def _cli_overrides(cli_args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    cli_arg_dict = vars(cli_args)

    for cli_key, (section, field) in CLI_ARGUMENT_MAP.items():
        cli_value = cli_arg_dict.get(cli_key)
        if cli_value is None:
            continue
        if section is None:
            overrides[field] = cli_value
        else:
            overrides.setdefault(section, {})[field] = cli_value

    if cli_arg_dict.get("non_interactive"):
        overrides["interactive"] = False
    if cli_arg_dict.get("skip_upgrade"):
        overrides["system_upgrade"] = False

    return overrides


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: str = DEFAULT_CONFIG_FILE,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads application settings with the precedence described in the module
    docstring.

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: Path to the YAML configuration file.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        SystemExit: The merged configuration does not validate.
    """
    logger_to_use = current_logger if current_logger else module_logger

    # Model defaults < environment variables
    current_values_dict = AppSettings().model_dump(exclude_defaults=False)

    yaml_data = _load_yaml_file(
        _resolve_config_path(config_file_path), logger_to_use
    )
    current_values_dict = _deep_update(current_values_dict, yaml_data)

    if cli_args:
        current_values_dict = _deep_update(
            current_values_dict, _cli_overrides(cli_args)
        )

    try:
        final_settings = AppSettings(**current_values_dict)
    except Exception as e:  # Pydantic validation errors
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    logger_to_use.debug(
        "Successfully loaded and validated application settings"
    )
    return final_settings
