#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0


"""
Configuration manager, responsible for loading and managing system configurations
"""

import copy
import os
import re
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "log_path": None,
    },
    "storage": {
        "data_dir": "./persist",
        "db_name": "deskcontext.db",
        "captures_dir": "captures",
        "screenshots_dir": "capture_screenshots",
    },
    "capture": {
        "settle_delay": 0.1,
        "active_window": {"enabled": True, "timeout": 0.5},
        "browser_tabs": {
            "enabled": True,
            "timeout": 1.0,
            "max_tabs": 50,
            "browsers": ["Chrome", "Safari", "Firefox", "Edge"],
        },
        "clipboard": {"enabled": True, "max_length": 10000},
        "screenshot": {"enabled": True, "max_image_size": None},
    },
    "webhook": {
        "url": "http://localhost:5678/webhook/desk-context",
        "timeout": 10.0,
        "test_timeout": 5.0,
        "max_attempts": 3,
        "retry_delay": 1.0,
        "user_agent": "DeskContext/1.0",
    },
    "scheduler": {
        "enabled": True,
        "webhook_outbox": {"enabled": True, "interval": 300},
        "capture_cleanup": {"enabled": True, "interval": 86400, "retention_days": 30},
    },
}


def merge_config(defaults: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Return a new configuration with ``overrides`` layered over ``defaults``.

    Sections are merged key by key; any other value in ``overrides`` replaces the
    default outright. Neither input is modified.
    """
    merged = copy.deepcopy(defaults)
    for key, value in (overrides or {}).items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_config(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ConfigManager:
    """
    Configuration Manager

    Loads the YAML configuration, substitutes environment variables and
    merges the result over the built-in defaults
    """

    def __init__(self):
        """Initialize the configuration manager"""
        self._config: Optional[Dict[str, Any]] = None
        self._config_path: Optional[str] = None
        self._env_vars: Dict[str, str] = {}

    def load_config(self, config_path: Optional[str] = None) -> bool:
        """
        Load configuration

        Raises:
            FileNotFoundError: If the configuration file does not exist
        """
        if not config_path:
            config_path = DEFAULT_CONFIG_PATH
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Specified configuration file does not exist: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}

        self._load_env_vars()
        config_data = self._replace_env_vars(config_data)
        self._config = merge_config(DEFAULT_CONFIG, config_data)
        self._config_path = config_path
        logger.info(f"Configuration loaded successfully: {self._config_path}")
        return True

    def load_defaults(self) -> None:
        """Use the built-in defaults without a configuration file"""
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self._config_path = None

    def _load_env_vars(self) -> None:
        """Load environment variables from system and .env file"""
        # .env does not override variables that are already set
        load_dotenv()

        for key, value in os.environ.items():
            self._env_vars[key] = value

    def _replace_env_vars(self, config_data: Any) -> Any:
        """
        Replace environment variable references in the configuration

        Supported formats:
        - ${VAR}: Simple variable substitution
        - ${VAR:default}: Use default value if the variable does not exist
        """
        if isinstance(config_data, dict):
            return {k: self._replace_env_vars(v) for k, v in config_data.items()}
        elif isinstance(config_data, list):
            return [self._replace_env_vars(item) for item in config_data]
        elif isinstance(config_data, str):
            pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

            def replace_match(match):
                var_name = match.group(1)
                default_value = match.group(2) if match.group(2) is not None else ""
                env_value = self._env_vars.get(var_name)
                return env_value if env_value is not None else default_value

            replaced = re.sub(pattern, replace_match, config_data)
            low = replaced.strip().lower()
            if low == "true":
                return True
            if low == "false":
                return False
            return replaced
        else:
            return config_data

    def get_config(self) -> Optional[Dict[str, Any]]:
        """
        Get configuration

        Returns:
            Optional[Dict[str, Any]]: Configuration dictionary, or None if not loaded
        """
        return self._config

    def get_config_path(self) -> Optional[str]:
        return self._config_path
