#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Global configuration manager, providing a unified interface for accessing configurations
"""

import os
import threading
from typing import Any, Dict, Optional

from deskcontext.config.config_manager import ConfigManager
from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)

CONFIG_PATH_ENV = "DESKCONTEXT_CONFIG_PATH"


class GlobalConfig:
    """
    Global Configuration Manager (Singleton Pattern)

    All components can access the configuration via GlobalConfig.get_instance().
    """

    _instance = None
    _lock = threading.Lock()
    _initialized = False

    def __new__(cls):
        """Ensure singleton pattern"""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            with self._lock:
                if not self._initialized:
                    self._config_manager: Optional[ConfigManager] = None
                    self._config_path: Optional[str] = None
                    self._auto_initialized = False
                    GlobalConfig._initialized = True

    @classmethod
    def get_instance(cls) -> "GlobalConfig":
        """
        Get the global configuration manager instance
        """
        instance = cls()
        if not instance._auto_initialized and instance._config_manager is None:
            instance._auto_initialize()
        return instance

    @classmethod
    def reset(cls):
        """Reset the singleton instance (mainly for testing)"""
        with cls._lock:
            cls._instance = None
            cls._initialized = False

    def _auto_initialize(self):
        """Automatically initialize the configuration"""
        if self._auto_initialized:
            return

        self._auto_initialized = True
        config_path = os.environ.get(CONFIG_PATH_ENV, "config/config.yaml")
        try:
            self.initialize(config_path)
        except Exception as e:
            logger.error(f"GlobalConfig auto-initialization failed: {e}, using defaults")
            self._config_manager = ConfigManager()
            self._config_manager.load_defaults()

    def initialize(self, config_path: Optional[str] = None) -> bool:
        """
        Initialize the configuration manager

        Raises:
            FileNotFoundError: If the configuration file does not exist
        """
        config_manager = ConfigManager()
        config_manager.load_config(config_path)
        self._config_manager = config_manager
        self._config_path = config_manager.get_config_path()
        self._auto_initialized = True
        logger.info(f"Config loaded from: {self._config_path}")
        return True

    def get_config_manager(self) -> Optional[ConfigManager]:
        return self._config_manager

    def get_config(self, path: Optional[str] = None) -> Optional[Any]:
        """
        Get configuration, optionally by dotted path (e.g. ``capture.browser_tabs``)
        """
        if not self._config_manager:
            logger.warning("Config manager not initialized")
            return None

        config = self._config_manager.get_config()
        if not config:
            return None

        if not path:
            return config

        value = config
        for key in path.split("."):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                logger.debug(f"Config path '{path}' not found")
                return None

        return value

    def is_enabled(self, module: str) -> bool:
        """
        Check if a module is enabled
        """
        config = self.get_config(module)
        if isinstance(config, dict):
            return config.get("enabled", False)
        return False

    def is_initialized(self) -> bool:
        """Check if the global configuration is initialized"""
        return self._config_manager is not None


def get_global_config() -> GlobalConfig:
    """Convenience function to get the global config instance"""
    return GlobalConfig.get_instance()


def get_config(path: Optional[str] = None) -> Optional[Any]:
    """Convenience function to get a configuration value"""
    return GlobalConfig.get_instance().get_config(path)
