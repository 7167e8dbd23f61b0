# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Configuration module - loads and manages configuration
"""

from deskcontext.config.config_manager import DEFAULT_CONFIG, ConfigManager, merge_config
from deskcontext.config.global_config import GlobalConfig, get_config, get_global_config

__all__ = [
    "DEFAULT_CONFIG",
    "ConfigManager",
    "merge_config",
    "GlobalConfig",
    "get_global_config",
    "get_config",
]
