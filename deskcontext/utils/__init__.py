# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Utility module - helper functions and classes
"""

from deskcontext.utils.file_utils import ensure_dir, remove_file
from deskcontext.utils.json_utils import dumps
from deskcontext.utils.logging_utils import get_logger, setup_logging

__all__ = ["setup_logging", "get_logger", "ensure_dir", "remove_file", "dumps"]
