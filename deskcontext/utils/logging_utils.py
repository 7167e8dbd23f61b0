#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0


"""
Logging utilities - loguru sinks and per-module loggers

All log output goes to stderr (and optionally a file) so that stdout
stays free for the JSON printed by the command line.
"""

import os
import sys
from typing import Any, Dict, Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <7}</level> | "
    "<magenta>{extra[name]}</magenta> | <cyan>{message}</cyan>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {extra[name]} | {message}"


class LogManager:
    """
    Log manager

    Owns the loguru sinks: a console sink on stderr and an optional dated,
    rotating file sink
    """

    def __init__(self):
        # records logged through the bare loguru logger still need extra[name]
        logger.configure(extra={"name": "deskcontext"})
        logger.remove()
        logger.add(sys.stderr, level="INFO", format=CONSOLE_FORMAT)
        self._file_path: Optional[str] = None

    @property
    def file_path(self) -> Optional[str]:
        """Dated file pattern of the active file sink"""
        return self._file_path

    def configure(self, config: Optional[Dict[str, Any]], level: Optional[str] = None) -> None:
        """
        Configure logging

        Args:
            config (Dict[str, Any]): Logging configuration with ``level`` and ``log_path``
            level (Optional[str]): Overrides the configured level
        """
        config = config or {}
        level = str(level or config.get("level") or "INFO").upper()

        logger.remove()
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

        self._file_path = None
        log_path = config.get("log_path")
        if not log_path:
            return

        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # deskcontext.log -> deskcontext_2025-10-13.log
        name_without_ext, ext = os.path.splitext(os.path.basename(log_path))
        self._file_path = os.path.join(log_dir, f"{name_without_ext}_{{time:YYYY-MM-DD}}{ext}")
        logger.add(
            self._file_path,
            level=level,
            format=FILE_FORMAT,
            rotation="100 MB",
            retention=2,
            encoding="utf-8",
        )


log_manager = LogManager()


def setup_logging(config: Optional[Dict[str, Any]], level: Optional[str] = None):
    """
    Setup logging

    Args:
        config (Dict[str, Any]): Logging configuration
        level (Optional[str]): Level overriding the configuration, e.g. from the command line
    """
    log_manager.configure(config, level)
    get_logger(__name__).debug("Logging setup completed")


def get_logger(name: str):
    """
    Get logger instance bound to a module name
    """
    return logger.bind(name=name)
