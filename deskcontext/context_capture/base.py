#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0


"""
Base source class implementing common functionality from ISource interface
"""

import abc
import asyncio
import threading
import time
from datetime import datetime
from typing import Any, Dict, Optional, TypeVar

from deskcontext.interfaces.source_interface import ISource
from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BaseSource(ISource[T]):
    """
    Base source class

    Races the concrete capture against the source timeout and converts every
    failure into the source default. Concrete sources implement ``_capture_impl``.
    """

    def __init__(
        self,
        name: str,
        description: str,
        timeout: Optional[float] = None,
        enabled: bool = True,
    ):
        """
        Initialize base source

        Args:
            name (str): Source name
            description (str): Source description
            timeout (Optional[float]): Time budget in seconds, None for no limit
            enabled (bool): Disabled sources return their default immediately
        """
        self._name = name
        self._description = description
        self._timeout = timeout
        self._enabled = enabled
        self._last_capture_time = None
        self._last_duration = None
        self._capture_count = 0
        self._error_count = 0
        self._timeout_count = 0
        self._last_error = None
        self._lock = threading.RLock()

    def get_name(self) -> str:
        return self._name

    def get_description(self) -> str:
        return self._description

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    @property
    def enabled(self) -> bool:
        return self._enabled

    def is_supported(self) -> bool:
        """Whether the source can run on the current platform"""
        return True

    async def capture(self) -> T:
        """
        Execute one capture

        Returns:
            T: Captured artifact, or the default on failure, timeout or unsupported platform
        """
        if not self._enabled:
            return self.default()

        if not self.is_supported():
            logger.debug(f"{self._name}: Not supported on this platform, returning default")
            return self.default()

        start_time = time.time()
        self._last_capture_time = datetime.now()
        try:
            if self._timeout:
                result = await asyncio.wait_for(self._capture_impl(), timeout=self._timeout)
            else:
                result = await self._capture_impl()
        except asyncio.TimeoutError:
            with self._lock:
                self._timeout_count += 1
                self._last_error = f"timed out after {self._timeout}s"
            logger.warning(f"{self._name}: Capture timed out after {self._timeout}s")
            return self.default()
        except Exception as e:
            with self._lock:
                self._error_count += 1
                self._last_error = str(e)
            logger.warning(f"{self._name}: Capture failed, using default: {e}")
            return self.default()
        finally:
            self._last_duration = time.time() - start_time

        with self._lock:
            self._capture_count += 1
        return result

    @abc.abstractmethod
    async def _capture_impl(self) -> T:
        """
        Capture implementation, may raise
        """

    def get_status(self) -> Dict[str, Any]:
        """
        Get status

        Returns:
            Dict[str, Any]: Status information
        """
        with self._lock:
            return {
                "name": self._name,
                "enabled": self._enabled,
                "supported": self.is_supported(),
                "timeout": self._timeout,
                "capture_count": self._capture_count,
                "error_count": self._error_count,
                "timeout_count": self._timeout_count,
                "last_error": self._last_error,
                "last_capture_time": (
                    self._last_capture_time.isoformat() if self._last_capture_time else None
                ),
                "last_duration": self._last_duration,
            }
