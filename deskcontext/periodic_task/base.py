#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Periodic Task Base Module

Defines the base class and result type for periodic maintenance tasks.
"""

import abc
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from loguru import logger


@dataclass
class TaskResult:
    """Result of a task execution"""
    success: bool
    message: str = ""
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    execution_time_ms: int = 0

    @classmethod
    def ok(cls, message: str = "Success", data: Dict[str, Any] = None) -> "TaskResult":
        """Create a successful result"""
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: str, message: str = "Failed") -> "TaskResult":
        """Create a failed result"""
        return cls(success=False, message=message, error=error)


class BasePeriodicTask(abc.ABC):
    """
    Base class for periodic tasks.

    Subclasses implement ``_run()``; ``execute()`` times it and turns
    exceptions into a failed TaskResult.
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        interval: int = 1800,
        enabled: bool = True,
    ):
        self._name = name
        self._description = description
        self._interval = interval
        self._enabled = enabled

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def interval(self) -> int:
        return self._interval

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def execute(self) -> TaskResult:
        """
        Run the task once.

        Returns:
            TaskResult indicating success or failure
        """
        start = time.time()
        try:
            result = await self._run()
        except Exception as e:
            logger.exception(f"Task {self._name} failed: {e}")
            result = TaskResult.fail(error=str(e))
        result.execution_time_ms = int((time.time() - start) * 1000)
        return result

    @abc.abstractmethod
    async def _run(self) -> TaskResult:
        pass
