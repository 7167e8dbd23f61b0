#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Capture Cleanup Periodic Task

Periodically removes captures older than the retention period.
"""

from loguru import logger

from deskcontext.periodic_task.base import BasePeriodicTask, TaskResult


class CaptureCleanupTask(BasePeriodicTask):
    """
    Capture Cleanup Task

    Deletes the documents, screenshots and index rows of old captures.
    """

    def __init__(
        self,
        orchestrator,
        interval: int = 86400,
        retention_days: int = 30,
        enabled: bool = True,
    ):
        """
        Initialize the capture cleanup task.

        Args:
            orchestrator: CaptureOrchestrator that owns the captures
            interval: Interval in seconds between cleanups (default: 24 hours)
            retention_days: Number of days to retain captures (default: 30)
            enabled: Whether the scheduler should run this task
        """
        super().__init__(
            name="capture_cleanup",
            description="Periodically delete captures past the retention period",
            interval=interval,
            enabled=enabled,
        )
        self._orchestrator = orchestrator
        self._retention_days = retention_days

    @property
    def retention_days(self) -> int:
        return self._retention_days

    async def _run(self) -> TaskResult:
        deleted = await self._orchestrator.cleanup_old_captures(self._retention_days)
        logger.info(
            f"Capture cleanup removed {deleted} captures older than {self._retention_days} days"
        )
        return TaskResult.ok(message=f"Deleted {deleted} captures", data={"deleted": deleted})
