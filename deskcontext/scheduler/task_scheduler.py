#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Task scheduler: runs periodic tasks as APScheduler interval jobs on the event loop
"""

from typing import Dict, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from deskcontext.periodic_task.base import BasePeriodicTask, TaskResult
from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)


async def job_wrapper(task: BasePeriodicTask) -> Optional[TaskResult]:
    try:
        logger.info(f"Starting job: {task.name}")
        result = await task.execute()
        if result.success:
            logger.info(f"Job finished: {task.name} - {result.message} ({result.execution_time_ms} ms)")
        else:
            logger.error(f"Job failed: {task.name}, Error: {result.error}")
        return result
    except Exception as e:
        logger.exception(f"Job failed: {task.name}, Error: {e}")
        return None


class TaskScheduler:
    """
    Registers enabled periodic tasks and runs them on the current event loop.
    Create it from inside the loop it should run on.
    """

    def __init__(self, scheduler: Optional[AsyncIOScheduler] = None):
        self._scheduler = scheduler or AsyncIOScheduler()
        self._tasks: Dict[str, BasePeriodicTask] = {}

    def register(self, task: BasePeriodicTask) -> bool:
        """
        Register a task as an interval job

        Returns:
            bool: Whether a job was added; disabled tasks are skipped
        """
        if not task.enabled:
            logger.info(f"Task {task.name} is disabled, not scheduled")
            return False
        if task.interval <= 0:
            logger.error(f"Task {task.name} has an invalid interval: {task.interval}")
            return False

        self._scheduler.add_job(
            job_wrapper,
            trigger=IntervalTrigger(seconds=task.interval),
            args=[task],
            id=task.name,
            name=task.name,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._tasks[task.name] = task
        logger.info(f"Scheduled task: {task.name} every {task.interval}s")
        return True

    def get_job_ids(self) -> List[str]:
        return [job.id for job in self._scheduler.get_jobs()]

    def get_task(self, name: str) -> Optional[BasePeriodicTask]:
        return self._tasks.get(name)

    async def run_now(self, name: str) -> Optional[TaskResult]:
        """Run a registered task immediately, outside its schedule"""
        task = self._tasks.get(name)
        if task is None:
            logger.warning(f"Task {name} is not registered")
            return None
        return await job_wrapper(task)

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        """Start the scheduler; must be called from a running event loop"""
        if self._scheduler.running:
            return
        self._scheduler.start()
        logger.info(f"Scheduler started with {len(self._tasks)} tasks")

    def shutdown(self) -> None:
        if not self._scheduler.running:
            return
        self._scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
