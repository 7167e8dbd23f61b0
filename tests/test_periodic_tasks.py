# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""Periodic task and scheduler tests."""

import pytest

from deskcontext.periodic_task import CaptureCleanupTask, TaskResult, WebhookOutboxTask
from deskcontext.periodic_task.base import BasePeriodicTask
from deskcontext.scheduler.task_scheduler import TaskScheduler, job_wrapper


class DummyOrchestrator:
    def __init__(self, delivered: int = 0, deleted: int = 0, error: Exception = None) -> None:
        self.delivered = delivered
        self.deleted = deleted
        self.error = error
        self.cleanup_calls = []

    async def send_unsent_captures(self) -> int:
        if self.error:
            raise self.error
        return self.delivered

    async def cleanup_old_captures(self, days_old: int = 30) -> int:
        self.cleanup_calls.append(days_old)
        return self.deleted


class CountingTask(BasePeriodicTask):
    def __init__(self, **kwargs) -> None:
        super().__init__(name="counting", description="counts runs", **kwargs)
        self.runs = 0

    async def _run(self) -> TaskResult:
        self.runs += 1
        return TaskResult.ok(data={"runs": self.runs})


@pytest.mark.asyncio
async def test_outbox_task_reports_deliveries():
    result = await WebhookOutboxTask(DummyOrchestrator(delivered=4)).execute()

    assert result.success
    assert result.data == {"delivered": 4}
    assert result.execution_time_ms >= 0


@pytest.mark.asyncio
async def test_task_failure_becomes_result():
    result = await WebhookOutboxTask(DummyOrchestrator(error=RuntimeError("db locked"))).execute()

    assert not result.success
    assert result.error == "db locked"


@pytest.mark.asyncio
async def test_cleanup_task_uses_retention():
    orchestrator = DummyOrchestrator(deleted=7)
    task = CaptureCleanupTask(orchestrator, retention_days=14)

    result = await task.execute()

    assert result.success
    assert result.data == {"deleted": 7}
    assert orchestrator.cleanup_calls == [14]


@pytest.mark.asyncio
async def test_scheduler_registers_enabled_tasks_only():
    scheduler = TaskScheduler()

    assert scheduler.register(WebhookOutboxTask(DummyOrchestrator(), interval=60)) is True
    assert scheduler.register(CaptureCleanupTask(DummyOrchestrator(), enabled=False)) is False
    assert scheduler.register(CountingTask(interval=0)) is False

    assert scheduler.get_job_ids() == ["webhook_outbox"]
    assert scheduler.get_task("capture_cleanup") is None


@pytest.mark.asyncio
async def test_scheduler_start_run_now_and_shutdown():
    scheduler = TaskScheduler()
    task = CountingTask(interval=3600)
    scheduler.register(task)

    scheduler.start()
    try:
        assert scheduler.running
        result = await scheduler.run_now("counting")
        assert result.success
        assert task.runs == 1
        assert await scheduler.run_now("unknown") is None
    finally:
        scheduler.shutdown()

    assert not scheduler.running


@pytest.mark.asyncio
async def test_job_wrapper_never_raises():
    class ExplodingTask(CountingTask):
        async def execute(self) -> TaskResult:
            raise RuntimeError("boom")

    assert await job_wrapper(ExplodingTask()) is None
