#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Webhook Outbox Periodic Task

Re-delivers captures whose webhook delivery has not succeeded yet.
"""

from loguru import logger

from deskcontext.periodic_task.base import BasePeriodicTask, TaskResult


class WebhookOutboxTask(BasePeriodicTask):
    """
    Webhook Outbox Task

    Sweeps the capture index for unsent rows and delivers them again,
    which together with explicit retries gives at-least-once delivery.
    """

    def __init__(self, orchestrator, interval: int = 300, enabled: bool = True):
        super().__init__(
            name="webhook_outbox",
            description="Re-deliver captures that were not sent to the webhook",
            interval=interval,
            enabled=enabled,
        )
        self._orchestrator = orchestrator

    async def _run(self) -> TaskResult:
        delivered = await self._orchestrator.send_unsent_captures()
        if delivered:
            logger.info(f"Webhook outbox delivered {delivered} captures")
        return TaskResult.ok(
            message=f"Delivered {delivered} captures", data={"delivered": delivered}
        )
