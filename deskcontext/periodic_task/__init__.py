#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Periodic Task Module

Maintenance tasks run by the task scheduler.
"""

from deskcontext.periodic_task.base import BasePeriodicTask, TaskResult
from deskcontext.periodic_task.capture_cleanup import CaptureCleanupTask
from deskcontext.periodic_task.webhook_outbox import WebhookOutboxTask

__all__ = [
    "BasePeriodicTask",
    "TaskResult",
    "CaptureCleanupTask",
    "WebhookOutboxTask",
]
