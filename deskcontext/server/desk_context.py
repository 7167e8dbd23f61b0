#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
DeskContext main class - system entry point wiring all components together
and exposing the public capture operations.
"""

import asyncio
import os
from typing import Any, Callable, Dict, List, Optional

from deskcontext.config.config_manager import DEFAULT_CONFIG, merge_config
from deskcontext.config.global_config import GlobalConfig
from deskcontext.context_capture.active_window import ActiveWindowCapture
from deskcontext.context_capture.browser_tabs import BrowserTabCapture
from deskcontext.context_capture.clipboard import ClipboardCapture
from deskcontext.context_capture.screenshot import ScreenCapture
from deskcontext.delivery.webhook_service import WebhookService
from deskcontext.managers.capture_orchestrator import CaptureOrchestrator
from deskcontext.managers.latest_capture import LatestCaptureSlot
from deskcontext.models.context import (
    CaptureIndexRecord,
    CaptureResult,
    CaptureStats,
    CapturedContext,
    OperationResult,
)
from deskcontext.models.enums import CaptureMethod
from deskcontext.periodic_task.capture_cleanup import CaptureCleanupTask
from deskcontext.periodic_task.webhook_outbox import WebhookOutboxTask
from deskcontext.scheduler.task_scheduler import TaskScheduler
from deskcontext.storage.blob_store import BlobStore
from deskcontext.storage.capture_index import CaptureIndex
from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)


class DeskContext:
    """DeskContext main class - builds the capture pipeline and provides a unified API."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Build all components.

        Args:
            config: Configuration dictionary, the global configuration is used when omitted
        """
        if config is None:
            config = GlobalConfig.get_instance().get_config() or {}
        self.config = merge_config(DEFAULT_CONFIG, config)

        storage_config = self.config["storage"]
        capture_config = self.config["capture"]
        webhook_config = self.config["webhook"]

        data_dir = storage_config["data_dir"]
        self.index = CaptureIndex(os.path.join(data_dir, storage_config["db_name"]))
        self.blob_store = BlobStore(
            data_dir,
            captures_dir=storage_config["captures_dir"],
            screenshots_dir=storage_config["screenshots_dir"],
        )
        self.webhook = WebhookService(
            url=webhook_config["url"],
            timeout=webhook_config["timeout"],
            test_timeout=webhook_config["test_timeout"],
            max_attempts=webhook_config["max_attempts"],
            retry_delay=webhook_config["retry_delay"],
            user_agent=webhook_config["user_agent"],
        )

        window_config = capture_config["active_window"]
        tabs_config = capture_config["browser_tabs"]
        clipboard_config = capture_config["clipboard"]
        screenshot_config = capture_config["screenshot"]
        self.orchestrator = CaptureOrchestrator(
            index=self.index,
            blob_store=self.blob_store,
            webhook=self.webhook,
            active_window=ActiveWindowCapture(
                timeout=window_config["timeout"], enabled=window_config["enabled"]
            ),
            browser_tabs=BrowserTabCapture(
                timeout=tabs_config["timeout"],
                enabled=tabs_config["enabled"],
                browsers=tabs_config["browsers"],
                max_tabs=tabs_config["max_tabs"],
            ),
            clipboard=ClipboardCapture(
                enabled=clipboard_config["enabled"], max_length=clipboard_config["max_length"]
            ),
            screen_capture=ScreenCapture(
                enabled=screenshot_config["enabled"],
                max_image_size=screenshot_config.get("max_image_size"),
            ),
            latest=LatestCaptureSlot(),
            settle_delay=capture_config["settle_delay"],
        )

        self.scheduler: Optional[TaskScheduler] = None
        self._initialized = False
        logger.info("DeskContext initialization completed")

    def initialize(self) -> None:
        """Open storage. Called automatically by the operations that need it."""
        if self._initialized:
            return
        if not self.blob_store.initialize():
            raise RuntimeError(f"Failed to create data directories under {self.blob_store.data_dir}")
        if not self.index.initialize():
            raise RuntimeError(f"Failed to open capture index at {self.index.db_path}")
        self._initialized = True
        logger.info("All components initialization completed successfully")

    async def capture_start(
        self,
        method: Any = CaptureMethod.MANUAL,
        hide_window: Optional[Callable[[], Any]] = None,
        show_window: Optional[Callable[[], Any]] = None,
    ) -> CaptureResult:
        self.initialize()
        return await self.orchestrator.capture_context(method, hide_window, show_window)

    async def list_captures(self, limit: int = 100) -> List[CaptureIndexRecord]:
        self.initialize()
        return await self.orchestrator.list_captures(limit)

    async def get_capture(self, capture_id: str) -> Optional[CapturedContext]:
        self.initialize()
        return await self.orchestrator.load_capture(capture_id)

    def get_latest_capture(self) -> Optional[CapturedContext]:
        return self.orchestrator.get_latest_capture()

    async def delete_capture(self, capture_id: str) -> OperationResult:
        self.initialize()
        return await self.orchestrator.delete_capture(capture_id)

    async def retry_webhook(self, capture_id: str) -> OperationResult:
        self.initialize()
        return await self.orchestrator.retry_webhook(capture_id)

    async def retry_unsent(self) -> int:
        self.initialize()
        return await self.orchestrator.send_unsent_captures()

    async def cleanup_old_captures(self, days_old: int = 30) -> int:
        self.initialize()
        return await self.orchestrator.cleanup_old_captures(days_old)

    async def get_stats(self) -> CaptureStats:
        self.initialize()
        return await asyncio.to_thread(self.index.get_stats)

    async def test_webhook_connection(self) -> bool:
        return await self.webhook.test_connection()

    def start_scheduler(self) -> TaskScheduler:
        """
        Register the periodic tasks and start them on the running event loop.
        """
        self.initialize()
        if self.scheduler and self.scheduler.running:
            return self.scheduler

        scheduler_config = self.config["scheduler"]
        outbox_config = scheduler_config["webhook_outbox"]
        cleanup_config = scheduler_config["capture_cleanup"]

        self.scheduler = TaskScheduler()
        if scheduler_config.get("enabled", True):
            self.scheduler.register(
                WebhookOutboxTask(
                    self.orchestrator,
                    interval=outbox_config["interval"],
                    enabled=outbox_config["enabled"],
                )
            )
            self.scheduler.register(
                CaptureCleanupTask(
                    self.orchestrator,
                    interval=cleanup_config["interval"],
                    retention_days=cleanup_config["retention_days"],
                    enabled=cleanup_config["enabled"],
                )
            )
        else:
            logger.info("Scheduler disabled by configuration")
        self.scheduler.start()
        return self.scheduler

    async def shutdown(self) -> None:
        """Stop the scheduler, finish pending deliveries and close connections."""
        logger.info("Shutting down DeskContext...")
        if self.scheduler:
            self.scheduler.shutdown()
        await self.orchestrator.wait_for_deliveries()
        await self.webhook.close()
        if self._initialized:
            self.index.close()
            self._initialized = False
        logger.info("DeskContext shutdown completed")
