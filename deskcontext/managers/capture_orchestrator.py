#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Capture orchestration.
Fans out to the sources, assembles one capture, persists it and hands it to delivery.
"""

import asyncio
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Set

from deskcontext.context_capture.screenshot import DEFAULT_SETTLE_DELAY, ScreenCapture, hidden_window
from deskcontext.delivery.webhook_service import WebhookService
from deskcontext.interfaces.source_interface import ISource
from deskcontext.interfaces.storage_interface import ICaptureIndex
from deskcontext.managers.latest_capture import LatestCaptureSlot
from deskcontext.models.context import (
    ActiveWindow,
    ActiveWindowInfo,
    BrowserTab,
    CaptureIndexRecord,
    CaptureMetadata,
    CaptureResult,
    CapturedContext,
    ClipboardContent,
    OperationResult,
    WebhookResponse,
)
from deskcontext.models.enums import UNKNOWN, CaptureMethod, ProcessingStatus
from deskcontext.storage.blob_store import BlobStore, is_valid_capture_id
from deskcontext.storage.capture_index import DAY_MS, now_ms
from deskcontext.utils.async_utils import fire_and_forget, settle_all
from deskcontext.utils.image import encode_image_base64
from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)

CAPTURE_NOT_FOUND = "Capture not found"

Hook = Optional[Callable[[], Any]]


def to_epoch_ms(timestamp: datetime) -> int:
    return int(timestamp.timestamp() * 1000)


class CaptureOrchestrator:
    """
    Capture Orchestrator

    Every capture ends with exactly one document and one index row, or neither.
    Delivery runs in the background and only ever marks rows as sent.
    """

    def __init__(
        self,
        index: ICaptureIndex,
        blob_store: BlobStore,
        webhook: WebhookService,
        active_window: ISource[Optional[ActiveWindowInfo]],
        browser_tabs: ISource[List[BrowserTab]],
        clipboard: ISource[Optional[ClipboardContent]],
        screen_capture: Optional[ScreenCapture] = None,
        latest: Optional[LatestCaptureSlot] = None,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
    ):
        self._index = index
        self._blob_store = blob_store
        self._webhook = webhook
        self._active_window = active_window
        self._browser_tabs = browser_tabs
        self._clipboard = clipboard
        self._screen_capture = screen_capture
        self._latest = latest or LatestCaptureSlot()
        self._settle_delay = settle_delay
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending_deliveries(self) -> int:
        return len(self._pending)

    async def capture_context(
        self,
        method: Any = CaptureMethod.HOTKEY,
        hide_window: Hook = None,
        show_window: Hook = None,
    ) -> CaptureResult:
        """
        Capture the current desktop context.

        Args:
            method: ``CaptureMethod`` or its string value
            hide_window: Called once before the screen grab, sync or async
            show_window: Called once after the screen grab, whatever its outcome

        Returns:
            CaptureResult: Success with the capture id once document and index row are written
        """
        try:
            method = CaptureMethod(method)
        except ValueError:
            return CaptureResult(success=False, error=f"Invalid capture method: {method}")

        capture_id = str(uuid.uuid4())
        timestamp = datetime.now(timezone.utc)
        screenshot_path = self._blob_store.screenshot_path(capture_id)
        logger.info(f"Starting capture {capture_id} ({method.value})")

        # hide_window changes the frontmost app, so the window is read first
        (window_info,) = await settle_all(self._active_window.capture())
        window_info = self._settled(window_info, None, "active window")

        tabs, clipboard, has_screenshot = await settle_all(
            self._browser_tabs.capture(),
            self._clipboard.capture(),
            self._capture_screen(screenshot_path, hide_window, show_window),
        )
        tabs = self._settled(tabs, [], "browser tabs")
        clipboard = self._settled(clipboard, None, "clipboard")
        has_screenshot = self._settled(has_screenshot, False, "screen capture")

        try:
            screenshot = None
            if has_screenshot:
                screenshot = await asyncio.to_thread(encode_image_base64, screenshot_path)

            context = CapturedContext(
                id=capture_id,
                timestamp=timestamp,
                active_window=ActiveWindow(
                    app=(window_info.app if window_info else None) or UNKNOWN,
                    title=(window_info.title if window_info else None) or UNKNOWN,
                    bundle_id=window_info.bundle_id if window_info else None,
                    screenshot=screenshot,
                ),
                browser_tabs=tabs or [],
                clipboard=clipboard,
                metadata=CaptureMetadata(
                    os=sys.platform,
                    capture_method=method,
                    processing_status=ProcessingStatus.PENDING,
                ),
            )
            self._latest.set(context)

            json_path = await asyncio.to_thread(self._blob_store.save, context)
            record = CaptureIndexRecord(
                id=capture_id,
                timestamp=to_epoch_ms(timestamp),
                app_name=context.active_window.app,
                window_title=context.active_window.title,
                tabs_count=len(context.browser_tabs),
                has_clipboard=context.clipboard is not None,
                screenshot_path=screenshot_path if has_screenshot else "",
                json_path=json_path,
            )
            await asyncio.to_thread(self._index.insert_capture, record)
        except Exception as e:
            logger.exception(f"Capture {capture_id} failed: {e}")
            await asyncio.to_thread(self._discard_files, capture_id, screenshot_path)
            return CaptureResult(success=False, error=str(e))

        logger.info(
            f"Capture {capture_id} saved: app={context.active_window.app}, "
            f"tabs={len(context.browser_tabs)}, clipboard={context.clipboard is not None}, "
            f"screenshot={has_screenshot}"
        )
        fire_and_forget(self._deliver(context), self._pending)
        return CaptureResult(success=True, capture_id=capture_id)

    def _settled(self, outcome: Any, default: Any, label: str) -> Any:
        if isinstance(outcome, BaseException):
            logger.warning(f"{label} failed, using default: {outcome}")
            return default
        return outcome

    async def _capture_screen(self, path: str, hide_window: Hook, show_window: Hook) -> bool:
        if self._screen_capture is None or not self._screen_capture.enabled:
            return False
        async with hidden_window(hide_window, show_window, self._settle_delay):
            return await self._screen_capture.capture_to_file(path)

    def _discard_files(self, capture_id: str, screenshot_path: str) -> None:
        self._blob_store.delete_json(capture_id)
        self._blob_store.delete_file(screenshot_path)

    async def _deliver(self, context: CapturedContext) -> WebhookResponse:
        response = await self._webhook.send(context.to_webhook_payload())
        try:
            await asyncio.to_thread(self._index.update_webhook_status, context.id, response.success)
        except Exception as e:
            logger.error(f"Failed to record delivery status of {context.id}: {e}")
        return response

    def get_latest_capture(self) -> Optional[CapturedContext]:
        return self._latest.get()

    async def load_capture(self, capture_id: str) -> Optional[CapturedContext]:
        return await asyncio.to_thread(self._blob_store.load, capture_id)

    async def list_captures(self, limit: int = 100) -> List[CaptureIndexRecord]:
        return await asyncio.to_thread(self._index.get_captures, limit)

    async def delete_capture(self, capture_id: str) -> OperationResult:
        """
        Remove the document, the screenshot and the index row of a capture.
        Missing pieces are skipped, so deleting twice succeeds both times.
        """
        if not is_valid_capture_id(capture_id):
            logger.warning(f"Refusing to delete invalid capture id: {capture_id!r}")
            return OperationResult(success=False, error=CAPTURE_NOT_FOUND)

        try:
            record = await asyncio.to_thread(self._index.get_capture, capture_id)
        except Exception as e:
            logger.warning(f"Could not read index row of {capture_id}: {e}")
            record = None

        screenshot_path = (
            record.screenshot_path
            if record and record.screenshot_path
            else self._blob_store.screenshot_path(capture_id)
        )
        await asyncio.to_thread(self._discard_files, capture_id, screenshot_path)

        try:
            await asyncio.to_thread(self._index.delete_capture, capture_id)
        except Exception as e:
            logger.error(f"Failed to delete capture {capture_id}: {e}")
            return OperationResult(success=False, error=str(e))

        self._latest.clear(capture_id)
        logger.info(f"Capture {capture_id} deleted")
        return OperationResult(success=True)

    async def retry_webhook(self, capture_id: str) -> OperationResult:
        """Deliver a stored capture again and report the outcome"""
        context = await self.load_capture(capture_id)
        if context is None:
            return OperationResult(success=False, error=CAPTURE_NOT_FOUND)

        response = await self._deliver(context)
        return OperationResult(success=response.success, error=response.error)

    async def send_unsent_captures(self) -> int:
        """
        Deliver every capture still marked unsent

        Returns:
            int: Number of captures delivered
        """
        records = await asyncio.to_thread(self._index.get_unsent_captures)
        if not records:
            return 0

        delivered = 0
        for record in records:
            context = await self.load_capture(record.id)
            if context is None:
                logger.warning(f"Unsent capture {record.id} has no document, skipping")
                continue
            response = await self._deliver(context)
            if response.success:
                delivered += 1

        logger.info(f"Outbox sweep delivered {delivered}/{len(records)} captures")
        return delivered

    async def cleanup_old_captures(self, days_old: int = 30) -> int:
        """
        Delete captures older than ``days_old`` days

        Returns:
            int: Number of captures deleted
        """
        cutoff = now_ms() - days_old * DAY_MS
        records = await asyncio.to_thread(self._index.get_captures_older_than, cutoff)

        deleted = 0
        for record in records:
            result = await self.delete_capture(record.id)
            if result.success:
                deleted += 1

        if deleted > 0:
            await asyncio.to_thread(self._index.vacuum)
        logger.info(f"Cleaned up {deleted} captures older than {days_old} days")
        return deleted

    async def wait_for_deliveries(self) -> None:
        """Wait until every background delivery has finished"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
