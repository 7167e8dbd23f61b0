#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0


"""
Screen capture component: grabs the whole virtual screen into a PNG file
"""

import asyncio
import os
import threading
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, Optional

import mss
from PIL import Image

from deskcontext.utils.async_utils import call_hook
from deskcontext.utils.file_utils import ensure_dir
from deskcontext.utils.image import resize_image
from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_SETTLE_DELAY = 0.1


@asynccontextmanager
async def hidden_window(
    hide: Optional[Callable[[], Any]] = None,
    show: Optional[Callable[[], Any]] = None,
    settle_delay: float = DEFAULT_SETTLE_DELAY,
):
    """
    Hide the host window for the duration of the block.

    ``hide`` is called once, then the compositor gets ``settle_delay`` seconds
    before the block runs. ``show`` is called once on exit, whatever the block did.
    Both hooks may be sync or async.
    """
    try:
        await call_hook(hide)
        if settle_delay:
            await asyncio.sleep(settle_delay)
        yield
    finally:
        try:
            await call_hook(show)
        except Exception as e:
            logger.error(f"Failed to restore window: {e}")


class ScreenCapture:
    """
    Screen capture component
    """

    def __init__(self, enabled: bool = True, max_image_size: Optional[int] = None):
        self._enabled = enabled
        self._max_image_size = max_image_size
        self._screenshot_count = 0
        self._error_count = 0
        self._last_screenshot_path = None
        self._lock = threading.RLock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def capture_to_file(self, path: str) -> bool:
        """
        Grab all monitors and save them as one PNG.

        Assumes the host window is already hidden.

        Args:
            path (str): Destination file

        Returns:
            bool: Whether the screenshot was written
        """
        if not self._enabled:
            return False
        try:
            await asyncio.to_thread(self._grab_to_file, path)
        except Exception as e:
            with self._lock:
                self._error_count += 1
            logger.error(f"Screenshot failed: {e}")
            return False

        with self._lock:
            self._screenshot_count += 1
            self._last_screenshot_path = path
        logger.debug(f"Screenshot saved to {path}")
        return True

    def _grab_to_file(self, path: str) -> None:
        ensure_dir(os.path.dirname(os.path.abspath(path)))
        with mss.mss() as sct:
            # sct.monitors[0] is the bounding box of all monitors
            sct_img = sct.grab(sct.monitors[0])
            img = Image.frombytes("RGB", sct_img.size, sct_img.bgra, "raw", "BGRX")
            img.save(path, format="PNG")

        if self._max_image_size:
            resize_image(path, self._max_image_size)

    def get_status(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "enabled": self._enabled,
                "screenshot_count": self._screenshot_count,
                "error_count": self._error_count,
                "last_screenshot_path": self._last_screenshot_path,
            }
