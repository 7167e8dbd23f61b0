# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Active window source: frontmost application and its front window title (macOS)
"""

import asyncio
from typing import Awaitable, Callable, Optional, Tuple

from deskcontext.context_capture.base import BaseSource
from deskcontext.models.context import ActiveWindowInfo
from deskcontext.utils.logging_utils import get_logger
from deskcontext.utils.process_utils import is_macos, run_osascript

logger = get_logger(__name__)

FRONT_APP_SCRIPT = """
tell application "System Events"
    set frontApp to first application process whose frontmost is true
    return (name of frontApp) & "|" & (bundle identifier of frontApp)
end tell
"""

WINDOW_TITLE_SCRIPT = """
tell application "System Events"
    set frontApp to first application process whose frontmost is true
    try
        return name of front window of frontApp
    on error
        return ""
    end try
end tell
"""

ScriptRunner = Callable[[str], Awaitable[str]]


def parse_frontmost_app(output: str) -> Optional[Tuple[str, Optional[str]]]:
    """Parse ``name|bundle id`` into a tuple, None if there is no name."""
    name, _, bundle_id = (output or "").strip().partition("|")
    name = name.strip()
    bundle_id = bundle_id.strip()
    if not name:
        return None
    if not bundle_id or bundle_id == "missing value":
        bundle_id = None
    return name, bundle_id


class ActiveWindowCapture(BaseSource[Optional[ActiveWindowInfo]]):
    """
    Queries the frontmost application and front window title concurrently.
    A failed query only clears its own field.
    """

    def __init__(
        self,
        timeout: float = 0.5,
        enabled: bool = True,
        runner: Optional[ScriptRunner] = None,
        platform_check: Callable[[], bool] = is_macos,
    ):
        super().__init__(
            name="ActiveWindowCapture",
            description="Frontmost application and window title",
            timeout=timeout,
            enabled=enabled,
        )
        self._runner = runner or run_osascript
        self._platform_check = platform_check

    def is_supported(self) -> bool:
        return self._platform_check()

    def default(self) -> Optional[ActiveWindowInfo]:
        return None

    async def _capture_impl(self) -> Optional[ActiveWindowInfo]:
        app_info, title = await asyncio.gather(
            self._get_frontmost_app(), self._get_window_title(), return_exceptions=True
        )

        if isinstance(app_info, BaseException):
            logger.warning(f"{self._name}: Error getting frontmost app: {app_info}")
            app_info = None
        if isinstance(title, BaseException):
            logger.warning(f"{self._name}: Error getting window title: {title}")
            title = None

        if app_info is None and title is None:
            logger.info(f"{self._name}: Could not determine the active window")
            return None

        app_name, bundle_id = app_info if app_info else (None, None)
        result = ActiveWindowInfo(app=app_name, title=title, bundle_id=bundle_id)
        logger.debug(f"{self._name}: Captured {result}")
        return result

    async def _get_frontmost_app(self) -> Optional[Tuple[str, Optional[str]]]:
        return parse_frontmost_app(await self._runner(FRONT_APP_SCRIPT))

    async def _get_window_title(self) -> Optional[str]:
        title = (await self._runner(WINDOW_TITLE_SCRIPT)).strip()
        return title or None
