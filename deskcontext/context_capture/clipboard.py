# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Clipboard source with text sanitization
"""

import asyncio
import re
import subprocess
from typing import Callable, Optional

import pyperclip

from deskcontext.context_capture.base import BaseSource
from deskcontext.models.context import ClipboardContent
from deskcontext.models.enums import ClipboardType
from deskcontext.utils.logging_utils import get_logger
from deskcontext.utils.process_utils import is_macos, run_osascript_sync

logger = get_logger(__name__)

MAX_CLIPBOARD_LENGTH = 10000
TRUNCATION_MARKER = "... [truncated]"

# control characters except \t \n \r, plus DEL
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

HTML_SCRIPT = "the clipboard as «class HTML»"
HTML_READ_TIMEOUT = 1.0
_HTML_DATA = re.compile(r"«data HTML([0-9A-Fa-f]*)»")


def sanitize_clipboard_text(
    text: Optional[str], max_length: int = MAX_CLIPBOARD_LENGTH
) -> Optional[str]:
    """
    Remove NUL and control characters (keeping newlines, carriage returns and tabs),
    trim, and cap the length with a truncation marker.

    Returns:
        Optional[str]: Sanitized text, None if nothing is left
    """
    if not text or not text.strip():
        return None

    sanitized = _CONTROL_CHARS.sub("", text).strip()
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + TRUNCATION_MARKER

    return sanitized or None


def decode_html_clipboard(output: Optional[str]) -> Optional[str]:
    """Decode the ``«data HTML...»`` hex literal osascript prints for the HTML flavor"""
    match = _HTML_DATA.search(output or "")
    if not match:
        return None
    try:
        return bytes.fromhex(match.group(1)).decode("utf-8", errors="replace")
    except ValueError:
        return None


class ClipboardReader:
    """
    Reads the system clipboard. The HTML flavor comes from AppleScript on macOS,
    plain text from pyperclip. Both calls block, so run them off the event loop.
    """

    def __init__(
        self,
        timeout: float = HTML_READ_TIMEOUT,
        platform_check: Callable[[], bool] = is_macos,
        runner: Callable[[str, Optional[float]], str] = run_osascript_sync,
    ):
        self._timeout = timeout
        self._platform_check = platform_check
        self._runner = runner

    def read_html(self) -> Optional[str]:
        if not self._platform_check():
            return None
        try:
            output = self._runner(HTML_SCRIPT, self._timeout)
        except (RuntimeError, OSError, subprocess.TimeoutExpired) as e:
            # osascript fails with -1700 when the clipboard has no HTML flavor
            logger.debug(f"No HTML on the clipboard: {e}")
            return None
        return decode_html_clipboard(output)

    def read_text(self) -> Optional[str]:
        return pyperclip.paste()


class ClipboardCapture(BaseSource[Optional[ClipboardContent]]):
    """
    Local, in-process clipboard read: rich content first, then plain text
    """

    def __init__(
        self,
        enabled: bool = True,
        max_length: int = MAX_CLIPBOARD_LENGTH,
        reader: Optional[ClipboardReader] = None,
    ):
        super().__init__(
            name="ClipboardCapture",
            description="Clipboard contents",
            timeout=None,
            enabled=enabled,
        )
        self._max_length = max_length
        self._reader = reader or ClipboardReader()

    def default(self) -> Optional[ClipboardContent]:
        return None

    async def _capture_impl(self) -> Optional[ClipboardContent]:
        return await asyncio.to_thread(self.read_clipboard)

    def read_clipboard(self) -> Optional[ClipboardContent]:
        """
        Read and sanitize the clipboard

        Raises:
            Exception: Whatever the clipboard backend raises; ``capture`` absorbs it
        """
        html = sanitize_clipboard_text(self._reader.read_html(), self._max_length)
        if html:
            logger.debug(f"{self._name}: Captured HTML content: {len(html)} chars")
            return ClipboardContent(text=html, type=ClipboardType.HTML)

        text = sanitize_clipboard_text(self._reader.read_text(), self._max_length)
        if text:
            logger.debug(f"{self._name}: Captured plain text: {len(text)} chars")
            return ClipboardContent(text=text, type=ClipboardType.PLAIN)

        logger.debug(f"{self._name}: Clipboard is empty or contains non-text content")
        return None

    def get_preview(self, length: int = 100) -> Optional[str]:
        """First ``length`` characters of the current clipboard text"""
        try:
            content = self.read_clipboard()
        except Exception as e:
            logger.warning(f"{self._name}: Error reading clipboard: {e}")
            return None
        if not content:
            return None
        if len(content.text) <= length:
            return content.text
        return content.text[:length] + "..."
