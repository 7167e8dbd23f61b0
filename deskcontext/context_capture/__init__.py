# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Context capture module - adapters for the desktop sources and the screen
"""

from deskcontext.context_capture.active_window import ActiveWindowCapture
from deskcontext.context_capture.base import BaseSource
from deskcontext.context_capture.browser_tabs import BrowserTabCapture, aggregate_tabs
from deskcontext.context_capture.clipboard import ClipboardCapture, sanitize_clipboard_text
from deskcontext.context_capture.screenshot import ScreenCapture, hidden_window

__all__ = [
    "BaseSource",
    "ActiveWindowCapture",
    "BrowserTabCapture",
    "ClipboardCapture",
    "ScreenCapture",
    "aggregate_tabs",
    "sanitize_clipboard_text",
    "hidden_window",
]
