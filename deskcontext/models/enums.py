#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0


"""
Capture type and constant enumeration definitions
"""

from enum import Enum


class CaptureMethod(str, Enum):
    """How a capture was triggered"""

    HOTKEY = "hotkey"
    MANUAL = "manual"


class ProcessingStatus(str, Enum):
    """Processing status of a captured context"""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"


class ClipboardType(str, Enum):
    """Clipboard content type"""

    PLAIN = "plain"
    HTML = "html"


class BrowserName(str, Enum):
    """Browsers queried for open tabs"""

    CHROME = "Chrome"
    SAFARI = "Safari"
    FIREFOX = "Firefox"
    EDGE = "Edge"


UNKNOWN = "Unknown"
