# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Data models
"""

from deskcontext.models.context import (
    ActiveWindow,
    ActiveWindowInfo,
    BrowserTab,
    CaptureIndexRecord,
    CaptureMetadata,
    CaptureResult,
    CaptureStats,
    CapturedContext,
    ClipboardContent,
    OperationResult,
    WebhookPayload,
    WebhookResponse,
)
from deskcontext.models.enums import (
    UNKNOWN,
    BrowserName,
    CaptureMethod,
    ClipboardType,
    ProcessingStatus,
)

__all__ = [
    "ActiveWindow",
    "ActiveWindowInfo",
    "BrowserTab",
    "CaptureIndexRecord",
    "CaptureMetadata",
    "CaptureResult",
    "CaptureStats",
    "CapturedContext",
    "ClipboardContent",
    "OperationResult",
    "WebhookPayload",
    "WebhookResponse",
    "UNKNOWN",
    "BrowserName",
    "CaptureMethod",
    "ClipboardType",
    "ProcessingStatus",
]
