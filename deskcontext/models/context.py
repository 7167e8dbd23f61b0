# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Define core data models used in deskcontext
"""
import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from deskcontext.models.enums import UNKNOWN, CaptureMethod, ClipboardType, ProcessingStatus


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys"""

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to a JSON-compatible dictionary"""
        return self.model_dump(mode="json", by_alias=True)


class ActiveWindowInfo(CamelModel):
    """Result of the active window source; fields are None when a query failed"""

    app: Optional[str] = None
    title: Optional[str] = None
    bundle_id: Optional[str] = Field(default=None, alias="bundleId")


class ActiveWindow(CamelModel):
    app: str = UNKNOWN
    title: str = UNKNOWN
    bundle_id: Optional[str] = Field(default=None, alias="bundleId")
    screenshot: Optional[str] = None  # base64 encoded PNG


class BrowserTab(CamelModel):
    title: str
    url: str
    domain: str
    browser: Optional[str] = None


class ClipboardContent(CamelModel):
    text: str
    type: ClipboardType = ClipboardType.PLAIN


class CaptureMetadata(CamelModel):
    os: str
    capture_method: CaptureMethod = Field(default=CaptureMethod.HOTKEY, alias="captureMethod")
    processing_status: ProcessingStatus = Field(
        default=ProcessingStatus.PENDING, alias="processingStatus"
    )


class CapturedContext(CamelModel):
    """
    One complete snapshot: window, tabs, clipboard and screenshot under one identity
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    timestamp: datetime.datetime
    active_window: ActiveWindow = Field(default_factory=ActiveWindow, alias="activeWindow")
    browser_tabs: List[BrowserTab] = Field(default_factory=list, alias="browserTabs")
    clipboard: Optional[ClipboardContent] = None
    metadata: CaptureMetadata

    def to_json(self) -> str:
        """Serialize for the blob store (ISO-8601 timestamp, camelCase keys)"""
        return self.model_dump_json(by_alias=True, indent=2)

    @classmethod
    def from_json(cls, data: str) -> "CapturedContext":
        return cls.model_validate_json(data)

    def to_webhook_payload(self) -> "WebhookPayload":
        return WebhookPayload(
            id=self.id,
            timestamp=self.timestamp,
            active_window=self.active_window,
            browser_tabs=self.browser_tabs,
            clipboard=self.clipboard,
        )


class WebhookPayload(CamelModel):
    """Wire payload posted to the collector, re-derived on every send"""

    id: str
    timestamp: datetime.datetime
    active_window: ActiveWindow = Field(alias="activeWindow")
    browser_tabs: List[BrowserTab] = Field(default_factory=list, alias="browserTabs")
    clipboard: Optional[ClipboardContent] = None


class WebhookResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    status_code: Optional[int] = None


class CaptureIndexRecord(BaseModel):
    """One row of the captures table"""

    id: str
    timestamp: int  # epoch milliseconds
    app_name: str
    window_title: str
    tabs_count: int = 0
    has_clipboard: bool = False
    screenshot_path: str = ""
    json_path: str
    webhook_sent: bool = False
    webhook_sent_at: Optional[int] = None

    @classmethod
    def from_row(cls, row: Any) -> "CaptureIndexRecord":
        return cls.model_validate(dict(row))


class CaptureStats(BaseModel):
    total_captures: int = 0
    unsent_captures: int = 0
    db_size_kb: int = 0


class CaptureResult(BaseModel):
    success: bool
    capture_id: Optional[str] = None
    error: Optional[str] = None


class OperationResult(BaseModel):
    success: bool
    error: Optional[str] = None
