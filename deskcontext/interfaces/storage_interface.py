#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0


"""
Capture index storage interface
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from deskcontext.models.context import CaptureIndexRecord, CaptureStats


class ICaptureIndex(ABC):
    """
    Capture index interface, one row per capture
    """

    @abstractmethod
    def initialize(self) -> bool:
        """Open the storage and create the schema"""

    @abstractmethod
    def insert_capture(self, record: CaptureIndexRecord) -> None:
        """Insert a capture row with ``webhook_sent`` initialized to false"""

    @abstractmethod
    def get_capture(self, capture_id: str) -> Optional[CaptureIndexRecord]:
        """Get a single capture row"""

    @abstractmethod
    def get_captures(self, limit: int = 100) -> List[CaptureIndexRecord]:
        """Get captures ordered by timestamp, newest first"""

    @abstractmethod
    def get_unsent_captures(self) -> List[CaptureIndexRecord]:
        """Get captures that have not been delivered"""

    @abstractmethod
    def get_captures_older_than(self, cutoff_ms: int) -> List[CaptureIndexRecord]:
        """Get captures with a timestamp before ``cutoff_ms``"""

    @abstractmethod
    def update_webhook_status(self, capture_id: str, sent: bool) -> bool:
        """Record a delivery outcome"""

    @abstractmethod
    def delete_capture(self, capture_id: str) -> bool:
        """Delete a capture row"""

    @abstractmethod
    def get_stats(self) -> CaptureStats:
        """Get aggregate statistics"""

    @abstractmethod
    def vacuum(self) -> None:
        """Reclaim storage space"""

    @abstractmethod
    def close(self) -> None:
        """Close the storage"""
