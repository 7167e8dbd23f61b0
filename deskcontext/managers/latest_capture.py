# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Single-slot store for the most recent capture
"""

import threading
from typing import Optional

from deskcontext.models.context import CapturedContext


class LatestCaptureSlot:
    """Holds the most recently assembled capture. Last write wins."""

    def __init__(self):
        self._context: Optional[CapturedContext] = None
        self._lock = threading.Lock()

    def set(self, context: CapturedContext) -> None:
        with self._lock:
            self._context = context

    def get(self) -> Optional[CapturedContext]:
        with self._lock:
            return self._context

    def clear(self, capture_id: Optional[str] = None) -> None:
        """Empty the slot, or only if it holds ``capture_id`` when one is given"""
        with self._lock:
            if capture_id is None or (self._context and self._context.id == capture_id):
                self._context = None
