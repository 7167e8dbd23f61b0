# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Managers module
"""

from deskcontext.managers.capture_orchestrator import CaptureOrchestrator
from deskcontext.managers.latest_capture import LatestCaptureSlot

__all__ = ["CaptureOrchestrator", "LatestCaptureSlot"]
