#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0


"""
Interface module containing interface definitions for system components
"""

from deskcontext.interfaces.source_interface import ISource
from deskcontext.interfaces.storage_interface import ICaptureIndex

__all__ = [
    "ISource",
    "ICaptureIndex",
]
