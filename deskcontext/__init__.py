#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
DeskContext - Desktop context capture with durable storage and webhook delivery
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "Desktop context capture with durable storage and webhook delivery"

# Package metadata
__all__ = ["__version__", "__license__", "__description__"]
