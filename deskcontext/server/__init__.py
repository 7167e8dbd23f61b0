# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Server module - DeskContext entry point
"""

from deskcontext.server.desk_context import DeskContext

__all__ = ["DeskContext"]
