# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Storage module - capture index and file storage
"""

from deskcontext.storage.blob_store import BlobStore
from deskcontext.storage.capture_index import CaptureIndex

__all__ = ["BlobStore", "CaptureIndex"]
