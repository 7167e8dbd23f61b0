# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
deskcontext module: image
"""

import base64
from typing import Optional

from PIL import Image

from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)


def encode_image_base64(path: str) -> Optional[str]:
    """
    Read an image file and return its base64 representation.
    """
    try:
        with open(path, "rb") as f:
            return base64.b64encode(f.read()).decode("ascii")
    except Exception as e:
        logger.error(f"Failed to encode image {path}: {e}")
        return None


def resize_image(path: str, max_size: int, resize_quality: int = 95) -> bool:
    """
    Scale image proportionally if size exceeds maximum limit.
    """
    try:
        with Image.open(path) as img:
            if max_size and (img.width > max_size or img.height > max_size):
                img.thumbnail((max_size, max_size), Image.Resampling.BILINEAR)
                if path.lower().endswith((".jpg", ".jpeg")):
                    img.save(path, quality=resize_quality, format="JPEG", optimize=True)
                else:
                    img.save(path, format="PNG", optimize=True, compress_level=6)
                return True
    except Exception as e:
        logger.error(f"Failed to resize image {path}: {e}")
    return False
