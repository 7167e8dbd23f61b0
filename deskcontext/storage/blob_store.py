# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
File storage for capture documents and their screenshots
"""

import os
import uuid
from typing import Optional

from pydantic import ValidationError

from deskcontext.models.context import CapturedContext
from deskcontext.utils.file_utils import ensure_dir, remove_file, write_text_file
from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)

CAPTURES_DIR = "captures"
SCREENSHOTS_DIR = "capture_screenshots"


def is_valid_capture_id(capture_id: str) -> bool:
    """Capture ids are canonical UUID strings; anything else never names a stored file"""
    try:
        return str(uuid.UUID(capture_id)) == capture_id
    except (TypeError, ValueError, AttributeError):
        return False


class BlobStore:
    """
    One ``<id>.json`` document per capture plus an optional ``<id>.png`` screenshot
    in a sibling directory
    """

    def __init__(
        self,
        data_dir: str,
        captures_dir: str = CAPTURES_DIR,
        screenshots_dir: str = SCREENSHOTS_DIR,
    ):
        self.data_dir = data_dir
        self.captures_dir = os.path.join(data_dir, captures_dir)
        self.screenshots_dir = os.path.join(data_dir, screenshots_dir)

    def initialize(self) -> bool:
        ok = ensure_dir(self.captures_dir) and ensure_dir(self.screenshots_dir)
        if ok:
            logger.info(f"Blob store ready under {self.data_dir}")
        return ok

    def _check_id(self, capture_id: str) -> None:
        if not is_valid_capture_id(capture_id):
            raise ValueError(f"Invalid capture id: {capture_id!r}")

    def json_path(self, capture_id: str) -> str:
        self._check_id(capture_id)
        return os.path.join(self.captures_dir, f"{capture_id}.json")

    def screenshot_path(self, capture_id: str) -> str:
        self._check_id(capture_id)
        return os.path.join(self.screenshots_dir, f"{capture_id}.png")

    def save(self, context: CapturedContext) -> str:
        """
        Write the capture document

        Returns:
            str: Path of the written document

        Raises:
            OSError: If the document cannot be written
        """
        path = self.json_path(context.id)
        write_text_file(path, context.to_json())
        logger.debug(f"Capture document saved: {path}")
        return path

    def load(self, capture_id: str) -> Optional[CapturedContext]:
        """Read a capture document, None if it is missing or cannot be parsed"""
        if not is_valid_capture_id(capture_id):
            logger.warning(f"Refusing to load invalid capture id: {capture_id!r}")
            return None
        path = self.json_path(capture_id)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return CapturedContext.from_json(f.read())
        except FileNotFoundError:
            logger.info(f"Capture document not found: {path}")
            return None
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load capture document {path}: {e}")
            return None

    def delete_json(self, capture_id: str) -> bool:
        if not is_valid_capture_id(capture_id):
            return False
        return remove_file(self.json_path(capture_id))

    def delete_file(self, path: str) -> bool:
        return remove_file(path)
