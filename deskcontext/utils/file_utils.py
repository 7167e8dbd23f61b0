# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
File utilities - Provides file operation helper functions
"""

import os
from pathlib import Path

from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)


def ensure_dir(directory: str) -> bool:
    """
    Ensure directory exists, create if it doesn't exist

    Args:
        directory: Directory path

    Returns:
        Whether successfully created or already exists
    """
    try:
        Path(directory).mkdir(parents=True, exist_ok=True)
        return True
    except Exception as e:
        logger.error(f"Failed to create directory: {directory}, error: {e}")
        return False


def get_file_size(file_path: str) -> int:
    """
    Get file size in bytes

    Args:
        file_path: File path

    Returns:
        File size in bytes, -1 if the file cannot be read
    """
    try:
        return Path(file_path).stat().st_size
    except Exception as e:
        logger.error(f"Failed to get file size: {file_path}, error: {e}")
        return -1


def write_text_file(file_path: str, content: str, encoding: str = "utf-8") -> None:
    """
    Write text file atomically (temp file + rename)

    Args:
        file_path: File path
        content: File content
        encoding: File encoding

    Raises:
        OSError: If the file cannot be written
    """
    ensure_dir(str(Path(file_path).parent))
    tmp_path = f"{file_path}.tmp"
    with open(tmp_path, "w", encoding=encoding) as f:
        f.write(content)
    os.replace(tmp_path, file_path)


def remove_file(file_path: str) -> bool:
    """
    Remove a file, treating a missing file as already removed

    Returns:
        True if a file was deleted, False if there was nothing to delete
    """
    if not file_path:
        return False
    try:
        os.remove(file_path)
        return True
    except FileNotFoundError:
        logger.debug(f"File not found, nothing to delete: {file_path}")
        return False
    except OSError as e:
        logger.warning(f"Failed to delete file: {file_path}, error: {e}")
        return False
