#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
SQLite capture index, one row per capture with its delivery status
"""

import os
import sqlite3
import threading
import time
from typing import List, Optional

from deskcontext.interfaces.storage_interface import ICaptureIndex
from deskcontext.models.context import CaptureIndexRecord, CaptureStats
from deskcontext.utils.file_utils import get_file_size
from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "id, timestamp, app_name, window_title, tabs_count, has_clipboard, "
    "screenshot_path, json_path, webhook_sent, webhook_sent_at"
)

DAY_MS = 24 * 60 * 60 * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


class CaptureIndex(ICaptureIndex):
    """
    SQLite capture index

    A single connection shared by the event loop and worker threads,
    serialized with a lock.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> bool:
        """Open the database and create the schema"""
        try:
            db_dir = os.path.dirname(self.db_path)
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)

            self.connection = sqlite3.connect(self.db_path, check_same_thread=False)
            self.connection.row_factory = sqlite3.Row
            if self.db_path != ":memory:":
                self.connection.execute("PRAGMA journal_mode=WAL")

            self._create_tables()
            self._initialized = True
            logger.info(f"Capture index initialized, database path: {self.db_path}")
            return True
        except Exception as e:
            logger.exception(f"Capture index initialization failed: {e}")
            return False

    def _create_tables(self):
        cursor = self.connection.cursor()
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS captures (
                id TEXT PRIMARY KEY,
                timestamp INTEGER NOT NULL,
                app_name TEXT NOT NULL,
                window_title TEXT NOT NULL,
                tabs_count INTEGER DEFAULT 0,
                has_clipboard INTEGER DEFAULT 0,
                screenshot_path TEXT NOT NULL,
                json_path TEXT NOT NULL,
                webhook_sent INTEGER DEFAULT 0,
                webhook_sent_at INTEGER
            )
        """
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_timestamp ON captures(timestamp DESC)"
        )
        self.connection.commit()

    def _check_initialized(self):
        if not self._initialized:
            raise RuntimeError("Capture index not initialized")

    def insert_capture(self, record: CaptureIndexRecord) -> None:
        """
        Insert a capture row, delivery status starts as unsent

        Raises:
            RuntimeError: If the index is not initialized
            sqlite3.Error: If the insert fails
        """
        self._check_initialized()
        with self._lock:
            cursor = self.connection.cursor()
            try:
                cursor.execute(
                    f"""
                    INSERT INTO captures ({_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, NULL)
                """,
                    (
                        record.id,
                        record.timestamp,
                        record.app_name,
                        record.window_title,
                        record.tabs_count,
                        1 if record.has_clipboard else 0,
                        record.screenshot_path or "",
                        record.json_path,
                    ),
                )
                self.connection.commit()
                logger.debug(f"Capture row inserted, ID: {record.id}")
            except Exception as e:
                self.connection.rollback()
                logger.exception(f"Failed to insert capture {record.id}: {e}")
                raise

    def get_capture(self, capture_id: str) -> Optional[CaptureIndexRecord]:
        self._check_initialized()
        with self._lock:
            cursor = self.connection.cursor()
            cursor.execute(f"SELECT {_COLUMNS} FROM captures WHERE id = ?", (capture_id,))
            row = cursor.fetchone()
        return CaptureIndexRecord.from_row(row) if row else None

    def get_captures(self, limit: int = 100) -> List[CaptureIndexRecord]:
        """Newest first"""
        self._check_initialized()
        with self._lock:
            cursor = self.connection.cursor()
            cursor.execute(
                f"SELECT {_COLUMNS} FROM captures ORDER BY timestamp DESC LIMIT ?",
                (limit,),
            )
            rows = cursor.fetchall()
        return [CaptureIndexRecord.from_row(row) for row in rows]

    def get_unsent_captures(self) -> List[CaptureIndexRecord]:
        """Oldest first, so the outbox drains in capture order"""
        self._check_initialized()
        with self._lock:
            cursor = self.connection.cursor()
            cursor.execute(
                f"SELECT {_COLUMNS} FROM captures WHERE webhook_sent = 0 ORDER BY timestamp ASC"
            )
            rows = cursor.fetchall()
        return [CaptureIndexRecord.from_row(row) for row in rows]

    def get_captures_older_than(self, cutoff_ms: int) -> List[CaptureIndexRecord]:
        self._check_initialized()
        with self._lock:
            cursor = self.connection.cursor()
            cursor.execute(
                f"SELECT {_COLUMNS} FROM captures WHERE timestamp < ? ORDER BY timestamp ASC",
                (cutoff_ms,),
            )
            rows = cursor.fetchall()
        return [CaptureIndexRecord.from_row(row) for row in rows]

    def update_webhook_status(self, capture_id: str, sent: bool) -> bool:
        """
        Record a delivery outcome

        Only a successful delivery changes the row: ``webhook_sent`` goes from 0 to 1
        and ``webhook_sent_at`` is stamped once. A failed delivery leaves the row as is,
        so it stays in the outbox, and never reverts a row that was already sent.

        Returns:
            bool: Whether the row changed
        """
        self._check_initialized()
        if not sent:
            logger.debug(f"Delivery of {capture_id} failed, row stays unsent")
            return False

        with self._lock:
            cursor = self.connection.cursor()
            try:
                cursor.execute(
                    """
                    UPDATE captures SET webhook_sent = 1, webhook_sent_at = ?
                    WHERE id = ? AND webhook_sent = 0
                """,
                    (now_ms(), capture_id),
                )
                changed = cursor.rowcount > 0
                self.connection.commit()
                return changed
            except Exception as e:
                self.connection.rollback()
                logger.exception(f"Failed to update webhook status of {capture_id}: {e}")
                raise

    def delete_capture(self, capture_id: str) -> bool:
        """
        Delete a capture row

        Returns:
            bool: Whether a row was removed; a missing row is not an error
        """
        self._check_initialized()
        with self._lock:
            cursor = self.connection.cursor()
            try:
                cursor.execute("DELETE FROM captures WHERE id = ?", (capture_id,))
                deleted = cursor.rowcount > 0
                self.connection.commit()
                return deleted
            except Exception as e:
                self.connection.rollback()
                logger.exception(f"Failed to delete capture {capture_id}: {e}")
                raise

    def delete_old_captures(self, days: int = 30) -> int:
        """
        Bulk delete rows older than ``days``. Files are left alone, use
        ``CaptureOrchestrator.cleanup_old_captures`` to remove them too.

        Returns:
            int: Number of rows deleted
        """
        self._check_initialized()
        cutoff = now_ms() - days * DAY_MS
        with self._lock:
            cursor = self.connection.cursor()
            try:
                cursor.execute("DELETE FROM captures WHERE timestamp < ?", (cutoff,))
                deleted = cursor.rowcount
                self.connection.commit()
                logger.info(f"Deleted {deleted} capture rows older than {days} days")
                return deleted
            except Exception as e:
                self.connection.rollback()
                logger.exception(f"Failed to delete old captures: {e}")
                raise

    def get_stats(self) -> CaptureStats:
        self._check_initialized()
        with self._lock:
            cursor = self.connection.cursor()
            cursor.execute("SELECT COUNT(*) FROM captures")
            total = cursor.fetchone()[0]
            cursor.execute("SELECT COUNT(*) FROM captures WHERE webhook_sent = 0")
            unsent = cursor.fetchone()[0]
            cursor.execute("PRAGMA page_count")
            page_count = cursor.fetchone()[0]
            cursor.execute("PRAGMA page_size")
            page_size = cursor.fetchone()[0]

        db_size = page_count * page_size
        if self.db_path != ":memory:":
            file_size = get_file_size(self.db_path)
            if file_size >= 0:
                db_size = file_size
        return CaptureStats(
            total_captures=total,
            unsent_captures=unsent,
            db_size_kb=round(db_size / 1024),
        )

    def vacuum(self) -> None:
        self._check_initialized()
        with self._lock:
            self.connection.execute("VACUUM")
        logger.info("Capture index vacuumed")

    def close(self) -> None:
        with self._lock:
            if self.connection:
                self.connection.close()
                self.connection = None
        self._initialized = False
        logger.info("Capture index connection closed")
