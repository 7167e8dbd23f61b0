# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""End-to-end tests of the DeskContext facade with a local collector."""

import json
import os
import threading

import pytest

from deskcontext.cli import main, parse_args
from deskcontext.config.global_config import GlobalConfig
from deskcontext.server.desk_context import DeskContext


def _config(tmp_path, url: str) -> dict:
    return {
        "storage": {"data_dir": str(tmp_path / "persist")},
        "capture": {
            "settle_delay": 0,
            "active_window": {"enabled": False},
            "browser_tabs": {"enabled": False},
            "clipboard": {"enabled": False},
            "screenshot": {"enabled": False},
        },
        "webhook": {"url": url, "retry_delay": 0, "max_attempts": 2},
        "scheduler": {"webhook_outbox": {"interval": 60}},
    }


@pytest.mark.asyncio
async def test_capture_list_retry_delete(tmp_path, collector):
    desk = DeskContext(_config(tmp_path, collector.url))
    try:
        result = await desk.capture_start()
        assert result.success
        await desk.orchestrator.wait_for_deliveries()

        records = await desk.list_captures()
        assert [r.id for r in records] == [result.capture_id]
        assert records[0].webhook_sent is True
        assert records[0].app_name == "Unknown"

        body = collector.requests[0]["body"]
        assert body["id"] == result.capture_id
        assert body["browserTabs"] == []

        context = await desk.get_capture(result.capture_id)
        assert context.metadata.capture_method.value == "manual"
        assert desk.get_latest_capture() == context

        retry = await desk.retry_webhook(result.capture_id)
        assert retry.success
        assert len(collector.requests) == 2

        stats = await desk.get_stats()
        assert stats.total_captures == 1
        assert stats.unsent_captures == 0

        assert (await desk.delete_capture(result.capture_id)).success
        assert (await desk.delete_capture(result.capture_id)).success
        assert await desk.list_captures() == []
        assert await desk.cleanup_old_captures(30) == 0
    finally:
        await desk.shutdown()


@pytest.mark.asyncio
async def test_unreachable_collector_leaves_capture_unsent(tmp_path, collector):
    collector.statuses = [503, 503]
    desk = DeskContext(_config(tmp_path, collector.url))
    try:
        result = await desk.capture_start("hotkey")
        await desk.orchestrator.wait_for_deliveries()

        stats = await desk.get_stats()
        assert stats.unsent_captures == 1
        assert await desk.test_webhook_connection() is True

        assert await desk.retry_unsent() == 1
        assert (await desk.get_stats()).unsent_captures == 0
        assert len(collector.requests) == 4
        assert (await desk.get_capture(result.capture_id)).metadata.capture_method.value == "hotkey"
    finally:
        await desk.shutdown()


@pytest.mark.asyncio
async def test_get_stats_reads_index_off_the_loop(tmp_path, collector, monkeypatch):
    desk = DeskContext(_config(tmp_path, collector.url))
    threads = []
    try:
        desk.initialize()
        read_stats = desk.index.get_stats

        def recording_get_stats():
            threads.append(threading.get_ident())
            return read_stats()

        monkeypatch.setattr(desk.index, "get_stats", recording_get_stats)
        stats = await desk.get_stats()
    finally:
        await desk.shutdown()

    assert stats.total_captures == 0
    assert threads and threads[0] != threading.get_ident()


@pytest.mark.asyncio
async def test_traversal_ids_are_rejected(tmp_path, collector):
    desk = DeskContext(_config(tmp_path, collector.url))
    try:
        desk.initialize()
        victim = tmp_path / "persist" / "victim.json"
        victim.write_text("{}", encoding="utf-8")

        deleted = await desk.delete_capture("../victim")
        retried = await desk.retry_webhook("../victim")

        assert deleted.success is False
        assert deleted.error == "Capture not found"
        assert retried.error == "Capture not found"
        assert await desk.get_capture("../victim") is None
        assert victim.exists()
        assert collector.requests == []
    finally:
        await desk.shutdown()


@pytest.mark.asyncio
async def test_scheduler_lifecycle(tmp_path, collector):
    desk = DeskContext(_config(tmp_path, collector.url))
    try:
        scheduler = desk.start_scheduler()
        assert scheduler.running
        assert sorted(scheduler.get_job_ids()) == ["capture_cleanup", "webhook_outbox"]
        assert desk.start_scheduler() is scheduler
    finally:
        await desk.shutdown()
    assert not scheduler.running


def test_parse_args():
    args = parse_args(["--config", "custom.yaml", "cleanup", "--days", "7"])

    assert args.config == "custom.yaml"
    assert args.command == "cleanup"
    assert args.days == 7


def test_cli_missing_config_fails(tmp_path):
    GlobalConfig.reset()
    try:
        assert main(["--config", str(tmp_path / "missing.yaml"), "stats"]) == 1
    finally:
        GlobalConfig.reset()
        os.environ.pop("DESKCONTEXT_CONFIG_PATH", None)


def test_cli_stats_and_list(tmp_path, capsys, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        f"storage:\n  data_dir: {tmp_path / 'persist'}\nlogging:\n  log_path:\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("DESKCONTEXT_CONFIG_PATH", raising=False)
    GlobalConfig.reset()
    try:
        assert main(["--config", str(config_path), "stats"]) == 0
        stats = json.loads(capsys.readouterr().out)
        assert stats == {"total_captures": 0, "unsent_captures": 0, "db_size_kb": stats["db_size_kb"]}

        assert main(["--config", str(config_path), "list"]) == 0
        assert json.loads(capsys.readouterr().out) == []

        assert main(["--config", str(config_path), "show", "missing-id"]) == 1
        assert json.loads(capsys.readouterr().out)["error"] == "Capture not found"
    finally:
        GlobalConfig.reset()
        os.environ.pop("DESKCONTEXT_CONFIG_PATH", None)
