# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""Active window source tests."""

import asyncio

import pytest

from deskcontext.context_capture.active_window import (
    FRONT_APP_SCRIPT,
    WINDOW_TITLE_SCRIPT,
    ActiveWindowCapture,
    parse_frontmost_app,
)


def _runner(app_output, title_output):
    async def run(script: str) -> str:
        output = app_output if script == FRONT_APP_SCRIPT else title_output
        assert script in (FRONT_APP_SCRIPT, WINDOW_TITLE_SCRIPT)
        if isinstance(output, Exception):
            raise output
        if output == "hang":
            await asyncio.sleep(5)
        return output

    return run


def test_parse_frontmost_app():
    assert parse_frontmost_app("Safari|com.apple.Safari\n") == ("Safari", "com.apple.Safari")
    assert parse_frontmost_app("Terminal|missing value") == ("Terminal", None)
    assert parse_frontmost_app("Finder") == ("Finder", None)
    assert parse_frontmost_app("") is None


@pytest.mark.asyncio
async def test_capture_app_and_title():
    source = ActiveWindowCapture(
        runner=_runner("Code|com.microsoft.VSCode", "main.py - project\n"),
        platform_check=lambda: True,
    )

    info = await source.capture()

    assert info.app == "Code"
    assert info.bundle_id == "com.microsoft.VSCode"
    assert info.title == "main.py - project"


@pytest.mark.asyncio
async def test_title_failure_only_clears_title():
    source = ActiveWindowCapture(
        runner=_runner("Code|com.microsoft.VSCode", RuntimeError("no window")),
        platform_check=lambda: True,
    )

    info = await source.capture()

    assert info.app == "Code"
    assert info.title is None


@pytest.mark.asyncio
async def test_app_failure_only_clears_app():
    source = ActiveWindowCapture(
        runner=_runner(RuntimeError("not permitted"), "Inbox"),
        platform_check=lambda: True,
    )

    info = await source.capture()

    assert info.app is None
    assert info.bundle_id is None
    assert info.title == "Inbox"


@pytest.mark.asyncio
async def test_both_failures_return_none():
    source = ActiveWindowCapture(
        runner=_runner(RuntimeError("a"), RuntimeError("b")),
        platform_check=lambda: True,
    )

    assert await source.capture() is None


@pytest.mark.asyncio
async def test_timeout_returns_none():
    source = ActiveWindowCapture(
        timeout=0.05, runner=_runner("hang", "hang"), platform_check=lambda: True
    )

    assert await source.capture() is None
    assert source.get_status()["timeout_count"] == 1


@pytest.mark.asyncio
async def test_unsupported_platform():
    calls = []

    async def runner(script):
        calls.append(script)
        return ""

    source = ActiveWindowCapture(runner=runner, platform_check=lambda: False)

    assert await source.capture() is None
    assert calls == []
