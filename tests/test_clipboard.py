# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""Clipboard source and sanitizer tests."""

import asyncio
import subprocess
import time

import pytest

from deskcontext.context_capture.clipboard import (
    HTML_SCRIPT,
    TRUNCATION_MARKER,
    ClipboardCapture,
    ClipboardReader,
    decode_html_clipboard,
    sanitize_clipboard_text,
)
from deskcontext.models.enums import ClipboardType


class FakeReader:
    def __init__(self, html=None, text=None, error=None) -> None:
        self.html = html
        self.text = text
        self.error = error

    def read_html(self):
        return self.html

    def read_text(self):
        if self.error:
            raise self.error
        return self.text


def test_sanitize_strips_control_characters():
    text = "  line one\x00\x07\nline\ttwo\r\n\x1b[0m\x7fend  "

    assert sanitize_clipboard_text(text) == "line one\nline\ttwo\r\n[0mend"


def test_sanitize_truncates_with_marker():
    result = sanitize_clipboard_text("x" * 10050)

    assert len(result) == 10000 + len(TRUNCATION_MARKER)
    assert result.endswith(TRUNCATION_MARKER)
    assert result.startswith("x" * 10000)


def test_sanitize_exact_length_not_truncated():
    assert sanitize_clipboard_text("y" * 10000) == "y" * 10000


def test_sanitize_custom_length():
    assert sanitize_clipboard_text("abcdef", max_length=3) == "abc" + TRUNCATION_MARKER


@pytest.mark.parametrize("text", [None, "", "   \n\t ", "\x00\x01\x02"])
def test_sanitize_empty_inputs(text):
    assert sanitize_clipboard_text(text) is None


@pytest.mark.asyncio
async def test_capture_prefers_html():
    source = ClipboardCapture(reader=FakeReader(html="<b>bold</b>", text="bold"))

    content = await source.capture()

    assert content.text == "<b>bold</b>"
    assert content.type == ClipboardType.HTML


@pytest.mark.asyncio
async def test_capture_falls_back_to_plain_text():
    source = ClipboardCapture(reader=FakeReader(html="  ", text="hello\x00 world"))

    content = await source.capture()

    assert content.text == "hello world"
    assert content.type == ClipboardType.PLAIN


@pytest.mark.asyncio
async def test_capture_sanitized_to_empty_is_no_clipboard():
    source = ClipboardCapture(reader=FakeReader(text="\x00\x00"))

    assert await source.capture() is None


@pytest.mark.asyncio
async def test_capture_reader_failure_returns_none():
    source = ClipboardCapture(reader=FakeReader(error=RuntimeError("no clipboard backend")))

    assert await source.capture() is None
    status = source.get_status()
    assert status["error_count"] == 1
    assert status["last_error"] == "no clipboard backend"


def test_preview_shortens_long_text():
    source = ClipboardCapture(reader=FakeReader(text="a" * 150))

    assert source.get_preview() == "a" * 100 + "..."


def test_decode_html_clipboard():
    html = "<b>café</b>"
    output = "«data HTML" + html.encode("utf-8").hex().upper() + "»\n"

    assert decode_html_clipboard(output) == html
    assert decode_html_clipboard("") is None
    assert decode_html_clipboard(None) is None
    assert decode_html_clipboard("plain words") is None
    assert decode_html_clipboard("«data HTML3C6»") is None


def test_reader_html_through_osascript():
    calls = []

    def runner(script, timeout):
        calls.append((script, timeout))
        return "«data HTML" + "<i>hi</i>".encode("utf-8").hex() + "»"

    reader = ClipboardReader(timeout=0.5, platform_check=lambda: True, runner=runner)

    assert reader.read_html() == "<i>hi</i>"
    assert calls == [(HTML_SCRIPT, 0.5)]


@pytest.mark.parametrize(
    "error",
    [
        RuntimeError("osascript exited with 1: Can't make some data into the expected type. (-1700)"),
        subprocess.TimeoutExpired(cmd="osascript", timeout=0.5),
        FileNotFoundError("osascript"),
    ],
)
def test_reader_without_html_flavor(error):
    def runner(script, timeout):
        raise error

    reader = ClipboardReader(platform_check=lambda: True, runner=runner)

    assert reader.read_html() is None


def test_reader_skips_html_off_macos():
    def runner(script, timeout):
        raise AssertionError("osascript must not run")

    reader = ClipboardReader(platform_check=lambda: False, runner=runner)

    assert reader.read_html() is None


@pytest.mark.asyncio
async def test_slow_clipboard_does_not_block_event_loop():
    class SlowReader(FakeReader):
        def read_text(self):
            time.sleep(0.4)
            return "slow"

    source = ClipboardCapture(reader=SlowReader())
    loop = asyncio.get_running_loop()
    gaps = []

    async def heartbeat():
        last = loop.time()
        while True:
            await asyncio.sleep(0.02)
            now = loop.time()
            gaps.append(now - last)
            last = now

    ticker = asyncio.create_task(heartbeat())
    try:
        content = await source.capture()
    finally:
        ticker.cancel()
        await asyncio.gather(ticker, return_exceptions=True)

    assert content.text == "slow"
    assert len(gaps) >= 5
    assert max(gaps) < 0.2
