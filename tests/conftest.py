# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures and stubs for the deskcontext tests."""

import asyncio
import os
from typing import Any, List, Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from PIL import Image

from deskcontext.context_capture.base import BaseSource
from deskcontext.managers.capture_orchestrator import CaptureOrchestrator
from deskcontext.managers.latest_capture import LatestCaptureSlot
from deskcontext.models.context import (
    ActiveWindowInfo,
    BrowserTab,
    ClipboardContent,
    WebhookPayload,
    WebhookResponse,
)
from deskcontext.storage.blob_store import BlobStore
from deskcontext.storage.capture_index import CaptureIndex
from deskcontext.utils.logging_utils import log_manager


class StubSource(BaseSource):
    """Source returning a fixed value, raising, or hanging past its timeout."""

    def __init__(
        self,
        value: Any = None,
        default: Any = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        timeout: Optional[float] = None,
    ) -> None:
        super().__init__(name="StubSource", description="stub", timeout=timeout)
        self._value = value
        self._default = default
        self._error = error
        self._delay = delay
        self.calls = 0

    def default(self):
        return self._default

    async def _capture_impl(self):
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._value


class StubScreenCapture:
    """Writes a tiny PNG instead of grabbing the screen."""

    def __init__(self, enabled: bool = True, fail: bool = False) -> None:
        self.enabled = enabled
        self.fail = fail
        self.paths: List[str] = []

    async def capture_to_file(self, path: str) -> bool:
        self.paths.append(path)
        if self.fail:
            return False
        os.makedirs(os.path.dirname(path), exist_ok=True)
        Image.new("RGB", (4, 4), color=(255, 0, 0)).save(path, format="PNG")
        return True


class RecordingWebhook:
    """Webhook stub returning queued responses and recording every payload."""

    def __init__(self, responses: Optional[List[WebhookResponse]] = None) -> None:
        self.responses = list(responses or [])
        self.payloads: List[WebhookPayload] = []
        self.closed = False

    async def send(self, payload: WebhookPayload) -> WebhookResponse:
        self.payloads.append(payload)
        if self.responses:
            return self.responses.pop(0)
        return WebhookResponse(success=True, status_code=200)

    async def close(self) -> None:
        self.closed = True

    def get_webhook_url(self) -> str:
        return "http://collector.test/webhook"


class FailingInsertIndex(CaptureIndex):
    """Index whose inserts always fail."""

    def insert_capture(self, record) -> None:
        raise RuntimeError("disk full")


@pytest.fixture(autouse=True)
def reset_log_sinks():
    """Re-point the console sink at the current stderr after tests that reconfigure logging."""
    yield
    log_manager.configure(None)


@pytest.fixture
def blob_store(tmp_path):
    store = BlobStore(str(tmp_path / "data"))
    store.initialize()
    return store


@pytest.fixture
def capture_index(tmp_path):
    index = CaptureIndex(str(tmp_path / "data" / "deskcontext.db"))
    assert index.initialize()
    yield index
    index.close()


@pytest.fixture
def webhook():
    return RecordingWebhook()


@pytest.fixture
def window_info():
    return ActiveWindowInfo(app="Code", title="main.py", bundle_id="com.microsoft.VSCode")


@pytest.fixture
def tabs():
    return [
        BrowserTab(
            title="Docs", url="https://docs.python.org/3/", domain="docs.python.org", browser="Chrome"
        ),
        BrowserTab(title="News", url="https://example.com/news", domain="example.com", browser="Safari"),
    ]


@pytest.fixture
def make_orchestrator(capture_index, blob_store, webhook, window_info, tabs):
    """Build an orchestrator with stub sources; keyword arguments override the defaults."""

    def _make(**overrides) -> CaptureOrchestrator:
        components = {
            "index": capture_index,
            "blob_store": blob_store,
            "webhook": webhook,
            "active_window": StubSource(value=window_info),
            "browser_tabs": StubSource(value=tabs, default=[]),
            "clipboard": StubSource(value=ClipboardContent(text="copied text")),
            "screen_capture": StubScreenCapture(),
            "latest": LatestCaptureSlot(),
            "settle_delay": 0,
        }
        components.update(overrides)
        return CaptureOrchestrator(**components)

    return _make


class Collector:
    """Collector endpoint answering with queued status codes."""

    def __init__(self) -> None:
        self.statuses = []
        self.delay = 0.0
        self.requests = []
        self.url = ""

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append({"headers": dict(request.headers), "body": await request.json()})
        if self.delay:
            await asyncio.sleep(self.delay)
        status = self.statuses.pop(0) if self.statuses else 200
        return web.Response(status=status)


@pytest_asyncio.fixture
async def collector():
    collector = Collector()
    app = web.Application()
    app.router.add_post("/webhook", collector.handle)
    server = TestServer(app)
    await server.start_server()
    collector.url = str(server.make_url("/webhook"))
    yield collector
    await server.close()
