# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Browser tab source: open tabs of the supported browsers (macOS)
"""

import asyncio
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Union
from urllib.parse import urlparse

from deskcontext.context_capture.base import BaseSource
from deskcontext.models.context import BrowserTab
from deskcontext.models.enums import BrowserName
from deskcontext.utils.logging_utils import get_logger
from deskcontext.utils.process_utils import is_macos, run_osascript

logger = get_logger(__name__)

MAX_TABS = 50

# browser -> (application name, tab title property); None means no tab scripting support
BROWSER_TARGETS: Dict[BrowserName, tuple] = {
    BrowserName.CHROME: ("Google Chrome", "title"),
    BrowserName.SAFARI: ("Safari", "name"),
    BrowserName.FIREFOX: ("Firefox", None),
    BrowserName.EDGE: ("Microsoft Edge", "title"),
}

# One "url<TAB>title" line per tab. ``tab`` is a class name inside the browser
# dictionaries, so the separators are built from character ids.
TAB_SCRIPT_TEMPLATE = """
set sep to character id 9
set nl to character id 10
set output to ""
if application "{app}" is running then
    tell application "{app}"
        repeat with w in windows
            repeat with t in tabs of w
                set output to output & (URL of t) & sep & ({title_prop} of t) & nl
            end repeat
        end repeat
    end tell
end if
return output
"""

ScriptRunner = Callable[[str], Awaitable[str]]
BranchResult = Union[List[BrowserTab], BaseException]


def build_tab_script(application: str, title_prop: str) -> str:
    return TAB_SCRIPT_TEMPLATE.format(app=application, title_prop=title_prop)


def parse_tab_output(output: str, browser: str) -> List[BrowserTab]:
    """
    Parse ``url<TAB>title`` lines into tabs, skipping incomplete lines and unparsable URLs
    """
    tabs: List[BrowserTab] = []
    for line in (output or "").splitlines():
        url, _, title = line.partition("\t")
        url = url.strip()
        title = title.strip()
        if not url or not title:
            continue

        parsed = urlparse(url)
        if not parsed.scheme:
            logger.debug(f"Invalid URL skipped: {url}")
            continue
        tabs.append(
            BrowserTab(title=title, url=url, domain=parsed.hostname or "", browser=browser)
        )
    return tabs


def aggregate_tabs(branches: Iterable[BranchResult], max_tabs: int = MAX_TABS) -> List[BrowserTab]:
    """
    Merge per-browser results in order, drop failed branches, deduplicate by URL
    (first occurrence wins) and keep the first ``max_tabs`` entries
    """
    seen = set()
    unique: List[BrowserTab] = []
    for branch in branches:
        if isinstance(branch, BaseException) or not branch:
            continue
        for tab in branch:
            if tab.url in seen:
                continue
            seen.add(tab.url)
            unique.append(tab)
            if len(unique) >= max_tabs:
                return unique
    return unique


class BrowserTabCapture(BaseSource[List[BrowserTab]]):
    """
    Queries every configured browser concurrently, each under its own timeout.
    A failing or slow browser is left out of the result.
    """

    def __init__(
        self,
        timeout: float = 1.0,
        enabled: bool = True,
        browsers: Optional[Sequence[str]] = None,
        max_tabs: int = MAX_TABS,
        runner: Optional[ScriptRunner] = None,
        platform_check: Callable[[], bool] = is_macos,
    ):
        # the time budget applies per browser, not to the whole source
        super().__init__(
            name="BrowserTabCapture",
            description="Open browser tabs",
            timeout=None,
            enabled=enabled,
        )
        self._browser_timeout = timeout
        self._browsers = [BrowserName(b) for b in (browsers or [b.value for b in BrowserName])]
        self._max_tabs = max_tabs
        self._runner = runner or run_osascript
        self._platform_check = platform_check

    def is_supported(self) -> bool:
        return self._platform_check()

    def default(self) -> List[BrowserTab]:
        return []

    async def _capture_impl(self) -> List[BrowserTab]:
        results = await asyncio.gather(
            *(self._capture_browser(browser) for browser in self._browsers),
            return_exceptions=True,
        )

        for browser, result in zip(self._browsers, results):
            if isinstance(result, asyncio.TimeoutError):
                logger.info(f"{self._name}: {browser.value} capture timed out")
            elif isinstance(result, BaseException):
                logger.info(f"{self._name}: {browser.value} failed - {result}")
            elif result:
                logger.debug(f"{self._name}: {browser.value}: {len(result)} tabs")

        tabs = aggregate_tabs(results, self._max_tabs)
        logger.info(f"{self._name}: Total unique tabs captured: {len(tabs)}")
        return tabs

    async def _capture_browser(self, browser: BrowserName) -> List[BrowserTab]:
        application, title_prop = BROWSER_TARGETS[browser]
        if title_prop is None:
            return []
        script = build_tab_script(application, title_prop)
        output = await asyncio.wait_for(self._runner(script), timeout=self._browser_timeout)
        return parse_tab_output(output, browser.value)

    def get_status(self):
        status = super().get_status()
        status["timeout"] = self._browser_timeout
        status["browsers"] = [b.value for b in self._browsers]
        return status
