#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Webhook delivery: posts captures to the collector endpoint with bounded retries
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import aiohttp

from deskcontext.models.context import WebhookPayload, WebhookResponse
from deskcontext.utils.json_utils import dumps
from deskcontext.utils.logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_TEST_TIMEOUT = 5.0
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_USER_AGENT = "DeskContext/1.0"


class WebhookService:
    """
    HTTP client for the collector webhook.

    Status codes below 400 count as delivered. 4xx responses are final. Timeouts,
    connection errors and 5xx responses are retried with exponential backoff.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        test_timeout: float = DEFAULT_TEST_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._url = url
        self._timeout = timeout
        self._test_timeout = test_timeout
        self._max_attempts = max(1, max_attempts)
        self._retry_delay = retry_delay
        self._user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_lock = asyncio.Lock()

    def get_webhook_url(self) -> str:
        return self._url

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "User-Agent": self._user_agent,
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        async with self._session_lock:
            if self._session is None or self._session.closed:
                self._session = aiohttp.ClientSession()
            return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _sleep(self, delay: float) -> None:
        await asyncio.sleep(delay)

    async def _post(self, body: str, timeout: float) -> int:
        session = await self._get_session()
        async with session.post(
            self._url,
            data=body.encode("utf-8"),
            headers=self._get_headers(),
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as response:
            await response.read()
            return response.status

    async def send(self, payload: WebhookPayload) -> WebhookResponse:
        """
        Deliver one payload

        Args:
            payload (WebhookPayload): Capture payload

        Returns:
            WebhookResponse: Outcome of the last attempt
        """
        body = dumps(payload)
        last_error = None
        last_status = None

        for attempt in range(1, self._max_attempts + 1):
            try:
                status = await self._post(body, self._timeout)
                last_status = status
                if status < 400:
                    logger.info(f"Webhook delivered capture {payload.id} (attempt {attempt})")
                    return WebhookResponse(success=True, status_code=status)
                if status < 500:
                    logger.error(f"Webhook rejected capture {payload.id}: HTTP {status}")
                    return WebhookResponse(
                        success=False, error=f"Client error: {status}", status_code=status
                    )
                last_error = f"Server error: {status}"
            except asyncio.TimeoutError:
                last_error = f"Request timed out after {self._timeout}s"
            except aiohttp.ClientError as e:
                last_error = f"Connection error: {e}"

            logger.warning(
                f"Webhook attempt {attempt}/{self._max_attempts} for {payload.id} failed: {last_error}"
            )
            if attempt < self._max_attempts:
                await self._sleep(self._retry_delay * 2 ** (attempt - 1))

        logger.error(f"Webhook delivery of {payload.id} failed after {self._max_attempts} attempts")
        return WebhookResponse(success=False, error=last_error, status_code=last_status)

    async def test_connection(self) -> bool:
        """Single probe request without retries"""
        probe: Dict[str, Any] = {
            "test": True,
            "timestamp": datetime.now(timezone.utc),
            "message": "DeskContext connection test",
        }
        body = dumps(probe)
        try:
            status = await self._post(body, self._test_timeout)
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            logger.error(f"Webhook connection test failed: {e}")
            return False

        ok = status < 400
        if ok:
            logger.info(f"Webhook connection test succeeded: HTTP {status}")
        else:
            logger.error(f"Webhook connection test failed: HTTP {status}")
        return ok
