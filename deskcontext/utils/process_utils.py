# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Helpers for running short-lived OS commands from the event loop
"""

import asyncio
import subprocess
import sys
from typing import Optional, Sequence


def is_macos() -> bool:
    return sys.platform == "darwin"


async def run_command(args: Sequence[str], timeout: Optional[float] = None) -> str:
    """
    Run a command and return its stdout.

    Raises:
        asyncio.TimeoutError: If the command does not finish within ``timeout``
        RuntimeError: If the command exits with a non-zero status
    """
    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except (asyncio.TimeoutError, asyncio.CancelledError):
        # also reached when an enclosing wait_for cancels us
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await asyncio.shield(proc.wait())
        raise

    if proc.returncode != 0:
        message = stderr.decode("utf-8", errors="replace").strip()
        raise RuntimeError(f"{args[0]} exited with {proc.returncode}: {message}")
    return stdout.decode("utf-8", errors="replace")


async def run_osascript(script: str, timeout: Optional[float] = None) -> str:
    """Run an AppleScript snippet through osascript."""
    return await run_command(["osascript", "-e", script], timeout=timeout)


def run_command_sync(args: Sequence[str], timeout: Optional[float] = None) -> str:
    """
    Blocking variant of ``run_command`` for code already running on a worker thread.

    Raises:
        subprocess.TimeoutExpired: If the command does not finish within ``timeout``
        RuntimeError: If the command exits with a non-zero status
    """
    completed = subprocess.run(list(args), capture_output=True, timeout=timeout)
    if completed.returncode != 0:
        message = completed.stderr.decode("utf-8", errors="replace").strip()
        raise RuntimeError(f"{args[0]} exited with {completed.returncode}: {message}")
    return completed.stdout.decode("utf-8", errors="replace")


def run_osascript_sync(script: str, timeout: Optional[float] = None) -> str:
    return run_command_sync(["osascript", "-e", script], timeout=timeout)
