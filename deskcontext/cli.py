# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Command-line interface - provides the entry point for command-line tools
"""

import argparse
import asyncio
import os
import sys
from typing import Any, List, Optional

from deskcontext.config.global_config import CONFIG_PATH_ENV, GlobalConfig
from deskcontext.server.desk_context import DeskContext
from deskcontext.utils.json_utils import dumps
from deskcontext.utils.logging_utils import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed command line arguments
    """
    parser = argparse.ArgumentParser(
        description="DeskContext - Desktop context capture and webhook delivery"
    )
    parser.add_argument("--config", type=str, help="Configuration file path")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config file)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    capture_parser = subparsers.add_parser("capture", help="Capture the current desktop context")
    capture_parser.add_argument(
        "--method",
        type=str,
        default="manual",
        choices=["hotkey", "manual"],
        help="Capture method recorded in the metadata (default: manual)",
    )

    list_parser = subparsers.add_parser("list", help="List captures, newest first")
    list_parser.add_argument("--limit", type=int, default=100, help="Maximum number of captures")

    show_parser = subparsers.add_parser("show", help="Show a stored capture")
    show_parser.add_argument("capture_id", type=str, help="Capture id")

    delete_parser = subparsers.add_parser("delete", help="Delete a capture")
    delete_parser.add_argument("capture_id", type=str, help="Capture id")

    retry_parser = subparsers.add_parser("retry", help="Send a capture to the webhook again")
    retry_parser.add_argument("capture_id", type=str, help="Capture id")

    subparsers.add_parser("retry-unsent", help="Send every unsent capture to the webhook")

    cleanup_parser = subparsers.add_parser("cleanup", help="Delete old captures")
    cleanup_parser.add_argument(
        "--days", type=int, default=30, help="Delete captures older than this (default: 30)"
    )

    subparsers.add_parser("stats", help="Show capture statistics")
    subparsers.add_parser("test-webhook", help="Probe the webhook endpoint")
    subparsers.add_parser("run", help="Run the periodic tasks until interrupted")

    return parser.parse_args(argv)


def _print_json(data: Any) -> None:
    print(dumps(data, indent=2))


async def _run_scheduler(desk: DeskContext) -> int:
    desk.start_scheduler()
    logger.info("Running periodic tasks. Press Ctrl+C to exit.")
    try:
        while True:
            await asyncio.sleep(1)
    except asyncio.CancelledError:
        pass
    return 0


async def _dispatch(desk: DeskContext, args: argparse.Namespace) -> int:
    command = args.command
    if command == "capture":
        result = await desk.capture_start(method=args.method)
        _print_json(result)
        return 0 if result.success else 1

    if command == "list":
        _print_json(await desk.list_captures(args.limit))
        return 0

    if command == "show":
        context = await desk.get_capture(args.capture_id)
        if context is None:
            _print_json({"success": False, "error": "Capture not found"})
            return 1
        _print_json(context)
        return 0

    if command == "delete":
        result = await desk.delete_capture(args.capture_id)
        _print_json(result)
        return 0 if result.success else 1

    if command == "retry":
        result = await desk.retry_webhook(args.capture_id)
        _print_json(result)
        return 0 if result.success else 1

    if command == "retry-unsent":
        _print_json({"delivered": await desk.retry_unsent()})
        return 0

    if command == "cleanup":
        _print_json({"deleted": await desk.cleanup_old_captures(args.days)})
        return 0

    if command == "stats":
        _print_json(await desk.get_stats())
        return 0

    if command == "test-webhook":
        ok = await desk.test_webhook_connection()
        _print_json({"success": ok, "url": desk.webhook.get_webhook_url()})
        return 0 if ok else 1

    if command == "run":
        return await _run_scheduler(desk)

    logger.error(f"Unknown command: {command}")
    return 1


async def _run_command(args: argparse.Namespace) -> int:
    desk = DeskContext()
    try:
        return await _dispatch(desk, args)
    finally:
        await desk.shutdown()


def _setup_logging(config_path: Optional[str], level: Optional[str] = None) -> None:
    """Setup logging configuration.

    Args:
        config_path: Optional path to configuration file
        level: Optional log level overriding the configuration
    """
    if config_path:
        os.environ[CONFIG_PATH_ENV] = config_path
        GlobalConfig.get_instance().initialize(config_path)

    setup_logging(GlobalConfig.get_instance().get_config("logging"), level)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = parse_args(argv)

    try:
        _setup_logging(args.config, args.log_level)
    except FileNotFoundError as e:
        logger.error(f"Failed to load configuration: {e}")
        return 1

    logger.debug(f"Command line arguments: {args}")

    if not args.command:
        logger.error("No command specified. Use 'deskcontext --help' for usage.")
        return 1

    try:
        return asyncio.run(_run_command(args))
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down...")
        return 0
    except Exception as e:
        logger.exception(f"Command {args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
