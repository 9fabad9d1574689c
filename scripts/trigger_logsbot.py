#!/usr/bin/env python3
"""
Manual trigger script for the group log bot.

Sends test notices to the configured operators to verify the bot and the
chat gateway are working correctly.

Usage:
    python scripts/trigger_logsbot.py --config
    python scripts/trigger_logsbot.py --command testlog --thread 123 --sender 456
    python scripts/trigger_logsbot.py --all --thread 123 --sender 456
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from logsbot import LogsBot, LogsBotConfig
from logsbot.commands import TEST_LOG, TEST_RESTART, TEST_STARTUP, TestCommandHandler
from logsbot.log_setup import setup_logging

logger = logging.getLogger("logsbot.scripts.trigger")

COMMANDS = {
    "testlog": TEST_LOG,
    "testrestart": TEST_RESTART,
    "teststartup": TEST_STARTUP,
}


def print_configuration(config: LogsBotConfig) -> None:
    """Print current log bot configuration."""
    logger.info("=== Log Bot Configuration ===")
    logger.info(f"Bot ID: {config.bot_id or '❌ not set'}")
    logger.info(f"Recipients: {', '.join(config.recipients) or '❌ none'}")
    logger.info(f"Gateway configured: {'✅ Yes' if config.api_url else '❌ No'}")
    logger.info(f"Enabled: {config.enabled}")
    logger.info(f"Cooldown: {config.cooldown_ms}ms")
    logger.info(f"Timeout: {config.timeout_seconds}s")
    logger.info("=" * 29)


async def run_command(bot: LogsBot, command: str, thread_id: str, sender_id: str) -> None:
    """Run one chat command through the command handler."""
    handler = TestCommandHandler(bot)
    logger.info(f"Triggering {command}...")
    await handler.handle({"body": command, "threadID": thread_id, "senderID": sender_id})
    logger.info(f"Stats after {command}: {bot.get_stats()}")


async def run(args: argparse.Namespace, config: LogsBotConfig) -> None:
    bot = LogsBot(config)
    commands = list(COMMANDS.values()) if args.all else [COMMANDS[args.command]]
    for command in commands:
        await run_command(bot, command, args.thread, args.sender)


def main() -> None:
    """Main function."""
    parser = argparse.ArgumentParser(description="Trigger the group log bot manually")
    parser.add_argument("--command", choices=sorted(COMMANDS), help="Run a single command")
    parser.add_argument("--all", action="store_true", help="Run every command")
    parser.add_argument("--config", action="store_true", help="Print configuration and exit")
    parser.add_argument("--thread", default="0", help="Thread ID the command is issued from")
    parser.add_argument("--sender", default="0", help="User ID issuing the command")

    args = parser.parse_args()

    config = LogsBotConfig.from_env()
    try:
        config.validate()
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)
    setup_logging(config)

    if args.config:
        print_configuration(config)
        return

    if not config.has_recipients():
        logger.error("❌ No recipients configured!")
        logger.error("Please set LOGSBOT_RECIPIENTS in your environment")
        sys.exit(1)

    if not (args.all or args.command):
        parser.print_help()
        sys.exit(1)

    print_configuration(config)
    asyncio.run(run(args, config))


if __name__ == "__main__":
    main()
