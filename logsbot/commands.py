"""
Chat commands for manually triggering the log bot.

``!testlog`` simulates the bot being added to the current group,
``!testrestart`` and ``!teststartup`` fire the lifecycle announcements.
Each command confirms in the thread it was sent from.
"""

import logging
from typing import Any, Mapping, Optional

from logsbot.dispatcher import OutgoingMessage
from logsbot.enricher import InMemoryThreadStore, ThreadEnricher
from logsbot.events import SUBSCRIBE
from logsbot.logsbot import LogsBot

logger = logging.getLogger(__name__)

TEST_LOG = "!testlog"
TEST_RESTART = "!testrestart"
TEST_STARTUP = "!teststartup"

TEST_USER_NAME = "Test User"
TEST_GROUP_NAME = "Test Group"


class _TestUserDirectory:
    async def get_name(self, user_id: str) -> str:
        return TEST_USER_NAME


class _TestThreadStore(InMemoryThreadStore):
    async def get(self, thread_id: str) -> Optional[Mapping[str, Any]]:
        return {"threadName": TEST_GROUP_NAME}


class TestCommandHandler:
    """Dispatches the manual trigger commands to a LogsBot."""

    # Not a pytest test class
    __test__ = False

    def __init__(self, bot: LogsBot):
        self.bot = bot

    def build_test_event(self, thread_id: str, sender_id: str) -> Mapping[str, Any]:
        """Synthesize a subscribe event adding the bot to ``thread_id``."""
        return {
            "logMessageType": SUBSCRIBE,
            "logMessageData": {"addedParticipants": [{"userFbId": self.bot.config.bot_id}]},
            "author": sender_id,
            "threadID": thread_id,
            "timestamp": self.bot.now(),
        }

    async def _reply(self, text: str, thread_id: str) -> None:
        try:
            await self.bot.transport.send(OutgoingMessage(body=text), thread_id)
        except Exception as e:
            logger.error(f"Could not confirm command in {thread_id}: {e}")

    async def handle(self, chat_event: Mapping[str, Any]) -> bool:
        """
        Run a test command if ``chat_event`` contains one.

        Args:
            chat_event: Chat message with ``body``, ``threadID`` and ``senderID``

        Returns:
            True if the message was a recognised command
        """
        command = str(chat_event.get("body") or "").strip().lower()
        thread_id = str(chat_event.get("threadID") or "")

        if command == TEST_LOG:
            event = self.build_test_event(thread_id, str(chat_event.get("senderID") or ""))
            enricher = ThreadEnricher(self.bot.enricher.live_source, _TestThreadStore())
            await self.bot.handle_event(event, users=_TestUserDirectory(), enricher=enricher)
            await self._reply("✅ Test log triggered!", thread_id)
            return True

        if command == TEST_RESTART:
            await self.bot.on_restart()
            await self._reply("✅ Test restart notification triggered!", thread_id)
            return True

        if command == TEST_STARTUP:
            self.bot.session.reset()
            await self.bot.on_ready()
            await self._reply("✅ Test startup notification triggered!", thread_id)
            return True

        return False
