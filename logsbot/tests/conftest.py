"""
Pytest configuration and shared fixtures for log bot tests.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

import pytest

from logsbot.config import LogsBotConfig
from logsbot.dispatcher import OutgoingMessage

BOT_ID = "100000000000001"
FIXED_NOW = 1_700_000_000_000  # 14/11/2023 22:13:20 UTC


class FakeTransport:
    """Records sends; raises for recipients listed in ``failing``."""

    def __init__(
        self, failing: Optional[Set[str]] = None, delays: Optional[Dict[str, float]] = None
    ):
        self.failing = set(failing or ())
        self.delays = dict(delays or {})
        self.sent: List[Tuple[str, OutgoingMessage]] = []
        self.attempted: List[str] = []
        self.thread_info: Dict[str, Mapping[str, Any]] = {}
        self.names: Dict[str, str] = {}
        self.thread_info_error: Optional[Exception] = None

    async def send(self, message: OutgoingMessage, recipient_id: str) -> bool:
        self.attempted.append(recipient_id)
        if recipient_id in self.delays:
            await asyncio.sleep(self.delays[recipient_id])
        if recipient_id in self.failing:
            raise RuntimeError(f"cannot reach {recipient_id}")
        self.sent.append((recipient_id, message))
        return True

    async def get_thread_info(self, thread_id: str) -> Optional[Mapping[str, Any]]:
        if self.thread_info_error is not None:
            raise self.thread_info_error
        return self.thread_info.get(thread_id)

    async def get_name(self, user_id: str) -> str:
        return self.names.get(user_id, f"User {user_id}")


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = FIXED_NOW):
        self.value = start

    def __call__(self) -> int:
        return self.value

    def advance(self, ms: int) -> None:
        self.value += ms


@pytest.fixture
def bot_id() -> str:
    return BOT_ID


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def config(tmp_path) -> LogsBotConfig:
    """Fixture to provide a test configuration with no attachments on disk."""
    return LogsBotConfig(
        bot_id=BOT_ID,
        recipients=["admin-a", "admin-b", "admin-c"],
        api_url="https://gateway.test",
        asset_dir=str(tmp_path),
    )


def make_event(
    message_type: str,
    author: str = "200",
    thread_id: str = "300",
    added: Optional[List[str]] = None,
    left: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a raw host event."""
    data: Dict[str, Any] = {}
    if added is not None:
        data["addedParticipants"] = [{"userFbId": user_id} for user_id in added]
    if left is not None:
        data["leftParticipantFbId"] = left
    return {
        "logMessageType": message_type,
        "logMessageData": data,
        "author": author,
        "threadID": thread_id,
        "timestamp": FIXED_NOW,
    }
