"""
Classification of raw group-membership events.

Decides whether an incoming log event means the bot itself was added to or
removed from a group, and whether the bot caused the event.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

SUBSCRIBE = "log:subscribe"
UNSUBSCRIBE = "log:unsubscribe"


class MembershipKind(Enum):
    """What a membership event means for the bot."""

    ADDED = "added"
    REMOVED = "removed"
    OTHER = "other"


@dataclass(frozen=True)
class MembershipEvent:
    """A classified membership event."""

    kind: MembershipKind
    actor_id: str
    thread_id: str
    timestamp_raw: Optional[Any] = None

    @property
    def is_relevant(self) -> bool:
        return self.kind is not MembershipKind.OTHER


def _is_self_added(data: Mapping[str, Any], self_id: str) -> bool:
    participants = data.get("addedParticipants") or []
    return any(
        str(participant.get("userFbId")) == self_id
        for participant in participants
        if isinstance(participant, Mapping)
    )


def classify(raw_event: Mapping[str, Any], self_id: str) -> MembershipEvent:
    """
    Classify a raw log event relative to the bot.

    Args:
        raw_event: Event from the host runtime with ``logMessageType``,
            ``logMessageData``, ``author``, ``threadID`` and ``timestamp``
        self_id: The bot's own participant ID

    Returns:
        MembershipEvent with kind ADDED, REMOVED or OTHER
    """
    message_type = raw_event.get("logMessageType")
    data: Dict[str, Any] = raw_event.get("logMessageData") or {}

    kind = MembershipKind.OTHER
    if self_id:
        if message_type == SUBSCRIBE and _is_self_added(data, self_id):
            kind = MembershipKind.ADDED
        elif message_type == UNSUBSCRIBE and str(data.get("leftParticipantFbId")) == self_id:
            kind = MembershipKind.REMOVED

    return MembershipEvent(
        kind=kind,
        actor_id=str(raw_event.get("author") or ""),
        thread_id=str(raw_event.get("threadID") or ""),
        timestamp_raw=raw_event.get("timestamp"),
    )


def is_self_caused(event: MembershipEvent, self_id: str) -> bool:
    """True when the bot itself performed the action."""
    return bool(self_id) and event.actor_id == self_id
