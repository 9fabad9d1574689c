"""
Best-effort group metadata lookup.

A group the bot was just added to is queried live; a group the bot was just
removed from can no longer be queried, so its last persisted state is used.
Lookup failures never abort the pipeline: fallback values are substituted.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_NAME = "Unnamed Group"
DEFAULT_CATEGORY = "Regular Group"
PREMIUM_CATEGORY = "Premium Group"


@dataclass(frozen=True)
class ThreadSnapshot:
    """Group metadata attached to a membership notice."""

    name: str = DEFAULT_NAME
    member_count: int = 0
    category: str = DEFAULT_CATEGORY


FALLBACK_SNAPSHOT = ThreadSnapshot()


class ThreadInfoSource(Protocol):
    """Live group lookup against the chat service."""

    async def get_thread_info(self, thread_id: str) -> Optional[Mapping[str, Any]]:
        ...


class ThreadStore(Protocol):
    """Locally persisted group state."""

    async def get(self, thread_id: str) -> Optional[Mapping[str, Any]]:
        ...


async def try_or_default(
    operation: Callable[[], Awaitable[T]], fallback: T, description: str = "operation"
) -> T:
    """
    Await ``operation`` and return its result, or ``fallback`` if it raises.

    Args:
        operation: Zero-argument coroutine factory
        fallback: Value returned on any failure
        description: Label used in the warning log line

    Returns:
        The operation result or the fallback
    """
    try:
        return await operation()
    except Exception as e:
        logger.warning(f"{description} failed, using fallback: {e}")
        return fallback


def _count(value: Any) -> int:
    try:
        return len(value or [])
    except TypeError:
        return 0


def snapshot_from_live(info: Optional[Mapping[str, Any]]) -> ThreadSnapshot:
    """Build a snapshot from a live thread-info response."""
    if not info:
        return FALLBACK_SNAPSHOT
    return ThreadSnapshot(
        name=info.get("threadName") or DEFAULT_NAME,
        member_count=_count(info.get("participantIDs")),
        category=PREMIUM_CATEGORY if info.get("isSubscribed") else DEFAULT_CATEGORY,
    )


def snapshot_from_store(data: Optional[Mapping[str, Any]]) -> ThreadSnapshot:
    """Build a snapshot from persisted thread data."""
    if not data:
        return FALLBACK_SNAPSHOT
    return ThreadSnapshot(
        name=data.get("threadName") or DEFAULT_NAME,
        member_count=_count(data.get("members")) or _count(data.get("participantIDs")),
    )


class ThreadEnricher:
    """Looks up group metadata for membership notices."""

    def __init__(self, live_source: ThreadInfoSource, store: ThreadStore) -> None:
        """
        Initialize the enricher.

        Args:
            live_source: Live lookup used when the bot joins a group
            store: Persisted lookup used when the bot leaves a group
        """
        self.live_source = live_source
        self.store = store

    def _remember(self, thread_id: str, info: Mapping[str, Any]) -> None:
        put = getattr(self.store, "put", None)
        if put is None:
            return
        try:
            put(
                thread_id,
                {
                    "threadName": info.get("threadName"),
                    "participantIDs": list(info.get("participantIDs") or []),
                },
            )
        except Exception as e:
            logger.warning(f"Could not store thread data for {thread_id}: {e}")

    async def enrich_added(self, thread_id: str) -> ThreadSnapshot:
        """Snapshot of a group the bot was just added to.

        A successful live lookup is also written to the store, so a later
        removal from the same group can still be described.
        """

        async def lookup() -> ThreadSnapshot:
            info = await self.live_source.get_thread_info(thread_id)
            if info:
                self._remember(thread_id, info)
            return snapshot_from_live(info)

        return await try_or_default(
            lookup, FALLBACK_SNAPSHOT, f"Live thread lookup for {thread_id}"
        )

    async def enrich_removed(self, thread_id: str) -> ThreadSnapshot:
        """Snapshot of a group the bot was just removed from."""

        async def lookup() -> ThreadSnapshot:
            return snapshot_from_store(await self.store.get(thread_id))

        return await try_or_default(
            lookup, FALLBACK_SNAPSHOT, f"Stored thread lookup for {thread_id}"
        )


class InMemoryThreadStore:
    """Thread store backed by a dict, keyed by thread ID.

    Default store for LogsBot. It is filled by live lookups when the bot joins
    a group and lasts for the process lifetime only.
    """

    def __init__(self, threads: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        self._threads = dict(threads or {})

    def put(self, thread_id: str, data: Mapping[str, Any]) -> None:
        self._threads[str(thread_id)] = data

    async def get(self, thread_id: str) -> Optional[Mapping[str, Any]]:
        return self._threads.get(str(thread_id))
