"""
Group log bot pipeline.

This is the main entry point for the host runtime. It handles:
- Classification of membership events and self-suppression
- Per-group cooldown
- Group metadata enrichment
- Notice composition and fan-out to every operator
- Startup and restart announcements with previous uptime
- Error notification without ever raising into the host
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Protocol
from zoneinfo import ZoneInfo

from logsbot.attachments import default_candidates, resolve_attachment
from logsbot.composer import (
    MessageCatalog,
    NotificationPayload,
    compose_lifecycle_notice,
    compose_membership_notice,
)
from logsbot.config import LogsBotConfig
from logsbot.dispatcher import DeliveryReport, FanoutDispatcher, MessageTransport
from logsbot.enricher import (
    InMemoryThreadStore,
    ThreadEnricher,
    ThreadInfoSource,
    ThreadSnapshot,
    ThreadStore,
)
from logsbot.error_reporter import ErrorReporter
from logsbot.events import MembershipEvent, MembershipKind, classify, is_self_caused
from logsbot.rate_limiter import RateLimiter
from logsbot.session import LifecycleIntent, LifecycleKind, SessionTracker, now_ms
from logsbot.transport import HttpMessageTransport

logger = logging.getLogger(__name__)


class UserDirectory(Protocol):
    """Resolves participant IDs to display names."""

    async def get_name(self, user_id: str) -> str:
        ...


def _empty_stats() -> Dict[str, int]:
    return {
        "handled": 0,
        "ignored": 0,
        "self_suppressed": 0,
        "rate_limited": 0,
        "dispatched": 0,
        "errors": 0,
    }


class LogsBot:
    """Owns the pipeline state and wires its collaborators together.

    Rate limit and session state live on the instance, so independent bots
    (and tests) never share them.
    """

    def __init__(
        self,
        config: Optional[LogsBotConfig] = None,
        transport: Optional[MessageTransport] = None,
        users: Optional[UserDirectory] = None,
        live_source: Optional[ThreadInfoSource] = None,
        thread_store: Optional[ThreadStore] = None,
        catalog: Optional[MessageCatalog] = None,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Initialize the bot.

        Args:
            config: Optional configuration. If not provided, read from environment.
            transport: Message transport. Defaults to the HTTP gateway client.
            users: Display name lookup. Defaults to the transport.
            live_source: Live thread lookup. Defaults to the transport.
            thread_store: Persisted thread lookup. Defaults to an empty store.
            catalog: Message templates. Defaults to the English catalog.
            clock: Callable returning the current time in milliseconds
        """
        self.config = config or LogsBotConfig.from_env()
        self.config.validate()

        self.transport = transport or HttpMessageTransport(self.config)
        self.users = users or self.transport
        self.enricher = ThreadEnricher(
            live_source or self.transport, thread_store or InMemoryThreadStore()
        )
        self.catalog = catalog or MessageCatalog()
        self.rate_limiter = RateLimiter(max_keys=self.config.rate_limit_max_keys)
        self.session = SessionTracker(clock=clock)
        self.dispatcher = FanoutDispatcher(self.transport)
        self.error_reporter = ErrorReporter(self.transport, self.catalog)
        self._clock = clock
        self._tz = ZoneInfo(self.config.timezone)

        self.stats = _empty_stats()

    def now(self) -> int:
        """Current time in milliseconds, from the injected clock."""
        return self._clock()

    def format_time(self, at_ms: int) -> str:
        """Render a millisecond timestamp with the configured format and zone."""
        return datetime.fromtimestamp(at_ms / 1000, tz=self._tz).strftime(
            self.config.time_format
        )

    def resolve_attachment(self) -> Optional[Path]:
        """First existing attachment file under the asset directory, if any."""
        return resolve_attachment(default_candidates(self.config.asset_dir))

    async def _dispatch(self, payload: NotificationPayload) -> DeliveryReport:
        report = await self.dispatcher.dispatch(
            payload, list(self.config.recipients), attachment=self.resolve_attachment()
        )
        if report.total:
            self.stats["dispatched"] += 1
        return report

    async def handle_event(
        self,
        raw_event: Mapping[str, Any],
        users: Optional[UserDirectory] = None,
        enricher: Optional[ThreadEnricher] = None,
    ) -> Optional[DeliveryReport]:
        """
        Process one raw log event from the host.

        Args:
            raw_event: Log event as delivered by the host runtime
            users: Optional display name lookup overriding the default
            enricher: Optional enricher overriding the default

        Returns:
            DeliveryReport if a notice was dispatched, None otherwise
        """
        if not self.config.enabled:
            logger.debug("Log bot is disabled")
            return None

        try:
            event = classify(raw_event, self.config.bot_id)
            if not event.is_relevant:
                self.stats["ignored"] += 1
                return None

            if is_self_caused(event, self.config.bot_id):
                logger.debug(f"Ignoring self-caused event in {event.thread_id}")
                self.stats["self_suppressed"] += 1
                return None

            now = self.now()
            if not self.rate_limiter.admit(event.thread_id, now, self.config.cooldown_ms):
                logger.debug(f"Rate limit blocked event for {event.thread_id}")
                self.stats["rate_limited"] += 1
                return None

            self.stats["handled"] += 1
            return await self._notify_membership(
                event, now, users or self.users, enricher or self.enricher
            )

        except Exception as e:
            logger.exception(f"Critical error in log bot: {e}")
            self.stats["errors"] += 1
            await self.error_reporter.report_failure(e, self.config.primary_recipient)
            return None

    async def _notify_membership(
        self,
        event: MembershipEvent,
        now: int,
        users: UserDirectory,
        enricher: ThreadEnricher,
    ) -> DeliveryReport:
        actor_name = await users.get_name(event.actor_id)

        snapshot: ThreadSnapshot
        if event.kind is MembershipKind.ADDED:
            snapshot = await enricher.enrich_added(event.thread_id)
        else:
            snapshot = await enricher.enrich_removed(event.thread_id)

        timestamp = self.format_time(now)
        payload = compose_membership_notice(
            event, actor_name, snapshot, timestamp, catalog=self.catalog
        )
        report = await self._dispatch(payload)

        logger.info(
            f"Bot {'ADDED' if event.kind is MembershipKind.ADDED else 'REMOVED'} event: "
            f"user={event.actor_id} group={snapshot.name} group_id={event.thread_id} "
            f"members={snapshot.member_count} type={snapshot.category} time={timestamp}",
            extra={
                "kind": event.kind.value,
                "thread_id": event.thread_id,
                "delivered": report.success_count,
                "failed": report.failure_count,
            },
        )
        return report

    async def _announce(self, intent: LifecycleIntent) -> DeliveryReport:
        timestamp = self.format_time(intent.at_ms)
        if intent.kind is LifecycleKind.RESTART:
            extra = {
                "previous_uptime": intent.previous_uptime or "Unknown",
                "session_status": "Completed",
            }
        else:
            extra = {"status": "✅ Operational"}

        payload = compose_lifecycle_notice(intent.kind, timestamp, extra, catalog=self.catalog)
        report = await self._dispatch(payload)
        logger.info(
            f"Bot {intent.kind.value} notification sent at {timestamp}"
            + (
                f" (previous uptime: {intent.previous_uptime})"
                if intent.previous_uptime
                else ""
            )
        )
        return report

    async def on_ready(self) -> Optional[DeliveryReport]:
        """
        Announce startup once per session.

        Returns:
            DeliveryReport on the first call of the session, None otherwise
        """
        if not self.config.enabled:
            return None
        try:
            intent = self.session.on_startup()
            if intent is None:
                return None
            return await self._announce(intent)
        except Exception as e:
            logger.error(f"Error sending startup notification: {e}")
            self.stats["errors"] += 1
            await self.error_reporter.report_failure(e, self.config.primary_recipient)
            return None

    async def on_restart(self) -> Optional[DeliveryReport]:
        """
        Announce a restart with the uptime of the session that just ended.

        Returns:
            DeliveryReport, or None if disabled or the announcement failed
        """
        if not self.config.enabled:
            return None
        try:
            return await self._announce(self.session.on_restart())
        except Exception as e:
            logger.error(f"Error sending restart notification: {e}")
            self.stats["errors"] += 1
            await self.error_reporter.report_failure(e, self.config.primary_recipient)
            return None

    def get_stats(self) -> Dict[str, int]:
        """
        Get pipeline statistics.

        Returns:
            Dictionary with statistics
        """
        return self.stats.copy()

    def reset_stats(self) -> None:
        """Reset pipeline statistics."""
        self.stats = _empty_stats()
