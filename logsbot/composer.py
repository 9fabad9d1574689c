"""
Notification text assembly.

Composers are pure: they turn a classified event, its enrichment and a
timestamp into a NotificationPayload. ``render_text`` turns a payload into the
final message body, so wording and layout can be swapped independently.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from logsbot.enricher import ThreadSnapshot
from logsbot.events import MembershipEvent, MembershipKind
from logsbot.session import LifecycleKind

BANNER = "╭───────★────────╮\n     {0}\n╰───────★────────╯"

DEFAULT_TEMPLATES: Dict[str, str] = {
    "title": BANNER.format("🤖 Bot Logs"),
    "added": "✅ Bot was added to a new group!\n👑 Added by: {0}",
    "kicked": "❌ Bot was removed from a group!\n🚫 Kicked by: {0}",
    "countMembers": "👥 Total Members: {0}",
    "groupType": "🏷️ Group Type: {0}",
    "footer": "🆔 User ID: {0}\n👥 Group Name: {1}\n🆔 Group ID: {2}\n⏰ Time: {3}",
    "restartTitle": BANNER.format("🔄 Bot Restart Logs"),
    "restartMessage": (
        "✨ Bot has been restarted successfully!\n"
        "⏰ Previous Uptime: {0}\n"
        "📊 Previous Session: {1}\n"
        "🔄 Restart Time: {2}"
    ),
    "startupTitle": BANNER.format("🟢 Bot Startup Logs"),
    "startupMessage": (
        "✨ Bot is now online and ready!\n" "⏰ Startup Time: {0}\n" "📊 Status: {1}"
    ),
    "error": "❌ Error processing bot log event: {0}",
}


class MessageCatalog:
    """Keyed message templates with positional arguments."""

    def __init__(self, templates: Optional[Mapping[str, str]] = None) -> None:
        self.templates: Dict[str, str] = dict(DEFAULT_TEMPLATES)
        if templates:
            self.templates.update(templates)

    def format(self, key: str, *args: Any) -> str:
        """
        Render template ``key`` with ``args``.

        Raises:
            KeyError: If no template is registered for ``key``
        """
        return self.templates[key].format(*args)


@dataclass(frozen=True)
class NotificationPayload:
    """A composed notification: a title followed by ordered body lines."""

    title: str
    body_lines: Tuple[str, ...] = ()


def render_text(payload: NotificationPayload) -> str:
    """Render a payload as a single message body."""
    return "\n".join((payload.title,) + payload.body_lines)


def compose_membership_notice(
    event: MembershipEvent,
    actor_name: str,
    snapshot: ThreadSnapshot,
    timestamp: str,
    catalog: Optional[MessageCatalog] = None,
) -> NotificationPayload:
    """
    Compose the notice for the bot being added to or removed from a group.

    Lines, in order: added/kicked with actor name, member count (only when
    positive), group type (added only), footer.

    Raises:
        ValueError: If the event is not an add or a removal
    """
    catalog = catalog or MessageCatalog()

    if event.kind is MembershipKind.ADDED:
        lines = [catalog.format("added", actor_name)]
    elif event.kind is MembershipKind.REMOVED:
        lines = [catalog.format("kicked", actor_name)]
    else:
        raise ValueError(f"Cannot compose notice for {event.kind.value} event")

    if snapshot.member_count > 0:
        lines.append(catalog.format("countMembers", snapshot.member_count))

    if event.kind is MembershipKind.ADDED:
        lines.append(catalog.format("groupType", snapshot.category))

    lines.append(
        catalog.format("footer", event.actor_id, snapshot.name, event.thread_id, timestamp)
    )

    return NotificationPayload(title=catalog.format("title"), body_lines=tuple(lines))


def compose_lifecycle_notice(
    kind: LifecycleKind,
    timestamp: str,
    extra: Optional[Mapping[str, str]] = None,
    catalog: Optional[MessageCatalog] = None,
) -> NotificationPayload:
    """
    Compose a startup or restart notice.

    ``extra`` may carry ``previous_uptime`` and ``session_status`` for a
    restart, or ``status`` for a startup.
    """
    catalog = catalog or MessageCatalog()
    extra = extra or {}

    if kind is LifecycleKind.RESTART:
        return NotificationPayload(
            title=catalog.format("restartTitle"),
            body_lines=(
                catalog.format(
                    "restartMessage",
                    extra.get("previous_uptime", "Unknown"),
                    extra.get("session_status", "Completed"),
                    timestamp,
                ),
            ),
        )

    return NotificationPayload(
        title=catalog.format("startupTitle"),
        body_lines=(
            catalog.format("startupMessage", timestamp, extra.get("status", "✅ Operational")),
        ),
    )


def compose_error_notice(
    error: BaseException, catalog: Optional[MessageCatalog] = None
) -> NotificationPayload:
    """Compose the single-line notice sent when the pipeline fails."""
    catalog = catalog or MessageCatalog()
    return NotificationPayload(title=catalog.format("error", error))
