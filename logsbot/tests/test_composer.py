"""Tests for notification composition."""

import pytest

from logsbot.composer import (
    MessageCatalog,
    NotificationPayload,
    compose_error_notice,
    compose_lifecycle_notice,
    compose_membership_notice,
    render_text,
)
from logsbot.enricher import ThreadSnapshot
from logsbot.events import MembershipEvent, MembershipKind
from logsbot.session import LifecycleKind

TIMESTAMP = "14/11/2023 22:13:20"


def _event(kind):
    return MembershipEvent(kind=kind, actor_id="200", thread_id="300")


class TestMessageCatalog:
    """Test MessageCatalog class."""

    def test_default_templates(self):
        catalog = MessageCatalog()
        assert catalog.format("countMembers", 12) == "👥 Total Members: 12"

    def test_override_template(self):
        catalog = MessageCatalog({"countMembers": "Members: {0}"})
        assert catalog.format("countMembers", 3) == "Members: 3"
        assert "Bot Logs" in catalog.format("title")

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            MessageCatalog().format("missing")


class TestComposeMembershipNotice:
    """Test compose_membership_notice()."""

    def test_added_line_order(self):
        snapshot = ThreadSnapshot(name="Cat Lovers", member_count=12, category="Premium Group")

        payload = compose_membership_notice(
            _event(MembershipKind.ADDED), "Alice", snapshot, TIMESTAMP
        )

        assert "🤖 Bot Logs" in payload.title
        assert payload.body_lines == (
            "✅ Bot was added to a new group!\n👑 Added by: Alice",
            "👥 Total Members: 12",
            "🏷️ Group Type: Premium Group",
            f"🆔 User ID: 200\n👥 Group Name: Cat Lovers\n🆔 Group ID: 300\n⏰ Time: {TIMESTAMP}",
        )

    def test_removed_has_no_group_type(self):
        snapshot = ThreadSnapshot(name="Cat Lovers", member_count=4)

        payload = compose_membership_notice(
            _event(MembershipKind.REMOVED), "Bob", snapshot, TIMESTAMP
        )

        assert payload.body_lines[0] == "❌ Bot was removed from a group!\n🚫 Kicked by: Bob"
        assert payload.body_lines[1] == "👥 Total Members: 4"
        assert len(payload.body_lines) == 3
        assert not any("Group Type" in line for line in payload.body_lines)

    def test_member_count_omitted_when_zero(self):
        payload = compose_membership_notice(
            _event(MembershipKind.ADDED), "Alice", ThreadSnapshot(), TIMESTAMP
        )

        assert not any("Total Members" in line for line in payload.body_lines)
        assert payload.body_lines[1] == "🏷️ Group Type: Regular Group"
        assert "Unnamed Group" in payload.body_lines[-1]

    def test_other_event_rejected(self):
        with pytest.raises(ValueError):
            compose_membership_notice(
                _event(MembershipKind.OTHER), "Alice", ThreadSnapshot(), TIMESTAMP
            )

    def test_deterministic(self):
        args = (_event(MembershipKind.ADDED), "Alice", ThreadSnapshot(member_count=2), TIMESTAMP)
        assert compose_membership_notice(*args) == compose_membership_notice(*args)


class TestComposeLifecycleNotice:
    """Test compose_lifecycle_notice()."""

    def test_restart(self):
        payload = compose_lifecycle_notice(
            LifecycleKind.RESTART,
            TIMESTAMP,
            {"previous_uptime": "3h 42m", "session_status": "Completed"},
        )

        assert "Bot Restart Logs" in payload.title
        body = payload.body_lines[0]
        assert "⏰ Previous Uptime: 3h 42m" in body
        assert "📊 Previous Session: Completed" in body
        assert f"🔄 Restart Time: {TIMESTAMP}" in body

    def test_restart_defaults(self):
        payload = compose_lifecycle_notice(LifecycleKind.RESTART, TIMESTAMP)
        assert "Previous Uptime: Unknown" in payload.body_lines[0]

    def test_startup(self):
        payload = compose_lifecycle_notice(LifecycleKind.STARTUP, TIMESTAMP)

        assert "Bot Startup Logs" in payload.title
        assert f"⏰ Startup Time: {TIMESTAMP}" in payload.body_lines[0]
        assert "📊 Status: ✅ Operational" in payload.body_lines[0]


class TestRendering:
    """Test render_text() and the error notice."""

    def test_render_joins_lines(self):
        payload = NotificationPayload(title="T", body_lines=("a", "b"))
        assert render_text(payload) == "T\na\nb"

    def test_render_title_only(self):
        assert render_text(NotificationPayload(title="T")) == "T"

    def test_error_notice(self):
        payload = compose_error_notice(RuntimeError("boom"))
        assert render_text(payload) == "❌ Error processing bot log event: boom"
