"""Tests for membership event classification."""

from conftest import BOT_ID, make_event

from logsbot.events import (
    SUBSCRIBE,
    UNSUBSCRIBE,
    MembershipEvent,
    MembershipKind,
    classify,
    is_self_caused,
)


class TestClassify:
    """Test classify()."""

    def test_self_added(self):
        event = classify(make_event(SUBSCRIBE, added=["999", BOT_ID]), BOT_ID)

        assert event.kind is MembershipKind.ADDED
        assert event.actor_id == "200"
        assert event.thread_id == "300"
        assert event.is_relevant

    def test_other_user_added(self):
        event = classify(make_event(SUBSCRIBE, added=["999"]), BOT_ID)
        assert event.kind is MembershipKind.OTHER
        assert not event.is_relevant

    def test_self_removed(self):
        event = classify(make_event(UNSUBSCRIBE, left=BOT_ID), BOT_ID)
        assert event.kind is MembershipKind.REMOVED

    def test_other_user_removed(self):
        event = classify(make_event(UNSUBSCRIBE, left="999"), BOT_ID)
        assert event.kind is MembershipKind.OTHER

    def test_subscribe_type_with_left_participant_is_other(self):
        """The participant field must match the event type."""
        event = classify(make_event(SUBSCRIBE, left=BOT_ID), BOT_ID)
        assert event.kind is MembershipKind.OTHER

    def test_unrelated_event_type(self):
        event = classify(make_event("log:thread-name", added=[BOT_ID]), BOT_ID)
        assert event.kind is MembershipKind.OTHER

    def test_missing_log_message_data(self):
        event = classify({"logMessageType": SUBSCRIBE, "threadID": "1"}, BOT_ID)
        assert event.kind is MembershipKind.OTHER
        assert event.actor_id == ""

    def test_numeric_ids_are_compared_as_strings(self):
        raw = make_event(SUBSCRIBE, added=[])
        raw["logMessageData"]["addedParticipants"] = [{"userFbId": 42}]
        raw["threadID"] = 300

        event = classify(raw, "42")

        assert event.kind is MembershipKind.ADDED
        assert event.thread_id == "300"

    def test_empty_self_id_never_matches(self):
        raw = make_event(UNSUBSCRIBE, left="")
        assert classify(raw, "").kind is MembershipKind.OTHER

    def test_timestamp_is_carried(self):
        raw = make_event(SUBSCRIBE, added=[BOT_ID])
        assert classify(raw, BOT_ID).timestamp_raw == raw["timestamp"]


class TestIsSelfCaused:
    """Test is_self_caused()."""

    def test_bot_is_actor(self):
        event = MembershipEvent(kind=MembershipKind.ADDED, actor_id=BOT_ID, thread_id="1")
        assert is_self_caused(event, BOT_ID) is True

    def test_other_actor(self):
        event = MembershipEvent(kind=MembershipKind.REMOVED, actor_id="200", thread_id="1")
        assert is_self_caused(event, BOT_ID) is False

    def test_classified_self_removal_by_bot(self):
        """A bot leaving on its own is classified REMOVED but self-caused."""
        event = classify(make_event(UNSUBSCRIBE, author=BOT_ID, left=BOT_ID), BOT_ID)
        assert event.kind is MembershipKind.REMOVED
        assert is_self_caused(event, BOT_ID) is True
