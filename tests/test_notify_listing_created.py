"""Tests for the listing alert fan-out."""

from __future__ import annotations

import threading
from functools import partial

import anyio
import pytest

from conftest import RecordingTransport
from listing_alerts.application.use_cases.listings import (
    build_listing_alert,
    notify_listing_created,
)
from listing_alerts.domain.entities import ListingContext, Recipient
from listing_alerts.domain.errors import DispatchError, StorageError
from listing_alerts.infrastructure.database import SessionLocal
from listing_alerts.infrastructure.push import PushDispatcher
from listing_alerts.infrastructure.repositories import (
    NotificationRepository,
    RecipientRepository,
)

LISTING = ListingContext(id="64f0c2", make="Ford", model="Focus", attributes={"year": 2019})


def _run(dispatcher, **kwargs):
    return anyio.run(
        partial(
            notify_listing_created,
            LISTING,
            session_factory=SessionLocal,
            dispatcher=dispatcher,
            **kwargs,
        )
    )


def _stored_for(db_session, recipient_id):
    return NotificationRepository(db_session).list_page(recipient_id).items


def test_transport_outage_still_saves_every_record(db_session, make_recipient):
    recipients = [
        make_recipient(tokens=["tok-1"]),
        make_recipient(tokens=["tok-2"]),
        make_recipient(),
    ]
    transport = RecordingTransport(error=DispatchError("UNAVAILABLE: fcm down"))

    summary = _run(PushDispatcher(transport))

    assert summary.notifications_saved == 3
    assert summary.notifications_sent == 0
    for recipient in recipients:
        stored = _stored_for(db_session, recipient.id)
        assert len(stored) == 1
        assert stored[0].is_read is False
        assert stored[0].payload == {
            "year": 2019,
            "listingId": "64f0c2",
            "make": "Ford",
            "model": "Focus",
        }


def test_sent_counts_only_successful_deduplicated_tokens(db_session, make_recipient):
    make_recipient(tokens=["tok-a", " tok-a "])
    make_recipient(tokens=["stale"])
    make_recipient(tokens=["tok-b"])
    make_recipient()
    transport = RecordingTransport(failing_tokens={"stale"})

    summary = _run(PushDispatcher(transport))

    assert transport.sent_tokens == ["tok-a", "stale", "tok-b"]
    assert summary.notifications_sent == 2
    assert summary.notifications_saved == 4


@pytest.mark.parametrize("token_flags", [[True, False, True], [False, False], [True] * 5])
def test_saved_equals_resolved_and_sent_never_exceeds_token_holders(
    db_session, make_recipient, token_flags
):
    for index, has_token in enumerate(token_flags):
        make_recipient(tokens=[f"tok-{index}"] if has_token else [])

    summary = _run(PushDispatcher(RecordingTransport()))

    assert summary.notifications_saved == len(token_flags)
    assert summary.notifications_sent <= sum(token_flags)


def test_no_recipients_short_circuits_without_side_effects(transport):
    summary = _run(PushDispatcher(transport))

    assert summary.notifications_sent == 0
    assert summary.notifications_saved == 0
    assert transport.calls == []


def test_storage_failure_does_not_block_push(
    make_recipient, monkeypatch: pytest.MonkeyPatch, transport
):
    make_recipient(tokens=["tok-1"])
    make_recipient(tokens=["tok-2"])

    def broken_create_many(self, drafts):
        raise StorageError("database unavailable")

    monkeypatch.setattr(NotificationRepository, "create_many", broken_create_many)

    summary = _run(PushDispatcher(transport))

    assert summary.notifications_sent == 2
    assert summary.notifications_saved == 0


def test_unexpected_transport_errors_do_not_fail_the_fan_out(db_session, make_recipient):
    class BrokenSocketTransport(RecordingTransport):
        def send_multicast(self, tokens, **kwargs):
            raise ConnectionResetError("socket closed by peer")

    make_recipient(tokens=["tok-1"])
    make_recipient(tokens=["tok-2"])

    summary = _run(PushDispatcher(BrokenSocketTransport()))

    assert summary.notifications_sent == 0
    assert summary.notifications_saved == 2


def test_unexpected_store_errors_do_not_fail_the_fan_out(
    make_recipient, monkeypatch: pytest.MonkeyPatch, transport
):
    make_recipient(tokens=["tok-1"])

    def broken_create_many(self, drafts):
        raise RuntimeError("driver bug")

    monkeypatch.setattr(NotificationRepository, "create_many", broken_create_many)

    summary = _run(PushDispatcher(transport))

    assert summary.notifications_sent == 1
    assert summary.notifications_saved == 0


def test_dispatch_and_store_run_concurrently(make_recipient, monkeypatch: pytest.MonkeyPatch):
    push_started = threading.Event()
    store_started = threading.Event()
    observed = {}

    class WaitingTransport(RecordingTransport):
        def send_multicast(self, tokens, **kwargs):
            push_started.set()
            observed["store_seen_by_push"] = store_started.wait(timeout=5)
            return super().send_multicast(tokens, **kwargs)

    original_create_many = NotificationRepository.create_many

    def waiting_create_many(self, drafts):
        store_started.set()
        observed["push_seen_by_store"] = push_started.wait(timeout=5)
        return original_create_many(self, drafts)

    monkeypatch.setattr(NotificationRepository, "create_many", waiting_create_many)
    make_recipient(tokens=["tok-1"])
    make_recipient(tokens=["tok-2"])

    summary = _run(PushDispatcher(WaitingTransport()))

    assert observed == {"store_seen_by_push": True, "push_seen_by_store": True}
    assert summary.notifications_sent == 2
    assert summary.notifications_saved == 2


def test_resolver_storage_failure_returns_zero_counts(
    monkeypatch: pytest.MonkeyPatch, transport
):
    from sqlalchemy.exc import OperationalError

    def broken_list_active(self):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(RecipientRepository, "list_active", broken_list_active)

    summary = _run(PushDispatcher(transport))

    assert (summary.notifications_sent, summary.notifications_saved) == (0, 0)
    assert transport.calls == []


def test_alert_hints_follow_recipient_platforms():
    message = build_listing_alert(
        LISTING, [Recipient(id=1, platform="ios"), Recipient(id=2, platform="web")]
    )

    assert message.title == "New Vehicle Near You! 🚗"
    assert message.body == "A Ford Focus was listed nearby."
    assert message.category == "car_listing"
    assert message.platform_hints == {"ios": {"sound": "notif_sound.wav"}}


def test_alert_hints_default_to_android_and_ios():
    message = build_listing_alert(LISTING, [Recipient(id=1)])

    assert message.platform_hints == {
        "android": {"sound": "notif_sound"},
        "ios": {"sound": "notif_sound.wav"},
    }


def test_recipients_without_platform_keep_both_sounds():
    message = build_listing_alert(
        LISTING, [Recipient(id=1, platform="ios"), Recipient(id=2, platform=None)]
    )

    assert message.platform_hints == {
        "android": {"sound": "notif_sound"},
        "ios": {"sound": "notif_sound.wav"},
    }
