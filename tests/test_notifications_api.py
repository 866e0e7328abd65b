"""Integration tests for the notification feed endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import INTERNAL_HEADERS
from listing_alerts.domain.entities import NotificationDraft
from listing_alerts.infrastructure.repositories import (
    NotificationRepository,
    RecipientRepository,
)


def _seed(db_session, recipient_id, count):
    repository = NotificationRepository(db_session)
    return [
        repository.create(
            NotificationDraft(
                recipient_id=recipient_id,
                title=f"Alert {index}",
                body="A Ford Focus was listed nearby.",
                category="car_listing",
                payload={"listingId": f"listing-{index}"},
            )
        )
        for index in range(count)
    ]


def test_feed_requires_a_valid_bearer_token(client: TestClient) -> None:
    assert client.get("/notifications/list").status_code == 401

    response = client.get(
        "/notifications/unread-count", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_inactive_recipient_is_rejected(client, make_recipient, auth_headers) -> None:
    recipient = make_recipient(is_active=False)

    response = client.get("/notifications/list", headers=auth_headers(recipient))

    assert response.status_code == 400
    assert response.json()["detail"] == "Destinatario inactivo"


def test_list_returns_camel_case_pages(client, db_session, make_recipient, auth_headers) -> None:
    recipient = make_recipient()
    _seed(db_session, recipient.id, 5)
    headers = auth_headers(recipient)

    response = client.get("/notifications/list?page=2&pageSize=2", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {
        "total": 5,
        "page": 2,
        "pageSize": 2,
        "totalPages": 3,
        "hasNext": True,
        "hasPrev": True,
    }
    assert len(body["data"]) == 2
    first = body["data"][0]
    assert first["recipientId"] == recipient.id
    assert first["isRead"] is False
    assert "createdAt" in first

    default_page = client.get("/notifications/list", headers=headers).json()
    assert default_page["pagination"]["pageSize"] == 20
    assert [item["title"] for item in default_page["data"]][0] == "Alert 4"


def test_read_lifecycle_updates_unread_count(
    client, db_session, make_recipient, auth_headers
) -> None:
    recipient = make_recipient()
    records = _seed(db_session, recipient.id, 3)
    headers = auth_headers(recipient)

    assert client.get("/notifications/unread-count", headers=headers).json() == {
        "unreadCount": 3
    }

    response = client.patch(f"/notifications/{records[0].id}/read", headers=headers)
    assert response.status_code == 200
    assert response.json()["isRead"] is True
    assert client.get("/notifications/unread-count", headers=headers).json()["unreadCount"] == 2

    first = client.patch("/notifications/read-all", headers=headers)
    second = client.patch("/notifications/read-all", headers=headers)
    assert first.json() == {"modifiedCount": 2}
    assert second.json() == {"modifiedCount": 0}
    assert client.get("/notifications/unread-count", headers=headers).json()["unreadCount"] == 0


def test_other_recipients_notifications_are_not_found(
    client, db_session, make_recipient, auth_headers
) -> None:
    owner = make_recipient()
    intruder = make_recipient()
    record = _seed(db_session, owner.id, 1)[0]
    headers = auth_headers(intruder)

    read_response = client.patch(f"/notifications/{record.id}/read", headers=headers)
    delete_response = client.delete(f"/notifications/{record.id}", headers=headers)

    assert read_response.status_code == 404
    assert read_response.json()["detail"] == "Notificación no encontrada"
    assert delete_response.status_code == 404
    owner_feed = client.get("/notifications/list", headers=auth_headers(owner)).json()
    assert owner_feed["pagination"]["total"] == 1
    assert owner_feed["data"][0]["isRead"] is False


def test_delete_one_and_delete_all(client, db_session, make_recipient, auth_headers) -> None:
    recipient = make_recipient()
    records = _seed(db_session, recipient.id, 3)
    headers = auth_headers(recipient)

    response = client.delete(f"/notifications/{records[0].id}", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Notification deleted successfully"}
    assert client.delete(f"/notifications/{records[0].id}", headers=headers).status_code == 404

    response = client.delete("/notifications/delete-all", headers=headers)
    assert response.json() == {"deletedCount": 2}

    empty = client.get("/notifications/list", headers=headers).json()
    assert empty["data"] == []
    assert empty["pagination"]["total"] == 0
    assert empty["pagination"]["hasNext"] is False


def test_register_token_attaches_device_to_recipient(
    client, db_session, make_recipient, auth_headers
) -> None:
    previous_owner = make_recipient(tokens=["device-1"])
    recipient = make_recipient()

    response = client.post(
        "/notifications/register-token",
        json={"token": "device-1", "platform": "ios"},
        headers=auth_headers(recipient),
    )

    assert response.status_code == 201
    assert response.json() == {"message": "Token received"}
    db_session.expire_all()
    repository = RecipientRepository(db_session)
    updated = repository.get(recipient.id)
    assert updated.device_tokens == ["device-1"]
    assert updated.platform == "ios"
    assert repository.get(previous_owner.id).device_tokens == []


def test_register_token_rejects_unknown_platform(client, make_recipient, auth_headers) -> None:
    recipient = make_recipient()

    response = client.post(
        "/notifications/register-token",
        json={"token": "device-1", "platform": "blackberry"},
        headers=auth_headers(recipient),
    )

    assert response.status_code == 422


def test_send_requires_internal_key(client, make_recipient) -> None:
    recipient = make_recipient()

    response = client.post(
        "/notifications/send",
        json={"recipientId": recipient.id, "title": "Hola", "body": "Mensaje"},
    )

    assert response.status_code == 403


def test_send_pushes_and_stores(client, transport, make_recipient, auth_headers) -> None:
    recipient = make_recipient()

    response = client.post(
        "/notifications/send",
        json={
            "token": "device-9",
            "recipientId": recipient.id,
            "title": "Price drop",
            "body": "A saved car is cheaper now.",
            "data": {"listingId": "abc"},
        },
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["pushDelivered"] is True
    assert body["notification"]["category"] == "system"
    assert body["notification"]["payload"] == {"listingId": "abc"}
    assert transport.sent_tokens == ["device-9"]

    feed = client.get("/notifications/list", headers=auth_headers(recipient)).json()
    assert feed["pagination"]["total"] == 1


def test_send_push_failure_still_stores(client, transport, make_recipient) -> None:
    recipient = make_recipient()
    transport.failing_tokens.add("stale-token")

    response = client.post(
        "/notifications/send",
        json={
            "token": "stale-token",
            "recipientId": recipient.id,
            "title": "Price drop",
            "body": "A saved car is cheaper now.",
        },
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["pushDelivered"] is False
    assert response.json()["notification"]["recipientId"] == recipient.id


def test_send_validates_targets_before_side_effects(client, transport) -> None:
    no_target = client.post(
        "/notifications/send",
        json={"title": "Hola", "body": "Mensaje"},
        headers=INTERNAL_HEADERS,
    )
    unknown_recipient = client.post(
        "/notifications/send",
        json={"token": "device-1", "recipientId": 4242, "title": "Hola", "body": "Mensaje"},
        headers=INTERNAL_HEADERS,
    )

    assert no_target.status_code == 400
    assert unknown_recipient.status_code == 400
    assert transport.calls == []


def test_out_of_range_paging_is_clamped(client, db_session, make_recipient, auth_headers) -> None:
    recipient = make_recipient()
    _seed(db_session, recipient.id, 2)

    response = client.get(
        "/notifications/list?page=10000000000000000000&pageSize=5000",
        headers=auth_headers(recipient),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["pagination"]["total"] == 2
    assert body["pagination"]["pageSize"] == 100
    assert body["pagination"]["hasNext"] is False
