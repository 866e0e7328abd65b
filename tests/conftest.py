"""Shared fixtures for the listing alerts test-suite."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "listing_alerts_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["INTERNAL_API_KEY"] = "internal-test-key"
for _name in ("FIREBASE_PROJECT_ID", "FIREBASE_CLIENT_EMAIL", "FIREBASE_PRIVATE_KEY"):
    os.environ.pop(_name, None)

from listing_alerts.config import get_settings  # noqa: E402

get_settings.cache_clear()

from listing_alerts.domain.entities import DispatchOutcome  # noqa: E402
from listing_alerts.domain.errors import DispatchError  # noqa: E402
from listing_alerts.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from listing_alerts.infrastructure.repositories import RecipientRepository  # noqa: E402

INTERNAL_HEADERS = {"X-Internal-Key": "internal-test-key"}


class RecordingTransport:
    """Push transport double that records calls and fails on request."""

    def __init__(
        self,
        *,
        failing_tokens: set[str] | None = None,
        error: DispatchError | None = None,
    ) -> None:
        self.failing_tokens = failing_tokens or set()
        self.error = error
        self.calls: list[dict] = []

    def send_multicast(self, tokens, *, title, body, platform_hints):
        self.calls.append(
            {
                "tokens": list(tokens),
                "title": title,
                "body": body,
                "platform_hints": platform_hints,
            }
        )
        if self.error is not None:
            raise self.error
        return [
            DispatchOutcome(
                token=token,
                success=token not in self.failing_tokens,
                error="messaging/registration-token-not-registered"
                if token in self.failing_tokens
                else None,
            )
            for token in tokens
        ]

    @property
    def sent_tokens(self) -> list[str]:
        return [token for call in self.calls for token in call["tokens"]]


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_recipient(db_session):
    """Return a factory that stores a recipient in the directory."""

    def _make(*, tokens=(), platform=None, is_active=True, name=None):
        return RecipientRepository(db_session).create(
            name=name,
            platform=platform,
            is_active=is_active,
            device_tokens=list(tokens),
        )

    return _make


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def client(transport):
    """Return a test client whose push dispatcher records instead of sending."""

    from fastapi.testclient import TestClient

    from listing_alerts.infrastructure.push import PushDispatcher
    from listing_alerts.main import create_app

    app = create_app(push_dispatcher=PushDispatcher(transport))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers():
    """Return a helper that builds bearer headers for a recipient."""

    from listing_alerts.infrastructure.security import create_access_token

    def _headers(recipient) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(recipient.id)}"}

    return _headers
