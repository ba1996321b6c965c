from __future__ import annotations

import os

# Settings are resolved at import time, so pick the test profile first
os.environ.setdefault("APP_ENV", "test")

from datetime import datetime, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from itertools import count  # noqa: E402

import pytest  # noqa: E402

from taxrecon.db.base_class import Base  # noqa: E402
from taxrecon.db.session import SessionLocal, engine  # noqa: E402
from taxrecon.models.models import Purchase, PurchaseState, ZipTaxRate  # noqa: E402


class FakeStorage:
    """In-memory stand-in for S3Client with the same put/presign surface."""

    def __init__(self, error: Exception | None = None):
        self.objects: dict[str, bytes] = {}
        self.puts: list[str] = []
        self.error = error

    def put_bytes(self, data: bytes, key: str, content_type: str = "text/csv") -> None:
        if self.error is not None:
            raise self.error
        self.puts.append(key)
        self.objects[key] = data

    def presigned_url(self, key: str, expires_in: int | None = None) -> str:
        return f"https://example.com/{key}?X-Amz-Expires={expires_in or 604800}"


class RecordingNotifier:
    def __init__(self, error: Exception | None = None, delivered: bool = True):
        self.outcomes = []
        self.error = error
        self.delivered = delivered

    def notify(self, outcome) -> bool:
        self.outcomes.append(outcome)
        if self.error is not None:
            raise self.error
        return self.delivered


@pytest.fixture(autouse=True)
def _reset_database_state():
    """Ensure each test sees a fresh database schema."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def purchase_factory(db_session):
    """Factory for successful India purchases; override any column via kwargs."""
    seq = count(1)

    def _create(**overrides):
        n = next(seq)
        data = {
            "external_id": f"pur_{n:04d}",
            "created_at": datetime(2023, 6, 15, 12, 0, tzinfo=timezone.utc),
            "purchase_state": PurchaseState.SUCCESSFUL.value,
            "country": "India",
            "ip_country": "India",
            "ip_state": "MH",
            "price_cents": 1000,
            "quantity": 1,
            "tax_cents": 180,
            "refunded": False,
        }
        data.update(overrides)
        purchase = Purchase(**data)
        db_session.add(purchase)
        db_session.commit()
        return purchase

    return _create


@pytest.fixture
def rate_factory(db_session):
    def _create(country="IN", state=None, zip_code=None, combined_rate="0.18", **overrides):
        rate = ZipTaxRate(
            country=country,
            state=state,
            zip_code=zip_code,
            combined_rate=Decimal(combined_rate),
            is_seller_responsible=overrides.pop("is_seller_responsible", False),
            **overrides,
        )
        db_session.add(rate)
        db_session.commit()
        return rate

    return _create
