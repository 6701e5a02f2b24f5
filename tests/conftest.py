"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import sys
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]

# Add repo root to path so `scripts` and `tests` import
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Set test environment variables before importing the app
# Unit tests use an in-memory store, so the database is never contacted
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("OTEL_LOG_RECORD_FORMAT", "console")

from risk_monitor.core.config import get_settings  # noqa: E402
from risk_monitor.core.dependencies import get_store, get_store_factory  # noqa: E402
from risk_monitor.main import create_app  # noqa: E402
from tests.fakes import FakeStore, store_factory_for  # noqa: E402

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env changes in one test never leak into another."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def app(store):
    """Real app factory with the store dependencies swapped for the fake."""
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_store_factory] = lambda: store_factory_for(store)
    return app


@pytest.fixture
async def client(app):
    """httpx.AsyncClient bound to the ASGI app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_session():
    """Mock async database session."""
    session = MagicMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


def make_result(*, first=None, one=None, rows=None, scalar=None, rowcount=None):
    """Build a mocked ``Result`` for ``session.execute``."""
    result = MagicMock()
    mappings = result.mappings.return_value
    mappings.first.return_value = first
    mappings.one.return_value = one
    mappings.all.return_value = rows or []
    result.scalar.return_value = scalar
    result.rowcount = rowcount
    return result


@pytest.fixture
def transaction_payload() -> dict:
    """Create body for a low-risk card payment."""
    return {
        "transaction_id": "txn_test_001",
        "email": "john.doe@example.com",
        "amount": "99.99",
        "currency": "usd",
        "gateway": "stripe",
        "status": "succeeded",
        "payment_method": "card",
        "card_brand": "visa",
        "card_country": "US",
        "risk_level": "low",
        "risk_score": 25,
        "ip_address": "192.168.1.1",
        "billing_name": "John Doe",
        "captured": True,
        "paid": True,
        "chargeback_confidence": 0.15,
        "created_at": "2024-02-01T10:00:00+00:00",
    }


@pytest.fixture
def customer_payload() -> dict:
    return {
        "email": "jane.smith@example.com",
        "name": "Jane Smith",
        "phone": "+1234567891",
        "currency": "usd",
        "country": "US",
        "balance": "-12.50",
        "metadata": {"user_id": "user_002"},
        "gateway_customer_ids": {"stripe": "cus_002"},
    }


def transaction_record(transaction_id: str, **overrides) -> dict:
    """A stored transaction row as the create path would write it."""
    record = {
        "transaction_id": transaction_id,
        "email": "john.doe@example.com",
        "amount": Decimal("10.00"),
        "currency": "USD",
        "status": "succeeded",
        "risk_score": 25,
        "risk_level": "low",
        "refunded": False,
        "amount_refunded": Decimal(0),
        "disputed": False,
        "captured": True,
        "paid": True,
        "chargeback_confidence": 0.0,
        "chargeback_predicted": False,
        "fraud_detected": False,
        "manual_review": None,
        "created_at": NOW,
        "updated_at": NOW,
    }
    record.update(overrides)
    return record


def subscription_record(subscription_id: str, **overrides) -> dict:
    record = {
        "subscription_id": subscription_id,
        "email": "john.doe@example.com",
        "gateway": "stripe",
        "status": "active",
        "current_period_start": NOW,
        "current_period_end": NOW,
        "price_amount": Decimal("10.00"),
        "currency": "USD",
        "interval": "month",
        "quantity": 1,
        "cancel_at_period_end": False,
        "metadata": {},
        "billing_cycle_anchor": NOW,
        "created_at": NOW,
    }
    record.update(overrides)
    return record


def customer_record(email: str, name: str, **overrides) -> dict:
    record = {
        "email": email,
        "name": name,
        "delinquent": False,
        "balance": Decimal(0),
        "tax_info": {"tax_id": None, "type": None},
        "metadata": {},
        "gateway_customer_ids": {},
        "created_at": NOW,
    }
    record.update(overrides)
    return record
