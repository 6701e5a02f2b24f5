#!/usr/bin/env python3
"""
Payment Risk Monitor: Sample Data Seeder

Inserts a small set of transactions, customers and fraud results through
the data access façade. Each collection is inserted in its own session:
one collection is all-or-nothing, the seed as a whole is not. A partial
seed is reported with PartialBulkInsertError.

Usage:
    uv run db-seed
"""

from __future__ import annotations

import asyncio
import sys
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from risk_monitor.core.config import get_settings
from risk_monitor.core.database import Database
from risk_monitor.core.errors import PartialBulkInsertError, PersistenceError
from risk_monitor.core.logging import get_logger, setup_logging
from risk_monitor.persistence.store import open_store
from risk_monitor.schemas.customer import CustomerCreate
from risk_monitor.schemas.fraud_result import FraudResultCreate
from risk_monitor.schemas.transaction import TransactionCreate

logger = get_logger(__name__)

SAMPLE_TRANSACTIONS: list[dict[str, Any]] = [
    {
        "transaction_id": "txn_sample_001",
        "email": "john.doe@example.com",
        "amount": "99.99",
        "currency": "usd",
        "gateway": "stripe",
        "status": "succeeded",
        "payment_method": "card",
        "card_brand": "visa",
        "card_country": "US",
        "fingerprint": "fp_sample_001",
        "funding_type": "credit",
        "three_d_secure": "pass",
        "cvc_check": "pass",
        "address_line1_check": "pass",
        "postal_code_check": "pass",
        "risk_level": "low",
        "risk_score": 25,
        "seller_message": "Payment completed successfully",
        "network_status": "approved_by_network",
        "outcome_type": "authorized",
        "ip_address": "192.168.1.1",
        "billing_name": "John Doe",
        "billing_email": "john.doe@example.com",
        "billing_phone": "+1234567890",
        "billing_address_country": "US",
        "billing_address_line1": "123 Main St",
        "billing_address_postal_code": "10001",
        "billing_address_city": "New York",
        "billing_address_state": "NY",
        "captured": True,
        "paid": True,
        # percentage, stored as 0.15
        "chargeback_confidence": 15,
    },
    {
        "transaction_id": "txn_sample_002",
        "email": "jane.smith@example.com",
        "amount": "149.99",
        "currency": "USD",
        "gateway": "stripe",
        "status": "succeeded",
        "payment_method": "card",
        "card_brand": "mastercard",
        "card_country": "US",
        "fingerprint": "fp_sample_002",
        "funding_type": "credit",
        "cvc_check": "pass",
        "address_line1_check": "pass",
        "postal_code_check": "pass",
        "risk_level": "medium",
        "risk_score": 45,
        "seller_message": "Payment completed successfully",
        "network_status": "approved_by_network",
        "outcome_type": "authorized",
        "ip_address": "192.168.1.2",
        "billing_name": "Jane Smith",
        "billing_email": "jane.smith@example.com",
        "billing_phone": "+1234567891",
        "billing_address_country": "US",
        "billing_address_line1": "456 Oak Ave",
        "billing_address_line2": "Apt 2B",
        "billing_address_postal_code": "10002",
        "billing_address_city": "New York",
        "billing_address_state": "NY",
        "captured": True,
        "paid": True,
        "chargeback_confidence": 30,
    },
]

SAMPLE_CUSTOMERS: list[dict[str, Any]] = [
    {
        "email": "john.doe@example.com",
        "name": "John Doe",
        "phone": "+1234567890",
        "currency": "USD",
        "country": "US",
        "address_line1": "123 Main St",
        "city": "New York",
        "state": "NY",
        "postal_code": "10001",
        "default_payment_method": "card_1234",
        "metadata": {
            "onboarding_funnel": "web",
            "type": "individual",
            "user_email": "john.doe@example.com",
            "user_id": "user_001",
        },
        "invoice_prefix": "INV",
        "gateway_customer_ids": {"stripe": "cus_sample_001"},
    },
]

SAMPLE_FRAUD_RESULTS: list[dict[str, Any]] = [
    {
        "transaction_id": "txn_sample_001",
        "email": "john.doe@example.com",
        "fraud_detected": False,
        "confidence": 0.855,
        "reasons": ["low_risk_ip", "verified_payment_method"],
    },
    {
        "transaction_id": "txn_sample_002",
        "email": "jane.smith@example.com",
        "fraud_detected": False,
        "confidence": 0.723,
        "reasons": ["medium_risk_score"],
    },
]


def build_sample_records(now: datetime | None = None) -> dict[str, list[dict[str, Any]]]:
    """Validate the samples through the create schemas and apply insert defaults."""
    now = now or datetime.now(UTC)

    transactions = []
    for sample in SAMPLE_TRANSACTIONS:
        record = TransactionCreate.model_validate(sample).model_dump()
        record.update(created_at=now, updated_at=now, manual_review=None)
        transactions.append(record)

    customers = []
    for sample in SAMPLE_CUSTOMERS:
        record = CustomerCreate.model_validate(sample).model_dump()
        record["created_at"] = now
        customers.append(record)

    fraud_results = []
    for sample in SAMPLE_FRAUD_RESULTS:
        record = FraudResultCreate.model_validate(sample).model_dump()
        record["timestamp"] = now
        fraud_results.append(record)

    return {
        "transactions": transactions,
        "customers": customers,
        "fraud_results": fraud_results,
    }


async def seed(database: Database, records: dict[str, list[dict[str, Any]]]) -> dict[str, int]:
    """Insert each collection in its own session.

    Returns:
        Inserted record count per collection.

    Raises:
        PartialBulkInsertError: Some collections were inserted and others failed.
        PersistenceError: Every collection failed.
    """
    inserted: dict[str, int] = {}
    failed: dict[str, str] = {}

    for collection, batch in records.items():
        try:
            async with open_store(database) as store:
                ids = await getattr(store, collection).insert_many(batch)
            inserted[collection] = len(ids)
        except SQLAlchemyError as exc:
            logger.error("Sample insert failed", collection=collection, error=str(exc))
            inserted[collection] = 0
            failed[collection] = str(exc)

    if failed and any(inserted.values()):
        raise PartialBulkInsertError(
            "Sample data was only partially inserted",
            details={"inserted": inserted, "failed": failed},
        )
    if failed:
        raise PersistenceError("Sample data insert failed", details={"failed": failed})

    logger.info("Sample data inserted", inserted=inserted)
    return inserted


async def _run() -> int:
    settings = get_settings()
    database = Database(settings.database)
    database.init()
    try:
        inserted = await seed(database, build_sample_records())
    except PersistenceError as exc:
        print(f"ERROR: {exc.message}")
        for key, value in exc.details.items():
            print(f"  {key}: {value}")
        return 1
    finally:
        await database.close()

    for collection, count in inserted.items():
        print(f"  [OK] {collection}: {count} inserted")
    return 0


def main() -> int:
    """Main entry point."""
    setup_logging(get_settings())
    return asyncio.run(_run())


if __name__ == "__main__":
    sys.exit(main())
