"""Unit tests for the operational scripts."""

from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from risk_monitor.core.errors import PartialBulkInsertError, PersistenceError
from scripts import seed_sample_data
from scripts.setup_database import (
    BUSINESS_KEYS,
    TABLES,
    find_schema_problems,
    resolve_admin_url,
    split_sql_statements,
)
from tests.fakes import FakeStore

SCHEMA_SQL = Path(__file__).resolve().parents[2] / "db" / "schema.sql"


class TestSplitSqlStatements:
    def test_splits_on_trailing_semicolons(self):
        sql = """
-- leading comment
CREATE SCHEMA IF NOT EXISTS payment_intelligence;

CREATE TABLE a (
    id UUID PRIMARY KEY
);
"""
        statements = split_sql_statements(sql)
        assert statements == [
            "CREATE SCHEMA IF NOT EXISTS payment_intelligence;",
            "CREATE TABLE a (\n    id UUID PRIMARY KEY\n);",
        ]

    def test_schema_file_creates_every_table(self):
        statements = split_sql_statements(SCHEMA_SQL.read_text(encoding="utf-8"))
        for table in TABLES:
            assert any(f"payment_intelligence.{table}" in s and "CREATE TABLE" in s for s in statements), table


class TestFindSchemaProblems:
    def test_complete_schema(self):
        unique_keys = set(BUSINESS_KEYS.items())
        assert find_schema_problems(set(TABLES), unique_keys) == []

    def test_missing_tables(self):
        present = set(TABLES) - {"fraud_results", "chargeback_predictions"}
        problems = find_schema_problems(present, set(BUSINESS_KEYS.items()))
        assert problems == ["Missing tables: fraud_results, chargeback_predictions"]

    def test_business_key_without_unique_constraint(self):
        unique_keys = set(BUSINESS_KEYS.items()) - {("customers", "email")}
        assert find_schema_problems(set(TABLES), unique_keys) == ["customers.email is not unique"]

    def test_schema_file_declares_business_keys_unique(self):
        sql = SCHEMA_SQL.read_text(encoding="utf-8")
        for column in BUSINESS_KEYS.values():
            assert f"{column} TEXT NOT NULL UNIQUE" in sql


class TestResolveAdminUrl:
    def test_cli_url_wins(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL_ADMIN", "postgresql://admin@env/db")
        assert resolve_admin_url("postgresql://cli/db") == "postgresql://cli/db"

    def test_admin_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL_ADMIN", "postgresql://admin@env/db")
        assert resolve_admin_url(None) == "postgresql://admin@env/db"

    def test_falls_back_to_app_settings(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL_ADMIN", raising=False)
        monkeypatch.setenv("DATABASE_URL_APP", "postgresql+asyncpg://app:pw@db:5432/risk")
        assert resolve_admin_url(None) == "postgresql://app:pw@db:5432/risk"


class TestSampleRecords:
    def test_samples_pass_create_schemas(self):
        records = seed_sample_data.build_sample_records()
        assert len(records["transactions"]) == 2
        assert len(records["customers"]) == 1
        assert len(records["fraud_results"]) == 2

    def test_confidence_percentages_normalized(self):
        transactions = seed_sample_data.build_sample_records()["transactions"]
        assert [t["chargeback_confidence"] for t in transactions] == pytest.approx([0.15, 0.30])

    def test_currency_uppercased(self):
        transactions = seed_sample_data.build_sample_records()["transactions"]
        assert {t["currency"] for t in transactions} == {"USD"}


def _open_fake_store(store: FakeStore):
    @asynccontextmanager
    async def open_store(database):
        yield store

    return open_store


class TestSeed:
    async def test_inserts_every_collection(self, monkeypatch):
        store = FakeStore()
        monkeypatch.setattr(seed_sample_data, "open_store", _open_fake_store(store))

        inserted = await seed_sample_data.seed(object(), seed_sample_data.build_sample_records())

        assert inserted == {"transactions": 2, "customers": 1, "fraud_results": 2}
        assert await store.transactions.count() == 2

    async def test_partial_failure_reports_counts(self, monkeypatch):
        store = FakeStore()
        store.fraud_results.insert_many = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("disk full"))
        )
        monkeypatch.setattr(seed_sample_data, "open_store", _open_fake_store(store))

        with pytest.raises(PartialBulkInsertError) as exc_info:
            await seed_sample_data.seed(object(), seed_sample_data.build_sample_records())

        details = exc_info.value.details
        assert details["inserted"] == {"transactions": 2, "customers": 1, "fraud_results": 0}
        assert "fraud_results" in details["failed"]
        assert await store.transactions.count() == 2

    async def test_total_failure_is_not_partial(self, monkeypatch):
        store = FakeStore()
        for repo in (store.transactions, store.customers, store.fraud_results):
            repo.insert_many = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("down")))
        monkeypatch.setattr(seed_sample_data, "open_store", _open_fake_store(store))

        with pytest.raises(PersistenceError) as exc_info:
            await seed_sample_data.seed(object(), seed_sample_data.build_sample_records())

        assert not isinstance(exc_info.value, PartialBulkInsertError)
        assert set(exc_info.value.details["failed"]) == {"transactions", "customers", "fraud_results"}
