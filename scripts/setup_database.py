#!/usr/bin/env python3
"""
Payment Risk Monitor: Database Setup Script

Supports:
- init: First-time schema creation
- reset: Drop and recreate tables (--mode=data|schema)
- verify: Check connectivity, collection tables, business-key constraints and row counts

Usage:
    uv run db-setup init
    uv run db-setup reset --mode data -y
    uv run db-setup verify

Environment Variables:
- DATABASE_URL_ADMIN: Connection with schema creation permissions (primary)
- DATABASE_URL_APP or DATABASE_* components: Fallback via application settings
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import psycopg
from psycopg.rows import dict_row

from risk_monitor.core.config import AppEnvironment, get_settings

SCHEMA = "payment_intelligence"
SCHEMA_FILE = "schema.sql"

# Every collection, one table each
TABLES = [
    "customers",
    "transactions",
    "subscriptions",
    "subscription_forecasts",
    "fraud_results",
    "chargeback_predictions",
]

# Duplicate-create conflicts depend on these
BUSINESS_KEYS = {
    "customers": "email",
    "transactions": "transaction_id",
    "subscriptions": "subscription_id",
}

UNIQUE_KEYS_SQL = """
    SELECT tc.table_name, kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON kcu.constraint_name = tc.constraint_name
     AND kcu.table_schema = tc.table_schema
    WHERE tc.table_schema = %s AND tc.constraint_type = 'UNIQUE'
"""


@dataclass
class SetupResult:
    """Result of a setup step."""

    success: bool
    message: str
    details: str | None = None


class ResetMode(Enum):
    """Database reset modes."""

    SCHEMA = "schema"
    DATA = "data"


def split_sql_statements(sql_content: str) -> list[str]:
    """Split a schema file into statements on trailing semicolons, skipping comment lines."""
    statements = []
    current: list[str] = []
    for line in sql_content.splitlines():
        stripped = line.strip()
        if not stripped or (stripped.startswith("--") and not current):
            continue
        current.append(line)
        if stripped.endswith(";"):
            statements.append("\n".join(current))
            current = []
    if current:
        statements.append("\n".join(current))
    return statements


def find_schema_problems(tables: set[str], unique_keys: set[tuple[str, str]]) -> list[str]:
    """Compare what the database has against the collection tables and their business keys."""
    problems = []
    missing = [t for t in TABLES if t not in tables]
    if missing:
        problems.append(f"Missing tables: {', '.join(missing)}")
    for table, column in BUSINESS_KEYS.items():
        if table in tables and (table, column) not in unique_keys:
            problems.append(f"{table}.{column} is not unique")
    return problems


class DatabaseSetup:
    """Handles database setup for the Payment Risk Monitor."""

    def __init__(self, admin_url: str):
        self.admin_url = admin_url
        self.repo_root = Path(__file__).parent.parent

    def _load_sql_file(self, filename: str) -> str:
        """Load SQL file from db directory."""
        sql_path = self.repo_root / "db" / filename
        if not sql_path.exists():
            raise FileNotFoundError(f"SQL file not found: {sql_path}")
        return sql_path.read_text(encoding="utf-8")

    def _execute_sql(
        self, conn: psycopg.Connection, sql_content: str, description: str
    ) -> SetupResult:
        """Execute SQL content with error handling."""
        try:
            statements = split_sql_statements(sql_content)
            for stmt in statements:
                conn.execute(stmt)
            conn.commit()
            return SetupResult(
                success=True,
                message=description,
                details=f"Executed {len(statements)} statements",
            )
        except psycopg.Error as e:
            conn.rollback()
            return SetupResult(
                success=False,
                message=description,
                details=f"{type(e).__name__}: {e}",
            )

    def init(self) -> int:
        """Initialize database schema."""
        print("Initializing database schema...")

        schema_sql = self._load_sql_file(SCHEMA_FILE)

        try:
            with psycopg.connect(self.admin_url, autocommit=False) as conn:
                print("  Applying schema...")
                result = self._execute_sql(conn, schema_sql, "Schema creation failed")
                if not result.success:
                    print(f"ERROR: {result.details}")
                    return 1
                print(f"  Schema applied: {result.details}")
        except psycopg.Error as e:
            print(f"ERROR: Database connection failed: {e}")
            return 1

        print("Database initialization complete.")
        return 0

    def reset(self, mode: ResetMode, force: bool = False) -> int:
        """Reset database tables (schema or data mode)."""
        print(f"Resetting database tables ({mode.value})...")

        if not force:
            response = input("This will destroy all collection data. Continue? [y/N]: ")
            if response.lower() != "y":
                print("Aborted.")
                return 1

        try:
            with psycopg.connect(self.admin_url, autocommit=False) as conn:
                if mode == ResetMode.SCHEMA:
                    print("  Dropping tables...")
                    for table in TABLES:
                        conn.execute(f"DROP TABLE IF EXISTS {SCHEMA}.{table} CASCADE")
                    conn.commit()
                    print("  Tables dropped.")

                    print("  Applying schema...")
                    schema_sql = self._load_sql_file(SCHEMA_FILE)
                    result = self._execute_sql(conn, schema_sql, "Schema recreation failed")
                    if not result.success:
                        print(f"ERROR: {result.details}")
                        return 1
                    print(f"  Schema applied: {result.details}")
                else:
                    print("  Truncating tables...")
                    qualified = ", ".join(f"{SCHEMA}.{table}" for table in TABLES)
                    conn.execute(f"TRUNCATE TABLE {qualified}")
                    conn.commit()
                    print("  Tables truncated.")

        except psycopg.Error as e:
            print(f"ERROR: Database reset failed: {e}")
            return 1

        print("Database reset complete.")
        return 0

    def verify(self) -> int:
        """Check connectivity, tables, business-key constraints and row counts."""
        print("Verifying database setup...")

        try:
            with psycopg.connect(self.admin_url, autocommit=True, row_factory=dict_row) as conn:
                print("  [OK] Database connection")
                tables = {
                    row["table_name"]
                    for row in conn.execute(
                        "SELECT table_name FROM information_schema.tables WHERE table_schema = %s",
                        (SCHEMA,),
                    ).fetchall()
                }
                unique_keys = {
                    (row["table_name"], row["column_name"])
                    for row in conn.execute(UNIQUE_KEYS_SQL, (SCHEMA,)).fetchall()
                }
                errors = find_schema_problems(tables, unique_keys)
                for table in TABLES:
                    if table in tables:
                        count = conn.execute(
                            f"SELECT count(*) AS n FROM {SCHEMA}.{table}"
                        ).fetchone()["n"]
                        print(f"  [OK] {table}: {count} rows")
        except psycopg.Error as e:
            errors = [f"Database check failed: {e}"]

        if errors:
            print("\nVerification FAILED:")
            for err in errors:
                print(f"  - {err}")
            return 1

        print("\nVerification PASSED.")
        return 0


def resolve_admin_url(cli_url: str | None) -> str:
    """Explicit URL, then DATABASE_URL_ADMIN, then the application's own settings."""
    return cli_url or os.getenv("DATABASE_URL_ADMIN") or get_settings().database.sync_url


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Payment Risk Monitor - Database Setup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--admin-url",
        help="Admin database URL (overrides env var)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init", help="First-time setup")

    reset_parser = subparsers.add_parser("reset", help="Reset database")
    reset_parser.add_argument(
        "--mode",
        choices=["schema", "data"],
        default="data",
        help="Reset mode: schema (drop/recreate) or data (truncate only)",
    )
    reset_parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Skip confirmation prompt",
    )

    subparsers.add_parser("verify", help="Verify database setup")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    setup = DatabaseSetup(admin_url=resolve_admin_url(args.admin_url))

    if args.command == "init":
        return setup.init()
    elif args.command == "reset":
        if get_settings().app.env == AppEnvironment.PROD:
            print("ERROR: Refusing to reset collections with APP_ENV=prod")
            return 1
        return setup.reset(mode=ResetMode(args.mode), force=args.yes)
    elif args.command == "verify":
        return setup.verify()

    return 0


if __name__ == "__main__":
    sys.exit(main())
