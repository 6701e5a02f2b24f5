"""Base class for the per-collection repositories.

Each repository is a thin typed pass-through over an ``AsyncSession``:
no caching, no retries, and database errors propagate unchanged to the
caller. Rows come back as plain dicts keyed by column name.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, ClassVar
from uuid import UUID, uuid4

from sqlalchemy import TextClause, bindparam, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession

SCHEMA = "payment_intelligence"

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so user input matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def contains_pattern(value: str) -> str:
    """Case-insensitive substring pattern for ILIKE."""
    return f"%{escape_like(value)}%"


class BaseRepository:
    """Shared CRUD for one collection table.

    Subclasses declare the table, its writable columns, which of them are
    JSONB, and the column that orders listings newest-first.
    """

    table: ClassVar[str]
    columns: ClassVar[tuple[str, ...]]
    json_columns: ClassVar[frozenset[str]] = frozenset()
    order_column: ClassVar[str] = "created_at"

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def qualified_table(self) -> str:
        return f"{SCHEMA}.{self.table}"

    @property
    def select_clause(self) -> str:
        quoted = ", ".join(f'"{c}"' for c in self.columns)
        return f"SELECT id, {quoted} FROM {self.qualified_table}"

    def _statement(self, sql: str) -> TextClause:
        """Build a text statement with JSONB binds for the JSON columns it uses."""
        statement = text(sql)
        json_binds = [
            bindparam(column, type_=JSONB)
            for column in self.json_columns
            if f":{column}" in sql
        ]
        if json_binds:
            statement = statement.bindparams(*json_binds)
        return statement

    async def _fetch_one(self, where: str, params: Mapping[str, Any]) -> dict[str, Any] | None:
        result = await self.session.execute(
            text(f"{self.select_clause} WHERE {where} LIMIT 1"),
            dict(params),
        )
        row = result.mappings().first()
        return dict(row) if row is not None else None

    async def _fetch_many(
        self,
        where: str | None,
        params: Mapping[str, Any],
        limit: int,
        skip: int = 0,
        ordered: bool = True,
    ) -> list[dict[str, Any]]:
        sql = self.select_clause
        if where:
            sql += f" WHERE {where}"
        if ordered:
            sql += f' ORDER BY "{self.order_column}" DESC, id DESC'
        sql += " LIMIT :limit OFFSET :skip"
        result = await self.session.execute(
            text(sql),
            {**params, "limit": limit, "skip": skip},
        )
        return [dict(row) for row in result.mappings().all()]

    async def get_all(self, limit: int = 100, skip: int = 0) -> list[dict[str, Any]]:
        """List records newest-first."""
        return await self._fetch_many(None, {}, limit=limit, skip=skip)

    async def get_by_id(self, record_id: UUID) -> dict[str, Any] | None:
        """Lookup by storage id. Returns None when absent."""
        return await self._fetch_one("id = :id", {"id": record_id})

    async def count(self) -> int:
        """Total number of records, unfiltered."""
        result = await self.session.execute(text(f"SELECT COUNT(*) FROM {self.qualified_table}"))
        return result.scalar() or 0

    def _insert_sql(self, columns: Sequence[str]) -> str:
        names = ", ".join(f'"{c}"' for c in ("id", *columns))
        values = ", ".join(f":{c}" for c in ("id", *columns))
        return f"INSERT INTO {self.qualified_table} ({names}) VALUES ({values})"

    def _prepare(self, record: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(record) - set(self.columns) - {"id"}
        if unknown:
            raise ValueError(f"Unknown columns for {self.table}: {sorted(unknown)}")
        params = {column: record.get(column) for column in self.columns}
        params["id"] = record.get("id") or uuid4()
        return params

    async def insert_one(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Insert one record and return it with its storage id."""
        params = self._prepare(record)
        await self.session.execute(self._statement(self._insert_sql(self.columns)), params)
        return params

    async def insert_many(self, records: Iterable[Mapping[str, Any]]) -> list[UUID]:
        """Bulk insert within the caller's transaction. Returns the new ids."""
        batch = [self._prepare(record) for record in records]
        if not batch:
            return []
        await self.session.execute(self._statement(self._insert_sql(self.columns)), batch)
        return [params["id"] for params in batch]

    async def clear(self) -> int:
        """Delete every record. Administrative reset only."""
        result = await self.session.execute(text(f"DELETE FROM {self.qualified_table}"))
        return result.rowcount or 0
