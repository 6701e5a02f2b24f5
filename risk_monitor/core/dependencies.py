"""
FastAPI dependency injection utilities.

Provides the database pool, per-request stores, and the shared query
parameter contract (pagination, boolean flags, ISO-8601 dates).
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Annotated

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from risk_monitor.core.config import Settings, get_settings
from risk_monitor.core.database import Database
from risk_monitor.core.errors import ValidationError
from risk_monitor.persistence.store import Store, StoreFactory, open_store

TRUE_FLAG = "true"


def get_database(request: Request) -> Database:
    """The pool owned by the application, created in the lifespan."""
    return request.app.state.database


async def get_session(database: Database = Depends(get_database)) -> AsyncGenerator[AsyncSession]:
    """Request-scoped session: commits on success, rolls back on error."""
    async with database.session() as session:
        yield session


def get_store(session: AsyncSession = Depends(get_session)) -> Store:
    return Store(session)


def get_store_factory(database: Database = Depends(get_database)) -> StoreFactory:
    """Opens a store on a fresh session per call, for concurrent fan-out reads."""
    return partial(open_store, database)


SettingsDep = Annotated[Settings, Depends(get_settings)]
StoreDep = Annotated[Store, Depends(get_store)]
StoreFactoryDep = Annotated[StoreFactory, Depends(get_store_factory)]


# =============================================================================
# Query parameter contract
# =============================================================================


def is_true(value: str | None) -> bool:
    """Boolean query flags are true only for the literal string "true"."""
    return value == TRUE_FLAG


def parse_iso_datetime(value: str | None, field: str) -> datetime | None:
    """Parse an ISO-8601 query value.

    Raises:
        ValidationError: If the value is present but unparseable.
    """
    if value is None or value == "":
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(
            f"Invalid date for {field}, expected ISO-8601",
            details={field: value},
        ) from None


@dataclass(frozen=True)
class Pagination:
    limit: int
    skip: int


def _parse_int(value: str | None, default: int) -> int | None:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return None


def get_pagination(
    settings: SettingsDep,
    limit: str | None = Query(None, description="Page size, 1 to 1000"),
    skip: str | None = Query(None, description="Records to skip, 0 or more"),
) -> Pagination:
    """Validate ``limit`` and ``skip``.

    Raises:
        ValidationError: If either value is out of range or not an integer.
    """
    parsed_limit = _parse_int(limit, settings.pagination.default_limit)
    parsed_skip = _parse_int(skip, 0)

    errors = []
    if parsed_limit is None or not 1 <= parsed_limit <= settings.pagination.max_limit:
        errors.append(f"Limit must be between 1 and {settings.pagination.max_limit}")
    if parsed_skip is None or parsed_skip < 0:
        errors.append("Skip must be a non-negative number")
    if errors:
        raise ValidationError(", ".join(errors), details={"limit": limit, "skip": skip})

    return Pagination(limit=parsed_limit, skip=parsed_skip)


PaginationDep = Annotated[Pagination, Depends(get_pagination)]
