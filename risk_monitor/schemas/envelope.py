"""Uniform response envelopes.

Success: ``{success: true, data?, totalCount?, limit?, skip?, stats?, message?}``
Error:   ``{success: false, error, details?}``

Routes serialize with ``response_model_exclude_unset`` so only the keys a
handler sets appear in the body.
"""

from typing import Any, Generic, TypeVar

from pydantic import Field

from risk_monitor.schemas.common import CamelModel

DataT = TypeVar("DataT")
StatsT = TypeVar("StatsT")


class ItemEnvelope(CamelModel, Generic[DataT]):
    """A single record or computed field set."""

    success: bool = True
    data: DataT
    message: str | None = None


class ListEnvelope(CamelModel, Generic[DataT]):
    """A page of records with the unfiltered collection count."""

    success: bool = True
    data: list[DataT]
    total_count: int | None = None
    limit: int | None = None
    skip: int | None = None


class StatsEnvelope(CamelModel, Generic[StatsT]):
    """Aggregated statistics for a collection."""

    success: bool = True
    stats: StatsT
    total_count: int | None = None


class MessageEnvelope(CamelModel):
    success: bool = True
    message: str
    data: dict[str, Any] | None = None


class ErrorEnvelope(CamelModel):
    success: bool = Field(default=False)
    error: str
    details: Any | None = None
