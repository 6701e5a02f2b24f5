"""Subscription schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from risk_monitor.schemas.common import CreateModel, normalize_currency


class SubscriptionCreate(CreateModel):
    """Schema for a recurring billing contract.

    ``interval`` is free text; week, month and year are normalized for MRR,
    any other value is treated as a daily price.
    """

    subscription_id: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    gateway: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1)

    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
    plan_id: str | None = None
    plan_name: str | None = None
    product_id: str | None = None
    price_amount: Decimal = Field(default=Decimal(0), ge=0, max_digits=14, decimal_places=2)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    interval: str = "month"
    quantity: int = Field(default=1, ge=0)
    cancel_at_period_end: bool = False
    canceled_at: datetime | None = None
    ended_at: datetime | None = None
    trial_start: datetime | None = None
    trial_end: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    latest_invoice: str | None = None
    collection_method: str | None = None
    default_payment_method: str | None = None
    billing_cycle_anchor: datetime | None = None
    created_at: datetime | None = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return normalize_currency(v)


class SubscriptionResponse(BaseModel):
    id: UUID
    subscription_id: str
    email: str
    gateway: str
    status: str
    current_period_start: datetime
    current_period_end: datetime
    plan_id: str | None = None
    plan_name: str | None = None
    product_id: str | None = None
    price_amount: float = 0.0
    currency: str = "USD"
    interval: str = "month"
    quantity: int = 1
    cancel_at_period_end: bool = False
    canceled_at: datetime | None = None
    ended_at: datetime | None = None
    trial_start: datetime | None = None
    trial_end: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    latest_invoice: str | None = None
    collection_method: str | None = None
    default_payment_method: str | None = None
    billing_cycle_anchor: datetime
    created_at: datetime
