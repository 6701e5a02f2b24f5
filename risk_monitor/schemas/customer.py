"""Customer schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from risk_monitor.schemas.common import CamelModel, CreateModel, normalize_currency
from risk_monitor.schemas.fraud_result import FraudResultResponse
from risk_monitor.schemas.stats import CustomerMetricsResponse
from risk_monitor.schemas.subscription import SubscriptionResponse
from risk_monitor.schemas.transaction import TransactionResponse


def _empty_tax_info() -> dict[str, Any]:
    return {"tax_id": None, "type": None}


class CustomerCreate(CreateModel):
    """Schema for registering a billing identity. Email is unique."""

    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    phone: str | None = None
    currency: str | None = Field(None, min_length=3, max_length=3)
    country: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    delinquent: bool = False
    default_payment_method: str | None = None
    balance: Decimal = Field(
        default=Decimal(0),
        max_digits=14,
        decimal_places=2,
        description="Positive is credit, negative is owed",
    )
    tax_info: dict[str, Any] = Field(default_factory=_empty_tax_info)
    metadata: dict[str, Any] = Field(default_factory=dict)
    invoice_prefix: str | None = None
    gateway_customer_ids: dict[str, str] = Field(
        default_factory=dict, description="Gateway name to external customer id"
    )
    created_at: datetime | None = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str | None) -> str | None:
        return normalize_currency(v)


class CustomerResponse(BaseModel):
    id: UUID
    email: str
    name: str
    phone: str | None = None
    currency: str | None = None
    country: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    delinquent: bool = False
    default_payment_method: str | None = None
    balance: float = 0.0
    tax_info: dict[str, Any] = Field(default_factory=_empty_tax_info)
    metadata: dict[str, Any] = Field(default_factory=dict)
    invoice_prefix: str | None = None
    gateway_customer_ids: dict[str, str] = Field(default_factory=dict)
    created_at: datetime


class CustomerAnalyticsResponse(CamelModel):
    """A customer with their activity metrics and most recent records."""

    customer: CustomerResponse
    metrics: CustomerMetricsResponse
    transactions: list[TransactionResponse]
    subscriptions: list[SubscriptionResponse]
    fraud_results: list[FraudResultResponse]
