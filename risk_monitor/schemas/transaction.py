"""Transaction schemas: create body, review body and read models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from risk_monitor.domain.risk import effective_risk_level, normalize_confidence
from risk_monitor.schemas.common import CreateModel, normalize_currency


class TransactionCreate(CreateModel):
    """Schema for recording a payment attempt."""

    transaction_id: str = Field(..., min_length=1, max_length=255, description="Gateway transaction id")
    email: EmailStr
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    currency: str = Field(default="USD", min_length=3, max_length=3)

    gateway: str | None = None
    status: str | None = None
    payment_method: str | None = None

    # Card
    card_brand: str | None = None
    card_country: str | None = None
    fingerprint: str | None = None
    funding_type: str | None = None
    three_d_secure: str | None = None
    cvc_check: str | None = None
    address_line1_check: str | None = None
    postal_code_check: str | None = None

    # Risk, produced upstream
    risk_level: str | None = None
    risk_score: int | None = Field(None, ge=0, le=100)
    seller_message: str | None = None
    network_status: str | None = None
    outcome_type: str | None = None
    ip_address: str | None = None

    # Billing
    billing_name: str | None = None
    billing_email: str | None = None
    billing_phone: str | None = None
    billing_address_country: str | None = None
    billing_address_line1: str | None = None
    billing_address_line2: str | None = None
    billing_address_postal_code: str | None = None
    billing_address_city: str | None = None
    billing_address_state: str | None = None

    refunded: bool = False
    amount_refunded: Decimal = Field(default=Decimal(0), ge=0)
    disputed: bool = False
    captured: bool = False
    paid: bool = False

    chargeback_confidence: float = Field(
        default=0.0,
        description="Fraction in [0, 1]; values in (1, 100] are read as percentages",
    )
    chargeback_predicted: bool = False
    fraud_detected: bool = False

    created_at: datetime | None = Field(None, description="Business event time, defaults to now")

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return normalize_currency(v)

    @field_validator("chargeback_confidence")
    @classmethod
    def validate_chargeback_confidence(cls, v: float) -> float:
        return normalize_confidence(v)


class TransactionReviewRequest(CreateModel):
    """Schema for a reviewer decision on a transaction."""

    transaction_id: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1, description='"mark_safe" or "mark_fraud"')
    notes: str | None = None
    retrain_model: bool | None = Field(None, description="Defaults to true unless explicitly false")


class ManualReviewResponse(BaseModel):
    reviewed: bool
    reviewed_at: datetime
    marked_as: str
    notes: str
    retrain_model: bool


class TransactionResponse(BaseModel):
    """Response schema for a stored transaction.

    ``risk_level`` is recomputed from ``risk_score`` whenever a score exists.
    """

    id: UUID
    transaction_id: str
    email: str
    amount: float
    currency: str | None = None
    gateway: str | None = None
    status: str | None = None
    payment_method: str | None = None
    card_brand: str | None = None
    card_country: str | None = None
    fingerprint: str | None = None
    funding_type: str | None = None
    three_d_secure: str | None = None
    cvc_check: str | None = None
    address_line1_check: str | None = None
    postal_code_check: str | None = None
    risk_level: str | None = None
    risk_score: int | None = None
    seller_message: str | None = None
    network_status: str | None = None
    outcome_type: str | None = None
    ip_address: str | None = None
    billing_name: str | None = None
    billing_email: str | None = None
    billing_phone: str | None = None
    billing_address_country: str | None = None
    billing_address_line1: str | None = None
    billing_address_line2: str | None = None
    billing_address_postal_code: str | None = None
    billing_address_city: str | None = None
    billing_address_state: str | None = None
    refunded: bool = False
    amount_refunded: float = 0.0
    disputed: bool = False
    captured: bool = False
    paid: bool = False
    chargeback_confidence: float = 0.0
    chargeback_predicted: bool = False
    fraud_detected: bool = False
    manual_review: ManualReviewResponse | None = None
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def derive_risk_level(self) -> "TransactionResponse":
        self.risk_level = effective_risk_level(self.risk_score, self.risk_level)
        return self


class ReviewResultResponse(BaseModel):
    """Exactly the fields a review computed."""

    transaction_id: str
    updated_at: datetime
    manual_review: ManualReviewResponse
    fraud_detected: bool
    risk_level: str
    risk_score: int

