"""Chargeback prediction and subscription forecast schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from risk_monitor.domain.risk import normalize_confidence
from risk_monitor.schemas.common import CreateModel


class ChargebackPredictionCreate(CreateModel):
    transaction_id: str = Field(..., min_length=1)
    chargeback_predicted: bool = False
    confidence_score: float = Field(
        default=0.0,
        description="Fraction in [0, 1]; values in (1, 100] are read as percentages",
    )
    created_at: datetime | None = None

    @field_validator("confidence_score")
    @classmethod
    def validate_confidence_score(cls, v: float) -> float:
        return normalize_confidence(v)


class ChargebackPredictionResponse(BaseModel):
    id: UUID
    transaction_id: str
    chargeback_predicted: bool = False
    confidence_score: float = 0.0
    created_at: datetime


class SubscriptionForecastCreate(CreateModel):
    subscription_id: str = Field(..., min_length=1)
    forecasted: bool = True
    forecasted_at: datetime | None = None
    predicted_revenue: Decimal = Field(default=Decimal(0), max_digits=14, decimal_places=2)


class SubscriptionForecastResponse(BaseModel):
    id: UUID
    subscription_id: str
    forecasted: bool = True
    forecasted_at: datetime
    predicted_revenue: float = 0.0
