"""Fraud check result schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from risk_monitor.schemas.common import CreateModel


class FraudResultCreate(CreateModel):
    """Schema for one append-only fraud check record."""

    transaction_id: str = Field(..., min_length=1)
    email: EmailStr
    fraud_detected: bool = False
    confidence: float = Field(default=0.0, ge=0, le=1)
    reasons: list[str] = Field(default_factory=list)
    timestamp: datetime | None = None


class FraudResultResponse(BaseModel):
    id: UUID
    transaction_id: str
    email: str
    fraud_detected: bool = False
    confidence: float = 0.0
    reasons: list[str] = Field(default_factory=list)
    timestamp: datetime
