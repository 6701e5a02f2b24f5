"""Shared schema bases."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# ISO 4217 codes the payment gateways settle in
SUPPORTED_CURRENCIES = frozenset({"USD", "EUR", "GBP", "JPY", "CAD", "AUD", "CHF", "CNY", "INR"})


class CamelModel(BaseModel):
    """Model serialized with camelCase keys (envelopes and stats)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateModel(BaseModel):
    """Request body for a create. Fields outside the schema are rejected."""

    model_config = ConfigDict(extra="forbid")


def normalize_currency(value: str | None) -> str | None:
    """Uppercase an ISO 4217 code and reject codes outside SUPPORTED_CURRENCIES."""
    if value is None:
        return None
    code = value.upper()
    if code not in SUPPORTED_CURRENCIES:
        raise ValueError(f"Unsupported currency code: {value}")
    return code
