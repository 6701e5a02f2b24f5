"""Customer repository.

Table: payment_intelligence.customers
"""

from typing import Any

from risk_monitor.persistence.base import BaseRepository, contains_pattern


class CustomerRepository(BaseRepository):
    """Repository for payment_intelligence.customers data access."""

    table = "customers"
    columns = (
        "email",
        "name",
        "phone",
        "currency",
        "country",
        "address_line1",
        "address_line2",
        "city",
        "state",
        "postal_code",
        "delinquent",
        "default_payment_method",
        "balance",
        "tax_info",
        "metadata",
        "invoice_prefix",
        "gateway_customer_ids",
        "created_at",
    )
    json_columns = frozenset({"tax_info", "metadata", "gateway_customer_ids"})

    async def get_by_email(self, email: str) -> dict[str, Any] | None:
        """Customer with exactly this email, if any."""
        return await self._fetch_one("email = :email", {"email": email})

    async def search(self, query: str, limit: int = 20) -> list[dict[str, Any]]:
        """Case-insensitive substring match on email or name."""
        return await self._fetch_many(
            "(email ILIKE :pattern ESCAPE '\\' OR name ILIKE :pattern ESCAPE '\\')",
            {"pattern": contains_pattern(query)},
            limit=limit,
        )
