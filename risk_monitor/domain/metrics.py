"""Dashboard aggregation formulas.

Values here are never rounded. Rounding to two places happens where a
value is handed to a caller (see ``round_half_away``).

Subscription revenue is normalized to a monthly equivalent per active
subscription from ``price_amount * quantity``:

    month      x 1
    year       / 12
    week       x 4.33
    otherwise  x 30   (any other interval is treated as a daily price)

    mrr = sum(monthly equivalents), arr = mrr * 12
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

WEEKS_PER_MONTH = Decimal("4.33")
DAYS_PER_MONTH = Decimal("30")
MONTHS_PER_YEAR = Decimal("12")

SUCCEEDED = "succeeded"
FAILED = "failed"
ACTIVE = "active"
CANCELED = "canceled"

Number = Decimal | float | int


def _decimal(value: Number | None) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    # str() keeps binary float artefacts out of the result
    return Decimal(str(value))


def percentage(part: Number, whole: Number) -> Decimal:
    """``part / whole * 100``, or 0 when ``whole`` is 0."""
    whole_d = _decimal(whole)
    if whole_d == 0:
        return Decimal(0)
    return _decimal(part) / whole_d * 100


def round_half_away(value: Number | None, places: int = 2) -> float:
    """Round half away from zero, e.g. 2.345 -> 2.35 and -2.345 -> -2.35."""
    quantum = Decimal(1).scaleb(-places)
    return float(_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def monthly_equivalent(amount: Number, interval: str | None) -> Decimal:
    """Normalize a per-interval charge (``price_amount * quantity``) to a month."""
    amount_d = _decimal(amount)
    if interval == "month":
        return amount_d
    if interval == "year":
        return amount_d / MONTHS_PER_YEAR
    if interval == "week":
        return amount_d * WEEKS_PER_MONTH
    return amount_d * DAYS_PER_MONTH


@dataclass(frozen=True)
class TransactionStats:
    total_transactions: int = 0
    total_amount: Decimal = Decimal(0)
    successful_transactions: int = 0
    failed_transactions: int = 0
    refunded_transactions: int = 0
    disputed_transactions: int = 0

    @property
    def average_amount(self) -> Decimal:
        if self.total_transactions == 0:
            return Decimal(0)
        return _decimal(self.total_amount) / self.total_transactions

    @property
    def success_rate(self) -> Decimal:
        return percentage(self.successful_transactions, self.total_transactions)

    @property
    def refund_rate(self) -> Decimal:
        return percentage(self.refunded_transactions, self.total_transactions)

    @property
    def dispute_rate(self) -> Decimal:
        return percentage(self.disputed_transactions, self.total_transactions)


@dataclass(frozen=True)
class SubscriptionStats:
    total_subscriptions: int = 0
    active_subscriptions: int = 0
    canceled_subscriptions: int = 0
    # subscriptions with both trial_start and trial_end set
    trial_subscriptions: int = 0
    total_revenue: Decimal = Decimal(0)
    # interval -> sum(price_amount * quantity) over active subscriptions
    active_amounts_by_interval: dict[str | None, Decimal] = field(default_factory=dict)

    @property
    def mrr(self) -> Decimal:
        return sum(
            (
                monthly_equivalent(amount, interval)
                for interval, amount in self.active_amounts_by_interval.items()
            ),
            Decimal(0),
        )

    @property
    def arr(self) -> Decimal:
        return self.mrr * MONTHS_PER_YEAR

    @property
    def churn_rate(self) -> Decimal:
        return percentage(self.canceled_subscriptions, self.total_subscriptions)

    @property
    def active_rate(self) -> Decimal:
        return percentage(self.active_subscriptions, self.total_subscriptions)

    @property
    def average_revenue(self) -> Decimal:
        if self.total_subscriptions == 0:
            return Decimal(0)
        return _decimal(self.total_revenue) / self.total_subscriptions


@dataclass(frozen=True)
class FraudStats:
    total_checks: int = 0
    fraud_detected: int = 0
    average_confidence: Decimal = Decimal(0)

    @property
    def fraud_rate(self) -> Decimal:
        return percentage(self.fraud_detected, self.total_checks)


@dataclass(frozen=True)
class CustomerMetrics:
    """One customer's activity: the collection aggregates restricted to their email."""

    transactions: TransactionStats = field(default_factory=TransactionStats)
    subscriptions: SubscriptionStats = field(default_factory=SubscriptionStats)
    fraud: FraudStats = field(default_factory=FraudStats)
