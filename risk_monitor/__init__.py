"""Payment Risk Monitor Service.

This service provides APIs for risk analysts to:
- Browse transactions, customers and subscriptions
- Mark transactions as safe or fraud after manual review
- Read fraud-check results, chargeback predictions and revenue forecasts
- View dashboard aggregates (success rate, fraud rate, MRR/ARR, churn)
"""

__version__ = "0.1.0"
