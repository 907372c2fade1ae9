"""Usage accounting — the shared ledger and model pricing."""

from baton.usage.ledger import UsageLedger
from baton.usage.pricing import PROVIDER_PRICES, calculate_cost

__all__ = [
    "PROVIDER_PRICES",
    "UsageLedger",
    "calculate_cost",
]
