"""UsageLedger — shared accounting for a whole call tree.

One ledger is threaded by reference through a top-level run and every delegated
sub-run. Counters only grow; integer counters saturate at `limit` instead of
wrapping.
"""

import logging
import sys
import threading
import warnings

from baton.errors import LedgerClosed, LedgerOverflow
from baton.types import UsageSnapshot

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = sys.maxsize


class UsageLedger:
    """Thread-safe, monotonic usage counters."""

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        """Initialize an empty ledger.

        Args:
            limit: Saturation ceiling for integer counters

        Raises:
            ValueError: If limit is not positive
        """
        if limit <= 0:
            raise ValueError("limit must be positive")

        self.limit = limit
        self._lock = threading.Lock()
        self._requests_issued = 0
        self._units_consumed = 0
        self._cost_usd = 0.0
        self._saturated = False
        self._closed = False

    def record(self, units: int, *, requests: int = 0, cost_usd: float = 0.0) -> None:
        """Add usage to the ledger.

        Args:
            units: Resource units consumed (tokens)
            requests: Model requests issued
            cost_usd: Cost of the consumed units

        Raises:
            ValueError: If any amount is negative
            LedgerClosed: If the ledger was closed by its owning run
        """
        if units < 0 or requests < 0 or cost_usd < 0:
            raise ValueError("usage amounts must be non-negative")

        with self._lock:
            if self._closed:
                raise LedgerClosed("ledger is closed; its run has already finished")

            self._requests_issued = self._saturating_add(self._requests_issued, requests)
            self._units_consumed = self._saturating_add(self._units_consumed, units)
            self._cost_usd += cost_usd

    def _saturating_add(self, current: int, amount: int) -> int:
        # Caller holds the lock
        if amount > self.limit - current:
            if not self._saturated:
                self._saturated = True
                logger.warning(
                    "Usage ledger saturated at %d; totals are now a lower bound", self.limit
                )
                warnings.warn(
                    f"usage ledger saturated at {self.limit}", LedgerOverflow, stacklevel=4
                )
            return self.limit
        return current + amount

    def snapshot(self) -> UsageSnapshot:
        """Return an immutable copy of the current totals."""
        with self._lock:
            return UsageSnapshot(
                requests_issued=self._requests_issued,
                units_consumed=self._units_consumed,
                cost_usd=self._cost_usd,
                saturated=self._saturated,
            )

    def close(self) -> None:
        """Refuse further records. Totals stay readable."""
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def saturated(self) -> bool:
        return self._saturated

    def __repr__(self) -> str:
        return (
            f"UsageLedger(requests_issued={self._requests_issued}, "
            f"units_consumed={self._units_consumed}, saturated={self._saturated})"
        )
