"""
Points Ledger - the single balance shared by earn and spend flows.

The stored balance is the source of truth. Every ledger in the process reads
it fresh under one shared lock, so separate browser sessions and CLI calls
see each other's credits and cannot spend the same points twice.
"""

import threading
from typing import Optional

from .context_store import ContextStore
from ..utils import get_logger

logger = get_logger(__name__)

class PointsLedger:
    """Non-negative points balance with atomic check-and-debit."""

    # One lock for every ledger: they all front the same stored balance
    _lock = threading.RLock()

    def __init__(self, store: ContextStore, initial_balance: Optional[int] = None):
        if initial_balance is None:
            from ..config import get_prep_config
            initial_balance = get_prep_config().initial_points
        self.store = store
        self.initial_balance = max(0, initial_balance)

    def _current(self) -> int:
        stored = self.store.get_points_balance()
        return stored if stored is not None else self.initial_balance

    @property
    def balance(self) -> int:
        with self._lock:
            return self._current()

    def credit(self, amount: int) -> int:
        """Add points and return the new balance."""
        if amount < 0:
            raise ValueError(f"Credit amount must be non-negative, got {amount}")
        with self._lock:
            balance = self._current() + amount
            self.store.set_points_balance(balance)
        logger.info(f"Credited {amount} points", balance=balance)
        return balance

    def debit(self, amount: int) -> bool:
        """
        Remove points if the balance covers them.

        The read, the check and the write happen under the shared lock with
        no suspension point in between, so no other credit or debit in the
        process can interleave.

        Returns:
            True if the balance was debited, False if it was left unchanged
        """
        if amount < 0:
            raise ValueError(f"Debit amount must be non-negative, got {amount}")
        with self._lock:
            current = self._current()
            if current < amount:
                logger.info(f"Declined debit of {amount} points", balance=current)
                return False
            balance = current - amount
            self.store.set_points_balance(balance)
        logger.info(f"Debited {amount} points", balance=balance)
        return True
