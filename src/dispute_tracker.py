from decimal import Decimal
from typing import Dict, Optional, Set

from models import DepositRecord, DisputeState


class DisputeTracker:
    """
    Transaction history for dispute lookups.
    Keeps every applied deposit (client, amount, dispute state) for the whole run,
    plus the ids of applied withdrawals so that ids cannot be reused.
    """

    def __init__(self):
        self._deposits: Dict[int, DepositRecord] = {}
        self._withdrawal_ids: Set[int] = set()

    def record_deposit(self, transaction_id: int, client_id: int, amount: Decimal) -> DepositRecord:
        """Store deposit for future dispute lookups."""
        record = DepositRecord(transaction_id=transaction_id, client_id=client_id, amount=amount)
        self._deposits[transaction_id] = record
        return record

    def record_withdrawal(self, transaction_id: int) -> None:
        self._withdrawal_ids.add(transaction_id)

    def lookup(self, transaction_id: int) -> Optional[DepositRecord]:
        """Retrieve stored deposit by ID."""
        return self._deposits.get(transaction_id)

    def set_state(self, transaction_id: int, state: DisputeState) -> None:
        """Move a stored deposit to a new dispute state. The deposit must exist."""
        self._deposits[transaction_id].state = state

    def is_known(self, transaction_id: int) -> bool:
        """Check whether a deposit or withdrawal already used this ID."""
        return transaction_id in self._deposits or transaction_id in self._withdrawal_ids

    def __len__(self) -> int:
        return len(self._deposits)
