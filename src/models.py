from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional, Union

# Largest balance an account may carry: 28 significant digits, 4 after the point.
BALANCE_LIMIT = Decimal("999999999999999999999999.9999")
AMOUNT_PLACES = 4


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class ProcessingResult(Enum):
    APPLIED = "applied"
    MALFORMED = "malformed"
    UNKNOWN_ACCOUNT = "unknown_account"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    INVALID_STATE = "invalid_state"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    ACCOUNT_LOCKED = "account_locked"
    OVERFLOW = "overflow"
    DUPLICATE_TRANSACTION = "duplicate_transaction"

    @property
    def is_rejection(self) -> bool:
        """A well-formed record the ledger refused to apply."""
        return self not in (ProcessingResult.APPLIED, ProcessingResult.MALFORMED)


class DisputeState(Enum):
    NONE = "none"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"


@dataclass(frozen=True)
class TransactionRow:
    """
    One input line in its flat external shape, fields already stripped.
    `error` is set when the line itself could not be read as CSV.
    """

    type: str
    client: str
    tx: str
    amount: str = ""
    line_number: Optional[int] = None
    error: str = ""


@dataclass(frozen=True)
class Deposit:
    transaction_type: ClassVar[TransactionType] = TransactionType.DEPOSIT

    client_id: int
    transaction_id: int
    amount: Decimal

    def __repr__(self) -> str:
        return f"Deposit(client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class Withdrawal:
    transaction_type: ClassVar[TransactionType] = TransactionType.WITHDRAWAL

    client_id: int
    transaction_id: int
    amount: Decimal

    def __repr__(self) -> str:
        return f"Withdrawal(client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class Dispute:
    transaction_type: ClassVar[TransactionType] = TransactionType.DISPUTE

    client_id: int
    transaction_id: int

    def __repr__(self) -> str:
        return f"Dispute(client={self.client_id}, tx={self.transaction_id})"


@dataclass(frozen=True)
class Resolve:
    transaction_type: ClassVar[TransactionType] = TransactionType.RESOLVE

    client_id: int
    transaction_id: int

    def __repr__(self) -> str:
        return f"Resolve(client={self.client_id}, tx={self.transaction_id})"


@dataclass(frozen=True)
class Chargeback:
    transaction_type: ClassVar[TransactionType] = TransactionType.CHARGEBACK

    client_id: int
    transaction_id: int

    def __repr__(self) -> str:
        return f"Chargeback(client={self.client_id}, tx={self.transaction_id})"


Transaction = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount

    def lock(self) -> None:
        self.locked = True


@dataclass
class DepositRecord:
    """What the ledger remembers about an applied deposit, for later disputes."""

    transaction_id: int
    client_id: int
    amount: Decimal
    state: DisputeState = DisputeState.NONE


@dataclass(frozen=True)
class ProcessingReport:
    """Outcome of one input row. `transaction` is None for malformed rows."""

    row: Optional[TransactionRow]
    transaction: Optional[Transaction]
    result: ProcessingResult
    detail: str = ""


@dataclass
class ProcessingStats:
    """Counters for tracking processing statistics."""

    applied: int = 0
    rejected: int = 0
    malformed: int = 0
    rejections_by_reason: Counter = field(default_factory=Counter)

    def record(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.APPLIED:
            self.applied += 1
        elif result == ProcessingResult.MALFORMED:
            self.malformed += 1
        else:
            self.rejected += 1
            self.rejections_by_reason[result] += 1

    @property
    def total(self) -> int:
        return self.applied + self.rejected + self.malformed

    def __str__(self) -> str:
        return f"Processed: {self.total}, Applied: {self.applied}, Rejected: {self.rejected}, Malformed: {self.malformed}"
