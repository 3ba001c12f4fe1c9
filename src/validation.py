import re
from decimal import Decimal

from exceptions import MalformedRecordError
from models import (
    AMOUNT_PLACES,
    Chargeback,
    Deposit,
    Dispute,
    Resolve,
    Transaction,
    TransactionRow,
    TransactionType,
    Withdrawal,
)

_AMOUNT_PATTERN = re.compile(r"\+?[0-9]+(?:\.(?P<fraction>[0-9]+))?")


def parse_transaction(row: TransactionRow) -> Transaction:
    """
    Turn a flat input row into a typed transaction.

    Deposits and withdrawals must carry a non-negative fixed-point amount
    (digits, optionally a point and at most four fractional digits); disputes,
    resolves and chargebacks must not carry one at all.

    Raises:
        MalformedRecordError: if the row breaks any of these rules, or the
            reader could not parse the line at all.
    """
    if row.error:
        raise MalformedRecordError(row.error)

    transaction_type = _parse_type(row.type)
    client_id = _parse_id("client", row.client)
    transaction_id = _parse_id("tx", row.tx)

    match transaction_type:
        case TransactionType.DEPOSIT:
            return Deposit(client_id, transaction_id, _parse_amount(row.amount))
        case TransactionType.WITHDRAWAL:
            return Withdrawal(client_id, transaction_id, _parse_amount(row.amount))
        case TransactionType.DISPUTE:
            _ensure_no_amount(transaction_type, row.amount)
            return Dispute(client_id, transaction_id)
        case TransactionType.RESOLVE:
            _ensure_no_amount(transaction_type, row.amount)
            return Resolve(client_id, transaction_id)
        case TransactionType.CHARGEBACK:
            _ensure_no_amount(transaction_type, row.amount)
            return Chargeback(client_id, transaction_id)


def _parse_type(value: str) -> TransactionType:
    try:
        return TransactionType(value.strip().lower())
    except ValueError:
        raise MalformedRecordError(f"unknown transaction type {value!r}") from None


def _parse_id(name: str, value: str) -> int:
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        raise MalformedRecordError(f"{name} must be a non-negative integer, got {value!r}")
    return int(value)


def _parse_amount(value: str) -> Decimal:
    value = value.strip()
    if not value:
        raise MalformedRecordError("amount is required")

    match = _AMOUNT_PATTERN.fullmatch(value)
    if match is None:
        if value.startswith("-"):
            raise MalformedRecordError(f"amount {value!r} is negative")
        raise MalformedRecordError(f"amount {value!r} is not a fixed-point decimal number")
    if len(match.group("fraction") or "") > AMOUNT_PLACES:
        raise MalformedRecordError(f"amount {value!r} has more than {AMOUNT_PLACES} decimal places")
    return Decimal(value)


def _ensure_no_amount(transaction_type: TransactionType, value: str) -> None:
    if value.strip():
        raise MalformedRecordError(f"{transaction_type.value} must not carry an amount, got {value!r}")
