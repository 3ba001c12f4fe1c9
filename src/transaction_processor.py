import logging
from decimal import Decimal
from typing import Optional

from account_registry import AccountRegistry
from dispute_tracker import DisputeTracker
from exceptions import InvariantViolationError
from models import (
    BALANCE_LIMIT,
    Chargeback,
    ClientAccount,
    Deposit,
    DepositRecord,
    Dispute,
    DisputeState,
    ProcessingResult,
    Resolve,
    Transaction,
    Withdrawal,
)

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies validated transactions to the account registry and dispute tracker.
    Returns ProcessingResult to indicate whether the transaction was applied or why it was rejected.
    A rejected transaction leaves every account and dispute record untouched.
    """

    def __init__(self, accounts: AccountRegistry, disputes: DisputeTracker):
        self._accounts = accounts
        self._disputes = disputes

    @property
    def accounts(self) -> AccountRegistry:
        return self._accounts

    @property
    def disputes(self) -> DisputeTracker:
        return self._disputes

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            APPLIED: Processed successfully
            Any other member: the rejection reason; state is unchanged

        Raises:
            InvariantViolationError: an applied transaction left an account inconsistent
        """
        total_before = self._current_total(transaction.client_id)

        match transaction:
            case Deposit():
                result = self._handle_deposit(transaction)
            case Withdrawal():
                result = self._handle_withdrawal(transaction)
            case Dispute():
                result = self._handle_dispute(transaction)
            case Resolve():
                result = self._handle_resolve(transaction)
            case Chargeback():
                result = self._handle_chargeback(transaction)
            case _:
                raise TypeError(f"Not a transaction: {transaction!r}")

        if result == ProcessingResult.APPLIED:
            expected_total = total_before + self._total_change(transaction)
            self._check_invariants(self._accounts.get(transaction.client_id), transaction, expected_total)
        return result

    def _current_total(self, client_id: int) -> Decimal:
        account = self._accounts.get(client_id)
        return account.total if account is not None else Decimal("0")

    def _total_change(self, transaction: Transaction) -> Decimal:
        """How far an applied transaction must move its account's total."""
        match transaction:
            case Deposit():
                return transaction.amount
            case Withdrawal():
                return -transaction.amount
            case Chargeback():
                return -self._disputes.lookup(transaction.transaction_id).amount
            case _:
                # Disputes and resolves only move funds between available and held.
                return Decimal("0")

    def _handle_deposit(self, transaction: Deposit) -> ProcessingResult:
        account = self._accounts.get(transaction.client_id)
        if account is not None and account.locked:
            logger.info(f"Deposit tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.ACCOUNT_LOCKED

        if self._disputes.is_known(transaction.transaction_id):
            logger.info(f"Deposit tx {transaction.transaction_id}: transaction id already used")
            return ProcessingResult.DUPLICATE_TRANSACTION

        if account is not None:
            if (account.available + transaction.amount > BALANCE_LIMIT
                    or account.total + transaction.amount > BALANCE_LIMIT):
                logger.info(f"Deposit tx {transaction.transaction_id}: amount {transaction.amount} would overflow account {account.client_id}")
                return ProcessingResult.OVERFLOW
        elif transaction.amount > BALANCE_LIMIT:
            logger.info(f"Deposit tx {transaction.transaction_id}: amount {transaction.amount} exceeds the balance limit")
            return ProcessingResult.OVERFLOW

        # Only an applied deposit opens an account.
        account = self._accounts.get_or_create(transaction.client_id)
        account.credit(transaction.amount)
        self._disputes.record_deposit(transaction.transaction_id, transaction.client_id, transaction.amount)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, transaction: Withdrawal) -> ProcessingResult:
        account = self._accounts.get(transaction.client_id)
        if account is None:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: client {transaction.client_id} has no account")
            return ProcessingResult.UNKNOWN_ACCOUNT

        if account.locked:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.ACCOUNT_LOCKED

        if self._disputes.is_known(transaction.transaction_id):
            logger.info(f"Withdrawal tx {transaction.transaction_id}: transaction id already used")
            return ProcessingResult.DUPLICATE_TRANSACTION

        if account.available < transaction.amount:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: insufficient funds (available {account.available}, requested {transaction.amount})")
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.debit(transaction.amount)
        self._disputes.record_withdrawal(transaction.transaction_id)
        return ProcessingResult.APPLIED

    def _handle_dispute(self, transaction: Dispute) -> ProcessingResult:
        original = self._find_deposit(transaction)
        if original is None:
            return ProcessingResult.UNKNOWN_TRANSACTION

        if original.state in (DisputeState.DISPUTED, DisputeState.CHARGED_BACK):
            logger.info(f"Dispute for tx {transaction.transaction_id}: deposit is {original.state.value}")
            return ProcessingResult.INVALID_STATE

        account = self._owning_account(original)
        if account.locked:
            logger.info(f"Dispute for tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.ACCOUNT_LOCKED

        # Funds already withdrawn cannot be held again.
        if original.amount > account.available:
            logger.info(f"Dispute for tx {transaction.transaction_id}: amount {original.amount} exceeds available {account.available}")
            return ProcessingResult.INVALID_STATE

        account.hold(original.amount)
        self._disputes.set_state(original.transaction_id, DisputeState.DISPUTED)
        return ProcessingResult.APPLIED

    def _handle_resolve(self, transaction: Resolve) -> ProcessingResult:
        original = self._find_disputed_deposit(transaction)
        if isinstance(original, ProcessingResult):
            return original

        account = self._owning_account(original)
        if account.locked:
            logger.info(f"Resolve for tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.ACCOUNT_LOCKED

        account.release_hold(original.amount)
        self._disputes.set_state(original.transaction_id, DisputeState.RESOLVED)
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, transaction: Chargeback) -> ProcessingResult:
        original = self._find_disputed_deposit(transaction)
        if isinstance(original, ProcessingResult):
            return original

        account = self._owning_account(original)
        if account.locked:
            logger.info(f"Chargeback for tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.ACCOUNT_LOCKED

        account.remove_held(original.amount)
        account.lock()
        self._disputes.set_state(original.transaction_id, DisputeState.CHARGED_BACK)
        logger.info(f"Chargeback for tx {transaction.transaction_id}: account {account.client_id} locked")
        return ProcessingResult.APPLIED

    def _find_deposit(self, transaction: Transaction) -> Optional[DepositRecord]:
        kind = transaction.transaction_type.value.capitalize()
        original = self._disputes.lookup(transaction.transaction_id)

        if original is None:
            logger.info(f"{kind} for tx {transaction.transaction_id}: no such deposit")
            return None

        if original.client_id != transaction.client_id:
            logger.info(f"{kind} for tx {transaction.transaction_id}: client mismatch (expected {original.client_id}, got {transaction.client_id})")
            return None

        return original

    def _find_disputed_deposit(self, transaction: Transaction):
        """Deposit record for a resolve/chargeback, or the rejection to report."""
        original = self._find_deposit(transaction)
        if original is None:
            return ProcessingResult.UNKNOWN_TRANSACTION

        if original.state != DisputeState.DISPUTED:
            kind = transaction.transaction_type.value.capitalize()
            logger.info(f"{kind} for tx {transaction.transaction_id}: deposit is {original.state.value}, not disputed")
            return ProcessingResult.INVALID_STATE

        return original

    def _owning_account(self, original: DepositRecord) -> ClientAccount:
        account = self._accounts.get(original.client_id)
        if account is None:
            raise InvariantViolationError(f"Deposit tx {original.transaction_id} refers to missing account {original.client_id}")
        return account

    @staticmethod
    def _check_invariants(account: Optional[ClientAccount], transaction: Transaction, expected_total: Decimal) -> None:
        if account is None:
            raise InvariantViolationError(f"{transaction!r} was applied but account {transaction.client_id} does not exist")
        if account.available < 0 or account.held < 0:
            raise InvariantViolationError(f"{transaction!r} left account {account.client_id} negative (available {account.available}, held {account.held})")
        if account.total != expected_total:
            raise InvariantViolationError(f"{transaction!r} left account {account.client_id} with total {account.total}, expected {expected_total}")
        if account.total > BALANCE_LIMIT:
            raise InvariantViolationError(f"{transaction!r} pushed account {account.client_id} past the balance limit")
