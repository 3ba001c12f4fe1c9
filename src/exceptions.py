"""Exception hierarchy for the payments ledger."""


class LedgerError(Exception):
    """Base exception for all ledger errors."""


class MalformedRecordError(LedgerError):
    """Raised when an input row cannot become a valid transaction."""


class InputFormatError(LedgerError):
    """Raised when the input as a whole cannot be read (e.g. bad header)."""


class InvariantViolationError(LedgerError):
    """
    Raised when an account breaks a ledger invariant after a transaction.
    This is a bug in the engine, not bad input, and must halt processing.
    """
