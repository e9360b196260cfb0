"""Exceptions raised by the payment ledger.

Two tiers exist. ``TransactionRejected`` marks a single record that breaks a
ledger rule; the ledger discards the record and carries on. ``InputDataError``
marks an input stream that cannot be trusted any more and ends the run.
"""


class PaymentEngineError(Exception):

    """Base class for payment ledger errors."""


class TransactionRejected(PaymentEngineError):

    """A transaction broke a ledger rule and was discarded."""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


class InputDataError(PaymentEngineError):

    """Input could not be read or parsed."""

    def __init__(self, message, row_number=None):
        if row_number is not None:
            message = f'row {row_number}: {message}'
        super().__init__(message)
        self.row_number = row_number
