"""Payment ledger: applies a transaction log and reports client balances."""

from payment_ledger.errors import InputDataError, PaymentEngineError, TransactionRejected
from payment_ledger.ledger import Ledger
from payment_ledger.models import AccountSnapshot, DisputeState, Transaction, TransactionType

__all__ = [
    'AccountSnapshot',
    'DisputeState',
    'InputDataError',
    'Ledger',
    'PaymentEngineError',
    'Transaction',
    'TransactionRejected',
    'TransactionType',
]
