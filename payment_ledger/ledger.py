"""Account ledger.

The ledger is the only owner of client accounts and of the deposits and
withdrawals that may later be disputed. Records are applied one at a time, in
the order they are given. A record that breaks a rule is logged and dropped
without touching any state, and processing continues with the next record.
"""
import logging
from collections import Counter

from payment_ledger import money
from payment_ledger.errors import TransactionRejected
from payment_ledger.models import Account, DisputeState, TransactionRecord, TransactionType

logger = logging.getLogger(__name__)


class Ledger:

    """Apply transactions to client accounts."""

    def __init__(self):
        self._accounts = {}
        self._transactions = {}
        self._stats = Counter()
        self._handlers = {
            TransactionType.DEPOSIT: self._deposit,
            TransactionType.WITHDRAWAL: self._withdrawal,
            TransactionType.DISPUTE: self._dispute,
            TransactionType.RESOLVE: self._resolve,
            TransactionType.CHARGEBACK: self._chargeback,
        }

    def apply(self, transaction):
        """Apply a single transaction.

        Returns True when the transaction changed the ledger and False when
        it was rejected.
        """
        handler = self._handlers[transaction.type]
        try:
            handler(transaction)
        except TransactionRejected as rejection:
            self._stats['rejected'] += 1
            logger.warning('tx %s, client %s, %s rejected: %s',
                           transaction.id, transaction.client_id, transaction.type.value, rejection.reason)
            return False
        self._stats['accepted'] += 1
        return True

    def apply_all(self, transactions):
        """Apply transactions in order, pulling them one at a time."""
        for transaction in transactions:
            self.apply(transaction)

    def snapshots(self):
        """Yield the balance of every account, in order of creation."""
        for account in self._accounts.values():
            yield account.snapshot()

    def account(self, client_id):
        """Get a snapshot of one account, or None if it does not exist."""
        account = self._accounts.get(client_id)
        return account.snapshot() if account is not None else None

    def dispute_state(self, transaction_id):
        """Get the dispute state of a deposit or withdrawal, or None if unknown."""
        record = self._transactions.get(transaction_id)
        return record.dispute_state if record is not None else None

    @property
    def stats(self):
        """Get counts of accepted and rejected transactions."""
        return {'accepted': self._stats['accepted'], 'rejected': self._stats['rejected']}

    def _deposit(self, transaction):
        account = self._open_account(transaction)
        self._check_new_transaction(transaction)
        available = self._checked(money.add, account.available, transaction.amount)
        self._checked(money.add, available, account.held)
        account.available = available
        self._record(transaction)

    def _withdrawal(self, transaction):
        account = self._open_account(transaction)
        self._check_new_transaction(transaction)
        if account.available < transaction.amount:
            raise TransactionRejected('insufficient funds')
        account.available = self._checked(money.subtract, account.available, transaction.amount)
        self._record(transaction)

    def _dispute(self, transaction):
        record, account = self._disputed_record(transaction, DisputeState.DISPUTED)
        if account.available < record.amount:
            raise TransactionRejected('insufficient available funds to hold')
        available = self._checked(money.subtract, account.available, record.amount)
        held = self._checked(money.add, account.held, record.amount)
        account.available, account.held = available, held
        record.dispute_state = DisputeState.DISPUTED

    def _resolve(self, transaction):
        record, account = self._disputed_record(transaction, DisputeState.RESOLVED)
        held = self._checked(money.subtract, account.held, record.amount)
        available = self._checked(money.add, account.available, record.amount)
        account.available, account.held = available, held
        record.dispute_state = DisputeState.RESOLVED

    def _chargeback(self, transaction):
        record, account = self._disputed_record(transaction, DisputeState.CHARGED_BACK)
        account.held = self._checked(money.subtract, account.held, record.amount)
        account.locked = True
        record.dispute_state = DisputeState.CHARGED_BACK

    def _open_account(self, transaction):
        # Non-positive amounts are rejected before the account exists.
        if transaction.amount is None or transaction.amount <= 0:
            raise TransactionRejected(f'amount must be positive, got {transaction.amount}')
        account = self._accounts.get(transaction.client_id)
        if account is None:
            account = self._accounts[transaction.client_id] = Account(transaction.client_id)
        if account.locked:
            raise TransactionRejected('account is locked')
        return account

    def _check_new_transaction(self, transaction):
        if transaction.id in self._transactions:
            raise TransactionRejected('duplicate transaction id')

    def _record(self, transaction):
        self._transactions[transaction.id] = TransactionRecord(
            id=transaction.id,
            client_id=transaction.client_id,
            kind=transaction.type,
            amount=transaction.amount,
        )

    def _disputed_record(self, transaction, target_state):
        record = self._transactions.get(transaction.id)
        if record is None:
            raise TransactionRejected('transaction not found')
        if record.client_id != transaction.client_id:
            raise TransactionRejected(f'transaction belongs to client {record.client_id}')
        if not record.dispute_state.can_become(target_state):
            raise TransactionRejected(
                f'transaction is {record.dispute_state.value}, cannot become {target_state.value}')
        return record, self._accounts[record.client_id]

    @staticmethod
    def _checked(operation, left, right):
        try:
            return operation(left, right)
        except money.MoneyOverflow as err:
            raise TransactionRejected(f'arithmetic overflow: {err}') from None
