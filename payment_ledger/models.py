"""Value types shared by the reader, the ledger and the reporter."""
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from payment_ledger import money
from payment_ledger.money import ZERO


class TransactionType(Enum):

    """Transaction types."""

    DEPOSIT = 'deposit'
    WITHDRAWAL = 'withdrawal'
    DISPUTE = 'dispute'
    RESOLVE = 'resolve'
    CHARGEBACK = 'chargeback'

    @property
    def carries_amount(self):
        """Deposits and withdrawals move money and must carry an amount."""
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeState(Enum):

    """Dispute lifecycle of a deposit or withdrawal."""

    UNDISPUTED = 'undisputed'
    DISPUTED = 'disputed'
    RESOLVED = 'resolved'
    CHARGED_BACK = 'charged_back'

    def can_become(self, target):
        """Check whether moving to ``target`` is a legal transition."""
        return target in _DISPUTE_TRANSITIONS[self]


_DISPUTE_TRANSITIONS = {
    DisputeState.UNDISPUTED: frozenset({DisputeState.DISPUTED}),
    DisputeState.DISPUTED: frozenset({DisputeState.RESOLVED, DisputeState.CHARGED_BACK}),
    DisputeState.RESOLVED: frozenset(),
    DisputeState.CHARGED_BACK: frozenset(),
}


@dataclass(frozen=True)
class Transaction:

    """One parsed input record."""

    type: TransactionType
    client_id: int
    id: int
    amount: Optional[Decimal] = None

    def __repr__(self):
        return f'Transaction({self.type.value}, client={self.client_id}, tx={self.id}, amount={self.amount})'


@dataclass
class TransactionRecord:

    """Accepted deposit or withdrawal kept for later disputes."""

    id: int
    client_id: int
    kind: TransactionType
    amount: Decimal
    dispute_state: DisputeState = DisputeState.UNDISPUTED


@dataclass
class Account:

    """Gather client's balance."""

    client_id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    locked: bool = False

    @property
    def total(self):
        """Get total funds."""
        return money.add(self.available, self.held)

    def snapshot(self):
        """Freeze the current balance."""
        return AccountSnapshot(self.client_id, self.available, self.held, self.total, self.locked)


@dataclass(frozen=True)
class AccountSnapshot:

    """Final state of one client account."""

    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool
