"""Render account balances as csv text."""
from payment_ledger.money import format_money

HEADER = ('client', 'available', 'held', 'total', 'locked')


class ClientsBalancesReporter:

    """Report all clients' balances."""

    def __init__(self, snapshots):
        self._snapshots = snapshots

    @staticmethod
    def get_header():
        """Get fields names."""
        return ','.join(HEADER)

    def get_balances(self):
        """Get all clients' balances."""
        for snapshot in self._snapshots:
            yield format_balance(snapshot)


def format_balance(snapshot):
    """Format one account snapshot as a csv line."""
    locked = 'true' if snapshot.locked else 'false'
    return (f'{snapshot.client_id},{format_money(snapshot.available)},'
            f'{format_money(snapshot.held)},{format_money(snapshot.total)},{locked}')


class Reporter:

    """Report data provided."""

    @staticmethod
    def write(data):
        """Write data provided."""
        print(data, flush=True)
