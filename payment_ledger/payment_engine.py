""" Payment ledger engine.

Writing to stdout
Example::
python -m payment_ledger <NAME>.csv

Writing to file
Example::
python -m payment_ledger <NAME>.csv > <NAME>.csv

The log level is read from ``PAYMENT_ENGINE_LOG_LEVEL`` (default WARNING);
log lines go to stderr so that stdout carries only the report.
"""
import logging
import os
import sys

from payment_ledger.errors import InputDataError
from payment_ledger.ledger import Ledger
from payment_ledger.reader import CsvTransactionsReader, TransactionsCreator
from payment_ledger.reporter import ClientsBalancesReporter, Reporter

LOG_FORMAT = '%(levelname)s:%(message)s'
LOG_LEVEL_VARIABLE = 'PAYMENT_ENGINE_LOG_LEVEL'
DEFAULT_LOG_LEVEL = 'WARNING'

EXIT_FAILURE = 1
EXIT_USAGE = 2

logger = logging.getLogger(__name__)


class CmdParser:

    """Parse command line execution arguments."""

    def __init__(self, argv=None, environ=None):
        self._data = sys.argv[1:] if argv is None else argv
        self._environ = os.environ if environ is None else environ
        self._input_file = ''
        self._update()

    def _update(self):
        if self._data:
            self._input_file = self._data[0]

    @property
    def input_file(self):
        """Get input file name."""
        return self._input_file

    @property
    def log_level(self):
        """Get the configured logging level, falling back to WARNING."""
        name = self._environ.get(LOG_LEVEL_VARIABLE, DEFAULT_LOG_LEVEL).strip().upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            return logging.getLevelName(DEFAULT_LOG_LEVEL)
        return level


class PaymentsEngine:

    """Handle payments."""

    def __init__(self, input_data, output, ledger=None):
        self._transactions_parser = TransactionsCreator(input_data)
        self._ledger = Ledger() if ledger is None else ledger
        self._output = output

    def run(self):
        """Handle transactions, then report every client's balance."""
        self._ledger.apply_all(self._transactions_parser.get())

        stats = self._ledger.stats
        logger.info('Transactions processed: %d accepted, %d rejected', stats['accepted'], stats['rejected'])

        balances_reporter = ClientsBalancesReporter(self._ledger.snapshots())

        self._output.write(balances_reporter.get_header())

        for balance in balances_reporter.get_balances():
            self._output.write(balance)


def main():
    """Run payment engine."""

    parser = CmdParser()
    logging.basicConfig(format=LOG_FORMAT, level=parser.log_level)

    if not parser.input_file:
        print('Usage: python -m payment_ledger <transactions.csv>', file=sys.stderr)
        sys.exit(EXIT_USAGE)

    bank = PaymentsEngine(CsvTransactionsReader(parser.input_file), Reporter())
    try:
        bank.run()
    except InputDataError as err:
        logger.error('Invalid input %s: %s', parser.input_file, err)
        sys.exit(EXIT_FAILURE)
    except OSError as err:
        logger.error('Could not read %s: %s', parser.input_file, err)
        sys.exit(EXIT_FAILURE)


if __name__ == '__main__':
    main()
