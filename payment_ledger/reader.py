"""Read transactions from csv.

Rows are pulled lazily through pandas' chunked reader, so the input is never
loaded whole. Any row that does not fit the expected schema ends the run with
``InputDataError``.
"""
import logging
import re

import numpy
import pandas

from payment_ledger.errors import InputDataError
from payment_ledger.models import Transaction, TransactionType
from payment_ledger.money import parse_money

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('type', 'client', 'tx')
AMOUNT_COLUMN = 'amount'
ID_PATTERN = re.compile(r'[+-]?[0-9]+')


class CsvTransactionsReader:

    """Read raw csv rows, one dict per row."""

    def __init__(self, path, chunk_size=1):
        self._path = path
        self._chunk_size = chunk_size

    def _get_record_from_file(self):
        try:
            reader = pandas.read_csv(
                self._path,
                iterator=True,
                chunksize=self._chunk_size,
                dtype=str,
                na_filter=False,
                skipinitialspace=True,
                engine='python',
            )
        except pandas.errors.EmptyDataError:
            raise InputDataError('input is empty, expected a header row') from None
        except pandas.errors.ParserError as err:
            raise InputDataError(f'malformed csv header: {err}') from None
        except UnicodeDecodeError as err:
            raise InputDataError(f'input is not valid text: {err}') from None

        with reader:
            row_number = 0
            chunks = iter(reader)
            while True:
                try:
                    chunk = next(chunks)
                except StopIteration:
                    break
                except (pandas.errors.ParserError, UnicodeDecodeError) as err:
                    raise InputDataError(f'malformed csv after row {row_number}: {err}') from None
                chunk.columns = _check_columns(chunk.columns)
                for record in chunk.to_dict('records'):
                    row_number += 1
                    yield row_number, record
        logger.info('All transactions read')

    def get(self):
        """Get rows of data."""
        return self._get_record_from_file()


class TransactionsCreator:

    """Create transactions from raw rows."""

    CLIENT_LIMITS = numpy.iinfo(numpy.uint16)
    TX_LIMITS = numpy.iinfo(numpy.uint32)

    def __init__(self, input_reader):
        self._input_reader = input_reader

    def get(self):
        """Get parsed transactions, in input order."""
        for row_number, record in self._input_reader.get():
            try:
                transaction = self.parse(record)
            except ValueError as err:
                raise InputDataError(str(err), row_number) from None
            yield transaction

    def parse(self, record):
        """Turn one raw row into a transaction.

        Raises ``ValueError`` describing the first field that does not parse.
        """
        type_name = _field(record, 'type').lower()
        try:
            transaction_type = TransactionType(type_name)
        except ValueError:
            raise ValueError(f'unknown transaction type {type_name!r}') from None

        client_id = self._parse_id(record, 'client', self.CLIENT_LIMITS)
        transaction_id = self._parse_id(record, 'tx', self.TX_LIMITS)

        amount = None
        if transaction_type.carries_amount:
            amount_text = _field(record, AMOUNT_COLUMN)
            if not amount_text:
                raise ValueError(f'{transaction_type.value} requires an amount')
            amount = parse_money(amount_text)

        return Transaction(transaction_type, client_id, transaction_id, amount)

    @staticmethod
    def _parse_id(record, name, limits):
        text = _field(record, name)
        if not ID_PATTERN.fullmatch(text):
            raise ValueError(f'{name} must be an integer, got {text!r}')
        value = int(text)
        if not limits.min <= value <= limits.max:
            raise ValueError(f'{name} {value} out of range {limits.min}..{limits.max}')
        return value


def _check_columns(columns):
    columns = [str(column).strip() for column in columns]
    missing = [column for column in REQUIRED_COLUMNS if column not in columns]
    if missing:
        raise InputDataError(f'missing columns: {", ".join(missing)}')
    return columns


def _field(record, name):
    value = record.get(name)
    if value is None or pandas.isna(value):
        return ''
    return str(value).strip()
