from decimal import Decimal
from io import StringIO

import pytest

from payment_ledger.errors import InputDataError
from payment_ledger.models import Transaction, TransactionType
from payment_ledger.reader import CsvTransactionsReader, TransactionsCreator


def read_all(csv_text, chunk_size=1):
    creator = TransactionsCreator(CsvTransactionsReader(StringIO(csv_text), chunk_size=chunk_size))
    return list(creator.get())


class TestTransactionsCreator:

    def test_parses_all_types(self):
        transactions = read_all("type,client,tx,amount\n"
                                "deposit,1,1,1.5\n"
                                "withdrawal,1,2,0.5\n"
                                "dispute,1,1,\n"
                                "resolve,1,1,\n"
                                "chargeback,1,1,\n")

        assert transactions == [
            Transaction(TransactionType.DEPOSIT, 1, 1, Decimal('1.5')),
            Transaction(TransactionType.WITHDRAWAL, 1, 2, Decimal('0.5')),
            Transaction(TransactionType.DISPUTE, 1, 1),
            Transaction(TransactionType.RESOLVE, 1, 1),
            Transaction(TransactionType.CHARGEBACK, 1, 1),
        ]

    def test_ignores_amount_on_dispute_rows(self):
        assert read_all("type,client,tx,amount\ndispute,1,1,9.99\n") == [
            Transaction(TransactionType.DISPUTE, 1, 1)]

    def test_dispute_rows_may_omit_trailing_comma(self):
        assert read_all("type,client,tx,amount\ndeposit,2,7,3\ndispute,2,7\n") == [
            Transaction(TransactionType.DEPOSIT, 2, 7, Decimal('3')),
            Transaction(TransactionType.DISPUTE, 2, 7),
        ]

    def test_amount_column_is_optional_without_deposits(self):
        assert read_all("type,client,tx\nresolve,3,4\n") == [Transaction(TransactionType.RESOLVE, 3, 4)]

    def test_id_limits(self):
        transactions = read_all("type,client,tx,amount\n"
                                "deposit,0,0,1\n"
                                "deposit,65535,4294967295,1\n")

        assert [(t.client_id, t.id) for t in transactions] == [(0, 0), (65535, 4294967295)]

    def test_larger_chunks_keep_order(self):
        rows = ''.join(f"deposit,{n % 3},{n},{n}.5\n" for n in range(1, 11))
        transactions = read_all("type,client,tx,amount\n" + rows, chunk_size=4)

        assert [t.id for t in transactions] == list(range(1, 11))

    def test_reads_lazily(self):
        creator = TransactionsCreator(CsvTransactionsReader(StringIO("type,client,tx,amount\n"
                                                                     "deposit,1,1,1\n"
                                                                     "bogus,1,2,1\n")))
        transactions = creator.get()

        assert next(transactions) == Transaction(TransactionType.DEPOSIT, 1, 1, Decimal('1'))
        with pytest.raises(InputDataError):
            next(transactions)


class TestFatalInput:

    @pytest.mark.parametrize('row, message', [
        ('transfer,1,1,1.0', 'unknown transaction type'),
        ('deposit,x,1,1.0', 'client must be an integer'),
        ('deposit,1,1.5,1.0', 'tx must be an integer'),
        ('deposit,65536,1,1.0', 'client 65536 out of range'),
        ('deposit,-1,1,1.0', 'client -1 out of range'),
        ('deposit,1,4294967296,1.0', 'tx 4294967296 out of range'),
        ('deposit,1,1,', 'deposit requires an amount'),
        ('withdrawal,1,1,', 'withdrawal requires an amount'),
        ('deposit,1,1,ten', 'invalid amount'),
        ('deposit,1_0,1,1.0', 'client must be an integer'),
        ('deposit,1,2_0,1.0', 'tx must be an integer'),
        ('deposit,1,1,1_000', 'invalid amount'),
        ('deposit,1,1,0x10', 'invalid amount'),
    ])
    def test_schema_violations_are_fatal(self, row, message):
        with pytest.raises(InputDataError, match=message) as excinfo:
            read_all("type,client,tx,amount\ndeposit,1,100,1\n" + row + "\n")

        assert excinfo.value.row_number == 2

    @pytest.mark.parametrize('chunk_size', [1, 8])
    def test_extra_fields_are_fatal(self, chunk_size):
        with pytest.raises(InputDataError, match='malformed csv'):
            read_all("type,client,tx,amount\ndeposit,1,1,1.0\ndeposit,1,2,1.0,extra\n", chunk_size=chunk_size)

    def test_empty_input_is_fatal(self):
        with pytest.raises(InputDataError, match='empty'):
            read_all("")

    def test_missing_columns_are_fatal(self):
        with pytest.raises(InputDataError, match='missing columns: tx'):
            read_all("type,client,amount\ndeposit,1,1.0\n")
