import sys
import os
from io import StringIO

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from csv_reader import read_transactions
from exceptions import InputFormatError
from models import TransactionRow


class TestReadTransactions:
    def test_trims_whitespace(self):
        source = StringIO("type, client, tx, amount\ndeposit, 1, 1, 1.0\n")

        rows = list(read_transactions(source))

        assert rows == [TransactionRow("deposit", "1", "1", "1.0", line_number=2)]

    def test_missing_amount_column(self):
        source = StringIO("type,client,tx,amount\ndispute,1,1\nresolve,1,1,\n")

        rows = list(read_transactions(source))

        assert [row.amount for row in rows] == ["", ""]
        assert [row.type for row in rows] == ["dispute", "resolve"]

    def test_blank_lines_skipped(self):
        source = StringIO("type,client,tx,amount\n\ndeposit,1,1,1\n\n\nwithdrawal,1,2,1\n")

        rows = list(read_transactions(source))

        assert [row.tx for row in rows] == ["1", "2"]
        assert [row.line_number for row in rows] == [3, 6]

    def test_short_rows_give_empty_fields(self):
        rows = list(read_transactions(StringIO("type,client,tx,amount\ndeposit\n")))

        assert rows == [TransactionRow("deposit", "", "", "", line_number=2)]

    def test_extra_columns_ignored(self):
        rows = list(read_transactions(StringIO("type,client,tx,amount\ndeposit,1,1,2,junk\n")))

        assert rows == [TransactionRow("deposit", "1", "1", "2", line_number=2)]

    def test_column_order_and_case_from_header(self):
        rows = list(read_transactions(StringIO("Client, TX, Type, Amount\n2, 3, deposit, 4\n")))

        assert rows == [TransactionRow("deposit", "2", "3", "4", line_number=2)]

    def test_header_without_amount_column(self):
        rows = list(read_transactions(StringIO("type,client,tx\ndispute,1,1\n")))

        assert rows[0].amount == ""

    def test_missing_required_column(self):
        with pytest.raises(InputFormatError, match="tx"):
            list(read_transactions(StringIO("type,client,amount\ndeposit,1,1\n")))

    def test_empty_input(self):
        assert list(read_transactions(StringIO(""))) == []

    def test_blank_lines_before_header(self):
        source = StringIO("\n  \ntype,client,tx,amount\ndeposit,1,1,1\n")

        rows = list(read_transactions(source))

        assert rows == [TransactionRow("deposit", "1", "1", "1", line_number=4)]

    def test_only_blank_lines(self):
        assert list(read_transactions(StringIO("\n\n"))) == []

    def test_oversized_field_becomes_error_row(self):
        source = StringIO("type,client,tx,amount\ndeposit,1,1," + "1" * 200000 + "\ndeposit,1,2,1\n")

        rows = list(read_transactions(source))

        assert len(rows) == 2
        assert rows[0].line_number == 2
        assert "unreadable CSV row" in rows[0].error
        assert rows[1] == TransactionRow("deposit", "1", "2", "1", line_number=3)
