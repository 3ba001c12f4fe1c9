import csv
import logging
from typing import Dict, Iterator, Optional, TextIO

from exceptions import InputFormatError
from models import TransactionRow

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("type", "client", "tx")
EXTRA_COLUMNS_KEY = "__extra__"


def read_transactions(source: TextIO) -> Iterator[TransactionRow]:
    """
    Read CSV rows of `type, client, tx, amount` into flat TransactionRows.

    Whitespace around headers and values is ignored, the trailing amount column
    may be omitted and blank lines are skipped, before the header too. Values
    are not validated here. A line the CSV parser rejects (e.g. an oversized
    field) becomes a row carrying the parser error, and reading continues.

    Raises:
        InputFormatError: if the header cannot be read or lacks a required column.
    """
    reader = csv.DictReader(source, restkey=EXTRA_COLUMNS_KEY)
    fieldnames = _read_header(reader)
    if fieldnames is None:
        return

    header = [name.strip().lower() for name in fieldnames]
    missing = [column for column in REQUIRED_COLUMNS if column not in header]
    if missing:
        raise InputFormatError(f"CSV header is missing column(s): {', '.join(missing)}")
    reader.fieldnames = header

    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            # DictReader only updates line_num after a successful read.
            line_number = reader.reader.line_num
            logger.debug(f"Line {line_number}: csv parser error: {e}")
            yield TransactionRow("", "", "", line_number=line_number, error=f"unreadable CSV row: {e}")
            continue
        yield _to_row(row, reader.line_num)


def _read_header(reader: csv.DictReader):
    try:
        fieldnames = reader.fieldnames
        while fieldnames is not None and not any(name.strip() for name in fieldnames):
            reader.fieldnames = None
            fieldnames = reader.fieldnames
    except csv.Error as e:
        raise InputFormatError(f"CSV header is unreadable: {e}") from e
    return fieldnames


def _to_row(row: Dict[str, Optional[str]], line_number: int) -> TransactionRow:
    extra = row.pop(EXTRA_COLUMNS_KEY, None)
    if extra and any(value.strip() for value in extra):
        logger.debug(f"Line {line_number}: ignoring extra columns {extra}")

    normalized = {key: (value or "").strip() for key, value in row.items()}
    return TransactionRow(
        type=normalized["type"],
        client=normalized["client"],
        tx=normalized["tx"],
        amount=normalized.get("amount", ""),
        line_number=line_number,
    )
