import csv
from decimal import Decimal
from typing import Iterable, TextIO

from models import AMOUNT_PLACES, ClientAccount

SUMMARY_HEADER = ("client", "available", "held", "total", "locked")
_QUANTUM = Decimal(1).scaleb(-AMOUNT_PLACES)


def format_amount(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value.quantize(_QUANTUM):f}"


def write_summary(accounts: Iterable[ClientAccount], stream: TextIO) -> None:
    """Write one CSV row per account, ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(SUMMARY_HEADER)
    for account in sorted(accounts, key=lambda account: account.client_id):
        writer.writerow((
            account.client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ))
