import argparse
import logging
import sys
from typing import List, Optional

from config import EngineConfig
from exceptions import InputFormatError, InvariantViolationError
from logging_config import setup_logging
from payments_engine import PaymentsEngine
from summary import write_summary

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payments-ledger",
        description="Apply a CSV stream of transactions and print the final client balances",
    )
    parser.add_argument(
        "file",
        metavar="FILE",
        help="Input CSV file with columns: type, client, tx, amount",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Verbose output on stderr (repeat for more: -v errors, -vv warnings, -vvv info, -vvvv debug)",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print processing statistics to stderr when done",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    config = EngineConfig.from_args(build_parser().parse_args(argv))
    setup_logging(config.log_level)

    if not config.input_file.is_file():
        print(f"Input file not found: {config.input_file}", file=sys.stderr)
        return 1

    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(config.input_file)
    except InputFormatError as e:
        print(f"Cannot read {config.input_file}: {e}", file=sys.stderr)
        return 1
    except InvariantViolationError:
        logger.critical("Ledger invariant violated, aborting", exc_info=True)
        return 2

    write_summary(accounts.values(), sys.stdout)

    if config.show_stats:
        print(engine.stats, file=sys.stderr)
        for reason, count in sorted(engine.stats.rejections_by_reason.items(), key=lambda item: item[0].value):
            print(f"  {reason.value}: {count}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
