import sys
import os
import logging
from pathlib import Path

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from config import EngineConfig
from logging_config import LOG_FORMAT, setup_logging, verbosity_to_level
from main import build_parser


class TestEngineConfig:
    def test_default_values(self):
        config = EngineConfig(input_file=Path("tx.csv"))

        assert config.verbosity == 0
        assert config.show_stats is False
        assert config.log_level == logging.CRITICAL

    def test_from_args(self):
        args = build_parser().parse_args(["-vvv", "--stats", "tx.csv"])

        config = EngineConfig.from_args(args)

        assert config.input_file == Path("tx.csv")
        assert config.verbosity == 3
        assert config.show_stats is True
        assert config.log_level == logging.INFO

    def test_file_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestVerbosityToLevel:
    @pytest.mark.parametrize("verbosity, level", [
        (0, logging.CRITICAL),
        (1, logging.ERROR),
        (2, logging.WARNING),
        (3, logging.INFO),
        (4, logging.DEBUG),
        (9, logging.DEBUG),
        (-1, logging.CRITICAL),
    ])
    def test_mapping(self, verbosity, level):
        assert verbosity_to_level(verbosity) == level


class TestSetupLogging:
    def teardown_method(self):
        logging.getLogger().handlers.clear()

    def test_sets_root_level(self):
        setup_logging(logging.INFO)

        assert logging.getLogger().level == logging.INFO

    def test_replaces_handlers(self):
        root = logging.getLogger()
        root.addHandler(logging.StreamHandler())
        root.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == LOG_FORMAT
        assert root.level == logging.WARNING
