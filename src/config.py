"""Run configuration for the payments ledger."""

import argparse
from dataclasses import dataclass
from pathlib import Path

from logging_config import verbosity_to_level


@dataclass
class EngineConfig:
    """Settings for one ledger run."""

    input_file: Path
    verbosity: int = 0
    show_stats: bool = False

    @property
    def log_level(self) -> int:
        """Log level implied by the verbosity count."""
        return verbosity_to_level(self.verbosity)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "EngineConfig":
        """Create config from parsed command-line arguments."""
        return cls(
            input_file=Path(args.file),
            verbosity=args.verbose,
            show_stats=args.stats,
        )
