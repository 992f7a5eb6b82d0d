"""
CLI workflow orchestration for photoprint.

Provides the CLIOrchestrator class that coordinates a run from argument
parsing through the worker pool to the optional pair export.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from ..config import HEIF_EXTENSIONS
from ..exceptions import ConfigError
from ..imaging import has_heif_support
from ..models import WorkerMode, WorkerOptions, RunStats
from ..output import ResultWriter, export_pairs
from ..store import FingerprintStore
from ..user_config import get_user_config
from ..utils.validators import validate_output_file
from .arg_parser import parse_arguments


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Log records go to stderr so stdout carries only results.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr,
    )
    return logging.getLogger(__name__)


def _optional_float(value) -> Optional[float]:
    return None if value is None else float(value)


class CLIOrchestrator:
    """
    Orchestrates the CLI workflow.

    Phases: setup, configuration, run, export. Configuration errors end
    the run with exit code 1 before any thread starts.
    """

    def __init__(self, argv=None, stream=None):
        """
        Initialize the orchestrator.

        Args:
            argv: Argument list (default: sys.argv)
            stream: Where results are written (default: stdout)
        """
        self.argv = argv
        self.stream = stream
        self.logger: Optional[logging.Logger] = None
        self.args = None
        self.options: Optional[WorkerOptions] = None
        self.stats: Optional[RunStats] = None

    def run(self) -> int:
        """
        Execute the complete CLI workflow.

        Returns:
            Exit code (0 for success, 1 for configuration or export error)
        """
        self._setup_phase()

        try:
            self._configure_phase()
            self._run_phase()
        except ConfigError as e:
            self.logger.error(str(e))
            return 1

        return self._export_phase()

    def _setup_phase(self) -> None:
        """Phase 1: Parse arguments and setup logging."""
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)

    def _select_mode(self) -> WorkerMode:
        selected = [
            mode for flag, mode in (
                (self.args.generate, WorkerMode.GENERATE),
                (self.args.find_duplicates, WorkerMode.FIND_DUPLICATES),
                (self.args.metadata, WorkerMode.EXTRACT_METADATA),
            )
            if flag
        ]
        if len(selected) != 1:
            raise ConfigError("Select exactly one of --generate, --find-duplicates, --metadata")
        return selected[0]

    def _configure_phase(self) -> None:
        """
        Phase 2: Merge flags with user configuration into WorkerOptions.

        Raises:
            ConfigError: If the resulting options are invalid
        """
        config = get_user_config()
        args = self.args
        mode = self._select_mode()

        def pick(value, fallback):
            return fallback if value is None else value

        export_pairs_requested = bool(args.pairs_output) and mode is WorkerMode.FIND_DUPLICATES

        extensions = pick(args.extensions, config.extensions)
        if not has_heif_support():
            extensions = frozenset(ext for ext in extensions if ext not in HEIF_EXTENSIONS)

        try:
            self.options = WorkerOptions(
                mode=mode,
                source=os.path.abspath(args.source) if args.source else None,
                destination=os.path.abspath(args.destination) if args.destination else None,
                threads=int(pick(args.threads, config.default_workers)),
                fuzz_factor=float(pick(args.fuzz_factor, config.fuzz_factor)),
                low_threshold=_optional_float(pick(args.low_threshold, config.low_threshold)),
                high_threshold=_optional_float(pick(args.high_threshold, config.high_threshold)),
                fingerprint_size=tuple(pick(args.size, config.fingerprint_size)),
                bit_depth=int(pick(args.bit_depth, config.bit_depth)),
                extensions=extensions,
                collect_matches=export_pairs_requested,
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}")

        self.options.validate()

        if export_pairs_requested:
            is_valid, error = validate_output_file(args.pairs_output)
            if not is_valid:
                raise ConfigError(f"Pairs output: {error}")

        self.logger.info(f"Using {self.options.threads} threads of maximum {os.cpu_count()}")

    def _run_phase(self) -> None:
        """Phase 3: Run the worker pool for the selected mode."""
        writer = ResultWriter(self.stream)
        store = FingerprintStore(writer=writer, show_progress=not self.args.no_progress)
        self.stats = store.run_workers(self.options)

    def _export_phase(self) -> int:
        """
        Phase 4: Write the review tool pair file if requested.

        Returns:
            Exit code (1 if the pair file could not be written)
        """
        if not self.args.pairs_output:
            return 0
        if self.options.mode is not WorkerMode.FIND_DUPLICATES:
            self.logger.warning("--pairs-output only applies to --find-duplicates")
            return 0
        try:
            count = export_pairs(self.stats.matches, self.args.pairs_output)
        except OSError as e:
            self.logger.error(f"Failed to write pairs to {self.args.pairs_output}: {e}")
            return 1
        self.logger.info(f"Exported {count:,} pairs to: {self.args.pairs_output}")
        return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
