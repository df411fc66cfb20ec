"""
Command-line interface for log volume estimation.

Usage:
    python -m log_volume app.log system.log --log-dir /var/log/myapp
    python -m log_volume --metadata-file inventory.json --keep-history --json
    python -m log_volume --purge-history
"""

import argparse
import sys
from typing import List, Optional

from .estimator import EstimatorConfig, LogVolumeEstimator
from .exceptions import ConfigurationError, NoValidLogsError, PersistenceError
from .history import HistoryStore
from .logging_config import configure_logging, enable_debug, enable_quiet, get_logger
from .providers import StaticMetadataProvider, TextLogFileProvider
from .report import print_report, render_json

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_NO_VALID_LOGS = 2
EXIT_PERSISTENCE = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="log-volume",
        description=(
            "Estimate how many records and bytes each log produces per hour, day, "
            "week and month from its oldest and newest records."
        ),
    )
    parser.add_argument("logs", nargs="*", help="Log identifiers (file names or paths)")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--log-dir", help="Directory that relative log names resolve against")
    source.add_argument(
        "--metadata-file",
        help="JSON inventory of log metadata; all listed logs are used when none are named",
    )
    parser.add_argument(
        "--keep-history",
        action="store_true",
        default=None,
        help="Accumulate samples across runs and report a running average",
    )
    parser.add_argument("--history-path", help="Location of the history file")
    parser.add_argument(
        "--purge-history",
        action="store_true",
        help=(
            "Delete the history file first; when no logs are named and "
            "--metadata-file supplies none, delete and exit"
        ),
    )
    parser.add_argument("--json", action="store_true", help="Emit averages as JSON")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug diagnostics")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")
    return parser


def build_config(args: argparse.Namespace) -> EstimatorConfig:
    """Environment defaults overridden by command-line options."""
    config = EstimatorConfig.from_env()
    if args.history_path:
        config.history_path = args.history_path
    if args.keep_history is not None:
        config.keep_history = args.keep_history
    config.purge_history = args.purge_history
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point.

    Returns:
        0 on success, 2 when no log could be sampled or configuration is
        invalid, 3 when the history file could not be saved.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging()
    if args.verbose:
        enable_debug()
    elif args.quiet:
        enable_quiet()

    try:
        config = build_config(args)
        if args.metadata_file:
            provider = StaticMetadataProvider.from_json_file(args.metadata_file)
            log_ids = args.logs or provider.log_ids()
        else:
            provider = TextLogFileProvider(base_dir=args.log_dir)
            log_ids = args.logs
    except ConfigurationError as e:
        logger.error("%s", e)
        return EXIT_NO_VALID_LOGS

    if not log_ids:
        if args.purge_history:
            try:
                HistoryStore(config.history_path).purge()
            except PersistenceError as e:
                logger.error("%s", e)
                return EXIT_PERSISTENCE
            return EXIT_OK
        parser.error("at least one log is required")

    estimator = LogVolumeEstimator(provider, config)
    try:
        result = estimator.run(log_ids)
    except NoValidLogsError as e:
        logger.error("%s", e)
        return EXIT_NO_VALID_LOGS
    except PersistenceError as e:
        logger.error("%s", e)
        if e.result is None:
            return EXIT_PERSISTENCE
        result = e.result
        exit_code = EXIT_PERSISTENCE
    else:
        exit_code = EXIT_OK

    if args.json:
        sys.stdout.write(render_json(result) + "\n")
    else:
        print_report(result)
    return exit_code
