"""
Command-line interface for procmem.

Takes one point-in-time sample of a process's memory map and prints how many
readable bytes each backing object accounts for.

Usage:
    procmem --name NAME | --pid PID [--chunks] [--output FILE] [--format parquet|json]

Example:
    sudo procmem --name nginx --top 20 --output nginx.parquet
"""

import argparse
import logging
import sys
import tomllib
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..config import get_config, get_config_or_default, set_config_path
from ..memory import aggregate_process
from ..models import AppConfig, MemorySample
from ..report import format_aggregation_table, format_sample_table
from ..sampling import Sampler
from ..storage import create_storage
from ..system import ensure_root_privileges, find_pid_by_name
from ..validation import (
    ErrorKind,
    ProcMemError,
    ValidationError,
    handle_cli_error,
    validate_path_exists,
    validate_positive_integer,
    validate_process_name,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

EXIT_VALIDATION = 4
EXIT_CODES = {
    ErrorKind.ENVIRONMENT: 1,
    ErrorKind.NOT_FOUND: 2,
    ErrorKind.PRIVILEGE: 3,
    ErrorKind.STALE_REGION: 1,
    ErrorKind.NUMERIC: 1,
}


def configure_logging(level: str) -> None:
    """Install the application log format on stderr."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procmem",
        description="Report readable memory per backing object of a running process.",
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "-n",
        "--name",
        type=str,
        help="Process name to sample (exact match on the Name: field of /proc/<pid>/status).",
    )
    target.add_argument("-p", "--pid", type=str, help="Process id to sample.")
    parser.add_argument("-c", "--config", type=Path, help="Path to config.toml.")
    parser.add_argument(
        "--proc-root", type=Path, help="Root of the procfs tree (overrides the config)."
    )
    parser.add_argument(
        "--chunks",
        action="store_true",
        help="Read the bytes of every readable region instead of only summing sizes.",
    )
    parser.add_argument("-o", "--output", type=Path, help="Save the sample to this file.")
    parser.add_argument(
        "--format",
        choices=["parquet", "json"],
        help="Output format for --output (defaults to the configured format).",
    )
    parser.add_argument("--top", type=int, help="Only list the N largest mappings.")
    parser.add_argument(
        "--no-root-check",
        action="store_true",
        help="Do not refuse to run as a non-root user.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (overrides the config).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Shortcut for --log-level DEBUG.")
    return parser


def _load_app_config(args: argparse.Namespace) -> AppConfig:
    if args.config:
        set_config_path(args.config)
        return get_config()
    return get_config_or_default()


def take_sample(args: argparse.Namespace, app_config: AppConfig) -> MemorySample:
    """
    Resolve the target process and sample it according to `args`.

    Prints the resulting table to stdout.

    Raises:
        ProcMemError: On lookup, privilege or procfs failures.
    """
    monitor_config = app_config.monitor
    proc_root = args.proc_root or monitor_config.proc_root

    if monitor_config.require_root and not args.no_root_check:
        ensure_root_privileges()

    if args.name is not None:
        pid = find_pid_by_name(args.name, proc_root)
    else:
        pid = args.pid

    if args.chunks or monitor_config.capture_chunks:
        sample_time = datetime.now(timezone.utc)
        aggregator = aggregate_process(
            pid,
            proc_root=proc_root,
            read_timeout=monitor_config.read_timeout_seconds,
            skip_stale_regions=monitor_config.skip_stale_regions,
        )
        print(format_aggregation_table(aggregator, top=args.top))
        return aggregator.to_sample(sample_time=sample_time, pid=pid)

    sample = Sampler(proc_root).sample_process(pid)
    print(format_sample_table(sample, top=args.top))
    return sample


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for procmem.

    Exit codes: 0 on success, 1 on procfs/environment errors, 2 when the
    process is not found, 3 without sufficient privilege, 4 on invalid
    configuration or arguments.

    Raises:
        SystemExit: On any failure.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level or ("DEBUG" if args.verbose else "INFO"))

    try:
        app_config = _load_app_config(args)
    except (FileNotFoundError, tomllib.TOMLDecodeError, ValidationError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=EXIT_VALIDATION,
            logger=logger,
        )

    if not args.log_level and not args.verbose:
        logging.getLogger().setLevel(app_config.monitor.log_level)

    try:
        if args.name is not None:
            args.name = validate_process_name(args.name, field_name="--name")
        if args.pid is not None:
            args.pid = validate_positive_integer(args.pid, min_value=1, field_name="--pid")
        if args.top is not None:
            validate_positive_integer(args.top, min_value=1, field_name="--top")
        if args.proc_root is not None:
            validate_path_exists(args.proc_root, field_name="--proc-root")
    except ValidationError as e:
        handle_cli_error(
            error=e,
            context="argument validation",
            exit_code=EXIT_VALIDATION,
            logger=logger,
        )

    try:
        sample = take_sample(args, app_config)
    except ProcMemError as e:
        handle_cli_error(
            error=e,
            context=f"sampling ({e.kind.value})",
            exit_code=EXIT_CODES[e.kind],
            logger=logger,
        )

    if args.output:
        storage_config = app_config.monitor.storage
        storage = create_storage(
            format_type=args.format or storage_config.format,
            compression=storage_config.compression,
        )
        try:
            storage.save_sample(sample, str(args.output))
        except OSError as e:
            handle_cli_error(
                error=e,
                context=f"saving sample to {args.output}",
                exit_code=1,
                logger=logger,
            )


if __name__ == "__main__":
    main_cli()
