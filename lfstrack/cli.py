#!/usr/bin/env python3
"""Command-line interface for lfstrack.

This module provides the CLI for tracking file patterns with Git LFS:
- Argument parsing and validation
- Configuration file loading
- Logging setup
- Help and version information

Example:
    >>> from lfstrack.cli import parse_arguments
    >>> args = parse_arguments(['*.psd', '--lockable'])
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from lfstrack.core.constants import LFSTRACK_VERSION, ConfigKey, ExitStatus, TrackOptions
from lfstrack.infrastructure.config_manager import (
    ConfigError,
    ConfigManager,
    ConfigSource,
    default_config_file,
)
from lfstrack.infrastructure.logger import Logger, LogLevel, set_global_logger

DESCRIPTION = "lfstrack - track file patterns with Git LFS"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If the configuration file is missing
    """
    parser = argparse.ArgumentParser(
        prog="lfstrack",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List the patterns tracked anywhere in the working tree
  lfstrack

  # Track Photoshop files from the current directory down
  lfstrack "*.psd"

  # Track and require a lock before editing
  lfstrack --lockable "*.psd"

  # Preview which committed files would be refreshed
  lfstrack --dry-run "*.bin"
        """,
    )

    parser.add_argument(
        "patterns",
        metavar="PATTERN",
        nargs="*",
        help="Patterns to track, relative to the current directory",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {LFSTRACK_VERSION}",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    track_group = parser.add_argument_group("track options")

    track_group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Log which files are being tracked and modified",
    )

    track_group.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        default=None,
        help="Preview results without touching tracked files",
    )

    lockable_group = track_group.add_mutually_exclusive_group()

    lockable_group.add_argument(
        "-l",
        "--lockable",
        dest="lockable",
        action="store_true",
        default=None,
        help="Make pattern lockable, i.e. read-only unless locked",
    )

    lockable_group.add_argument(
        "--not-lockable",
        dest="lockable",
        action="store_false",
        default=None,
        help="Remove lockable attribute from pattern",
    )

    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write log lines to FILE",
    )

    parsed = parser.parse_args(args)

    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Raises:
        CLIError: If validation fails
    """
    if args.config:
        config_path = Path(args.config)

        if not config_path.exists():
            raise CLIError(f"Configuration file does not exist: {args.config}")

        if not config_path.is_file():
            raise CLIError(f"Configuration path is not a file: {args.config}")


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build configuration dictionary from command-line arguments.

    Flags that were not given are left out so lower precedence sources
    still apply.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration dictionary for ConfigManager
    """
    track = {
        ConfigKey.LOCKABLE: args.lockable,
        ConfigKey.DRY_RUN: args.dry_run,
        ConfigKey.VERBOSE: args.verbose,
    }
    config: Dict[str, Any] = {ConfigKey.TRACK: {k: v for k, v in track.items() if v is not None}}

    if args.log_file:
        config[ConfigKey.LOGGING] = {ConfigKey.FILE: args.log_file}

    return config


def load_config(args: argparse.Namespace) -> ConfigManager:
    """
    Assemble configuration from file, environment and arguments.

    Raises:
        ConfigError: If the configuration file cannot be loaded
    """
    config = ConfigManager(args.config or default_config_file())
    config.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
    return config


def setup_logging(options: TrackOptions, config: ConfigManager) -> Logger:
    """
    Setup logging based on options and configuration.

    Args:
        options: Options for this invocation
        config: Configuration manager

    Returns:
        Configured logger instance
    """
    if options.verbose:
        level = LogLevel.DEBUG
    else:
        level = config.get(f"{ConfigKey.LOGGING}.{ConfigKey.LEVEL}", "INFO")

    logger = Logger("lfstrack", level=level)

    log_file = config.get(f"{ConfigKey.LOGGING}.{ConfigKey.FILE}")
    if log_file:
        logger.add_handler(Logger.create_file_handler(log_file))

    set_global_logger(logger)
    return logger


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Parses arguments, builds the track options and hands over to
    lfstrack.main.run_track.
    """
    try:
        args = parse_arguments(argv)

        config = load_config(args)
        options = config.track_options()

        logger = setup_logging(options, config)

        from lfstrack.main import run_track

        return run_track(args.patterns, options, logger)

    except (CLIError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return ExitStatus.ERROR

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        import traceback

        traceback.print_exc()
        return ExitStatus.FATAL


if __name__ == "__main__":
    sys.exit(main())
