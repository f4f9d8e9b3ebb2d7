#!/usr/bin/env python3
"""Command-line interface for Pathfinder.

This module provides the CLI for collecting files into an archive:
- Argument parsing
- Settings layering (defaults, settings file, environment, arguments)
- Root directory and rule file checks
- Logging setup
- Exit codes

Example:
    >>> from pathfinder.cli import parse_arguments
    >>> args = parse_arguments(['-d', '/data', '-l', 'rules.txt', '-v'])
"""

import argparse
import os
import sys
from typing import Any, Dict, List, Optional

from pathfinder.core.config import ConfigError, ConfigManager, ConfigSource
from pathfinder.core.constants import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    PATHFINDER_VERSION,
    Defaults,
)
from pathfinder.core.logging import Logger, LogLevel, set_global_logger

DESCRIPTION = "Pathfinder - collect files listed in a rule file into a ZIP archive"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def default_directory() -> str:
    """Directory scanned when none is given: ./Pathfinder under the cwd."""
    return os.path.join(os.getcwd(), Defaults.SEARCH_DIRECTORY_NAME)


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Options left out on the command line are None so that settings file
    and environment values can fill them in.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
    """
    parser = argparse.ArgumentParser(
        prog="pathfinder",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Rule file format:
  [files]
  config.json
  [paths]
  /data/logs
  [directories]
  /data/cache

Examples:
  # Scan ./Pathfinder using ./pathfinder.txt
  pathfinder

  # Scan /data, write /tmp/bundle.zip, show progress
  pathfinder -d /data -l rules.txt -p /tmp -n bundle.zip -v
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {PATHFINDER_VERSION}",
    )

    parser.add_argument(
        "-d",
        "--directory",
        metavar="DIR",
        type=str,
        help="Directory to search for files (default: ./Pathfinder)",
    )

    parser.add_argument(
        "-l",
        "--list",
        dest="list_file",
        metavar="FILE",
        type=str,
        help=f"Text file with file lists (default: ./{Defaults.LIST_FILE})",
    )

    # Output options
    output_group = parser.add_argument_group("output options")

    output_group.add_argument(
        "-p",
        "--output-path",
        metavar="DIR",
        type=str,
        help="Output path for the zip archive (default: current directory)",
    )

    output_group.add_argument(
        "-n",
        "--name",
        dest="output_name",
        metavar="NAME",
        type=str,
        help="Output archive name (default: request-<YYYY-Mon-DD-HH-MM>.zip)",
    )

    # Logging options
    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Enable verbose mode",
    )

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write log lines to a rotating log file",
    )

    parser.add_argument(
        "--settings",
        metavar="FILE",
        type=str,
        help="Settings file (YAML format)",
    )

    return parser.parse_args(args)


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build a settings dictionary from command-line arguments.

    Only options that were given are included.

    Args:
        args: Parsed arguments namespace

    Returns:
        Settings dictionary for ConfigManager
    """
    settings: Dict[str, Any] = {}

    for key in ("directory", "list_file", "output_path", "output_name", "verbose"):
        value = getattr(args, key, None)
        if value is not None:
            settings[key] = value

    logging_settings = {}
    if getattr(args, "debug", False):
        logging_settings["level"] = "DEBUG"
    if getattr(args, "log_file", None):
        logging_settings["file"] = args.log_file
    if logging_settings:
        settings["logging"] = logging_settings

    return {"pathfinder": settings}


def load_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Resolve the run settings from every source.

    Args:
        args: Parsed arguments namespace

    Returns:
        The merged ``pathfinder`` settings dictionary

    Raises:
        CLIError: If the settings file is unusable or a value has the
            wrong type
    """
    try:
        config = ConfigManager(settings_file=getattr(args, "settings", None))
        config.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
        config.validate_schema()
    except ConfigError as e:
        raise CLIError(e.message)

    settings = config.get_all()["pathfinder"]
    if not settings.get("directory"):
        settings["directory"] = default_directory()
    return settings


def validate_settings(settings: Dict[str, Any]) -> None:
    """
    Check that the root directory and rule file exist.

    Args:
        settings: Merged settings dictionary

    Raises:
        CLIError: If either path is missing
    """
    if not os.path.exists(settings["directory"]):
        raise CLIError("The specified directory does not exist.")

    if not os.path.exists(settings["list_file"]):
        raise CLIError("The specified list file does not exist.")


def setup_logging(settings: Dict[str, Any]) -> Logger:
    """
    Setup logging based on settings.

    Errors are always shown; progress lines need verbose mode.

    Args:
        settings: Merged settings dictionary

    Returns:
        Configured logger instance
    """
    log_settings = settings.get("logging") or {}
    level = LogLevel[str(log_settings.get("level") or Defaults.LOG_LEVEL).upper()]

    if settings.get("verbose"):
        level = min(level, LogLevel.INFO)

    logger = Logger("pathfinder", level=level)

    log_file = log_settings.get("file")
    if log_file:
        logger.add_handler(logger.create_file_handler(log_file))

    set_global_logger(logger)
    return logger


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Handles argument parsing, settings and path checks, then passes
    control to pathfinder.main for the actual run.

    Returns:
        Process exit code
    """
    try:
        args = parse_arguments(argv)

        settings = load_settings(args)

        validate_settings(settings)

        try:
            logger = setup_logging(settings)
        except (KeyError, OSError) as e:
            raise CLIError(f"Invalid logging settings: {e}")

        from pathfinder.main import run_pathfinder

        try:
            return run_pathfinder(settings, logger)
        finally:
            logger.close()

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        import traceback

        traceback.print_exc()
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
