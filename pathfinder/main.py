#!/usr/bin/env python3
"""Main entry point for a Pathfinder run.

This module handles:
- Rule file loading
- Output archive creation
- The selection walk
- Closing the archive on every exit path

Example:
    >>> from pathfinder.main import run_pathfinder
    >>> run_pathfinder(settings, logger)
"""

import os
import sys
from typing import Any, Dict, Optional

from pathfinder.archive.naming import generate_output_filename
from pathfinder.archive.session import ArchiveError, ArchiveSession, open_archive
from pathfinder.core.constants import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_SUCCESS
from pathfinder.core.logging import Logger
from pathfinder.rules.engine import RunReport, SelectionEngine
from pathfinder.rules.parser import RuleFileError, parse_rules
from pathfinder.rules.ruleset import RuleSet


class PathfinderMain:
    """
    Controller for one Pathfinder run.

    Owns the archive session for the duration of the run and closes it
    (writer first, then file) however the run ends.
    """

    def __init__(self, settings: Dict[str, Any], logger: Logger):
        """
        Initialize the run controller.

        Args:
            settings: Merged ``pathfinder`` settings dictionary
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger

        self.rules: Optional[RuleSet] = None
        self.session: Optional[ArchiveSession] = None
        self.report: Optional[RunReport] = None
        self.output_filename: Optional[str] = None

    def load_rules(self) -> RuleSet:
        """
        Read the rule file.

        Raises:
            RuleFileError: If the rule file is missing or cannot be opened
        """
        self.rules = parse_rules(self.settings["list_file"], logger=self.logger)
        if self.rules.is_empty:
            self.logger.info("Rule file contains no rules", path=self.settings["list_file"])
        return self.rules

    def open_output(self) -> ArchiveSession:
        """
        Create the output archive.

        Raises:
            ArchiveError: If the archive file cannot be created
        """
        self.output_filename = generate_output_filename(self.settings.get("output_name"))
        output_path = os.path.join(self.settings.get("output_path") or ".", self.output_filename)

        self.logger.debug("Creating archive", path=output_path)
        self.session = open_archive(output_path, logger=self.logger)
        return self.session

    def cleanup(self) -> None:
        """Close the archive session if one is open."""
        if self.session is not None:
            self.session.close()

    def run(self) -> int:
        """
        Run Pathfinder once.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        try:
            self.load_rules()
            self.open_output()

            engine = SelectionEngine(self.rules, self.session, self.logger)
            self.report = engine.run(self.settings["directory"])

        except RuleFileError as e:
            self.logger.error(f"Error opening text file: {e}")
            return EXIT_FAILURE

        except ArchiveError as e:
            self.logger.error(str(e))
            return EXIT_FAILURE

        except KeyboardInterrupt:
            self.logger.error("Interrupted by user")
            return EXIT_INTERRUPTED

        finally:
            self.cleanup()

        if self.settings.get("verbose"):
            self.logger.info(f"New zip archive created: {self.output_filename}")

        return EXIT_SUCCESS


def run_pathfinder(settings: Dict[str, Any], logger: Logger) -> int:
    """
    Main entry point for running Pathfinder.

    Args:
        settings: Merged ``pathfinder`` settings dictionary
        logger: Logger instance

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    return PathfinderMain(settings, logger).run()


def main():
    """
    Entry point when run as standalone script.

    Delegates to cli.py for argument parsing.
    """
    from pathfinder.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
