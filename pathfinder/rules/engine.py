#!/usr/bin/env python3
"""Selection and archiving engine.

This module walks a root directory once and evaluates every entry against
the three rule types of a RuleSet:
- Name rules: files whose base name is listed
- Path rules: files whose walked path starts with a listed prefix
- Directory rules: directories whose path starts with a listed prefix;
  every file beneath them is collected by a separate sub-walk

The checks are independent. A file that satisfies several rules is added
once per rule, and a file beneath nested matching directories is added
once per matching ancestor. Failures on a single file or subtree are
logged and the run continues.

Example:
    >>> with open_archive("request.zip") as session:
    ...     report = SelectionEngine(rules, session).run("/data")
    >>> report.added
    3
"""

from dataclasses import dataclass
from typing import Optional

from pathfinder.archive.session import ArchiveEntryError, ArchiveSession
from pathfinder.core.logging import Logger, get_logger
from pathfinder.core.walk import WalkEntry, walk
from pathfinder.rules.ruleset import RuleSet


@dataclass
class RunReport:
    """Counters collected during one engine run."""

    visited: int = 0
    matched_by_name: int = 0
    matched_by_path: int = 0
    matched_by_directory: int = 0
    added: int = 0
    failed: int = 0
    walk_errors: int = 0
    skipped: int = 0

    @property
    def matched(self) -> int:
        return self.matched_by_name + self.matched_by_path + self.matched_by_directory


class SelectionEngine:
    """Evaluates walked entries against a RuleSet and archives matches.

    Features:
    - One outer walk; directory matches trigger their own sub-walk
    - Non-exclusive rule types, evaluated name, path, directory
    - Best-effort: unreadable files and subtrees are logged and skipped
    """

    def __init__(
        self,
        rules: RuleSet,
        session: ArchiveSession,
        logger: Optional[Logger] = None,
    ):
        """Initialize the engine.

        Args:
            rules: Selection criteria
            session: Open archive that matches are written to
            logger: Logger for progress and errors
        """
        self.rules = rules
        self.session = session
        self.logger = logger or get_logger()
        self.report = RunReport()

    def run(self, root_dir: str) -> RunReport:
        """Walk ``root_dir`` and archive every match.

        Args:
            root_dir: Directory to scan, used verbatim as the walk root

        Returns:
            Counters for this run
        """
        self.report = RunReport()

        self.logger.debug("Scanning directory", root=root_dir)

        for entry in walk(root_dir, onerror=self._on_walk_error):
            self.report.visited += 1
            self.evaluate(entry)

        self.logger.debug(
            "Scan complete",
            visited=self.report.visited,
            added=self.report.added,
            failed=self.report.failed,
        )
        return self.report

    def evaluate(self, entry: WalkEntry) -> None:
        """Apply all three rule types to one walked entry."""
        self._handle_by_name(entry)
        self._handle_by_path(entry)
        self._handle_directory(entry)

    def _handle_by_name(self, entry: WalkEntry) -> None:
        if entry.is_dir or not self.rules.matches_name(entry.name):
            return

        self.report.matched_by_name += 1
        self.logger.info(f"Found by name: {entry.path}")
        self._add(entry.path)

    def _handle_by_path(self, entry: WalkEntry) -> None:
        if entry.is_dir or self.rules.match_path(entry.path) is None:
            return

        self.report.matched_by_path += 1
        self.logger.info(f"Found by path: {entry.path}")
        self._add(entry.path)

    def _handle_directory(self, entry: WalkEntry) -> None:
        if not entry.is_dir or not self.rules.matches_directory(entry.path):
            return

        self.logger.info(f"Found under directory: {entry.path}")

        for sub_entry in walk(entry.path, onerror=self._on_walk_error):
            if sub_entry.is_dir:
                continue
            self.report.matched_by_directory += 1
            self._add(sub_entry.path)

    def _add(self, path: str) -> None:
        if self.session.is_output(path):
            self.report.skipped += 1
            self.logger.warning("Skipping the archive being written", path=path)
            return

        try:
            self.session.add_file(path)
        except ArchiveEntryError as e:
            self.report.failed += 1
            self.logger.error(f"Error adding file to archive: {e}", path=path)
            return

        self.report.added += 1

    def _on_walk_error(self, path: str, error: OSError) -> None:
        self.report.walk_errors += 1
        self.logger.error(f"Error walking through directory: {error}", path=path)


def run(root_dir: str, rules: RuleSet, session: ArchiveSession, logger: Optional[Logger] = None) -> RunReport:
    """Run the selection engine once over ``root_dir``."""
    return SelectionEngine(rules, session, logger).run(root_dir)
