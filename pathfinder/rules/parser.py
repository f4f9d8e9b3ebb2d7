#!/usr/bin/env python3
"""Rule file parser.

The rule file is line oriented with bracketed section headers:

    [files]
    config.json
    [paths]
    /data/logs
    [directories]
    /data/cache

A line that starts with ``[`` and ends with ``]`` switches the current
section. Every other line is stored verbatim under the current section.
Lines before the first header, and lines under unknown sections, are
dropped. Sections may repeat; their entries accumulate.

Lines are decoded the same way the OS decodes file names, so a rule
written in the file compares equal to the path the walk produces.

Example:
    >>> rules = parse_rules("pathfinder.txt")
    >>> rules.names
    ('config.json',)
"""

import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pathfinder.core.constants import SECTION_CLOSE, SECTION_OPEN, ErrorCode, Section
from pathfinder.core.logging import Logger, get_logger
from pathfinder.rules.ruleset import RuleSet


class RuleFileError(Exception):
    """Base exception for rule file errors."""

    def __init__(self, message: str, path: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message)
        self.path = path
        self.error_code = error_code


class ConfigNotFound(RuleFileError):
    """Rule file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Rule file does not exist: {path}", path, ErrorCode.NOT_FOUND)


class ConfigReadError(RuleFileError):
    """Rule file could not be opened or read."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Error reading rule file {path}: {cause}", path, ErrorCode.IO_ERROR)
        self.cause = cause


def is_section_header(line: str) -> bool:
    """Check whether a line is a ``[section]`` header."""
    return len(line) >= 2 and line.startswith(SECTION_OPEN) and line.endswith(SECTION_CLOSE)


class RuleParser:
    """Incremental rule file parser.

    Feed lines one at a time with ``feed`` (or all at once with
    ``parse_lines``) and collect the result with ``build``.
    """

    def __init__(self):
        self.section = ""
        self._entries: Dict[str, List[str]] = {section.value: [] for section in Section}

    def feed(self, line: str) -> None:
        """Consume one line (without its line terminator)."""
        if is_section_header(line):
            self.section = line[1:-1]
            return

        entries = self._entries.get(self.section)
        if entries is not None:
            entries.append(line)

    def parse_lines(self, lines: Iterable[str]) -> RuleSet:
        """Consume every line and return the resulting rule set."""
        for line in lines:
            self.feed(line)
        return self.build()

    def build(self) -> RuleSet:
        """Build a rule set from the lines consumed so far."""
        return RuleSet(
            names=self._entries[Section.FILES.value],
            path_prefixes=self._entries[Section.PATHS.value],
            dir_prefixes=self._entries[Section.DIRECTORIES.value],
        )


def _strip_terminator(raw: bytes) -> str:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return os.fsdecode(raw)


def parse_rules(
    config_path: Union[str, Path],
    logger: Optional[Logger] = None,
    strict: bool = False,
) -> RuleSet:
    """Read a rule file into a RuleSet.

    Args:
        config_path: Path to the rule file
        logger: Logger for read errors (global logger if None)
        strict: Raise on a read error part way through instead of
            returning the rules collected so far

    Returns:
        Parsed rule set

    Raises:
        ConfigNotFound: If the rule file does not exist
        ConfigReadError: If the rule file cannot be opened, or cannot be
            read to the end and ``strict`` is set
    """
    path = str(config_path)
    logger = logger or get_logger()

    if not os.path.exists(path):
        raise ConfigNotFound(path)

    try:
        f = open(path, "rb")
    except OSError as e:
        raise ConfigReadError(path, e)

    parser = RuleParser()
    with f:
        try:
            for raw in f:
                parser.feed(_strip_terminator(raw))
        except OSError as e:
            if strict:
                raise ConfigReadError(path, e)
            logger.error("Error reading text file", path=path, error=e)

    rules = parser.build()
    logger.debug(
        "Rules loaded",
        path=path,
        names=len(rules.names),
        paths=len(rules.path_prefixes),
        directories=len(rules.dir_prefixes),
        total=len(rules),
    )
    return rules
