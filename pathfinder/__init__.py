"""Pathfinder - collect files listed in a rule file into a ZIP archive.

Typical use:
    >>> from pathfinder.rules import parse_rules, SelectionEngine
    >>> from pathfinder.archive import open_archive
    >>> rules = parse_rules("pathfinder.txt")
    >>> with open_archive("request.zip") as session:
    ...     SelectionEngine(rules, session).run("/data")
"""

from pathfinder.core.constants import PATHFINDER_VERSION

__version__ = PATHFINDER_VERSION
