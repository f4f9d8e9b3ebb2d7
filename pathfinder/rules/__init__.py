"""Pathfinder Rules System.

This module provides file selection:
- RuleSet: names, path prefixes and directory prefixes
- RuleParser / parse_rules: sectioned rule file reader
- SelectionEngine: walks a directory and archives every match
"""

from .engine import RunReport, SelectionEngine, run
from .parser import (
    ConfigNotFound,
    ConfigReadError,
    RuleFileError,
    RuleParser,
    is_section_header,
    parse_rules,
)
from .ruleset import RuleSet

__all__ = [
    # Rule set
    "RuleSet",
    # Parser
    "RuleParser",
    "RuleFileError",
    "ConfigNotFound",
    "ConfigReadError",
    "is_section_header",
    "parse_rules",
    # Engine
    "RunReport",
    "SelectionEngine",
    "run",
]
