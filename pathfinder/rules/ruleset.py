#!/usr/bin/env python3
"""Rule set value and match predicates.

A RuleSet holds the three independent selection criteria read from the
rule file:
- names: exact base names of files
- path_prefixes: prefixes of the full walked path of files
- dir_prefixes: prefixes of directory paths whose whole subtree is collected

Prefix checks are plain string prefix tests against the path as walked,
so ``/data/cache`` also matches ``/data/cache-old``.

Example:
    >>> rules = RuleSet(names=("config.json",), dir_prefixes=("/data/cache",))
    >>> rules.matches_name("config.json")
    True
    >>> rules.matches_directory("/data/cache/a")
    True
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class RuleSet:
    """Immutable selection criteria, in rule file order."""

    names: Tuple[str, ...] = ()
    path_prefixes: Tuple[str, ...] = ()
    dir_prefixes: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept any sequence, store tuples
        object.__setattr__(self, "names", tuple(self.names))
        object.__setattr__(self, "path_prefixes", tuple(self.path_prefixes))
        object.__setattr__(self, "dir_prefixes", tuple(self.dir_prefixes))

    def matches_name(self, basename: str) -> bool:
        """Check whether a base name is listed under [files]."""
        return basename in self.names

    def match_path(self, path: str) -> Optional[str]:
        """Return the first path prefix ``path`` starts with, or None."""
        for prefix in self.path_prefixes:
            if path.startswith(prefix):
                return prefix
        return None

    def matches_directory(self, path: str) -> bool:
        """Check whether a directory path starts with any [directories] prefix."""
        return any(path.startswith(prefix) for prefix in self.dir_prefixes)

    @property
    def is_empty(self) -> bool:
        return not (self.names or self.path_prefixes or self.dir_prefixes)

    def __len__(self) -> int:
        return len(self.names) + len(self.path_prefixes) + len(self.dir_prefixes)
