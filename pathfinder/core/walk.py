"""
Pathfinder Core: Directory traversal.

A lazy, pre-order, depth-first walk that reports every entry (the root
included) before descending into it. Symbolic links are never followed.
A failure to stat the root or list a directory skips that subtree only;
the walk then carries on with the next sibling.
"""
import os
import stat
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from pathfinder.core.constants import FilePath

# Called with (path, error) when a subtree cannot be read
WalkErrorHandler = Callable[[FilePath, OSError], None]


@dataclass(frozen=True)
class WalkEntry:
    """A single visited filesystem entry."""

    path: FilePath
    is_dir: bool

    @property
    def name(self) -> str:
        """Base name of the entry."""
        return os.path.basename(self.path)


def join_path(parent: str, name: str) -> str:
    """Join a child name onto its parent and normalise the result.

    The root path is never normalised; only paths built from it are.
    """
    return os.path.normpath(os.path.join(parent, name))


def walk(root: str, onerror: Optional[WalkErrorHandler] = None) -> Iterator[WalkEntry]:
    """Walk ``root`` yielding a WalkEntry per filesystem entry.

    Children are visited in lexical order of their names. A directory is
    yielded before it is listed, so consumers act on it before any of its
    descendants are seen.

    Args:
        root: Directory (or file) to start from, used verbatim
        onerror: Optional callback for unreadable subtrees

    Yields:
        WalkEntry for the root and every reachable descendant
    """
    try:
        st = os.lstat(root)
    except OSError as e:
        _report(onerror, root, e)
        return

    is_dir = stat.S_ISDIR(st.st_mode)
    yield WalkEntry(root, is_dir)

    if is_dir:
        yield from _walk_children(root, onerror)


def _walk_children(directory: str, onerror: Optional[WalkErrorHandler]) -> Iterator[WalkEntry]:
    try:
        with os.scandir(directory) as it:
            children = sorted((entry.name, _entry_is_dir(entry)) for entry in it)
    except OSError as e:
        _report(onerror, directory, e)
        return

    for name, is_dir in children:
        path = join_path(directory, name)
        yield WalkEntry(path, is_dir)

        if is_dir:
            yield from _walk_children(path, onerror)


def _entry_is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _report(onerror: Optional[WalkErrorHandler], path: str, error: OSError) -> None:
    if onerror is not None:
        onerror(path, error)
