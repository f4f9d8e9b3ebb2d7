"""Pathfinder Archive Output.

This module provides the ZIP output side of a run:
- ArchiveSession: the open writer and the file it wraps
- open_archive: create the output file and start a session
- generate_output_filename: explicit or time-based archive names
"""

from .naming import format_timestamp, generate_output_filename
from .session import ArchiveEntryError, ArchiveError, ArchiveSession, entry_name, open_archive

__all__ = [
    "ArchiveSession",
    "ArchiveError",
    "ArchiveEntryError",
    "open_archive",
    "entry_name",
    "generate_output_filename",
    "format_timestamp",
]
