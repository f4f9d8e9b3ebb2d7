#!/usr/bin/env python3
"""ZIP archive session.

An ArchiveSession owns the output file handle and the ZIP writer that
wraps it. Entries are streamed from source files one at a time and named
by the source's base name; directory structure is not kept.

The writer must be closed before the file so that the central directory
is written while the file is still open. ``close`` does both, in that
order, exactly once.

Example:
    >>> with open_archive("out/request.zip") as session:
    ...     session.add_file("/data/config.json")
    'config.json'
"""

import os
import shutil
import warnings
import zipfile
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from pathfinder.core.constants import EntryName, ErrorCode, FilePath, Limits
from pathfinder.core.logging import Logger, get_logger


class ArchiveError(Exception):
    """Output archive could not be created."""

    def __init__(self, message: str, path: str, error_code: ErrorCode = ErrorCode.IO_ERROR):
        super().__init__(message)
        self.path = path
        self.error_code = error_code


class ArchiveEntryError(Exception):
    """A single file could not be added to the archive."""

    def __init__(self, message: str, source_path: str, cause: Optional[Exception] = None):
        super().__init__(f"{message}: {cause}" if cause else message)
        self.source_path = source_path
        self.cause = cause
        self.error_code = ErrorCode.IO_ERROR


def entry_name(source_path: FilePath) -> EntryName:
    """Archive entry name for a source file: its base name.

    File names that are not valid UTF-8 come back from the OS with
    surrogate escapes, which zipfile cannot store. Their undecodable bytes
    are replaced with U+FFFD.
    """
    name = os.path.basename(source_path)
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        name = os.fsencode(name).decode("utf-8", "replace")
    return name


class ArchiveSession:
    """An open ZIP archive being written.

    Features:
    - Streams each source file in fixed-size chunks
    - Deflate compression, fixed entry timestamps and permission bits
    - Repeated base names become additional entries of the same name
    - Writer-then-file close, idempotent
    """

    def __init__(self, path: str, fileobj: BinaryIO, logger: Optional[Logger] = None):
        """Wrap an already opened output file.

        Args:
            path: Path of the output file
            fileobj: Writable binary file the archive is written to
            logger: Logger for close errors
        """
        self.path = path
        self._file = fileobj
        self._logger = logger or get_logger()
        self._writer: Optional[zipfile.ZipFile] = zipfile.ZipFile(
            fileobj, mode="w", compression=zipfile.ZIP_DEFLATED
        )
        self._entry_names: List[str] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def entry_names(self) -> List[str]:
        """Names of the entries written so far, in order."""
        return list(self._entry_names)

    @property
    def entry_count(self) -> int:
        return len(self._entry_names)

    def is_output(self, path: str) -> bool:
        """Check whether ``path`` refers to this session's output file."""
        try:
            return os.path.samefile(path, self.path)
        except OSError:
            return False

    def add_file(self, source_path: FilePath) -> EntryName:
        """Stream one source file into a new entry.

        If the copy fails part way the truncated entry stays in the archive,
        since a ZIP writer cannot take an entry back. It is not listed in
        ``entry_names``.

        Args:
            source_path: File to add

        Returns:
            Name of the new entry

        Raises:
            ArchiveEntryError: If the file cannot be opened, the entry
                cannot be created, or the copy fails
        """
        if self._closed or self._writer is None:
            raise ArchiveEntryError("Archive is closed", source_path)

        name = entry_name(source_path)

        try:
            source = open(source_path, "rb")
        except OSError as e:
            raise ArchiveEntryError("failed to open source file", source_path, e)

        with source:
            try:
                size = os.fstat(source.fileno()).st_size
                entry = self._create_entry(name, size)
            except (OSError, ValueError, RuntimeError) as e:
                raise ArchiveEntryError("failed to create entry in zip file", source_path, e)

            try:
                with entry:
                    shutil.copyfileobj(source, entry, Limits.COPY_CHUNK_SIZE)
            except (OSError, ValueError, RuntimeError, zipfile.LargeZipFile) as e:
                raise ArchiveEntryError(
                    "failed to copy file content to zip archive", source_path, e
                )

        self._entry_names.append(name)
        return name

    def _create_entry(self, name: str, size: int):
        info = zipfile.ZipInfo(name, date_time=Limits.ENTRY_DATE_TIME)
        info.compress_type = zipfile.ZIP_DEFLATED

        # Same-name entries are allowed; zipfile warns about each one
        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", message="Duplicate name", category=UserWarning)
            return self._writer.open(
                info, mode="w", force_zip64=size >= Limits.ZIP64_THRESHOLD
            )

    def close(self) -> None:
        """Close the ZIP writer, then the output file."""
        if self._closed:
            return
        self._closed = True

        if self._writer is not None:
            try:
                self._writer.close()
            except (OSError, ValueError) as e:
                self._logger.error("Error closing zip writer", path=self.path, error=e)
            self._writer = None

        try:
            self._file.close()
        except OSError as e:
            self._logger.error("Error closing archive file", path=self.path, error=e)

    def __enter__(self) -> "ArchiveSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"ArchiveSession({self.path!r}, entries={self.entry_count}, {state})"


def open_archive(path: Union[str, Path], logger: Optional[Logger] = None) -> ArchiveSession:
    """Create the output file and open a ZIP session on it.

    An existing file at ``path`` is overwritten.

    Args:
        path: Output archive path
        logger: Logger passed to the session

    Returns:
        Open archive session

    Raises:
        ArchiveError: If the output file cannot be created
    """
    path = str(path)

    try:
        fileobj = open(path, "wb")
    except OSError as e:
        raise ArchiveError(f"Error creating zip archive: {e}", path)

    try:
        return ArchiveSession(path, fileobj, logger)
    except Exception as e:
        fileobj.close()
        raise ArchiveError(f"Error creating zip archive: {e}", path)
