"""
Pathfinder Core: Constants and Type Definitions

This module provides system-wide constants, error codes, rule file section
names and default values.
"""
from enum import Enum, IntEnum
from typing import TypeAlias

# Version information
PATHFINDER_VERSION = "1.0.0"


class ErrorCode(IntEnum):
    """Standardized error codes for Pathfinder operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad argument, invalid settings
    NOT_FOUND = 2  # File or directory doesn't exist
    IO_ERROR = 4  # Read/write failure


# Type aliases for clarity
FilePath: TypeAlias = str
EntryName: TypeAlias = str


class Section(str, Enum):
    """Recognised rule file sections."""

    FILES = "files"  # Exact base names
    PATHS = "paths"  # Full path prefixes
    DIRECTORIES = "directories"  # Directory path prefixes


SECTION_OPEN = "["
SECTION_CLOSE = "]"


class Defaults:
    """Default values used when neither CLI nor settings provide one."""

    # Directory under the working directory scanned when -d is not given
    SEARCH_DIRECTORY_NAME = "Pathfinder"

    LIST_FILE = "pathfinder.txt"
    OUTPUT_PATH = "."

    # Generated archive names: request-2024-Jan-02-15-04.zip
    OUTPUT_NAME_PREFIX = "request"
    ARCHIVE_EXTENSION = "zip"

    LOG_LEVEL = "WARNING"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
    LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
    LOG_BACKUP_COUNT = 5


class Limits:
    """I/O sizes and archive format thresholds."""

    # Bytes copied per read when streaming a source file into the archive
    COPY_CHUNK_SIZE = 64 * 1024

    # Entries at or above this size need ZIP64 headers up front
    ZIP64_THRESHOLD = (1 << 31) - 1

    # Timestamp written on every entry so identical trees give identical archives
    ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)


# English month abbreviations, independent of the process locale
MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

# Environment variable prefix for settings overrides
ENV_PREFIX = "PATHFINDER_"


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130
