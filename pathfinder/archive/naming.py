"""Output archive file names."""

from datetime import datetime
from typing import Optional

from pathfinder.core.constants import MONTH_ABBREVIATIONS, Defaults


def format_timestamp(now: datetime) -> str:
    """Format a time as ``YYYY-Mon-DD-HH-MM`` with English month names."""
    month = MONTH_ABBREVIATIONS[now.month - 1]
    return f"{now.year:04d}-{month}-{now.day:02d}-{now.hour:02d}-{now.minute:02d}"


def generate_output_filename(
    user_provided: Optional[str] = "",
    now: Optional[datetime] = None,
    extension: str = Defaults.ARCHIVE_EXTENSION,
) -> str:
    """Return the archive file name to write.

    A non-empty user supplied name is used verbatim, extension included.
    Otherwise the name is built from the current minute, so two runs in
    the same minute without an explicit name write to the same file.

    Args:
        user_provided: Name given on the command line, may be empty
        now: Time to use instead of the current local time
        extension: Extension of generated names

    Returns:
        Archive file name
    """
    if user_provided:
        return user_provided

    if now is None:
        now = datetime.now()

    return f"{Defaults.OUTPUT_NAME_PREFIX}-{format_timestamp(now)}.{extension}"
