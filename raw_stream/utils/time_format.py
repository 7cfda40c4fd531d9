"""
Timestamp formatting helpers for log file naming.
"""

from datetime import datetime

LOG_FILE_EXTENSION = ".log"


def log_file_stem(moment: datetime) -> str:
    """
    Format a local wall-clock time as ``YYYY_MM_DD_HHMM``.

    Args:
        moment: Local time to format

    Returns:
        Zero-padded stem, e.g. ``2024_03_07_0905``
    """
    return (
        f"{moment.year:04d}_{moment.month:02d}_{moment.day:02d}_"
        f"{moment.hour:02d}{moment.minute:02d}"
    )


def log_filename(moment: datetime) -> str:
    """File name for a session started at ``moment``."""
    return log_file_stem(moment) + LOG_FILE_EXTENSION


def local_now() -> datetime:
    """Current local wall-clock time."""
    return datetime.now()
