"""
Utility modules for the raw data stream relay.

Provides:
- Log file name formatting
- Structured logging configuration
"""

from raw_stream.utils.time_format import (
    local_now,
    log_file_stem,
    log_filename,
)
from raw_stream.utils.logging import (
    DiagnosticsSink,
    StructlogDiagnostics,
    configure_logging,
    get_logger,
)

__all__ = [
    # Time formatting
    "local_now",
    "log_file_stem",
    "log_filename",
    # Logging
    "DiagnosticsSink",
    "StructlogDiagnostics",
    "configure_logging",
    "get_logger",
]
