"""Error codes for per-file failures and diagnostics.

Error Code Convention:
    MA1xx - Reading and parsing source files
    MA2xx - Declaration walking
    MA3xx - Module path resolution
    MA9xx - Internal errors
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Structured error codes carried by ErrorRecords and log messages."""

    # Scanning errors (MA1xx)
    MA100 = "MA100"  # File read error
    MA101 = "MA101"  # Source could not be parsed
    MA102 = "MA102"  # No grammar for the file's language

    # Walker diagnostics (MA2xx)
    MA200 = "MA200"  # Unknown declaration shape

    # Resolver diagnostics (MA3xx)
    MA300 = "MA300"  # Import specifier matched no file

    # Internal (MA9xx)
    MA900 = "MA900"  # Unexpected error while processing a file
