"""
CLI constants for tubemeta.

Exit codes follow Unix conventions and map to user-facing error categories.
"""

from __future__ import annotations

from typing import Final

EXIT_SUCCESS: Final[int] = 0
"""Operation completed normally."""

EXIT_USER_ERROR: Final[int] = 1
"""
User error: unreadable input file, page without a player response.
"""

EXIT_SYSTEM_ERROR: Final[int] = 2
"""
System error: network failure, non-200 response from YouTube.
"""

LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
