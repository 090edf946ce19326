"""
Services module for tubemeta.

Contains the watch page extraction engine and the HTTP client that feeds it.
"""

from __future__ import annotations

from tubemeta.services.extraction import extract_video_metadata
from tubemeta.services.watch_page_client import WatchPageClient

__all__: list[str] = ["WatchPageClient", "extract_video_metadata"]
