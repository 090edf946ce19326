"""
tubemeta - YouTube watch-page metadata recovery.

Recovers video metadata (title, author, channel, descriptions, view count,
publish date, duration) directly from the markup of a YouTube watch page,
without an official API key.
"""

from __future__ import annotations

__version__ = "0.3.0"
__author__ = "tubemeta"
__license__ = "AGPL-3.0-or-later"

__all__ = ["__version__", "__author__", "__license__"]
