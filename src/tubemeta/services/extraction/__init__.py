"""
Watch page metadata extraction engine.

The engine turns an already-fetched watch page into a ``VideoMetadata``
record. It is synchronous and pure; fetching belongs to
``tubemeta.services.watch_page_client``.

Modules
-------
cascade
    Extraction context and the cascade runner.
fields
    Ordered strategy tables for each metadata field.
long_description
    Longest-candidate description recovery.
normalizers
    Count, duration and escape normalization helpers.
formatters
    Canonical view count and publish date labels.
extractor
    ``extract_video_metadata``, the engine entry point.
"""

from __future__ import annotations

from tubemeta.services.extraction.extractor import extract_video_metadata

__all__ = ["extract_video_metadata"]
