"""
Watch page metadata extraction.

``extract_video_metadata`` is the engine's single entry point: a pure,
synchronous function of the page HTML. It locates the player response,
attempts the typed decode, runs every field cascade, applies the canonical
formatters once and assembles the immutable ``VideoMetadata`` record.

It performs no I/O and keeps no state, so it is safe to call concurrently
on independent documents.
"""

from __future__ import annotations

import logging
from datetime import datetime

from tubemeta.config.settings import settings
from tubemeta.exceptions import NoPlayerResponseFound
from tubemeta.models.player_response import decode_video_details
from tubemeta.models.video_metadata import VideoMetadata
from tubemeta.parsers.variable_locator import locate_player_response
from tubemeta.services.extraction.cascade import ExtractionContext, run_cascade
from tubemeta.services.extraction.fields import (
    AUTHOR_STRATEGIES,
    CHANNEL_ID_STRATEGIES,
    DURATION_STRATEGIES,
    PUBLISHED_STRATEGIES,
    SHORT_DESCRIPTION_STRATEGIES,
    TITLE_STRATEGIES,
    VIEW_COUNT_STRATEGIES,
    positive_seconds,
    primary_view_count_text,
    view_count_from_raw,
)
from tubemeta.services.extraction.formatters import (
    normalize_published_display,
    normalize_view_count_text,
)
from tubemeta.services.extraction.long_description import extract_long_description
from tubemeta.services.extraction.normalizers import format_duration

logger = logging.getLogger(__name__)


def _live_view_count_text(context: ExtractionContext) -> str | None:
    try:
        text = primary_view_count_text(context)
    except Exception as e:
        logger.debug("Live view count lookup failed: %s: %s", type(e).__name__, e)
        return None
    return text.strip() if text and text.strip() else None


def extract_video_metadata(
    html: str,
    video_id: str,
    *,
    strict: bool = True,
    language: str | None = None,
    now: datetime | None = None,
) -> VideoMetadata:
    """
    Extract video metadata from a watch page.

    Parameters
    ----------
    html : str
        Watch page HTML, as fetched from the canonical watch URL.
    video_id : str
        The video ID the page was fetched for. Copied to the record as-is.
    strict : bool, optional
        If True (default), a page without a locatable player response
        raises ``NoPlayerResponseFound``. If False, the cascade runs
        against ``ytInitialData`` and the raw HTML only, typically leaving
        title and author empty for an oEmbed lookup by the caller.
    language : str | None, optional
        Display language for the canonical labels (default:
        ``settings.display_language``).
    now : datetime | None, optional
        Reference time for relative date labels (default: current time).

    Returns
    -------
    VideoMetadata
        The assembled record.

    Raises
    ------
    NoPlayerResponseFound
        If ``strict`` and no balanced ``ytInitialPlayerResponse`` object
        exists in the page.
    """
    display_language = language or settings.display_language

    blob = locate_player_response(html)
    if blob is None:
        logger.debug(
            "ytInitialPlayerResponse missing for video %s (html length %d)",
            video_id,
            len(html),
        )
        if strict:
            raise NoPlayerResponseFound(video_id)
    if "consent.google.com" in html:
        logger.debug("Consent page markers present for video %s", video_id)

    blob_text = blob.text if blob is not None else None
    context = ExtractionContext(
        html=html, blob=blob_text, details=decode_video_details(blob_text)
    )

    title = run_cascade("title", TITLE_STRATEGIES, context)
    author = run_cascade("author", AUTHOR_STRATEGIES, context)
    channel_id = run_cascade("channel_id", CHANNEL_ID_STRATEGIES, context)
    short_description = run_cascade(
        "short_description", SHORT_DESCRIPTION_STRATEGIES, context
    )
    view_count = run_cascade(
        "view_count", VIEW_COUNT_STRATEGIES, context, transform=view_count_from_raw
    )
    published = run_cascade("published_time", PUBLISHED_STRATEGIES, context)
    duration = run_cascade(
        "duration_seconds", DURATION_STRATEGIES, context, transform=positive_seconds
    )

    # The live label ("1,234 watching now") always wins for the raw text,
    # whichever strategy supplied the canonical count.
    raw_view_count_text = view_count.raw or ""
    live_text = _live_view_count_text(context)
    if live_text:
        raw_view_count_text = live_text

    short_text = short_description.value or ""
    long_description = extract_long_description(context, short_text)

    duration_seconds = int(duration.value) if duration.value else None
    published_text, _ = normalize_published_display(
        published.value or "", now=now, language=display_language
    )

    return VideoMetadata(
        id=video_id,
        title=title.value or "",
        author=author.value or "",
        channel_id=channel_id.value,
        short_description=short_text,
        long_description=long_description,
        view_count_text=normalize_view_count_text(
            view_count.value or "", display_language
        ),
        raw_view_count_text=raw_view_count_text,
        published_time_text=published_text,
        duration_seconds=duration_seconds,
        duration_text=format_duration(duration_seconds) if duration_seconds else "",
    )
