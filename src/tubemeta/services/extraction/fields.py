"""
Per-field strategy tables for watch page metadata.

Each ``*_STRATEGIES`` tuple lists, in priority order, where a field may be
found: the typed ``videoDetails`` decode first, then regex scans over the
player response blob, then structured-tree lookups and regex scans over
``ytInitialData`` and the full page. YouTube moves these values between
layouts, locales and A/B experiments, which is why most fields have more
than one source.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from tubemeta.parsers.structured_tree import StructuredTree
from tubemeta.services.extraction.cascade import (
    ExtractionContext,
    Strategy,
    blob_regex,
    html_regex,
    string_literal_pattern,
    typed_field,
)
from tubemeta.services.extraction.normalizers import approx_number, digits_only


def _primary_info_renderers(context: ExtractionContext) -> Iterator[StructuredTree]:
    for item in context.watch_contents:
        renderer = item["videoPrimaryInfoRenderer"]
        if renderer.is_object:
            yield renderer


def primary_view_count_text(context: ExtractionContext) -> Optional[str]:
    """
    Read the view count label from ``videoPrimaryInfoRenderer``.

    Follows ``viewCount -> (videoViewCountRenderer | viewCountRenderer)``
    and takes ``viewCount.simpleText``, else the joined ``viewCount.runs``
    text, else ``shortViewCount.simpleText``. On live streams this is the
    ``"1,234 watching now"`` label.
    """
    for primary in _primary_info_renderers(context):
        renderer = primary["viewCount"].first_of(
            "videoViewCountRenderer", "viewCountRenderer"
        )
        if not renderer.is_object:
            continue
        view_count = renderer["viewCount"]
        text = (
            view_count["simpleText"].text
            or view_count.runs_text()
            or renderer.path("shortViewCount", "simpleText").text
        )
        if text:
            return text
    return None


def primary_date_text(context: ExtractionContext) -> Optional[str]:
    """Read ``videoPrimaryInfoRenderer.dateText.simpleText``."""
    for primary in _primary_info_renderers(context):
        text = primary.path("dateText", "simpleText").text
        if text:
            return text
    return None


def microformat_publish_date(context: ExtractionContext) -> Optional[str]:
    """Read ``microformat.playerMicroformatRenderer.publishDate``."""
    path = ("microformat", "playerMicroformatRenderer", "publishDate")
    return context.player_tree.path(*path).text or context.initial_data.path(*path).text


def _approx_duration_seconds(context: ExtractionContext) -> Optional[str]:
    match = re.search(string_literal_pattern("approxDurationMs"), context.blob or "")
    if not match or not match.group(1).isdigit():
        return None
    return str(int(match.group(1)) // 1000)


def view_count_from_raw(raw: str) -> Optional[str]:
    """
    Turn a raw view count capture into a decimal count string.

    Approximate parsing first (``"1.2M views"``), digits-only second;
    ``None`` when neither yields anything.
    """
    approx = approx_number(raw)
    if approx is not None:
        return str(approx)
    digits = digits_only(raw)
    return digits or None


def positive_seconds(raw: str) -> Optional[str]:
    """Accept only strictly positive integer second counts."""
    if not raw.isdigit():
        return None
    return raw if int(raw) > 0 else None


TITLE_STRATEGIES: tuple[Strategy, ...] = (
    typed_field("title"),
    blob_regex("title", string_literal_pattern("title")),
)

AUTHOR_STRATEGIES: tuple[Strategy, ...] = (
    typed_field("author"),
    blob_regex("author", string_literal_pattern("author")),
)

CHANNEL_ID_STRATEGIES: tuple[Strategy, ...] = (
    typed_field("channel_id"),
    blob_regex("channelId", string_literal_pattern("channelId")),
)

SHORT_DESCRIPTION_STRATEGIES: tuple[Strategy, ...] = (
    typed_field("short_description"),
    blob_regex("shortDescription", string_literal_pattern("shortDescription"), flags=re.DOTALL),
)

VIEW_COUNT_STRATEGIES: tuple[Strategy, ...] = (
    typed_field("view_count"),
    blob_regex("viewCount", string_literal_pattern("viewCount")),
    blob_regex("view_count", string_literal_pattern("view_count")),
    html_regex(
        "viewCountText.simpleText",
        r'"viewCountText"\s*:\s*\{\s*"simpleText"\s*:\s*"(.*?)"',
        flags=re.DOTALL,
    ),
    Strategy(name="tree:videoPrimaryInfoRenderer.viewCount", func=primary_view_count_text),
    html_regex(
        "viewCountRenderer.simpleText",
        r'(?:videoViewCountRenderer|viewCountRenderer)"\s*:\s*\{[^{]*?"viewCount"\s*:'
        r'\s*\{[^{]*?"simpleText"\s*:\s*"(.*?)"',
        flags=re.DOTALL,
    ),
    html_regex(
        "shortViewCount.simpleText",
        r'"shortViewCount"[^}]*?"simpleText"\s*:\s*"(.*?)"',
        flags=re.DOTALL,
    ),
    html_regex(
        "playerMicroformatRenderer.viewCount",
        r'playerMicroformatRenderer"[^{]*?\{[^}]*?"viewCount"\s*:\s*"(\d+)"',
        flags=re.DOTALL,
    ),
)

PUBLISHED_STRATEGIES: tuple[Strategy, ...] = (
    typed_field("publish_date"),
    blob_regex("publishDate", string_literal_pattern("publishDate")),
    blob_regex("uploadDate", string_literal_pattern("uploadDate")),
    html_regex("datePublished", r'"datePublished"\s*:\s*"(\d{4}-\d{2}-\d{2})'),
    Strategy(name="tree:videoPrimaryInfoRenderer.dateText", func=primary_date_text),
    html_regex(
        "dateText.simpleText",
        r'"dateText"\s*:\s*\{\s*"simpleText"\s*:\s*"(.*?)"',
        flags=re.DOTALL,
    ),
    Strategy(name="tree:playerMicroformatRenderer.publishDate", func=microformat_publish_date),
    html_regex(
        "playerMicroformatRenderer.publishDate",
        r'playerMicroformatRenderer"[^{]*?\{[^}]*?"publishDate"\s*:\s*"(\d{4}-\d{2}-\d{2})',
        flags=re.DOTALL,
    ),
)

DURATION_STRATEGIES: tuple[Strategy, ...] = (
    typed_field("length_seconds"),
    blob_regex("lengthSeconds", string_literal_pattern("lengthSeconds")),
    Strategy(name="blob:approxDurationMs", func=_approx_duration_seconds),
)
