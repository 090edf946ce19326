"""
Long description recovery.

The player response's ``shortDescription`` is frequently truncated. The
full text may live in several other places on the page; every source is
tried, the longest candidate wins, and it is accepted only when strictly
longer than the short description.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, Iterator, Optional

from tubemeta.parsers.structured_tree import StructuredTree
from tubemeta.services.extraction.cascade import ExtractionContext
from tubemeta.services.extraction.normalizers import unescape_json_fragment

logger = logging.getLogger(__name__)

# A run starting with "0:00 Intro" / "1:02:03 Outro" begins a new chapter line.
_TIMESTAMP_LINE_RE = re.compile(r"^(?:\d{1,2}:)?\d{1,2}:[0-5]\d\s+.+")
_RUNS_START_RE = re.compile(r'"description"\s*:\s*\{\s*"runs"\s*:\s*\[')
_STRING_VALUE = r'"((?:[^"\\]|\\.)*)"'

_ATTRIBUTED_WINDOW = 8000
_MICROFORMAT_WINDOW = 6000
_RUNS_SCAN_LIMIT = 20000

_SIMPLE_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "/": "/",
    "\\": "\\",
    '"': '"',
}


def combine_runs(texts: Iterable[str]) -> str:
    """
    Concatenate description runs, keeping chapter timestamps on their own lines.

    A newline is inserted before any run whose text starts with a
    timestamp (``M:SS`` or ``H:MM:SS`` followed by a label), unless the
    output is empty or already ends with one. Carriage returns are dropped.

    Parameters
    ----------
    texts : Iterable[str]
        Text of each run, in order.

    Returns
    -------
    str
        The combined description.
    """
    out = ""
    for text in texts:
        text = text.replace("\\n", "\n").replace("\r", "")
        if _TIMESTAMP_LINE_RE.match(text) and out and not out.endswith("\n"):
            out += "\n"
        out += text
    return out


def _description_text(description: StructuredTree) -> Iterator[str]:
    simple = description["simpleText"].text
    if simple:
        yield simple.replace("\\n", "\n")
    runs = [run["text"].text or "" for run in description["runs"].children()]
    if runs:
        yield combine_runs(runs)


def secondary_info_descriptions(context: ExtractionContext) -> Iterator[str]:
    """Descriptions under ``videoSecondaryInfoRenderer.description``."""
    for item in context.watch_contents:
        yield from _description_text(item.path("videoSecondaryInfoRenderer", "description"))


def structured_panel_descriptions(context: ExtractionContext) -> Iterator[str]:
    """Descriptions in the ``structured-description`` engagement panel."""
    for panel in context.initial_data["engagementPanels"].children():
        section = panel["engagementPanelSectionListRenderer"]
        identifier = section["identifier"].text or ""
        if "structured-description" not in identifier:
            continue
        items = section.path("content", "structuredDescriptionContentRenderer", "items")
        for item in items.children():
            yield from _description_text(
                item.path("videoDescriptionMetadataRenderer", "description")
            )


def attributed_description(context: ExtractionContext) -> Iterator[str]:
    """``content`` or ``simpleText`` shortly after ``"attributedDescription":``."""
    start = context.html.find('"attributedDescription":')
    if start < 0:
        return
    snippet = context.html[start : start + _ATTRIBUTED_WINDOW]
    for key in ("content", "simpleText"):
        match = re.search(rf'"{key}"\s*:\s*{_STRING_VALUE}', snippet)
        if match:
            yield unescape_json_fragment(match.group(1))
            return


def microformat_description(context: ExtractionContext) -> Iterator[str]:
    """``description...simpleText`` shortly after ``microformatDataRenderer``."""
    start = context.html.find("microformatDataRenderer")
    if start < 0:
        return
    snippet = context.html[start : start + _MICROFORMAT_WINDOW]
    match = re.search(
        rf'"description"\s*:\s*\{{.*?"simpleText"\s*:\s*{_STRING_VALUE}',
        snippet,
        re.DOTALL,
    )
    if match:
        yield unescape_json_fragment(match.group(1))


def _read_string(text: str, start: int) -> tuple[str, int]:
    """Decode the JSON string literal opening at ``start``; return it and the index after it."""
    buffer: list[str] = []
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == '"':
            return "".join(buffer), i + 1
        if ch == "\\" and i + 1 < len(text):
            escaped = text[i + 1]
            if escaped == "u" and re.fullmatch(r"[0-9a-fA-F]{4}", text[i + 2 : i + 6]):
                buffer.append(chr(int(text[i + 2 : i + 6], 16)))
                i += 6
                continue
            buffer.append(_SIMPLE_ESCAPES.get(escaped, escaped))
            i += 2
            continue
        buffer.append(ch)
        i += 1
    return "".join(buffer), len(text)


def scan_description_runs(html: str) -> Optional[str]:
    """
    Collect ``"description":{"runs":[...]}`` text from ``ytInitialData`` by scanning.

    Used when the tree decode of ``ytInitialData`` failed (e.g. the page
    truncated the object). Walks the runs array character by character,
    tracking string literals and nesting, and takes the string value of
    each run-level ``text`` key. Collection stops when the array closes or
    after roughly 20000 characters.

    Parameters
    ----------
    html : str
        Full page HTML.

    Returns
    -------
    str | None
        The combined runs text, or ``None`` if no runs were found.
    """
    anchor = html.find("ytInitialData")
    if anchor < 0:
        return None
    runs_start = _RUNS_START_RE.search(html, anchor)
    if not runs_start:
        return None

    texts: list[str] = []
    collected = 0
    depth = 1
    expecting_text = False
    i = runs_start.end()
    while i < len(html) and depth > 0 and collected < _RUNS_SCAN_LIMIT:
        ch = html[i]
        if ch == '"':
            token, i = _read_string(html, i)
            if expecting_text:
                texts.append(token)
                collected += len(token)
                expecting_text = False
                continue
            j = i
            while j < len(html) and html[j].isspace():
                j += 1
            # depth 2 means a key of a run object directly inside the array
            if token == "text" and depth == 2 and j < len(html) and html[j] == ":":
                expecting_text = True
                i = j + 1
            continue
        if ch in "[{":
            depth += 1
        elif ch in "]}":
            depth -= 1
        elif not ch.isspace():
            expecting_text = False
        i += 1

    if not texts:
        return None
    return combine_runs(texts)


def _scanned_runs(context: ExtractionContext) -> Iterator[str]:
    scanned = scan_description_runs(context.html)
    if scanned:
        yield scanned


LONG_DESCRIPTION_SOURCES: tuple[tuple[str, Callable[[ExtractionContext], Iterable[str]]], ...] = (
    ("tree:videoSecondaryInfoRenderer.description", secondary_info_descriptions),
    ("tree:structured-description", structured_panel_descriptions),
    ("html:attributedDescription", attributed_description),
    ("html:microformatDataRenderer", microformat_description),
    ("scan:description.runs", _scanned_runs),
)


def extract_long_description(
    context: ExtractionContext, short_description: str
) -> Optional[str]:
    """
    Pick the longest description candidate across all sources.

    Parameters
    ----------
    context : ExtractionContext
        Shared extraction inputs.
    short_description : str
        The already-resolved short description.

    Returns
    -------
    str | None
        The longest candidate if it is strictly longer (by character
        count) than ``short_description``, otherwise ``None``.
    """
    best = ""
    best_source: str | None = None
    for name, source in LONG_DESCRIPTION_SOURCES:
        try:
            candidates = list(source(context))
        except Exception as e:
            logger.debug(
                "Long description source %s failed: %s: %s", name, type(e).__name__, e
            )
            continue
        for candidate in candidates:
            if len(candidate) > len(best):
                best = candidate
                best_source = name

    if best and len(best) > len(short_description):
        logger.debug("Long description taken from %s (%d chars)", best_source, len(best))
        return best
    return None
