"""
Locators for the JSON objects YouTube assigns to page-level variables.

A watch page carries several bootstrap objects, each assigned with one of a
handful of spellings (``var x = {...}``, ``window["x"] = {...}``, ...).
Each locator searches the marker spellings in order, hands the next ``{``
to the document scanner and, where an object may appear several times,
validates each candidate by its keys before accepting it.

Constants
---------
PLAYER_RESPONSE_MARKERS
    Assignment spellings of ``ytInitialPlayerResponse``.
INITIAL_DATA_MARKERS
    Assignment spellings of ``ytInitialData``.
YTCFG_MARKERS
    Call/assignment spellings of the ``ytcfg`` client configuration.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterator, Sequence

from tubemeta.models.extraction import ExtractedBlob
from tubemeta.parsers.document_scanner import scan_balanced_object
from tubemeta.parsers.structured_tree import StructuredTree

logger = logging.getLogger(__name__)

PLAYER_RESPONSE_MARKERS: tuple[str, ...] = (
    "ytInitialPlayerResponse = ",
    "var ytInitialPlayerResponse = ",
    "window.ytInitialPlayerResponse = ",
)

INITIAL_DATA_MARKERS: tuple[str, ...] = (
    "ytInitialData = {",
    "var ytInitialData = {",
    'window["ytInitialData"] = {',
    "window.ytInitialData = {",
    'ytInitialData": {',
)

YTCFG_MARKERS: tuple[str, ...] = (
    "ytcfg.set(",
    "ytcfg.data_ = ",
)

YTCFG_REQUIRED_KEYS: tuple[str, ...] = ("INNERTUBE_API_KEY", "INNERTUBE_CONTEXT")


def _iter_marker_blobs(
    html: str, marker: str, *, search_from: int = 0
) -> Iterator[ExtractedBlob]:
    """
    Yield the balanced object after each occurrence of a marker.

    Scanning resumes from the previous blob's continuation index. The
    iteration stops at the first occurrence that cannot be balanced.
    """
    position = search_from
    while True:
        found = html.find(marker, position)
        if found < 0:
            return
        brace = html.find("{", found)
        if brace < 0:
            return
        blob = scan_balanced_object(html, brace)
        if blob is None:
            logger.debug("Marker %r at %d did not yield a balanced object", marker, found)
            return
        yield blob
        position = blob.continuation_index


def _load_object(text: str) -> dict[str, Any] | None:
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    return value if isinstance(value, dict) else None


def locate_json_object(
    html: str,
    markers: Sequence[str],
    required_keys: Sequence[str] = (),
) -> tuple[ExtractedBlob, dict[str, Any]] | None:
    """
    Locate the first marker-assigned object that decodes and validates.

    Parameters
    ----------
    html : str
        Raw document text.
    markers : Sequence[str]
        Marker spellings, tried in order.
    required_keys : Sequence[str], optional
        When non-empty, a candidate is accepted only if at least one of
        these keys is present at its top level. Rejected candidates do not
        end the search: scanning resumes after them for the next
        occurrence of the same marker.

    Returns
    -------
    tuple[ExtractedBlob, dict[str, Any]] | None
        The accepted blob and its decoded object, or ``None``.
    """
    for marker in markers:
        for blob in _iter_marker_blobs(html, marker):
            data = _load_object(blob.text)
            if data is None:
                continue
            if required_keys and not any(key in data for key in required_keys):
                logger.debug(
                    "Object after %r lacks required keys %s, resuming at %d",
                    marker,
                    list(required_keys),
                    blob.continuation_index,
                )
                continue
            return blob, data
    return None


def locate_object(
    html: str,
    markers: Sequence[str],
    required_keys: Sequence[str] | None = None,
) -> ExtractedBlob | None:
    """
    Locate a marker-assigned object.

    Parameters
    ----------
    html : str
        Raw document text.
    markers : Sequence[str]
        Marker spellings, tried in order.
    required_keys : Sequence[str] | None, optional
        If given, delegate to ``locate_json_object`` so the candidate must
        decode and contain one of the keys. If ``None``, the first balanced
        object after the first occurrence of any marker is returned
        without decoding.

    Returns
    -------
    ExtractedBlob | None
        The located blob, or ``None``.
    """
    if required_keys is not None:
        located = locate_json_object(html, markers, required_keys)
        return located[0] if located else None

    for marker in markers:
        blob = next(_iter_marker_blobs(html, marker), None)
        if blob is not None:
            return blob
    return None


def locate_player_response(html: str) -> ExtractedBlob | None:
    """Locate the ``ytInitialPlayerResponse`` blob."""
    return locate_object(html, PLAYER_RESPONSE_MARKERS)


def locate_initial_data(html: str) -> StructuredTree | None:
    """
    Locate and decode the ``ytInitialData`` object.

    Tries every known assignment spelling, then falls back to the first
    ``{`` after any bare ``ytInitialData`` mention.

    Parameters
    ----------
    html : str
        Raw document text.

    Returns
    -------
    StructuredTree | None
        The decoded tree, or ``None`` if no decodable object is found.
    """
    located = locate_json_object(html, INITIAL_DATA_MARKERS)
    if located is not None:
        return StructuredTree.from_value(located[1])

    mention = html.find("ytInitialData")
    if mention < 0:
        return None
    brace = html.find("{", mention + len("ytInitialData"))
    if brace < 0:
        return None
    blob = scan_balanced_object(html, brace)
    if blob is None:
        return None
    data = _load_object(blob.text)
    return StructuredTree.from_value(data) if data is not None else None


def extract_string_field(text: str, key: str) -> str | None:
    """
    Capture a single string-literal field with a narrow regex.

    Last resort for isolated scalar fields when no balanced object can be
    located. The value is returned exactly as written in the source.

    Parameters
    ----------
    text : str
        Text to search.
    key : str
        JSON key name.

    Returns
    -------
    str | None
        The first ``"KEY":"value"`` value, or ``None``.
    """
    match = re.search(rf'"{re.escape(key)}"\s*:\s*"((?:[^"\\]|\\.)*)"', text)
    return match.group(1) if match else None


def locate_ytcfg(html: str) -> dict[str, Any] | None:
    """
    Locate the ``ytcfg`` client configuration.

    ``ytcfg.set({...})`` is called several times per page, most calls
    carrying unrelated flags; only an object holding ``INNERTUBE_API_KEY``
    or ``INNERTUBE_CONTEXT`` is accepted. If none is found, the API key
    alone is recovered by string search.

    Parameters
    ----------
    html : str
        Raw document text.

    Returns
    -------
    dict[str, Any] | None
        The configuration object, ``{"INNERTUBE_API_KEY": key}`` from the
        last-resort search, or ``None``.
    """
    located = locate_json_object(html, YTCFG_MARKERS, YTCFG_REQUIRED_KEYS)
    if located is not None:
        return located[1]

    api_key = extract_string_field(html, "INNERTUBE_API_KEY")
    if api_key:
        return {"INNERTUBE_API_KEY": api_key}
    return None
