"""
Balanced JSON object scanning over raw HTML/JS text.

YouTube embeds its bootstrap JSON in ``<script>`` tags as JavaScript
assignments. A non-greedy regex cannot find the end of such an object, so
the object is extracted by brace-counting instead, honouring string
literals and backslash escapes so that braces inside values (e.g.
``"title":"a {test} title"``) are ignored.
"""

from __future__ import annotations

import logging

from tubemeta.models.extraction import ExtractedBlob

logger = logging.getLogger(__name__)


def scan_balanced_object(text: str, start: int) -> ExtractedBlob | None:
    """
    Extract a balanced JSON object from text starting at the given position.

    Depth starts at 0 and only reacts to ``{``/``}`` outside string
    literals, so brackets and quotes inside arrays are handled
    transparently. A ``<`` seen before the opening brace was consumed
    means the caller pointed at the wrong place (typically the end of a
    ``<script>`` block) and aborts the scan.

    Parameters
    ----------
    text : str
        Raw document text.
    start : int
        Position at which to begin scanning, normally the opening ``{``.

    Returns
    -------
    ExtractedBlob | None
        The balanced object text and the index just after its closing
        brace, or ``None`` if the scan aborted or the object is
        unterminated.

    Examples
    --------
    >>> blob = scan_balanced_object('x = {"a": "}"};', 4)
    >>> blob.text
    '{"a": "}"}'
    >>> blob.continuation_index
    14
    """
    if start < 0 or start >= len(text):
        return None

    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(text)):
        ch = text[i]

        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return ExtractedBlob(text=text[start : i + 1], continuation_index=i + 1)
        elif ch == "<" and depth == 0:
            return None

    logger.debug("Unterminated object starting at index %d", start)
    return None
