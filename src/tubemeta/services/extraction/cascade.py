"""
Cascade runner for per-field extraction strategies.

Every metadata field is recovered by an ordered tuple of ``Strategy``
objects. ``run_cascade`` tries them in order and stops at the first
non-empty result, so the per-field "if still empty, try the next source"
logic lives in one place and the field definitions stay declarative.

Classes
-------
ExtractionContext
    Immutable inputs shared by all strategies of one extraction call.
Strategy
    A named extraction function.

Functions
---------
run_cascade
    Run a field's strategies until one produces a value.
blob_regex / html_regex / typed_field
    Constructors for the common strategy shapes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import cached_property
from typing import Callable, Optional, Sequence

from tubemeta.models.extraction import CascadeOutcome
from tubemeta.models.player_response import VideoDetails
from tubemeta.parsers.structured_tree import StructuredTree, parse_tree
from tubemeta.parsers.variable_locator import locate_initial_data
from tubemeta.services.extraction.normalizers import unescape_json_fragment

logger = logging.getLogger(__name__)

# Path from the ytInitialData root to the watch page's primary column items.
WATCH_CONTENTS_PATH: tuple[str, ...] = (
    "contents",
    "twoColumnWatchNextResults",
    "results",
    "results",
    "contents",
)


@dataclass(frozen=True)
class ExtractionContext:
    """
    Inputs shared by every strategy of a single extraction call.

    The structured trees are decoded lazily and at most once per context,
    so fields resolved by the typed decode never pay for a full
    ``ytInitialData`` parse.

    Attributes
    ----------
    html : str
        The full watch page HTML. Never mutated.
    blob : str | None
        The located ``ytInitialPlayerResponse`` text, if any.
    details : VideoDetails | None
        The typed ``videoDetails`` decode, if it succeeded.
    """

    html: str
    blob: Optional[str] = None
    details: Optional[VideoDetails] = None

    @cached_property
    def initial_data(self) -> StructuredTree:
        """The decoded ``ytInitialData`` tree, or MISSING."""
        return locate_initial_data(self.html) or StructuredTree.missing()

    @cached_property
    def player_tree(self) -> StructuredTree:
        """The player response blob as a structured tree, or MISSING."""
        return parse_tree(self.blob) or StructuredTree.missing()

    @cached_property
    def watch_contents(self) -> list[StructuredTree]:
        """Items of the primary watch column (primary/secondary info renderers)."""
        return list(self.initial_data.path(*WATCH_CONTENTS_PATH).children())


StrategyFunc = Callable[[ExtractionContext], Optional[str]]
Transform = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class Strategy:
    """
    A named extraction strategy.

    Attributes
    ----------
    name : str
        Identifier used in debug logs.
    func : Callable[[ExtractionContext], str | None]
        Returns a raw capture, or ``None`` when the source lacks the field.
    """

    name: str
    func: StrategyFunc

    def __call__(self, context: ExtractionContext) -> Optional[str]:
        return self.func(context)


def run_cascade(
    field: str,
    strategies: Sequence[Strategy],
    context: ExtractionContext,
    transform: Transform | None = None,
) -> CascadeOutcome:
    """
    Run a field's strategies in order until one yields a non-empty value.

    Each raw capture is trimmed, then passed through ``transform`` when
    given. An empty capture, a ``None``/empty transform result, or any
    exception counts as "no result" and the next strategy is tried. A
    failing strategy therefore never aborts the extraction.

    Parameters
    ----------
    field : str
        Field name, for logging.
    strategies : Sequence[Strategy]
        Strategies in priority order.
    context : ExtractionContext
        Shared extraction inputs.
    transform : Callable[[str], str | None] | None, optional
        Maps a raw capture to the field value.

    Returns
    -------
    CascadeOutcome
        The winning value, its raw capture and the strategy name, or an
        empty outcome if every strategy failed.
    """
    for strategy in strategies:
        try:
            captured = strategy(context)
            if captured is None:
                continue
            raw = captured.strip()
            if not raw:
                continue
            value = transform(raw) if transform is not None else raw
        except Exception as e:
            # Never raise: a broken strategy only means "no result"
            logger.debug(
                "Strategy %s for %s failed: %s: %s",
                strategy.name,
                field,
                type(e).__name__,
                e,
            )
            continue
        if not value:
            continue
        logger.debug("Field %s resolved by %s", field, strategy.name)
        return CascadeOutcome(value=value, raw=raw, strategy=strategy.name)

    logger.debug("Field %s unresolved after %d strategies", field, len(strategies))
    return CascadeOutcome()


def string_literal_pattern(key: str) -> str:
    """Regex capturing a JSON string value (escapes included) for ``key``."""
    return rf'"{re.escape(key)}"\s*:\s*"((?:[^"\\]|\\.)*)"'


def typed_field(attribute: str) -> Strategy:
    """Strategy reading a field of the typed ``videoDetails`` decode."""

    def _read(context: ExtractionContext) -> Optional[str]:
        if context.details is None:
            return None
        value = getattr(context.details, attribute)
        return value if isinstance(value, str) else None

    return Strategy(name=f"typed:{attribute}", func=_read)


def blob_regex(
    name: str,
    pattern: str,
    *,
    flags: int = 0,
    unescape: bool = True,
) -> Strategy:
    """Strategy applying a one-group regex to the player response blob."""
    compiled = re.compile(pattern, flags)

    def _search(context: ExtractionContext) -> Optional[str]:
        if not context.blob:
            return None
        match = compiled.search(context.blob)
        if not match:
            return None
        return unescape_json_fragment(match.group(1)) if unescape else match.group(1)

    return Strategy(name=f"blob:{name}", func=_search)


def html_regex(
    name: str,
    pattern: str,
    *,
    flags: int = 0,
    unescape: bool = True,
) -> Strategy:
    """Strategy applying a one-group regex to the full page HTML."""
    compiled = re.compile(pattern, flags)

    def _search(context: ExtractionContext) -> Optional[str]:
        match = compiled.search(context.html)
        if not match:
            return None
        return unescape_json_fragment(match.group(1)) if unescape else match.group(1)

    return Strategy(name=f"html:{name}", func=_search)
