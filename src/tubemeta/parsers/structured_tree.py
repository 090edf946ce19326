"""
Schema-free JSON tree with safe, path-based lookups.

``ytInitialData`` is a deeply nested renderer tree whose shape varies by
request and locale. Rather than casting ``dict``/``list`` values at every
step, lookups go through ``StructuredTree``: every access returns another
tree, and a failed access returns a ``MISSING`` tree instead of raising.
Only the final leaf is converted back to a Python value.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Union

logger = logging.getLogger(__name__)

PathSegment = Union[str, int]


class TreeKind(str, Enum):
    """Tag of a ``StructuredTree`` node."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"
    MISSING = "missing"


def _kind_of(value: Any) -> TreeKind:
    # bool is a subclass of int, so it must be tested first
    if isinstance(value, bool):
        return TreeKind.BOOL
    if isinstance(value, dict):
        return TreeKind.OBJECT
    if isinstance(value, list):
        return TreeKind.ARRAY
    if isinstance(value, str):
        return TreeKind.STRING
    if isinstance(value, (int, float)):
        return TreeKind.NUMBER
    if value is None:
        return TreeKind.NULL
    raise TypeError(f"Unsupported JSON value type: {type(value).__name__}")


@dataclass(frozen=True)
class StructuredTree:
    """
    A tagged JSON value.

    Attributes
    ----------
    kind : TreeKind
        The node's tag.
    value : Any
        The underlying decoded JSON value (``None`` for NULL and MISSING).

    Examples
    --------
    >>> tree = StructuredTree.from_value({"a": [{"b": "x"}]})
    >>> tree.path("a", 0, "b").text
    'x'
    >>> tree.path("a", 5, "b").is_missing
    True
    """

    kind: TreeKind
    value: Any = None

    @classmethod
    def from_value(cls, value: Any) -> StructuredTree:
        """Wrap an already-decoded JSON value."""
        return cls(kind=_kind_of(value), value=value)

    @classmethod
    def missing(cls) -> StructuredTree:
        """Return the MISSING sentinel tree."""
        return _MISSING

    @property
    def is_missing(self) -> bool:
        """Whether this node is the result of a failed lookup."""
        return self.kind is TreeKind.MISSING

    @property
    def is_object(self) -> bool:
        """Whether this node is a JSON object."""
        return self.kind is TreeKind.OBJECT

    @property
    def is_array(self) -> bool:
        """Whether this node is a JSON array."""
        return self.kind is TreeKind.ARRAY

    def __getitem__(self, segment: PathSegment) -> StructuredTree:
        if self.kind is TreeKind.OBJECT and isinstance(segment, str):
            if segment in self.value:
                return StructuredTree.from_value(self.value[segment])
        elif self.kind is TreeKind.ARRAY and isinstance(segment, int):
            if -len(self.value) <= segment < len(self.value):
                return StructuredTree.from_value(self.value[segment])
        return _MISSING

    def path(self, *segments: PathSegment) -> StructuredTree:
        """
        Follow a sequence of object keys and array indices.

        Parameters
        ----------
        *segments : str | int
            Keys (for objects) and indices (for arrays), applied in order.

        Returns
        -------
        StructuredTree
            The node at the end of the path, or MISSING if any step fails.
        """
        node = self
        for segment in segments:
            node = node[segment]
            if node.is_missing:
                break
        return node

    def first_of(self, *keys: str) -> StructuredTree:
        """Return the child under the first present key, or MISSING."""
        for key in keys:
            node = self[key]
            if not node.is_missing:
                return node
        return _MISSING

    def children(self) -> Iterator[StructuredTree]:
        """Iterate array elements, or nothing for non-arrays."""
        if self.kind is TreeKind.ARRAY:
            for item in self.value:
                yield StructuredTree.from_value(item)

    def keys(self) -> list[str]:
        """Object keys, or an empty list for non-objects."""
        if self.kind is TreeKind.OBJECT:
            return list(self.value)
        return []

    @property
    def text(self) -> str | None:
        """The string value, or ``None`` if this is not a STRING node."""
        if self.kind is TreeKind.STRING:
            return str(self.value)
        return None

    @property
    def number(self) -> int | float | None:
        """The numeric value, or ``None`` if this is not a NUMBER node."""
        if self.kind is TreeKind.NUMBER:
            return self.value  # type: ignore[no-any-return]
        return None

    def runs_text(self) -> str | None:
        """
        Join the ``text`` of every element of a ``runs`` array.

        YouTube renders formatted text either as ``{"simpleText": ...}``
        or as ``{"runs": [{"text": ...}, ...]}``; this handles the latter
        on the node holding the ``runs`` key.

        Returns
        -------
        str | None
            The joined text, or ``None`` if there are no textual runs.
        """
        parts = [run["text"].text for run in self["runs"].children()]
        joined = "".join(part for part in parts if part)
        return joined or None


_MISSING = StructuredTree(kind=TreeKind.MISSING)


def parse_tree(text: str | None) -> StructuredTree | None:
    """
    Decode a JSON substring into a ``StructuredTree``.

    Parameters
    ----------
    text : str | None
        JSON text, typically a balanced blob from the document scanner.

    Returns
    -------
    StructuredTree | None
        The decoded tree, or ``None`` if the text is empty or not valid
        JSON.
    """
    if not text:
        return None
    try:
        return StructuredTree.from_value(json.loads(text))
    except (json.JSONDecodeError, ValueError) as e:
        logger.debug("Structured tree decode failed: %s", e)
        return None
