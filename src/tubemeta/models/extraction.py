"""
Value types shared by the scanning and extraction layers.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractedBlob:
    """
    A balanced JSON object located inside a larger document.

    Attributes
    ----------
    text : str
        The object text, from the opening ``{`` to the matching ``}``
        inclusive.
    continuation_index : int
        Index in the source document just after the closing brace. Used
        to resume scanning for further occurrences of the same marker.
    """

    text: str
    continuation_index: int


@dataclass(frozen=True)
class CascadeOutcome:
    """
    Result of running one field cascade.

    Attributes
    ----------
    value : str | None
        The field value after the cascade's transform, or ``None`` when
        every strategy came up empty.
    raw : str | None
        The raw capture of the winning strategy, before transformation.
    strategy : str | None
        Name of the winning strategy.
    """

    value: str | None = None
    raw: str | None = None
    strategy: str | None = None

    @property
    def found(self) -> bool:
        """Whether any strategy produced a value."""
        return self.value is not None
