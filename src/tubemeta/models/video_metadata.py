"""
Video metadata models returned by the extraction engine.

Defines the final, immutable ``VideoMetadata`` record and the small
``OEmbedResult`` produced by the oEmbed fallback.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class VideoMetadata(BaseModel):
    """
    Metadata recovered from a YouTube watch page.

    The record is frozen: it is built once by the extractor and owned by
    the caller afterwards. ``view_count_text`` and ``published_time_text``
    always hold canonical display strings, while ``raw_view_count_text``
    keeps the raw capture (e.g. ``"1,234 watching now"``) so callers can
    detect live streams.

    Attributes
    ----------
    id : str
        Caller-supplied video ID. Never derived from the page.
    title : str
        Video title, empty if unrecoverable.
    author : str
        Channel display name, empty if unrecoverable.
    channel_id : str | None
        Channel ID, if recovered.
    short_description : str
        Description from the player response.
    long_description : str | None
        A longer description mined from the page, only set when strictly
        longer than ``short_description``.
    view_count_text : str
        Canonical view count label (e.g. ``"1.2M views"``).
    raw_view_count_text : str
        Raw view count capture, preserved for liveness heuristics.
    published_time_text : str
        Canonical publish date label (e.g. ``"3 years ago"``).
    duration_seconds : int | None
        Duration in seconds, if known and positive.
    duration_text : str
        ``M:SS`` or ``H:MM:SS``, empty when the duration is unknown.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="YouTube video ID")
    title: str = Field(default="")
    author: str = Field(default="")
    channel_id: Optional[str] = Field(default=None)
    short_description: str = Field(default="")
    long_description: Optional[str] = Field(default=None)
    view_count_text: str = Field(default="")
    raw_view_count_text: str = Field(default="")
    published_time_text: str = Field(default="")
    duration_seconds: Optional[int] = Field(default=None, gt=0)
    duration_text: str = Field(default="")

    @model_validator(mode="after")
    def validate_long_description(self) -> "VideoMetadata":
        """Ensure the long description is strictly longer than the short one."""
        if self.long_description is not None and len(self.long_description) <= len(
            self.short_description
        ):
            raise ValueError(
                "long_description must be strictly longer than short_description"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def effective_description(self) -> str:
        """The long description when available, otherwise the short one."""
        if self.long_description:
            return self.long_description
        return self.short_description

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_live(self) -> bool:
        """Whether the raw view count text indicates a live stream."""
        return "watching" in self.raw_view_count_text.lower()


class OEmbedResult(BaseModel):
    """Title and author returned by the oEmbed endpoint."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="")
    author: str = Field(default="")
