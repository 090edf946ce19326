"""
Pydantic models for the ``ytInitialPlayerResponse`` blob.

Only the ``videoDetails`` fields the application displays are modelled.
The decode is deliberately lenient: unknown keys are ignored, numbers are
coerced to strings, and any failure yields ``None`` so that every field
falls through to the regex and structured-tree cascades.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class BasePlayerModel(BaseModel):
    """
    Base model for player response fragments.

    Configures:
    - populate_by_name: Allow both camelCase (page JSON) and snake_case (Python)
    - alias_generator: Auto-convert snake_case fields to camelCase
    - extra='ignore': Ignore the many fields YouTube ships that we never read
    - coerce_numbers_to_str: ``viewCount``/``lengthSeconds`` may arrive as numbers
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
        coerce_numbers_to_str=True,
        frozen=True,
    )


class VideoDetails(BasePlayerModel):
    """
    The ``videoDetails`` object of a player response.

    All values are kept as the raw strings YouTube emits; normalization
    happens later in the extraction pipeline.
    """

    title: Optional[str] = Field(default=None, description="Video title")
    author: Optional[str] = Field(default=None, description="Channel display name")
    channel_id: Optional[str] = Field(default=None, description="Channel ID")
    short_description: Optional[str] = Field(
        default=None, description="Description as embedded in the player response"
    )
    view_count: Optional[str] = Field(default=None, description="Raw view count")
    publish_date: Optional[str] = Field(default=None, description="Publish date")
    length_seconds: Optional[str] = Field(
        default=None, description="Duration in seconds"
    )


class PlayerResponse(BasePlayerModel):
    """Top-level ``ytInitialPlayerResponse`` object."""

    video_details: Optional[VideoDetails] = Field(default=None)


def decode_video_details(blob_text: str | None) -> VideoDetails | None:
    """
    Decode ``videoDetails`` from a player response blob, best effort.

    Parameters
    ----------
    blob_text : str | None
        Balanced JSON text of the player response.

    Returns
    -------
    VideoDetails | None
        The decoded details, or ``None`` when the blob is absent, is not
        valid JSON, or does not match the minimal schema.
    """
    if not blob_text:
        return None
    try:
        response = PlayerResponse.model_validate_json(blob_text)
    except ValidationError as e:
        logger.debug(
            "Typed player response decode failed (%d errors)", e.error_count()
        )
        return None
    return response.video_details
