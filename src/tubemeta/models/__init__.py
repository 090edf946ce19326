"""
Data models module for tubemeta.

Defines Pydantic models for the typed player response decode and the
final video metadata record, plus the small value types shared by the
scanning and extraction layers.
"""

from __future__ import annotations

from .extraction import CascadeOutcome, ExtractedBlob
from .player_response import PlayerResponse, VideoDetails, decode_video_details
from .video_metadata import OEmbedResult, VideoMetadata

__all__ = [
    "CascadeOutcome",
    "ExtractedBlob",
    "OEmbedResult",
    "PlayerResponse",
    "VideoDetails",
    "VideoMetadata",
    "decode_video_details",
]
