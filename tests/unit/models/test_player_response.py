"""
Unit tests for the typed player response decode.
"""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from tubemeta.models.player_response import (
    PlayerResponse,
    VideoDetails,
    decode_video_details,
)


class TestDecodeVideoDetails:
    """Test best-effort decode of ``videoDetails``."""

    def test_full_details(self) -> None:
        """Test that camelCase keys map to snake_case fields."""
        blob = json.dumps(
            {
                "videoDetails": {
                    "title": "Title",
                    "author": "Author",
                    "channelId": "UC123",
                    "shortDescription": "Desc",
                    "viewCount": "1000",
                    "lengthSeconds": "212",
                }
            }
        )

        details = decode_video_details(blob)

        assert details == VideoDetails(
            title="Title",
            author="Author",
            channel_id="UC123",
            short_description="Desc",
            view_count="1000",
            length_seconds="212",
        )

    def test_numbers_coerced_to_strings(self) -> None:
        """Test that numeric counts are accepted as strings."""
        details = decode_video_details('{"videoDetails": {"viewCount": 42, "lengthSeconds": 7}}')

        assert details is not None
        assert details.view_count == "42"
        assert details.length_seconds == "7"

    def test_unknown_fields_ignored(self) -> None:
        """Test that the many unmodelled keys do not break the decode."""
        blob = json.dumps(
            {
                "streamingData": {"formats": []},
                "videoDetails": {"title": "T", "keywords": ["a"], "isPrivate": False},
            }
        )

        details = decode_video_details(blob)

        assert details is not None
        assert details.title == "T"
        assert details.author is None

    def test_missing_video_details(self) -> None:
        """Test that a response without videoDetails yields None."""
        assert decode_video_details('{"playabilityStatus": {"status": "ERROR"}}') is None

    @pytest.mark.parametrize(
        "blob",
        [
            None,
            "",
            "{not json}",
            '{"videoDetails": {"title": {"runs": []}}}',
            '{"videoDetails": []}',
        ],
    )
    def test_failures_yield_none(self, blob: str | None) -> None:
        """Test that invalid JSON or schema mismatches are not fatal."""
        assert decode_video_details(blob) is None


class TestPlayerResponseModel:
    """Test model configuration."""

    def test_populate_by_name(self) -> None:
        """Test that snake_case names are accepted."""
        response = PlayerResponse(video_details=VideoDetails(title="T"))

        assert response.video_details is not None
        assert response.video_details.title == "T"

    def test_frozen(self) -> None:
        """Test that decoded details are immutable."""
        details = VideoDetails(title="T")

        with pytest.raises(ValidationError):
            details.title = "Other"  # type: ignore[misc]
