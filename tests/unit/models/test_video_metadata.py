"""
Unit tests for VideoMetadata and OEmbedResult.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tubemeta.models.video_metadata import OEmbedResult, VideoMetadata


class TestVideoMetadata:
    """Test record invariants and computed fields."""

    def test_defaults(self) -> None:
        """Test that only the ID is required."""
        metadata = VideoMetadata(id="dQw4w9WgXcQ")

        assert metadata.title == ""
        assert metadata.channel_id is None
        assert metadata.long_description is None
        assert metadata.duration_seconds is None
        assert metadata.effective_description == ""
        assert metadata.is_live is False

    def test_empty_id_rejected(self) -> None:
        """Test that an empty ID is rejected."""
        with pytest.raises(ValidationError):
            VideoMetadata(id="")

    def test_long_description_must_be_longer(self) -> None:
        """Test that a long description not strictly longer is rejected."""
        with pytest.raises(ValidationError, match="strictly longer"):
            VideoMetadata(id="abc", short_description="same", long_description="four")

    def test_effective_description_prefers_long(self) -> None:
        """Test that the long description is preferred when present."""
        metadata = VideoMetadata(
            id="abc", short_description="short", long_description="much longer text"
        )

        assert metadata.effective_description == "much longer text"

    def test_effective_description_falls_back_to_short(self) -> None:
        """Test the short description fallback."""
        metadata = VideoMetadata(id="abc", short_description="short")

        assert metadata.effective_description == "short"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1,234 watching now", True),
            ("12K Watching", True),
            ("1,234,567 views", False),
            ("", False),
        ],
    )
    def test_is_live(self, raw: str, expected: bool) -> None:
        """Test liveness detection from the raw view count text."""
        assert VideoMetadata(id="abc", raw_view_count_text=raw).is_live is expected

    def test_non_positive_duration_rejected(self) -> None:
        """Test that a zero duration is rejected."""
        with pytest.raises(ValidationError):
            VideoMetadata(id="abc", duration_seconds=0)

    def test_frozen(self) -> None:
        """Test that the record is immutable."""
        metadata = VideoMetadata(id="abc", title="T")

        with pytest.raises(ValidationError):
            metadata.title = "Other"  # type: ignore[misc]

    def test_dump_includes_computed_fields(self) -> None:
        """Test that serialization carries the computed fields."""
        dumped = VideoMetadata(
            id="abc", short_description="s", raw_view_count_text="5 watching"
        ).model_dump()

        assert dumped["effective_description"] == "s"
        assert dumped["is_live"] is True

    def test_model_copy_update(self) -> None:
        """Test that placeholder fields can be filled on a copy."""
        metadata = VideoMetadata(id="abc")
        filled = metadata.model_copy(update={"title": "From oEmbed"})

        assert filled.title == "From oEmbed"
        assert metadata.title == ""


class TestOEmbedResult:
    """Test the oEmbed result model."""

    def test_defaults(self) -> None:
        """Test empty defaults."""
        result = OEmbedResult()

        assert result.title == ""
        assert result.author == ""
