"""
Unit tests for long description recovery.
"""

from __future__ import annotations

import json
from typing import Any, Iterator

import pytest

from tubemeta.services.extraction import long_description
from tubemeta.services.extraction.cascade import ExtractionContext
from tubemeta.services.extraction.long_description import (
    attributed_description,
    combine_runs,
    extract_long_description,
    microformat_description,
    scan_description_runs,
    secondary_info_descriptions,
    structured_panel_descriptions,
)

# ytInitialData cut off mid-object, so only the scanner can recover the runs.
TRUNCATED_INITIAL_DATA = (
    '<script>var ytInitialData = {"contents": {"description": {"runs": ['
    '{"text": "Hello "}, '
    '{"navigationEndpoint": {"text": "ignored"}, "text": "Tom \\u0026 Jerry"}, '
    '{"text": "\\n0:00 Intro"}'
    "]}, \"more\": {"
)


def _context(data: dict[str, Any], extra: str = "") -> ExtractionContext:
    return ExtractionContext(html=f"var ytInitialData = {json.dumps(data)};{extra}")


class TestCombineRuns:
    """Test run concatenation."""

    def test_timestamps_start_new_lines(self) -> None:
        """Test that chapter timestamps begin on their own line."""
        result = combine_runs(["Intro text ", "0:00 Start", "1:02:03 End"])

        assert result == "Intro text \n0:00 Start\n1:02:03 End"

    def test_no_double_newline(self) -> None:
        """Test that no newline is added after an existing one."""
        assert combine_runs(["Line\n", "12:34 Chapter"]) == "Line\n12:34 Chapter"

    def test_leading_timestamp(self) -> None:
        """Test that a first-run timestamp gets no leading newline."""
        assert combine_runs(["0:00 Intro", " more"]) == "0:00 Intro more"

    def test_invalid_seconds_not_a_timestamp(self) -> None:
        """Test that ``12:60`` is not treated as a timestamp."""
        assert combine_runs(["a", "12:60 x"]) == "a12:60 x"

    def test_carriage_returns_dropped(self) -> None:
        """Test that ``\\r`` is removed."""
        assert combine_runs(["a\r\nb"]) == "a\nb"


class TestSources:
    """Test each description source."""

    def test_secondary_info_simple_text(self, contents_builder) -> None:
        """Test ``videoSecondaryInfoRenderer.description.simpleText``."""
        context = _context(
            contents_builder(
                {"videoSecondaryInfoRenderer": {"description": {"simpleText": "Plain text"}}}
            )
        )

        assert list(secondary_info_descriptions(context)) == ["Plain text"]

    def test_secondary_info_runs(self, contents_builder) -> None:
        """Test the runs form."""
        context = _context(
            contents_builder(
                {
                    "videoSecondaryInfoRenderer": {
                        "description": {"runs": [{"text": "a "}, {"text": "b"}]}
                    }
                }
            )
        )

        assert list(secondary_info_descriptions(context)) == ["a b"]

    def test_structured_panel(self) -> None:
        """Test the structured-description engagement panel."""
        data = {
            "engagementPanels": [
                {
                    "engagementPanelSectionListRenderer": {
                        "identifier": "engagement-panel-comments-section"
                    }
                },
                {
                    "engagementPanelSectionListRenderer": {
                        "identifier": "engagement-panel-structured-description",
                        "content": {
                            "structuredDescriptionContentRenderer": {
                                "items": [
                                    {"videoDescriptionHeaderRenderer": {}},
                                    {
                                        "videoDescriptionMetadataRenderer": {
                                            "description": {"simpleText": "Panel text"}
                                        }
                                    },
                                ]
                            }
                        },
                    }
                },
            ]
        }

        assert list(structured_panel_descriptions(_context(data))) == ["Panel text"]

    def test_attributed_description_content(self) -> None:
        """Test ``attributedDescription.content`` with escapes."""
        context = ExtractionContext(
            html='"attributedDescription":{"content":"Line1\\nLine2 \\u0026 more"}'
        )

        assert list(attributed_description(context)) == ["Line1\nLine2 & more"]

    def test_attributed_description_absent(self) -> None:
        """Test that a page without the key yields nothing."""
        assert list(attributed_description(ExtractionContext(html="<html></html>"))) == []

    def test_microformat_description(self) -> None:
        """Test ``microformatDataRenderer`` description."""
        context = ExtractionContext(
            html='"microformatDataRenderer":{"title":"T","description":{"simpleText":"Micro text"}}'
        )

        assert list(microformat_description(context)) == ["Micro text"]


class TestScanDescriptionRuns:
    """Test the runs scanner used when ytInitialData cannot be decoded."""

    def test_truncated_initial_data(self) -> None:
        """Test that run-level text is collected and nested text ignored."""
        assert scan_description_runs(TRUNCATED_INITIAL_DATA) == (
            "Hello Tom & Jerry\n0:00 Intro"
        )

    def test_no_runs(self) -> None:
        """Test that a page without description runs yields None."""
        assert scan_description_runs('var ytInitialData = {"a": 1};') is None

    def test_no_initial_data(self) -> None:
        """Test that runs outside ytInitialData are not considered."""
        assert scan_description_runs('"description": {"runs": [{"text": "x"}]}') is None

    def test_empty_runs(self) -> None:
        """Test that an empty runs array yields None."""
        assert scan_description_runs('ytInitialData = {"description": {"runs": []}}') is None


class TestExtractLongDescription:
    """Test longest-candidate selection."""

    def test_longest_candidate_wins(self, contents_builder) -> None:
        """Test that the longest of several candidates is chosen."""
        context = _context(
            contents_builder(
                {"videoSecondaryInfoRenderer": {"description": {"simpleText": "Medium length"}}}
            ),
            extra='"attributedDescription":{"content":"The longest description of all"}',
        )

        assert extract_long_description(context, "short") == "The longest description of all"

    def test_not_longer_than_short(self, contents_builder) -> None:
        """Test that a candidate of equal length is rejected."""
        context = _context(
            contents_builder(
                {"videoSecondaryInfoRenderer": {"description": {"simpleText": "same"}}}
            )
        )

        assert extract_long_description(context, "four") is None

    def test_no_candidates(self) -> None:
        """Test a page without any description source."""
        assert extract_long_description(ExtractionContext(html="<html></html>"), "") is None

    def test_failing_source_skipped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that one failing source does not hide the others."""

        def boom(context: ExtractionContext) -> Iterator[str]:
            raise ValueError("broken layout")

        def ok(context: ExtractionContext) -> Iterator[str]:
            yield "recovered description"

        monkeypatch.setattr(
            long_description,
            "LONG_DESCRIPTION_SOURCES",
            (("boom", boom), ("ok", ok)),
        )

        assert extract_long_description(ExtractionContext(html=""), "short") == (
            "recovered description"
        )
