"""
Unit tests for the cascade runner and strategy constructors.
"""

from __future__ import annotations

import json
from typing import Optional
from unittest.mock import MagicMock

from tubemeta.models.extraction import CascadeOutcome
from tubemeta.models.player_response import VideoDetails
from tubemeta.services.extraction.cascade import (
    ExtractionContext,
    Strategy,
    blob_regex,
    html_regex,
    run_cascade,
    string_literal_pattern,
    typed_field,
)


def _const(name: str, value: Optional[str]) -> Strategy:
    return Strategy(name=name, func=lambda context: value)


def _raising(context: ExtractionContext) -> Optional[str]:
    raise KeyError("boom")


class TestRunCascade:
    """Test first-non-empty-wins semantics."""

    def test_first_non_empty_wins(self) -> None:
        """Test that later strategies are not consulted once a value is found."""
        later = MagicMock(return_value="later")
        strategies = [
            _const("none", None),
            _const("hit", "first"),
            Strategy(name="later", func=later),
        ]

        outcome = run_cascade("title", strategies, ExtractionContext(html=""))

        assert outcome == CascadeOutcome(value="first", raw="first", strategy="hit")
        later.assert_not_called()

    def test_whitespace_only_is_empty(self) -> None:
        """Test that blank captures fall through."""
        strategies = [_const("blank", "   \n"), _const("hit", "  value  ")]

        outcome = run_cascade("title", strategies, ExtractionContext(html=""))

        assert outcome.value == "value"
        assert outcome.strategy == "hit"

    def test_exception_treated_as_no_result(self) -> None:
        """Test that a raising strategy does not abort the cascade."""
        strategies = [Strategy(name="boom", func=_raising), _const("hit", "ok")]

        outcome = run_cascade("title", strategies, ExtractionContext(html=""))

        assert outcome.value == "ok"

    def test_transform_none_falls_through(self) -> None:
        """Test that a transform returning None means "no result"."""
        strategies = [_const("words", "no digits"), _const("digits", "1,234")]

        outcome = run_cascade(
            "views",
            strategies,
            ExtractionContext(html=""),
            transform=lambda raw: "".join(c for c in raw if c.isdigit()) or None,
        )

        assert outcome.value == "1234"
        assert outcome.raw == "1,234"
        assert outcome.strategy == "digits"

    def test_transform_exception_falls_through(self) -> None:
        """Test that a raising transform does not abort the cascade."""
        strategies = [_const("bad", "x"), _const("good", "7")]

        outcome = run_cascade(
            "duration",
            strategies,
            ExtractionContext(html=""),
            transform=lambda raw: str(int(raw)),
        )

        assert outcome.value == "7"

    def test_all_empty(self) -> None:
        """Test the empty outcome."""
        outcome = run_cascade(
            "title", [_const("none", None)], ExtractionContext(html="")
        )

        assert outcome == CascadeOutcome()
        assert outcome.found is False


class TestStrategies:
    """Test strategy constructors."""

    def test_typed_field(self) -> None:
        """Test reading the typed decode."""
        context = ExtractionContext(html="", details=VideoDetails(title="Typed"))

        assert typed_field("title")(context) == "Typed"
        assert typed_field("author")(context) is None
        assert typed_field("title").name == "typed:title"

    def test_typed_field_without_details(self) -> None:
        """Test that a failed decode yields None."""
        assert typed_field("title")(ExtractionContext(html="")) is None

    def test_blob_regex_unescapes(self) -> None:
        """Test that blob captures are unescaped."""
        context = ExtractionContext(html="", blob=r'{"title": "a \"b\"\nc & d"}')
        strategy = blob_regex("title", string_literal_pattern("title"))

        assert strategy(context) == 'a "b"\nc & d'
        assert strategy.name == "blob:title"

    def test_blob_regex_raw(self) -> None:
        """Test that unescaping can be disabled."""
        context = ExtractionContext(html="", blob=r'{"title": "a\nb"}')
        strategy = blob_regex("title", string_literal_pattern("title"), unescape=False)

        assert strategy(context) == r"a\nb"

    def test_blob_regex_without_blob(self) -> None:
        """Test that a missing blob yields None."""
        strategy = blob_regex("title", string_literal_pattern("title"))

        assert strategy(ExtractionContext(html='"title": "in html only"')) is None

    def test_html_regex(self) -> None:
        """Test full-page regex strategies."""
        context = ExtractionContext(
            html='<div>"dateText":{"simpleText":"Jun 1, 2020"}</div>'
        )
        strategy = html_regex("dateText", r'"dateText":\{"simpleText":"(.*?)"')

        assert strategy(context) == "Jun 1, 2020"
        assert strategy.name == "html:dateText"

    def test_string_literal_pattern_spans_escaped_quotes(self) -> None:
        """Test that the capture does not stop at an escaped quote."""
        context = ExtractionContext(html="", blob=r'{"title": "x \"y\" z", "a": "b"}')
        strategy = blob_regex("title", string_literal_pattern("title"))

        assert strategy(context) == 'x "y" z'


class TestExtractionContext:
    """Test lazily decoded trees."""

    def test_initial_data_missing(self) -> None:
        """Test that a page without ytInitialData yields MISSING."""
        assert ExtractionContext(html="<html></html>").initial_data.is_missing

    def test_initial_data_decoded_once(self) -> None:
        """Test that the tree is cached per context."""
        context = ExtractionContext(html='var ytInitialData = {"a": 1};')

        assert context.initial_data is context.initial_data
        assert context.initial_data["a"].number == 1

    def test_player_tree(self) -> None:
        """Test the player response tree."""
        context = ExtractionContext(html="", blob='{"videoDetails": {"title": "T"}}')

        assert context.player_tree.path("videoDetails", "title").text == "T"

    def test_player_tree_missing_without_blob(self) -> None:
        """Test that a missing blob yields MISSING."""
        assert ExtractionContext(html="").player_tree.is_missing

    def test_watch_contents(self, contents_builder) -> None:
        """Test the primary column items."""
        data = contents_builder({"videoPrimaryInfoRenderer": {}}, {"other": {}})
        context = ExtractionContext(html=f"var ytInitialData = {json.dumps(data)};")

        assert len(context.watch_contents) == 2
        assert context.watch_contents[0]["videoPrimaryInfoRenderer"].is_object
