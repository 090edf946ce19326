"""
Pytest configuration and fixtures for tubemeta tests.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import pytest

from tubemeta.config.settings import Settings

# Reference time for every relative date assertion.
FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def build_watch_page(
    player_response: Optional[dict[str, Any]] = None,
    initial_data: Optional[dict[str, Any]] = None,
    extra_html: str = "",
) -> str:
    """
    Build a minimal watch page embedding the given bootstrap objects.

    Parameters
    ----------
    player_response : dict[str, Any] | None, optional
        Object assigned to ``ytInitialPlayerResponse``.
    initial_data : dict[str, Any] | None, optional
        Object assigned to ``ytInitialData``.
    extra_html : str, optional
        Raw markup appended to the body.

    Returns
    -------
    str
        The page HTML.
    """
    scripts = []
    if player_response is not None:
        scripts.append(
            f"<script>var ytInitialPlayerResponse = {json.dumps(player_response)};"
            "var meta = document.createElement('meta');</script>"
        )
    if initial_data is not None:
        scripts.append(f"<script>var ytInitialData = {json.dumps(initial_data)};</script>")
    return (
        "<!DOCTYPE html><html><head><title>Test Video - YouTube</title></head><body>"
        + "".join(scripts)
        + extra_html
        + "</body></html>"
    )


def watch_contents(*items: dict[str, Any]) -> dict[str, Any]:
    """Wrap renderer items in the ``twoColumnWatchNextResults`` layout."""
    return {
        "contents": {
            "twoColumnWatchNextResults": {
                "results": {"results": {"contents": list(items)}}
            }
        }
    }


@pytest.fixture
def page_builder():
    """The watch page builder."""
    return build_watch_page


@pytest.fixture
def contents_builder():
    """The ``twoColumnWatchNextResults`` wrapper."""
    return watch_contents


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed reference time (2024-06-15 12:00 UTC)."""
    return FIXED_NOW


@pytest.fixture
def test_settings() -> Settings:
    """Settings with instant retries for client tests."""
    return Settings(
        retry_attempts=3,
        retry_backoff=[0.0],
        request_timeout=5.0,
        oembed_fallback=True,
        display_language="en",
    )


@pytest.fixture
def sample_player_response() -> dict[str, Any]:
    """Player response with a complete ``videoDetails`` object."""
    return {
        "responseContext": {"serviceTrackingParams": []},
        "playabilityStatus": {"status": "OK"},
        "videoDetails": {
            "videoId": "dQw4w9WgXcQ",
            "title": 'A {braced} "quoted" title',
            "lengthSeconds": "3725",
            "channelId": "UCuAXFkgsw1L7xaCfnd5JJOw",
            "shortDescription": "Short description",
            "viewCount": "1234567",
            "author": "Test Channel",
            "isLiveContent": False,
        },
        "microformat": {
            "playerMicroformatRenderer": {
                "publishDate": "2021-06-15",
                "category": "Music",
            }
        },
    }


@pytest.fixture
def sample_initial_data() -> dict[str, Any]:
    """``ytInitialData`` with primary and secondary info renderers."""
    return watch_contents(
        {
            "videoPrimaryInfoRenderer": {
                "title": {"runs": [{"text": "A title"}]},
                "viewCount": {
                    "videoViewCountRenderer": {
                        "viewCount": {"simpleText": "1,234,567 views"},
                        "shortViewCount": {"simpleText": "1.2M views"},
                    }
                },
                "dateText": {"simpleText": "Jun 15, 2021"},
            }
        },
        {
            "videoSecondaryInfoRenderer": {
                "description": {
                    "runs": [
                        {"text": "Full description line one.\n"},
                        {"text": "0:00 Intro"},
                        {"text": " and more"},
                        {"text": "1:02:03 Outro"},
                    ]
                }
            }
        },
    )


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    """Remove handlers the CLI attaches to the package logger."""
    yield
    package_logger = logging.getLogger("tubemeta")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_tubemeta_cli", False):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
