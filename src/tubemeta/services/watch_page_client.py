"""
HTTP client for YouTube watch pages and the oEmbed endpoint.

This is the I/O boundary around the pure extraction engine. It fetches the
canonical watch URL (pinned to ``hl=en``/``gl=US`` so view and date labels
parse predictably) with realistic desktop browser headers, retries
transient transport failures with backoff, runs the extractor, and
consults oEmbed only when title or author are still empty.

Classes
-------
WatchPageClient
    Async fetcher combining watch page extraction with the oEmbed fallback.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from tubemeta.config.settings import Settings, settings as default_settings
from tubemeta.exceptions import FetchError, NoPlayerResponseFound, OEmbedError
from tubemeta.models.video_metadata import OEmbedResult, VideoMetadata
from tubemeta.services.extraction.extractor import extract_video_metadata

logger = logging.getLogger(__name__)

_WATCH_URL = "https://www.youtube.com/watch"
_OEMBED_URL = "https://www.youtube.com/oembed"
_HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

_TRANSIENT_ERRORS = (httpx.ConnectTimeout, httpx.ReadTimeout, httpx.ConnectError)


def build_watch_url(video_id: str, hl: str = "en", gl: str = "US") -> str:
    """
    Build the canonical watch URL for a video.

    Parameters
    ----------
    video_id : str
        YouTube video ID.
    hl : str, optional
        Interface language (default ``"en"``).
    gl : str, optional
        Content region (default ``"US"``).

    Returns
    -------
    str
        The watch URL with persisted locale and the age-gate bypass flag.
    """
    return (
        f"{_WATCH_URL}?v={video_id}&hl={hl}&persist_hl=1&gl={gl}&persist_gl=1"
        "&bpctr=9999999999"
    )


def build_oembed_url(video_id: str) -> str:
    """Build the oEmbed lookup URL for a video."""
    return f"{_OEMBED_URL}?url=https://www.youtube.com/watch?v={video_id}&format=json"


class WatchPageClient:
    """
    Async client fetching watch pages and turning them into metadata.

    Parameters
    ----------
    app_settings : Settings | None, optional
        Settings providing headers, timeout, retry policy and display
        language (default: the global settings).

    Examples
    --------
    >>> client = WatchPageClient()
    >>> metadata = await client.fetch_video("dQw4w9WgXcQ")
    >>> metadata.view_count_text
    '1.6B views'
    """

    def __init__(self, app_settings: Settings | None = None) -> None:
        """
        Initialize the WatchPageClient.

        Parameters
        ----------
        app_settings : Settings | None, optional
            Settings to use instead of the global instance.
        """
        self._settings = app_settings or default_settings

    def _html_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._settings.user_agent,
            "Accept": _HTML_ACCEPT,
            "Accept-Language": self._settings.accept_language,
            "Sec-Fetch-Site": "same-origin",
            "Sec-Fetch-Dest": "document",
            "Sec-Fetch-Mode": "navigate",
        }

    async def fetch_watch_html(self, video_id: str) -> str:
        """
        Fetch the watch page HTML for a video.

        Transient transport errors are retried up to
        ``settings.retry_attempts`` times with the configured backoff.

        Parameters
        ----------
        video_id : str
            YouTube video ID.

        Returns
        -------
        str
            The page HTML.

        Raises
        ------
        FetchError
            On a non-200 response, a non-transient transport error, or
            when every attempt failed.
        """
        url = build_watch_url(video_id)
        attempts = self._settings.retry_attempts
        last_error: Exception | None = None

        for attempt in range(attempts):
            try:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    response = await client.get(
                        url,
                        timeout=self._settings.request_timeout,
                        headers=self._html_headers(),
                    )
            except _TRANSIENT_ERRORS as e:
                last_error = e
                if attempt + 1 >= attempts:
                    break
                backoff = self._settings.backoff_for(attempt)
                logger.warning(
                    "Fetch attempt %d/%d for video %s failed (%s), "
                    "retrying in %.0fs",
                    attempt + 1,
                    attempts,
                    video_id,
                    type(e).__name__,
                    backoff,
                )
                await asyncio.sleep(backoff)
                continue
            except httpx.HTTPError as e:
                logger.warning(
                    "Failed to fetch watch page for %s: %s: %s",
                    video_id,
                    type(e).__name__,
                    e,
                )
                raise FetchError(
                    f"Failed to fetch watch page for {video_id}: {e}",
                    original_error=e,
                    retry_count=attempt,
                ) from e

            if response.status_code != 200:
                raise FetchError(
                    f"Watch page for {video_id} returned HTTP {response.status_code}",
                    status_code=response.status_code,
                    retry_count=attempt,
                )
            return response.text

        logger.warning(
            "Failed to fetch watch page for %s after %d attempts", video_id, attempts
        )
        raise FetchError(
            f"Failed to fetch watch page for {video_id} after {attempts} attempts",
            original_error=last_error,
            retry_count=attempts,
        )

    async def fetch_oembed(self, video_id: str) -> OEmbedResult:
        """
        Look up title and author through the oEmbed endpoint.

        Parameters
        ----------
        video_id : str
            YouTube video ID.

        Returns
        -------
        OEmbedResult
            Title and author (``author_name``, else ``author``).

        Raises
        ------
        OEmbedError
            On any transport error, non-200 response or non-object JSON.
        """
        try:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                response = await client.get(
                    build_oembed_url(video_id),
                    timeout=self._settings.request_timeout,
                    headers={"User-Agent": self._settings.user_agent},
                )
        except httpx.HTTPError as e:
            raise OEmbedError(f"oEmbed request for {video_id} failed: {e}") from e

        if response.status_code != 200:
            raise OEmbedError(
                f"oEmbed for {video_id} returned HTTP {response.status_code}"
            )
        try:
            payload = response.json()
        except ValueError as e:
            raise OEmbedError(f"oEmbed for {video_id} returned invalid JSON") from e
        if not isinstance(payload, dict):
            raise OEmbedError(f"oEmbed for {video_id} returned a non-object payload")

        title = payload.get("title")
        author = payload.get("author_name") or payload.get("author")
        return OEmbedResult(
            title=title if isinstance(title, str) else "",
            author=author if isinstance(author, str) else "",
        )

    async def _fill_from_oembed(self, metadata: VideoMetadata) -> VideoMetadata:
        try:
            oembed = await self.fetch_oembed(metadata.id)
        except OEmbedError as e:
            logger.warning("oEmbed fallback for %s failed: %s", metadata.id, e.message)
            return metadata

        updates: dict[str, str] = {}
        if not metadata.title and oembed.title:
            updates["title"] = oembed.title
        if not metadata.author and oembed.author:
            updates["author"] = oembed.author
        return metadata.model_copy(update=updates) if updates else metadata

    async def fetch_video(
        self, video_id: str, *, use_oembed: bool | None = None
    ) -> VideoMetadata:
        """
        Fetch and extract metadata for a video.

        A page without a player response still yields a degraded record
        (view count and date from ``ytInitialData``) when the oEmbed
        fallback is enabled; otherwise ``NoPlayerResponseFound`` propagates.

        Parameters
        ----------
        video_id : str
            YouTube video ID.
        use_oembed : bool | None, optional
            Override ``settings.oembed_fallback``.

        Returns
        -------
        VideoMetadata
            The extracted metadata.

        Raises
        ------
        FetchError
            If the watch page cannot be fetched.
        NoPlayerResponseFound
            If the page has no player response and oEmbed is disabled.
        """
        oembed_enabled = (
            self._settings.oembed_fallback if use_oembed is None else use_oembed
        )
        html = await self.fetch_watch_html(video_id)

        try:
            metadata = extract_video_metadata(
                html, video_id, language=self._settings.display_language
            )
        except NoPlayerResponseFound:
            if not oembed_enabled:
                raise
            logger.info(
                "No player response for %s, falling back to degraded extraction",
                video_id,
            )
            metadata = extract_video_metadata(
                html,
                video_id,
                strict=False,
                language=self._settings.display_language,
            )

        if oembed_enabled and (not metadata.title or not metadata.author):
            metadata = await self._fill_from_oembed(metadata)
        return metadata
