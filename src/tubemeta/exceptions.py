"""
Custom exceptions for the tubemeta application.

This module defines the error taxonomy surfaced to callers: the single
fatal extraction error, fetch failures owned by the watch page client,
and the non-fatal oEmbed failure.
"""

from __future__ import annotations


class TubemetaError(Exception):
    """Base exception for all tubemeta errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize TubemetaError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        """
        self.message = message
        super().__init__(message)


class NoPlayerResponseFound(TubemetaError):
    """
    Exception raised when no player response can be located in a page.

    This is the only fatal extraction error. It is raised when the watch
    page HTML contains no balanced ``ytInitialPlayerResponse`` object. The
    caller may still attempt a degraded extraction and an oEmbed lookup.

    Attributes
    ----------
    message : str
        Human-readable error message.
    video_id : str
        The video ID whose page was being parsed.

    Examples
    --------
    >>> try:
    ...     metadata = extract_video_metadata(html, "dQw4w9WgXcQ")
    ... except NoPlayerResponseFound as e:
    ...     print(f"No player response for {e.video_id}")
    """

    def __init__(self, video_id: str, message: str | None = None) -> None:
        """
        Initialize NoPlayerResponseFound.

        Parameters
        ----------
        video_id : str
            The video ID whose page lacked a player response.
        message : str | None, optional
            Human-readable error message (default: generated from video_id).
        """
        self.video_id = video_id
        super().__init__(
            message or f"No ytInitialPlayerResponse found for video {video_id}"
        )


class FetchError(TubemetaError):
    """
    Exception raised when a watch page or oEmbed request fails.

    Wraps transport errors (timeouts, connection failures) and non-200
    HTTP responses from YouTube.

    Attributes
    ----------
    message : str
        Human-readable error message.
    status_code : int | None
        HTTP status code, if a response was received.
    original_error : Exception | None
        The original exception that caused this error.
    retry_count : int
        Number of retry attempts made before raising this exception.
    """

    def __init__(
        self,
        message: str = "Failed to fetch watch page",
        status_code: int | None = None,
        original_error: Exception | None = None,
        retry_count: int = 0,
    ) -> None:
        """
        Initialize FetchError.

        Parameters
        ----------
        message : str, optional
            Human-readable error message (default: "Failed to fetch watch page").
        status_code : int | None, optional
            HTTP status code, if any (default: None).
        original_error : Exception | None, optional
            The original exception that caused this error (default: None).
        retry_count : int, optional
            Number of retry attempts made (default: 0).
        """
        self.status_code = status_code
        self.original_error = original_error
        self.retry_count = retry_count
        super().__init__(message)


class OEmbedError(TubemetaError):
    """Exception raised when the oEmbed endpoint fails or returns bad JSON."""

    def __init__(self, message: str = "oEmbed lookup failed") -> None:
        """
        Initialize OEmbedError.

        Parameters
        ----------
        message : str, optional
            Human-readable error message (default: "oEmbed lookup failed").
        """
        super().__init__(message)
