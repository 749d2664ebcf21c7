"""Errors raised by the Spotify Web API client"""

from typing import Any, Optional


class SpotifyApiError(Exception):
    """A failed Spotify Web API request

    Attributes:
        status: HTTP status code, or 0 when no response was received
        response: Decoded error body from Spotify, if any
    """

    def __init__(self, message: str, status: int, response: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.response = response

    @property
    def is_auth_error(self) -> bool:
        return self.status == 401

    def __repr__(self) -> str:
        return f"SpotifyApiError(status={self.status}, message={self.message!r})"
