"""Spotify Web API HTTP client for read-only profile and history queries"""

import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

import settings
from spotify_oauth.credentials import CredentialStore
from .errors import SpotifyApiError
from .models import (
    RecentlyPlayedResponse,
    RecentlyPlayedTrack,
    SpotifyUser,
    TrackPlay,
    UserProfile,
    normalize_track,
    normalize_user,
    to_track_play,
)

logger = logging.getLogger(__name__)

MIN_LIMIT = 1
MAX_LIMIT = 50


def clamp_limit(limit: int) -> int:
    """Clamp a page size to what recently-played accepts"""
    return max(MIN_LIMIT, min(MAX_LIMIT, int(limit)))


class SpotifyApiClient:
    """Bearer-authenticated access to the Spotify Web API

    A 401 from Spotify means the stored credential is no longer accepted, so
    it is cleared before the error propagates.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        api_base: str = settings.API_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = settings.REQUEST_TIMEOUT,
    ):
        self.credentials = credentials
        self.api_base = api_base.rstrip("/")
        self.transport = transport
        self.timeout = timeout

    async def request(self, endpoint: str, method: str = "GET", **kwargs) -> Any:
        """Make an authenticated request and return the decoded JSON body

        Args:
            endpoint: Path below the API base, e.g. "/me"
            method: HTTP method
            **kwargs: Passed through to httpx (params, json, ...)

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            SpotifyApiError: On missing credential, HTTP error or transport error
        """
        token = self.credentials.get_access_token()
        if not token:
            raise SpotifyApiError("No access token available. Please login first.", 401)

        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            **kwargs.pop("headers", {}),
        }

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.request(
                    method,
                    f"{self.api_base}{endpoint}",
                    headers=headers,
                    **kwargs,
                )
        except httpx.RequestError as e:
            raise SpotifyApiError(str(e) or "Unknown error occurred", 0) from e

        if response.status_code == 401:
            logger.info("Spotify rejected the access token, logging out")
            self.credentials.logout()
            raise SpotifyApiError("Authentication expired. Please login again.", 401)

        if not response.is_success:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {}
            message = None
            if isinstance(error_data, dict) and isinstance(error_data.get("error"), dict):
                message = error_data["error"].get("message")
            raise SpotifyApiError(
                message or f"API request failed with status {response.status_code}",
                response.status_code,
                error_data,
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise SpotifyApiError(f"Invalid JSON from Spotify: {e}", response.status_code) from e

    async def get_user_profile(self) -> UserProfile:
        """Fetch the current user's profile (GET /me)"""
        data = await self.request("/me")
        try:
            return normalize_user(SpotifyUser.model_validate(data))
        except ValidationError as e:
            raise SpotifyApiError(f"Unexpected profile response: {e}", 200, data) from e

    async def _recently_played(self, limit: int) -> RecentlyPlayedResponse:
        data = await self.request(
            "/me/player/recently-played",
            params={"limit": clamp_limit(limit)},
        )
        try:
            return RecentlyPlayedResponse.model_validate(data)
        except ValidationError as e:
            raise SpotifyApiError(f"Unexpected recently-played response: {e}", 200, data) from e

    async def get_recently_played_tracks(self, limit: int = 20) -> List[RecentlyPlayedTrack]:
        """Fetch recently played tracks, most recent first

        Args:
            limit: Number of items, clamped to 1..50
        """
        response = await self._recently_played(limit)
        return [
            RecentlyPlayedTrack(track=normalize_track(item.track), played_at=item.played_at)
            for item in response.items
        ]

    async def get_track_play_history(self, limit: int = 20) -> List[TrackPlay]:
        """Fetch recently played tracks as flat play-history rows"""
        response = await self._recently_played(limit)
        return [to_track_play(item) for item in response.items]
