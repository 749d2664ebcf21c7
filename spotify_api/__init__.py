"""Spotify Web API client package"""

from .client import SpotifyApiClient, clamp_limit
from .errors import SpotifyApiError
from .models import (
    AlbumSummary,
    ArtistRef,
    RecentlyPlayedTrack,
    Track,
    TrackPlay,
    UserProfile,
)

__all__ = [
    "SpotifyApiClient",
    "SpotifyApiError",
    "clamp_limit",
    "AlbumSummary",
    "ArtistRef",
    "RecentlyPlayedTrack",
    "Track",
    "TrackPlay",
    "UserProfile",
]
