"""
Pydantic models for Spotify Web API responses and the normalized records
handed to the presentation layer.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class SpotifyModel(BaseModel):
    """Base for raw API shapes; Spotify adds fields freely"""
    model_config = ConfigDict(extra="ignore")


class SpotifyImage(SpotifyModel):
    url: str
    height: Optional[int] = None
    width: Optional[int] = None


class ExternalUrls(SpotifyModel):
    spotify: Optional[str] = None


class Followers(SpotifyModel):
    total: Optional[int] = None


class SpotifyUser(SpotifyModel):
    """Response of GET /me"""
    id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    country: Optional[str] = None
    followers: Optional[Followers] = None
    images: List[SpotifyImage] = []
    external_urls: Optional[ExternalUrls] = None
    type: Optional[str] = None
    uri: Optional[str] = None
    product: Optional[str] = None


class SpotifyArtist(SpotifyModel):
    id: str
    name: str
    external_urls: Optional[ExternalUrls] = None
    uri: Optional[str] = None


class SpotifyAlbum(SpotifyModel):
    id: str
    name: str
    images: List[SpotifyImage] = []
    external_urls: Optional[ExternalUrls] = None
    release_date: Optional[str] = None
    uri: Optional[str] = None


class SpotifyTrack(SpotifyModel):
    id: str
    name: str
    artists: List[SpotifyArtist] = []
    album: SpotifyAlbum
    duration_ms: int
    preview_url: Optional[str] = None
    external_urls: Optional[ExternalUrls] = None
    uri: Optional[str] = None
    explicit: Optional[bool] = None
    popularity: Optional[int] = None


class PlayContext(SpotifyModel):
    type: Optional[str] = None
    href: Optional[str] = None
    uri: Optional[str] = None


class RecentlyPlayedItem(SpotifyModel):
    track: SpotifyTrack
    played_at: str
    context: Optional[PlayContext] = None


class Cursors(SpotifyModel):
    after: Optional[str] = None
    before: Optional[str] = None


class RecentlyPlayedResponse(SpotifyModel):
    """Response of GET /me/player/recently-played"""
    items: List[RecentlyPlayedItem] = []
    next: Optional[str] = None
    cursors: Optional[Cursors] = None
    limit: Optional[int] = None
    href: Optional[str] = None


# Normalized records

class UserProfile(BaseModel):
    id: str
    display_name: str
    email: str
    country: str
    followers: int
    image_url: Optional[str] = None
    spotify_url: str
    type: str


class ArtistRef(BaseModel):
    id: str
    name: str


class AlbumSummary(BaseModel):
    id: str
    name: str
    image_url: Optional[str] = None


class Track(BaseModel):
    id: str
    name: str
    artists: List[ArtistRef]
    album: AlbumSummary
    duration_ms: int
    preview_url: Optional[str] = None
    spotify_url: str


class RecentlyPlayedTrack(BaseModel):
    track: Track
    played_at: str


class TrackPlay(BaseModel):
    """Flat play-history row"""
    id: str
    track_name: str
    artist_names: List[str]
    album_name: str
    album_image_url: Optional[str] = None
    played_at: datetime
    duration_ms: int
    spotify_url: str


def _first_image_url(images: List[SpotifyImage]) -> Optional[str]:
    return images[0].url if images else None


def _spotify_url(urls: Optional[ExternalUrls]) -> str:
    return (urls.spotify if urls else None) or ""


def normalize_user(user: SpotifyUser) -> UserProfile:
    return UserProfile(
        id=user.id,
        display_name=user.display_name or "Unknown User",
        email=user.email or "",
        country=user.country or "Unknown",
        followers=(user.followers.total if user.followers else None) or 0,
        image_url=_first_image_url(user.images),
        spotify_url=_spotify_url(user.external_urls),
        type=user.type or "user",
    )


def normalize_track(track: SpotifyTrack) -> Track:
    return Track(
        id=track.id,
        name=track.name,
        artists=[ArtistRef(id=artist.id, name=artist.name) for artist in track.artists],
        album=AlbumSummary(
            id=track.album.id,
            name=track.album.name,
            image_url=_first_image_url(track.album.images),
        ),
        duration_ms=track.duration_ms,
        preview_url=track.preview_url or None,
        spotify_url=_spotify_url(track.external_urls),
    )


def to_track_play(item: RecentlyPlayedItem) -> TrackPlay:
    track = item.track
    return TrackPlay(
        id=track.id,
        track_name=track.name,
        artist_names=[artist.name for artist in track.artists],
        album_name=track.album.name,
        album_image_url=_first_image_url(track.album.images),
        played_at=item.played_at,
        duration_ms=track.duration_ms,
        spotify_url=_spotify_url(track.external_urls),
    )
