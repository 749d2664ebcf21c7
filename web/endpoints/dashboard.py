"""
Dashboard and profile/listening-history endpoints.
"""
import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from spotify_api import RecentlyPlayedTrack, SpotifyApiError, TrackPlay, UserProfile
from ..sessions import BrowserSession, get_session

logger = logging.getLogger(__name__)

router = APIRouter()

DASHBOARD_TRACK_COUNT = 10


@router.get("/")
async def dashboard(session: BrowserSession = Depends(get_session)):
    """Profile and recent tracks, or just the unauthenticated state"""
    if not session.oauth.is_authenticated():
        return {"authenticated": False}

    try:
        profile, tracks = await asyncio.gather(
            session.api.get_user_profile(),
            session.api.get_recently_played_tracks(DASHBOARD_TRACK_COUNT),
        )
    except SpotifyApiError as e:
        if e.is_auth_error:
            logger.info("Credential rejected while loading dashboard")
            return {"authenticated": False}
        raise

    return {
        "authenticated": True,
        "profile": profile.model_dump(),
        "recently_played": [track.model_dump() for track in tracks],
    }


@router.get("/me", response_model=UserProfile)
async def me(session: BrowserSession = Depends(get_session)):
    return await session.api.get_user_profile()


@router.get("/me/recently-played", response_model=List[RecentlyPlayedTrack])
async def recently_played(
    limit: int = Query(20),
    session: BrowserSession = Depends(get_session),
):
    return await session.api.get_recently_played_tracks(limit)


@router.get("/me/history", response_model=List[TrackPlay])
async def history(
    limit: int = Query(20),
    session: BrowserSession = Depends(get_session),
):
    return await session.api.get_track_play_history(limit)
