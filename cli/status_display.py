"""Status and listening-history display for CLI"""

from typing import List

from rich.table import Table

from spotify_api import RecentlyPlayedTrack, UserProfile
from spotify_oauth.credentials import CredentialStore


def show_credential_status(credentials: CredentialStore, console, session_file=None):
    """
    Display credential status without printing the token

    Args:
        credentials: CredentialStore instance
        console: Rich console for output
        session_file: Optional path shown for reference
    """
    status = credentials.get_status()

    table = Table(title="Spotify Session")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Authenticated", "Yes" if status["authenticated"] else "No")
    if status["expires_at"]:
        table.add_row("Expires At", status["expires_at"])
        table.add_row("Time Until Expiry", status["time_until_expiry"])
    if session_file is not None:
        table.add_row("Session File", str(session_file))

    console.print(table)


def show_profile(profile: UserProfile, console):
    table = Table(title="Spotify Profile")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Name", profile.display_name)
    table.add_row("ID", profile.id)
    table.add_row("Email", profile.email or "-")
    table.add_row("Country", profile.country)
    table.add_row("Followers", str(profile.followers))
    table.add_row("Profile URL", profile.spotify_url or "-")

    console.print(table)


def _format_duration(duration_ms: int) -> str:
    minutes, seconds = divmod(duration_ms // 1000, 60)
    return f"{minutes}:{seconds:02d}"


def show_recent_tracks(tracks: List[RecentlyPlayedTrack], console):
    if not tracks:
        console.print("[yellow]No recently played tracks[/yellow]")
        return

    table = Table(title="Recently Played")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Track", style="bold")
    table.add_column("Artists")
    table.add_column("Album")
    table.add_column("Length", justify="right")
    table.add_column("Played At", style="dim")

    for index, item in enumerate(tracks, start=1):
        track = item.track
        table.add_row(
            str(index),
            track.name,
            ", ".join(artist.name for artist in track.artists),
            track.album.name,
            _format_duration(track.duration_ms),
            item.played_at,
        )

    console.print(table)
