"""CLI entry point and argument parsing"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.console import Console

import settings
from cli.auth_flow import CLIAuthFlow
from cli.status_display import show_credential_status, show_profile, show_recent_tracks
from spotify_api import SpotifyApiClient, SpotifyApiError
from spotify_oauth import SpotifyOAuthManager
from utils.logging_setup import configure_logging
from utils.storage import FileSessionStore

logger = logging.getLogger(__name__)

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="spotify-pkce", description="Spotify PKCE client")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Append logs to this file")
    parser.add_argument(
        "--session-file",
        default=None,
        help=f"Session file for the CLI (default: {settings.SESSION_FILE})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("login", help="Authorize this client with your Spotify account")
    subparsers.add_parser("status", help="Show whether a valid access token is stored")
    subparsers.add_parser("logout", help="Forget the access token and any pending login")
    subparsers.add_parser("profile", help="Show your Spotify profile")

    recent = subparsers.add_parser("recent", help="Show recently played tracks")
    recent.add_argument("--limit", "-n", type=int, default=20, help="Number of tracks (1-50)")

    serve = subparsers.add_parser("serve", help="Run the web login/callback/dashboard server")
    serve.add_argument("--bind", "-b", default=None, help="Override bind address (default: from config)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Override port (default: from config)")

    return parser


def _require_login(oauth: SpotifyOAuthManager) -> bool:
    if oauth.is_authenticated():
        return True
    console.print("[yellow]Not logged in.[/yellow] Run [bold]spotify-pkce login[/bold] first.")
    return False


def _run_api_command(oauth: SpotifyOAuthManager, args: argparse.Namespace) -> int:
    if not _require_login(oauth):
        return 1

    api = SpotifyApiClient(oauth.credentials)
    try:
        if args.command == "profile":
            show_profile(asyncio.run(api.get_user_profile()), console)
        else:
            show_recent_tracks(asyncio.run(api.get_recently_played_tracks(args.limit)), console)
    except SpotifyApiError as e:
        logger.debug(f"Spotify API request failed: {e!r}")
        console.print(f"[red]Spotify API error ({e.status}):[/red] {e.message}")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)
    configure_logging(settings.LOG_LEVEL, debug=args.debug, log_file=args.log_file)

    try:
        if args.command == "serve":
            from web.server import WebServer
            WebServer(bind_address=args.bind, port=args.port, debug=args.debug).run()
            return 0

        store = FileSessionStore(args.session_file)
        oauth = SpotifyOAuthManager(store=store)

        if args.command == "login":
            success = CLIAuthFlow(oauth, console).authenticate()
            return 0 if success else 1

        if args.command == "status":
            show_credential_status(oauth.credentials, console, session_file=store.session_file)
            return 0 if oauth.is_authenticated() else 1

        if args.command == "logout":
            oauth.logout()
            console.print("[green]Logged out[/green]")
            return 0

        return _run_api_command(oauth, args)

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
