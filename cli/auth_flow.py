"""Spotify OAuth authentication CLI flow"""

import asyncio
import logging
from typing import Callable

from spotify_oauth import SpotifyOAuthManager

logger = logging.getLogger(__name__)


class CLIAuthFlow:
    """Handle the Spotify PKCE login in a terminal

    The browser is redirected to the configured callback URL; when nothing
    is listening there the user copies the address bar back into the CLI.
    """

    def __init__(self, oauth: SpotifyOAuthManager, console, prompt: Callable[[str], str] = input):
        self.oauth = oauth
        self.console = console
        self.prompt = prompt

    def authenticate(self) -> bool:
        """Run the OAuth authentication flow

        The prompt is read before the event loop starts; only the token
        exchange runs inside it.

        Returns:
            True if successful, False otherwise
        """
        # Step 1: Generate auth URL and open browser
        self.console.print("\n[bold]Step 1:[/bold] Opening browser for Spotify authentication...")
        try:
            auth_url = self.oauth.start_login_flow()
        except ValueError as e:
            self.console.print(f"[red]ERROR:[/red] {e}")
            return False

        self.console.print("If the browser did not open, visit this URL manually:")
        self.console.print(auth_url, soft_wrap=True)

        # Step 2: Instructions
        self.console.print("\n[bold]Step 2:[/bold] Complete the login process in your browser")
        self.console.print("  1. Login to your Spotify account if prompted")
        self.console.print("  2. Authorize the application")
        self.console.print("  3. You will be redirected to the callback URL")

        # Step 3: Get callback URL from user
        self.console.print("\n[bold]Step 3:[/bold] Paste the callback URL below")
        self.console.print(f"[dim]The URL should start with: {self.oauth.auth_builder.redirect_uri}?code=[/dim]\n")

        try:
            callback_url = self.prompt("Callback URL: ")
        except (KeyboardInterrupt, EOFError):
            self.console.print("\n[yellow]Authentication cancelled by user[/yellow]")
            return False

        # Step 4: Exchange code for tokens
        self.console.print("\n[bold]Step 4:[/bold] Exchanging code for an access token...")
        result = asyncio.run(self.oauth.handle_callback(callback_url or ""))

        if not result.ok:
            logger.warning(f"Spotify login failed: {result.reason.value}")
            self.console.print(f"[red]Authentication failed:[/red] {result.reason.value}")
            if result.detail:
                self.console.print(result.detail, style="dim", markup=False)
            return False

        self.console.print("[green][OK][/green] Successfully authenticated with Spotify")
        return True
