"""CLI package for the Spotify PKCE client

Logs in through the system browser, inspects the stored session and
queries the profile and listening history from a terminal.
"""

from cli.main import main

__all__ = [
    "main",
]
