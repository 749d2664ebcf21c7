import tempfile
from pathlib import Path

from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Web server configuration
PORT = config.get("PORT", 5173)
BIND_ADDRESS = config.get("BIND_ADDRESS", "127.0.0.1")
LOG_LEVEL = config.get("LOG_LEVEL", "info")

# Spotify application registration (user configurable)
SPOTIFY_CLIENT_ID = config.get("SPOTIFY_CLIENT_ID", "")
SPOTIFY_REDIRECT_URI = config.get("SPOTIFY_REDIRECT_URI", "http://localhost:5173/callback")
SPOTIFY_SCOPES = config.get_list("SPOTIFY_SCOPES", ["user-read-private", "user-read-recently-played"])

# Spotify endpoints (hardcoded - dictated by the provider)
AUTH_ENDPOINT = "https://accounts.spotify.com/authorize"
TOKEN_ENDPOINT = "https://accounts.spotify.com/api/token"
API_BASE = "https://api.spotify.com/v1"

# PKCE verifier length in characters (RFC 7636 allows 43-128)
VERIFIER_LENGTH = config.get("VERIFIER_LENGTH", 64)

# Total timeout in seconds for token exchange and API requests
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 30.0)

# Seconds the callback page waits before navigating back to the dashboard
REDIRECT_DELAY_SECONDS = config.get("REDIRECT_DELAY_SECONDS", 1)

# Seconds a web browser session may sit unused before it is dropped
SESSION_IDLE_TTL = config.get("SESSION_IDLE_TTL", 3600)

# Session file used by the CLI (the web app keeps sessions in memory)
SESSION_FILE = config.get("SESSION_FILE", str(Path(tempfile.gettempdir()) / "spotify_pkce_session.json"))
