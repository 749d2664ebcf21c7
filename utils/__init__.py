"""Shared utilities package for the Spotify PKCE client"""

from .storage import (
    ACCESS_TOKEN_KEY,
    CODE_VERIFIER_KEY,
    TOKEN_EXPIRY_KEY,
    FileSessionStore,
    MemorySessionStore,
    SessionStore,
)
from .logging_setup import configure_logging

__all__ = [
    "ACCESS_TOKEN_KEY",
    "CODE_VERIFIER_KEY",
    "TOKEN_EXPIRY_KEY",
    "FileSessionStore",
    "MemorySessionStore",
    "SessionStore",
    "configure_logging",
]
