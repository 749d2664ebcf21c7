"""
Web surface: login redirect, OAuth callback route and dashboard.
"""
from .app import create_app
from .server import WebServer

__all__ = [
    "create_app",
    "WebServer",
]
