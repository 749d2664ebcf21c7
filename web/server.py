"""
WebServer class for CLI control of the FastAPI application.
"""
import logging
from typing import Optional

import uvicorn

import settings
from .app import create_app

logger = logging.getLogger(__name__)


class WebServer:
    """Uvicorn wrapper serving the login/callback/dashboard routes"""

    def __init__(self, bind_address: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
        self.bind_address = bind_address or settings.BIND_ADDRESS
        self.port = port or settings.PORT
        self.debug = debug
        self.app = create_app()
        self.server: Optional[uvicorn.Server] = None

    def run(self):
        """Run the web server (blocking)"""
        if not settings.SPOTIFY_CLIENT_ID:
            logger.warning("SPOTIFY_CLIENT_ID is not set; /login will fail until it is configured")

        logger.info(f"Starting Spotify PKCE client on http://{self.bind_address}:{self.port}")
        logger.info(f"Spotify must redirect to {settings.SPOTIFY_REDIRECT_URI}")

        config = uvicorn.Config(
            self.app,
            host=self.bind_address,
            port=self.port,
            log_level="debug" if self.debug else str(settings.LOG_LEVEL).lower(),
            # Root logger is configured by utils.logging_setup
            log_config=None,
        )
        self.server = uvicorn.Server(config)
        self.server.run()

    def stop(self):
        """Ask a running server to exit"""
        if self.server:
            self.server.should_exit = True
