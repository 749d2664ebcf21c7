"""Configuration loader for the Spotify PKCE client

Loads configuration from multiple sources with the following priority:
1. Environment variables (highest priority)
2. .env file
3. Hardcoded defaults (lowest priority)
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Handles loading configuration from the environment and a .env file"""

    def __init__(self, env_path: Optional[str] = None):
        """Initialize the config loader

        Args:
            env_path: Optional path to .env file.
                     Defaults to SPOTIFY_PKCE_ENV_FILE or '.env' in the current directory.
        """
        env_path = env_path or os.getenv("SPOTIFY_PKCE_ENV_FILE")
        self.env_path = Path(env_path) if env_path else Path(".env")
        self._load_env_file()

    def _load_env_file(self):
        """Load environment variables from .env file if it exists"""
        if self.env_path.exists():
            # Real environment variables win over the file
            load_dotenv(dotenv_path=self.env_path, override=False)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f".env file not found at {self.env_path}, using environment variables and defaults only")

    def get(self, env_var: str, default: Any) -> Any:
        """Get a configuration value with priority: env > default

        The raw string is coerced to the type of ``default`` (bool, int, float).

        Args:
            env_var: Environment variable name to check
            default: Default value if not found in environment

        Returns:
            The configuration value from environment or default
        """
        env_value = os.getenv(env_var)
        if env_value is None or env_value == "":
            return default

        if isinstance(default, bool):
            return env_value.strip().lower() in ("true", "1", "yes", "on")
        if isinstance(default, int):
            try:
                return int(env_value)
            except ValueError:
                logger.warning(f"Failed to parse {env_var}={env_value} as int, using default: {default}")
                return default
        if isinstance(default, float):
            try:
                return float(env_value)
            except ValueError:
                logger.warning(f"Failed to parse {env_var}={env_value} as float, using default: {default}")
                return default
        return env_value

    def get_list(self, env_var: str, default: List[str]) -> List[str]:
        """Get a list value separated by whitespace or commas

        Args:
            env_var: Environment variable name to check
            default: Default list if the variable is unset or empty

        Returns:
            List of non-empty items
        """
        env_value = os.getenv(env_var)
        if not env_value or not env_value.strip():
            return list(default)
        return [item for item in re.split(r"[\s,]+", env_value.strip()) if item]


_config_loader = None


def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
