"""Short-lived session storage backends

The authentication flow keeps three string values (access token, expiry,
code verifier) in a session-scoped store. Everything that touches them goes
through the small ``SessionStore`` interface so the backing storage can be
swapped: an in-memory dict for one browser session, or a private JSON file
for the CLI, which runs the flow across separate process invocations.
"""

import json
import logging
import os
import platform
from pathlib import Path
from typing import Dict, Optional, Protocol

import settings

logger = logging.getLogger(__name__)

# Fixed slot names
ACCESS_TOKEN_KEY = "spotify_access_token"
TOKEN_EXPIRY_KEY = "spotify_token_expiry"
CODE_VERIFIER_KEY = "spotify_code_verifier"


class SessionStore(Protocol):
    """get/set/remove over named string slots"""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemorySessionStore:
    """Session store backed by a plain dict (one per browser session)"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class FileSessionStore:
    """Session store persisted to a private JSON file

    The whole file is rewritten on every change; it only ever holds three
    short strings.
    """

    def __init__(self, session_file: Optional[str] = None):
        self.session_path = Path(session_file if session_file else settings.SESSION_FILE)
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.session_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def _read(self) -> Dict[str, str]:
        if not self.session_path.exists():
            return {}
        try:
            data = json.loads(self.session_path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable session file {self.session_path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self, data: Dict[str, str]) -> None:
        if not data:
            if self.session_path.exists():
                self.session_path.unlink()
            return

        self._ensure_secure_directory()
        self.session_path.write_text(json.dumps(data, indent=2))
        if platform.system() != "Windows":
            os.chmod(self.session_path, 0o600)

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = str(value)
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    @property
    def session_file(self) -> Path:
        """Get the session file path"""
        return self.session_path
