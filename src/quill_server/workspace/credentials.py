"""Storage of per-user workspace access tokens.

Tokens are issued elsewhere (the OAuth exchange is not part of this server)
and stored here as a single JSON object mapping user id to token.
"""

import json
import logging
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


class CredentialStore:
    """JSON file mapping user ids to workspace access tokens."""

    def __init__(self, path: Path):
        self.path = path
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _save(self, tokens: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(tokens, f, indent=2)
        tmp_path.replace(self.path)

    def get(self, user_id: str) -> str | None:
        return self._load().get(user_id)

    def set(self, user_id: str, token: str) -> None:
        with self._lock:
            tokens = self._load()
            tokens[user_id] = token
            self._save(tokens)
        logger.info(f"Stored workspace credential for {user_id}")

    def remove(self, user_id: str) -> bool:
        """Forget a user's token. Returns True if one was stored."""
        with self._lock:
            tokens = self._load()
            if user_id not in tokens:
                return False
            del tokens[user_id]
            self._save(tokens)
        logger.info(f"Removed workspace credential for {user_id}")
        return True
