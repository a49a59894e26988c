"""Persistence of question/response exchanges attached to a note.

The orchestration loop never stores anything on its own. The HTTP layer uses
this store when a caller asks for an exchange to be kept with a note.
"""

import json
import logging
import uuid
from dataclasses import asdict
from pathlib import Path

from quill_server.notes.types import ChatExchange, utc_timestamp

logger = logging.getLogger(__name__)


class ChatHistoryStore:
    """Stores chat exchanges as ``<history_dir>/<note_id>.json``."""

    def __init__(self, history_dir: Path):
        self.history_dir = history_dir
        self.history_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, note_id: str) -> Path:
        return self.history_dir / f"{note_id}.json"

    def load(self, note_id: str) -> list[ChatExchange]:
        """Load all exchanges for a note, oldest first."""
        path = self._path(note_id)
        if not path.exists():
            return []
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return [ChatExchange(**item) for item in data.get("exchanges", [])]

    def append(self, note_id: str, question: str, response: str) -> ChatExchange:
        """Save a new exchange for a note."""
        exchanges = self.load(note_id)
        exchange = ChatExchange(
            id=uuid.uuid4().hex[:10],
            note_id=note_id,
            question=question,
            response=response,
            created_at=utc_timestamp(),
        )
        exchanges.append(exchange)

        with open(self._path(note_id), "w", encoding="utf-8") as f:
            json.dump(
                {"exchanges": [asdict(e) for e in exchanges]},
                f,
                indent=2,
                ensure_ascii=False,
            )

        logger.debug(f"Saved chat exchange {exchange.id} for note {note_id}")
        return exchange

    def clear(self, note_id: str) -> int:
        """Delete all exchanges for a note.

        Returns:
            Number of exchanges removed
        """
        exchanges = self.load(note_id)
        path = self._path(note_id)
        if path.exists():
            path.unlink()
        logger.info(f"Cleared {len(exchanges)} chat exchanges for note {note_id}")
        return len(exchanges)
