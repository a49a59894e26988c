"""JSON file backed note store.

Each note is persisted as ``<notes_dir>/<note_id>.json``. Every lookup is
scoped to an owner so that a user can never read or write another user's
note through this store.
"""

import json
import logging
import threading
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import Protocol

from quill_server.notes.types import Note, utc_timestamp

logger = logging.getLogger(__name__)


class NoteStore(Protocol):
    """Operations the orchestration core needs from note storage."""

    def find_by_id(self, note_id: str, owner_id: str) -> Note | None: ...

    def create(self, owner_id: str, text: str) -> Note: ...

    def update_text(
        self, note_id: str, text: str, owner_id: str | None = None
    ) -> Note | None: ...

    def list_notes(self, owner_id: str) -> list[Note]: ...


class JsonNoteStore:
    """Note store persisting one JSON file per note."""

    def __init__(self, notes_dir: Path):
        """Initialize the store.

        Args:
            notes_dir: Directory where note JSON files are stored
        """
        self.notes_dir = notes_dir
        self.notes_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, note_id: str) -> Path:
        # Note ids are generated hex strings; reject anything path-like
        if not note_id or "/" in note_id or "\\" in note_id or note_id.startswith("."):
            raise ValueError(f"Invalid note id: {note_id!r}")
        return self.notes_dir / f"{note_id}.json"

    def _read(self, path: Path) -> Note:
        with open(path, "r", encoding="utf-8") as f:
            return Note(**json.load(f))

    def _write(self, note: Note) -> None:
        path = self._path(note.id)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(asdict(note), f, indent=2, ensure_ascii=False)
        tmp_path.replace(path)

    def find_by_id(self, note_id: str, owner_id: str) -> Note | None:
        """Get a note if it exists and belongs to owner_id."""
        try:
            path = self._path(note_id)
        except ValueError:
            return None
        if not path.exists():
            return None
        try:
            note = self._read(path)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Failed to load note {note_id}: {e}")
            return None
        if note.owner_id != owner_id:
            logger.debug(f"Note {note_id} is not owned by {owner_id}")
            return None
        return note

    def create(self, owner_id: str, text: str, note_id: str | None = None) -> Note:
        """Create and persist a new note.

        Args:
            owner_id: The user who owns the note
            text: Initial note text
            note_id: Optional explicit id (a new id is generated otherwise)

        Returns:
            The created Note
        """
        now = utc_timestamp()
        note = Note(
            id=note_id or uuid.uuid4().hex,
            owner_id=owner_id,
            text=text,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            if self._path(note.id).exists():
                raise ValueError(f"Note {note.id} already exists")
            self._write(note)
        logger.info(f"Created note {note.id} for {owner_id}")
        return note

    def update_text(
        self, note_id: str, text: str, owner_id: str | None = None
    ) -> Note | None:
        """Replace a note's text.

        When owner_id is given the write only happens if the stored note is
        still owned by that user; the check and the write are atomic with
        respect to other writers in this process.

        Returns:
            The updated Note, or None if it does not exist (or is not owned)
        """
        with self._lock:
            try:
                path = self._path(note_id)
            except ValueError:
                return None
            if not path.exists():
                return None
            note = self._read(path)
            if owner_id is not None and note.owner_id != owner_id:
                return None
            note.text = text
            note.updated_at = utc_timestamp()
            self._write(note)
        logger.debug(f"Updated note {note_id} ({len(text)} characters)")
        return note

    def delete(self, note_id: str, owner_id: str) -> bool:
        """Delete a note owned by owner_id.

        Returns:
            True if a note was deleted
        """
        with self._lock:
            note = self.find_by_id(note_id, owner_id)
            if note is None:
                return False
            self._path(note_id).unlink()
        logger.info(f"Deleted note {note_id}")
        return True

    def list_notes(self, owner_id: str) -> list[Note]:
        """List all notes of a user, newest first."""
        notes: list[Note] = []
        for file_path in self.notes_dir.glob("*.json"):
            try:
                note = self._read(file_path)
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Failed to load note {file_path.stem}: {e}")
                continue
            if note.owner_id == owner_id:
                notes.append(note)

        notes.sort(key=lambda n: n.created_at, reverse=True)
        return notes
