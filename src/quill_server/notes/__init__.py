"""Note storage for quill-server.

This package provides the note store used by the tool dispatcher and the
notes API, plus persistence of chat exchanges attached to notes.
"""

from quill_server.notes.history import ChatHistoryStore
from quill_server.notes.store import JsonNoteStore, NoteStore
from quill_server.notes.types import ChatExchange, Note

__all__ = [
    "ChatExchange",
    "ChatHistoryStore",
    "JsonNoteStore",
    "Note",
    "NoteStore",
]
