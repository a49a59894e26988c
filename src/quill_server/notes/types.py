"""Data types for notes and persisted chat exchanges."""

from dataclasses import dataclass
from datetime import datetime, timezone


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO 8601 string with a Z suffix."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class Note:
    """A user's note."""

    id: str
    owner_id: str
    text: str = ""
    created_at: str = ""
    updated_at: str = ""


@dataclass
class ChatExchange:
    """A question and the assistant's response, saved against a note."""

    id: str
    note_id: str
    question: str
    response: str
    created_at: str = ""
