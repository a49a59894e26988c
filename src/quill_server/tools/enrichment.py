"""Argument enrichment for stateless worker tools.

The worker tools never see server-side state on their own. This table is
the only place where run context (the user's notes) is merged into tool
arguments before they cross the process boundary.
"""

from typing import Any, Callable

from quill_server.notes.types import Note
from quill_server.tools.types import RunContext

Enricher = Callable[[dict[str, Any], RunContext], dict[str, Any]]


def _serialize_note(note: Note) -> dict[str, str]:
    return {
        "id": note.id,
        "text": note.text,
        "createdAt": note.created_at,
        "updatedAt": note.updated_at,
    }


def attach_note_corpus(arguments: dict[str, Any], context: RunContext) -> dict[str, Any]:
    """Always replace any model-supplied notes with the run's note snapshot."""
    return {
        **arguments,
        "notes": [_serialize_note(note) for note in context.notes],
    }


def default_text_to_corpus(
    arguments: dict[str, Any], context: RunContext
) -> dict[str, Any]:
    """Use the full note corpus as text when the model gave none."""
    if arguments.get("text"):
        return dict(arguments)
    return {
        **arguments,
        "text": "\n\n".join(note.text for note in context.notes),
    }


ENRICHERS: dict[str, Enricher] = {
    "analyze_notes": attach_note_corpus,
    "extract_entities": default_text_to_corpus,
}


def enrich_arguments(
    name: str, arguments: dict[str, Any], context: RunContext
) -> dict[str, Any]:
    """Apply the enricher registered for a tool, if any."""
    enricher = ENRICHERS.get(name)
    if enricher is None:
        return dict(arguments)
    return enricher(arguments, context)
