"""System prompt for note assistance runs."""

from quill_server.notes.types import Note
from quill_server.tools.types import RunContext

BASE_PROMPT = """\
You are a helpful assistant for a note-taking app. You help users understand \
and work with their personal notes.

Use the available tools when they fit the request:
- analyze_notes for summaries, topics, sentiment, action items or statistics
- web_search for current events or facts that are not in the notes
- get_weather when the user mentions the weather
- extract_entities to find emails, URLs, dates or phone numbers
- create_note when the user asks to save, remember or write down something new
- update_note only when the user explicitly asks to add to or change a note
- search_notion, get_notion_page, create_notion_page, append_to_notion and \
list_notion_databases for the user's Notion workspace

When asked to "search and add" something, first call web_search, then call \
update_note with the findings. Searching alone must never modify notes.

Format every answer as an HTML fragment: start with an <h3> heading, wrap \
each short paragraph in <p>, use <ul><li> for lists, <strong> for key \
phrases and <code> for ids and values. Never answer with a wall of text."""


def _format_note(note: Note) -> str:
    return (
        f"Note ID: {note.id}\n"
        f"Text: {note.text}\n"
        f"Created: {note.created_at[:10]}\n"
        f"Updated: {note.updated_at[:10]}"
    )


def build_system_prompt(context: RunContext) -> str:
    """Build the system prompt for a run from its context."""
    sections = [BASE_PROMPT]

    current = context.current_note
    if current is not None:
        sections.append(
            "CURRENT NOTE (the user is viewing this note):\n"
            f"{_format_note(current)}\n"
            f'To add to this note, call update_note with noteId="{current.id}".'
        )

    if context.notes:
        notes = "\n\n".join(_format_note(note) for note in context.notes)
        sections.append(f"User's notes:\n{notes}")
    else:
        sections.append("The user has no notes yet.")

    return "\n\n".join(sections)
