"""Tracking of note mutations performed during a run."""

from dataclasses import dataclass

from quill_server.tools.types import ToolResult


@dataclass
class SideEffectTracker:
    """Records whether notes were created or updated during one run.

    Flags start false and only ever flip to true, and only when the
    corresponding mutation actually succeeded. A tracker belongs to a single
    run and is never shared.
    """

    note_created: bool = False
    note_updated: bool = False

    def record(self, tool_name: str, result: ToolResult) -> None:
        if not result.ok:
            return
        if tool_name == "create_note":
            self.note_created = True
        elif tool_name == "update_note":
            self.note_updated = True
