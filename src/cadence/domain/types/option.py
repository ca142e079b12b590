"""Completion request context."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

__all__ = ["CompleteOption"]


@dataclass(frozen=True, slots=True)
class CompleteOption:
    """Snapshot of the editor state a completion request is made for.

    Attributes:
        bufnr: Buffer identifier
        linenr: Cursor line number (1-based)
        colnr: Cursor column (1-based)
        col: Column where the word being completed starts (0-based anchor)
        input: Partial word between the anchor and the cursor
        filetype: Language identifier of the buffer
        line: Text of the cursor line when the option was assembled
        trigger_character: Character that caused the request, if any
    """

    bufnr: int
    linenr: int
    colnr: int
    col: int
    input: str = ""
    filetype: str = ""
    line: str = ""
    trigger_character: str | None = None

    def same_session(self, other: CompleteOption | None) -> bool:
        """Return ``True`` when ``other`` completes the same anchored word."""
        if other is None:
            return False
        return (
            self.bufnr == other.bufnr
            and self.linenr == other.linenr
            and self.col == other.col
        )

    def with_input(self, input: str) -> CompleteOption:
        """Copy of this option narrowed (or widened) to ``input``.

        The cursor column moves by the length delta so it keeps pointing at
        the end of the typed text.
        """
        return replace(self, input=input, colnr=self.colnr + len(input) - len(self.input))

    def to_dict(self) -> dict[str, Any]:
        return {
            "bufnr": self.bufnr,
            "linenr": self.linenr,
            "colnr": self.colnr,
            "col": self.col,
            "input": self.input,
            "filetype": self.filetype,
            "trigger_character": self.trigger_character,
        }
