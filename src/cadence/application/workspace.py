"""Per-buffer document bookkeeping."""

from dataclasses import dataclass, field
from typing import Optional

from cadence.logger import get_logger

logger = get_logger("workspace")


@dataclass
class Document:
    """Change-tracking state of one buffer.

    While ``paused`` the document ignores buffer changes, so edits made by
    an active completion session are not reported as user changes.
    """

    bufnr: int
    filetype: str = ""
    paused: bool = False
    changedtick: int = 0
    lines: list[str] = field(default_factory=list)

    def on_change(self, lines: list[str]) -> bool:
        """
        Record new buffer content unless change tracking is paused.

        Returns:
            True if the change was recorded
        """
        if self.paused:
            return False
        self.lines = list(lines)
        self.changedtick += 1
        return True


class Workspace:
    """Registry of attached documents keyed by buffer number."""

    def __init__(self) -> None:
        self._documents: dict[int, Document] = {}

    def attach(self, bufnr: int, filetype: str = "", lines: Optional[list[str]] = None) -> Document:
        document = self._documents.get(bufnr)
        if document is None:
            document = Document(bufnr=bufnr, filetype=filetype, lines=list(lines or []))
            self._documents[bufnr] = document
            logger.debug(f"Attached buffer {bufnr} ({filetype or 'no filetype'})")
        return document

    def get_document(self, bufnr: int) -> Optional[Document]:
        return self._documents.get(bufnr)

    @property
    def documents(self) -> list[Document]:
        return list(self._documents.values())
