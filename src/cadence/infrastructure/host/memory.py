"""In-memory editor host implementation.

This module provides an editor host that keeps a single buffer in memory and
publishes the same notification sequences a real editor emits while typing.
It is used by the ``replay`` CLI command and by tests. Display calls are
recorded instead of rendered.
"""

import asyncio
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from cadence.application.workspace import Workspace
from cadence.domain.events import (
    CompleteDone,
    EventBus,
    InsertCharPre,
    InsertEnter,
    InsertLeave,
    TextChangedI,
    TextChangedP,
)
from cadence.domain.types import CompleteItem, CompleteOption
from cadence.logger import get_logger

logger = get_logger("host.memory")

_WORD_TAIL_RE = re.compile(r"\w*$")


@dataclass(frozen=True)
class MenuSnapshot:
    """A completion menu as it was displayed."""

    col: int
    words: tuple[str, ...]


class MemoryHost:
    """Editor host over an in-memory buffer.

    The cursor is tracked as ``(linenr, colnr)``, both 1-based; ``colnr - 1``
    is the number of characters before the cursor on its line.

    Example:
        >>> bus = EventBus()
        >>> host = MemoryHost(bus, lines=["foo"], filetype="python")
        >>> await host.type_text(" fo")
        >>> host.menus[-1].words
        ('foo',)
    """

    def __init__(
        self,
        event_bus: EventBus,
        lines: Optional[Sequence[str]] = None,
        filetype: str = "",
        bufnr: int = 1,
        workspace: Optional[Workspace] = None,
    ) -> None:
        self._event_bus = event_bus
        self.lines: list[str] = list(lines or [""])
        self.filetype = filetype
        self.bufnr = bufnr
        self.linenr = len(self.lines)
        self.colnr = len(self.lines[-1]) + 1
        self.insert_mode = False
        self.menu_visible = False
        self.context_col: Optional[int] = None
        self.context_items: list[CompleteItem] = []
        self.menus: list[MenuSnapshot] = []
        self.errors: list[str] = []
        self._workspace = workspace
        if workspace is not None:
            workspace.attach(bufnr, filetype, self.lines)

    # ------------------------------------------------------------------
    # EditorHost protocol
    # ------------------------------------------------------------------

    async def get_cursor(self) -> tuple[int, int]:
        return self.linenr, self.colnr

    async def get_line(self) -> str:
        return self.line

    async def get_search(self, col: int) -> Optional[str]:
        if self.colnr - 1 < col:
            return None
        return self.line[col : self.colnr - 1]

    async def get_input(self) -> str:
        return self._word_before_cursor()

    async def get_complete_option(self) -> Optional[CompleteOption]:
        if not self.insert_mode:
            return None
        input = self._word_before_cursor()
        return CompleteOption(
            bufnr=self.bufnr,
            linenr=self.linenr,
            colnr=self.colnr,
            col=self.colnr - 1 - len(input),
            input=input,
            filetype=self.filetype,
            line=self.line,
        )

    async def set_context(self, col: int, items: Sequence[CompleteItem]) -> None:
        self.context_col = col
        self.context_items = list(items)

    async def do_complete(self) -> None:
        if self.context_col is None or not self.context_items:
            return
        self.menu_visible = True
        snapshot = MenuSnapshot(
            col=self.context_col,
            words=tuple(item.word for item in self.context_items),
        )
        self.menus.append(snapshot)
        logger.debug(f"Menu at col {snapshot.col}: {', '.join(snapshot.words)}")

    async def hide(self) -> None:
        self.menu_visible = False

    async def get_filetype(self) -> str:
        return self.filetype

    async def echo_error(self, message: str) -> None:
        self.errors.append(message)
        logger.warning(f"Host error message: {message}")

    # ------------------------------------------------------------------
    # Editing helpers
    # ------------------------------------------------------------------

    @property
    def line(self) -> str:
        return self.lines[self.linenr - 1]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def displayed_words(self) -> list[str]:
        return [item.word for item in self.context_items] if self.menu_visible else []

    def enter_insert(self) -> None:
        self.insert_mode = True
        self._event_bus.publish(InsertEnter())

    def leave_insert(self) -> None:
        self.insert_mode = False
        self.menu_visible = False
        self._event_bus.publish(InsertLeave())

    async def type_text(self, text: str, delay: float = 0.0) -> None:
        """Type ``text`` one character at a time, yielding to the loop between keys."""
        if not self.insert_mode:
            self.enter_insert()
        for character in text:
            self._event_bus.publish(InsertCharPre(character=character))
            self._set_line(self.line[: self.colnr - 1] + character + self.line[self.colnr - 1 :])
            self.colnr += 1
            self._narrow_menu()
            self._publish_changed()
            await asyncio.sleep(delay)

    async def backspace(self, count: int = 1, delay: float = 0.0) -> None:
        for _ in range(count):
            if self.colnr <= 1:
                break
            self._set_line(self.line[: self.colnr - 2] + self.line[self.colnr - 1 :])
            self.colnr -= 1
            self._narrow_menu()
            self._publish_changed()
            await asyncio.sleep(delay)

    async def select(self, index: int = 0) -> Optional[CompleteItem]:
        """Move the menu selection to ``index``; the item text is written into the buffer."""
        item = self._menu_item(index)
        if item is None:
            return None
        self._replace_word(item.word)
        self._event_bus.publish(TextChangedP())
        await asyncio.sleep(0)
        return item

    async def accept(self, index: int = 0) -> Optional[CompleteItem]:
        """Accept menu entry ``index``, closing the menu."""
        item = self._menu_item(index)
        if item is None:
            return None
        self._replace_word(item.word)
        self.menu_visible = False
        self._event_bus.publish(CompleteDone(item=item))
        await asyncio.sleep(0)
        return item

    def _menu_item(self, index: int) -> Optional[CompleteItem]:
        words = self.displayed_words
        if not 0 <= index < len(words):
            return None
        return self.context_items[index]

    def _replace_word(self, word: str) -> None:
        col = self.context_col if self.context_col is not None else self.colnr - 1
        self._set_line(self.line[:col] + word + self.line[self.colnr - 1 :])
        self.colnr = col + len(word) + 1

    def _narrow_menu(self) -> None:
        # the popup filters itself against what is typed after its column
        if not self.menu_visible or self.context_col is None:
            return
        typed = self.line[self.context_col : self.colnr - 1] if self.colnr - 1 >= self.context_col else None
        if typed is None or not any(item.word.lower().startswith(typed.lower()) for item in self.context_items):
            self.menu_visible = False

    def _publish_changed(self) -> None:
        self._event_bus.publish(TextChangedP() if self.menu_visible else TextChangedI())

    def _set_line(self, text: str) -> None:
        self.lines[self.linenr - 1] = text
        if self._workspace is not None:
            document = self._workspace.get_document(self.bufnr)
            if document is not None:
                document.on_change(self.lines)

    def _word_before_cursor(self) -> str:
        match = _WORD_TAIL_RE.search(self.line[: self.colnr - 1])
        return match.group(0) if match else ""
