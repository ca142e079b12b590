"""Completion session state machine.

Tracks whether a completion session is open, which option it was opened
for, what has been typed since, and the most recently typed character.
Knows nothing about sources or results.
"""

from typing import Callable, Optional

from cadence.domain.events import EventBus, SessionStarted, SessionStopped
from cadence.domain.protocols import EditorHost
from cadence.domain.types import CompleteOption, InsertedChar
from cadence.logger import get_logger
from cadence.utils import now

logger = get_logger("increment")

# A typed character counts as "just typed" for this long (seconds).
LATEST_INSERT_WINDOW = 0.05


class Increment:
    """Idle/Active session state machine.

    Transitions:
        start(option): Idle -> Active, or Active -> Active to re-arm
        stop(): Active -> Idle; no-op when already Idle

    ``start`` and ``stop`` publish SessionStarted / SessionStopped on the
    event bus so document bookkeeping can pause change tracking while the
    session's own edits land in the buffer.
    """

    def __init__(
        self,
        host: EditorHost,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], float] = now,
    ) -> None:
        self._host = host
        self._event_bus = event_bus
        self._clock = clock
        self._active = False
        self.option: Optional[CompleteOption] = None
        self.search: Optional[str] = None
        """Input typed since the session started.

        Kept after ``stop`` until the next ``start`` so a correction that
        deletes below the trigger point can still be recognised.
        """
        self.last_insert: Optional[InsertedChar] = None

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def latest_insert(self) -> Optional[InsertedChar]:
        """The last typed character, if it was typed within the latest-insert window."""
        last_insert = self.last_insert
        if last_insert is None or self._clock() - last_insert.timestamp > LATEST_INSERT_WINDOW:
            return None
        return last_insert

    @property
    def latest_insert_char(self) -> str:
        latest = self.latest_insert
        return latest.character if latest else ""

    def record_insert(self, character: str) -> None:
        """Record a typed character, regardless of session state.

        While a session is active the character also extends ``search``, so a
        keystroke typed during an outstanding query makes its result stale.
        Deletions never shorten ``search`` here; only ``get_resume_input``
        reads them back from the buffer.
        """
        self.last_insert = InsertedChar(character=character, timestamp=self._clock())
        if self._active and self.search is not None:
            self.search += character

    def start(self, option: CompleteOption) -> None:
        rearmed = option.same_session(self.option)
        self._active = True
        self.option = option
        self.search = option.input
        logger.debug(
            f"Session {'re-armed' if rearmed else 'started'} at line {option.linenr} "
            f"col {option.col} input={option.input!r}"
        )
        if self._event_bus:
            self._event_bus.publish(SessionStarted(option=option))

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        logger.debug("Session stopped")
        if self._event_bus:
            self._event_bus.publish(SessionStopped(option=self.option))

    async def get_resume_input(self) -> Optional[str]:
        """
        Read the text typed at the session's anchor.

        Stops the session when the cursor left the anchor line or moved in
        front of the anchor column.

        Returns:
            The current search text, or None when the session cannot resume
        """
        option = self.option
        if not self._active or option is None:
            return None
        linenr, colnr = await self._host.get_cursor()
        if linenr != option.linenr or colnr < option.col + 1:
            logger.debug(f"Cursor moved off the session anchor ({linenr}, {colnr})")
            self.stop()
            return None
        line = await self._host.get_line()
        search = line[option.col : colnr - 1]
        self.search = search
        return search
