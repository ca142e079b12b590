"""Event types for the event bus system.

Editor notifications are published by the host binding and consumed by the
completion orchestrator. Session signals are published by the session state
machine and consumed by document bookkeeping.
"""

import time
from dataclasses import dataclass, field

from cadence.domain.types import CompleteItem, CompleteOption


@dataclass
class Event:
    """Base class for all events.

    The timestamp field is automatically set when the event is created.
    """

    timestamp: float = field(default_factory=time.monotonic, init=False)
    """Monotonic timestamp when the event was created."""


@dataclass
class InsertCharPre(Event):
    """A character is about to be inserted in insert mode."""

    character: str
    """The character being typed."""


@dataclass
class TextChangedI(Event):
    """Buffer text changed in insert mode while no popup menu is visible."""


@dataclass
class TextChangedP(Event):
    """Buffer text changed in insert mode while the popup menu is visible.

    Besides typed characters this fires when selecting a menu entry writes
    the entry's text into the buffer.
    """


@dataclass
class InsertEnter(Event):
    """Insert mode was entered."""


@dataclass
class InsertLeave(Event):
    """Insert mode was left."""


@dataclass
class CompleteDone(Event):
    """The user accepted (or dismissed) a completion item."""

    item: CompleteItem | None = None
    """The accepted item, ``None`` when the menu closed without a choice."""


@dataclass
class SessionStarted(Event):
    """A completion session was (re)armed for ``option``."""

    option: CompleteOption


@dataclass
class SessionStopped(Event):
    """The active completion session ended."""

    option: CompleteOption | None = None
