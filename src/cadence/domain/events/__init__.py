"""Event system for decoupled component communication.

The host binding publishes editor notifications; the completion orchestrator
subscribes to them. The session state machine publishes session signals;
document bookkeeping subscribes to them.

Example:
    ```python
    from cadence.domain.events import EventBus, InsertCharPre

    bus = EventBus()
    bus.subscribe(InsertCharPre, lambda event: print(event.character))
    bus.publish(InsertCharPre(character="a"))
    ```
"""

from .bus import EventBus
from .types import (
    CompleteDone,
    Event,
    InsertCharPre,
    InsertEnter,
    InsertLeave,
    SessionStarted,
    SessionStopped,
    TextChangedI,
    TextChangedP,
)

__all__ = [
    "EventBus",
    "Event",
    "CompleteDone",
    "InsertCharPre",
    "InsertEnter",
    "InsertLeave",
    "SessionStarted",
    "SessionStopped",
    "TextChangedI",
    "TextChangedP",
]
