"""Completion cache protocol."""

from typing import Protocol, Sequence

from cadence.domain.protocols.source import Source
from cadence.domain.types import CompleteItem, CompleteOption

__all__ = ["CompletionCache"]


class CompletionCache(Protocol):
    """Protocol for the store of the currently displayed result set.

    The cache queries sources once per request option and can then narrow
    the stored result set against a longer input without querying again.
    """

    option: CompleteOption | None
    """Option that produced the stored result set, None after ``reset``."""

    async def do_complete(
        self, sources: Sequence[Source], option: CompleteOption
    ) -> list[CompleteItem]:
        """Query ``sources`` for ``option``, store and return the merged items."""
        ...

    def filter_complete_items(self, option: CompleteOption) -> list[CompleteItem]:
        """Filter the stored result set against ``option.input``."""
        ...

    def get_complete_item(self, text: str) -> CompleteItem | None:
        """Return the stored item whose word equals ``text``."""
        ...

    def is_own_item(self, item: CompleteItem | None) -> bool:
        """Return ``True`` for items that this cache handed to the host."""
        ...

    def add_recent(self, word: str) -> None:
        """Remember ``word`` as recently accepted."""
        ...

    def reset(self) -> None:
        """Drop the stored option and result set."""
        ...
