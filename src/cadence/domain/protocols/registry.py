"""Source registry protocol."""

from typing import Protocol

from cadence.domain.protocols.source import Source
from cadence.domain.types import CompleteItem, CompleteOption

__all__ = ["SourceRegistry"]


class SourceRegistry(Protocol):
    """Protocol for the registry that owns completion sources."""

    def get_complete_sources(self, option: CompleteOption) -> list[Source]:
        """Return the sources eligible to answer ``option``."""
        ...

    def get_sources_for_filetype(self, filetype: str) -> list[Source]:
        """Return every registered source serving ``filetype``, enabled or not."""
        ...

    def should_trigger(self, character: str, filetype: str) -> bool:
        """Return ``True`` when ``character`` is a trigger character for ``filetype``."""
        ...

    async def do_complete_resolve(self, item: CompleteItem) -> None:
        """Run the resolve hook of the source owning ``item``."""
        ...

    async def do_complete_done(self, item: CompleteItem) -> None:
        """Run the accept hook of the source owning ``item``."""
        ...

    def get_source(self, name: str) -> Source | None:
        """Return the source registered as ``name``."""
        ...

    def dispose(self) -> None:
        """Release source resources."""
        ...
