"""Completion source protocol."""

from typing import Protocol, Sequence

from cadence.domain.types import CompleteItem, CompleteOption, SourceType

__all__ = ["Source"]


class Source(Protocol):
    """Protocol for completion sources (providers).

    Sources abstract the different places candidates come from (words of
    the current buffer, dictionaries, language services) behind a uniform
    interface. The registry decides which sources are eligible for a
    request; a source only produces candidates.

    Example:
        class KeywordSource:
            name = "keywords"
            enable = True
            priority = 5
            filetypes = ("python",)
            trigger_characters = ()
            source_type = SourceType.NATIVE
            filepath = ""

            def toggle(self) -> None:
                self.enable = not self.enable

            def should_complete(self, option: CompleteOption) -> bool:
                return bool(option.input)

            async def do_complete(self, option):
                return [CompleteItem(word=w) for w in keyword.kwlist]

            async def on_complete_resolve(self, item): ...
            async def on_complete_done(self, item): ...
    """

    name: str
    enable: bool
    priority: int
    filetypes: Sequence[str]
    """Filetypes this source serves; empty means every filetype."""
    trigger_characters: Sequence[str]
    source_type: SourceType
    filepath: str

    def toggle(self) -> None:
        """Flip ``enable``."""
        ...

    def should_complete(self, option: CompleteOption) -> bool:
        """Return ``True`` when this source wants to answer ``option``."""
        ...

    async def do_complete(self, option: CompleteOption) -> list[CompleteItem]:
        """Return candidates for ``option``.

        Raises:
            Exception: Any failure; the registry logs it and treats it as
                no candidates from this source.
        """
        ...

    async def on_complete_resolve(self, item: CompleteItem) -> None:
        """Lazily fill in details of ``item`` while it is selected in the menu."""
        ...

    async def on_complete_done(self, item: CompleteItem) -> None:
        """React to ``item`` being accepted."""
        ...
