"""Base class for in-process completion sources."""

from typing import Sequence

from cadence.domain.types import CompleteItem, CompleteOption, SourceType


class BaseSource:
    """Defaults shared by the built-in sources.

    Subclasses set ``name`` and implement ``do_complete``.
    """

    name: str = ""
    priority: int = 1
    source_type: SourceType = SourceType.NATIVE
    filepath: str = ""

    def __init__(
        self,
        filetypes: Sequence[str] = (),
        trigger_characters: Sequence[str] = (),
        enable: bool = True,
    ) -> None:
        self.filetypes = tuple(filetypes)
        self.trigger_characters = tuple(trigger_characters)
        self.enable = enable

    def toggle(self) -> None:
        self.enable = not self.enable

    def should_complete(self, option: CompleteOption) -> bool:
        return bool(option.input)

    async def do_complete(self, option: CompleteOption) -> list[CompleteItem]:
        raise NotImplementedError

    async def on_complete_resolve(self, item: CompleteItem) -> None:
        return None

    async def on_complete_done(self, item: CompleteItem) -> None:
        return None
