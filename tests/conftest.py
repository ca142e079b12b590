"""Shared fixtures and stubs for completion tests."""

import asyncio
from typing import Callable, Iterable, Optional

import pytest

from cadence.application import Completes, Completion, Sources, Workspace
from cadence.config import Configuration, Preferences
from cadence.domain.events import EventBus
from cadence.domain.types import CompleteItem, CompleteOption
from cadence.infrastructure.host import MemoryHost
from cadence.sources import BaseSource


class FakeClock:
    """Manually advanced clock for the keystroke timing windows."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class WordSource(BaseSource):
    """Source returning a fixed word list and recording every hook call."""

    def __init__(
        self,
        words: Iterable[str],
        name: str = "words",
        priority: int = 1,
        gated: bool = False,
        error: Optional[Exception] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.name = name
        self.priority = priority
        self.words = list(words)
        self.error = error
        self.calls: list[CompleteOption] = []
        self.resolved: list[CompleteItem] = []
        self.done: list[CompleteItem] = []
        self.disposed = 0
        self._gate = asyncio.Event() if gated else None

    def release(self) -> None:
        assert self._gate is not None
        self._gate.set()

    async def do_complete(self, option: CompleteOption) -> list[CompleteItem]:
        self.calls.append(option)
        if self._gate is not None:
            await self._gate.wait()
        if self.error is not None:
            raise self.error
        return [CompleteItem(word=word) for word in self.words]

    async def on_complete_resolve(self, item: CompleteItem) -> None:
        self.resolved.append(item)

    async def on_complete_done(self, item: CompleteItem) -> None:
        self.done.append(item)

    def dispose(self) -> None:
        self.disposed += 1


class Harness:
    """A Completion wired to a MemoryHost through a shared event bus."""

    def __init__(
        self,
        sources: list[BaseSource],
        lines: Optional[list[str]] = None,
        filetype: str = "",
        host_class: type[MemoryHost] = MemoryHost,
        **preferences,
    ):
        preferences.setdefault("triggerAfterInsertEnter", False)
        self.clock = FakeClock()
        self.configuration = Configuration(Preferences(**preferences))
        self.workspace = Workspace()
        self.event_bus = EventBus()
        self.sources = Sources(self.configuration)
        for source in sources:
            self.sources.register(source)
        self.completes = Completes(run_source=self.sources.complete)
        self.completion = Completion(
            self.sources,
            self.completes,
            self.configuration,
            self.workspace,
            clock=self.clock,
        )
        self.host = host_class(
            self.event_bus,
            lines=lines,
            filetype=filetype,
            workspace=self.workspace,
        )
        self.host.insert_mode = True
        self.completion.init(self.host, self.event_bus)

    @property
    def increment(self):
        return self.completion.increment

    def option(self, input: str, col: int = 0, linenr: int = 1, **kwargs) -> CompleteOption:
        return CompleteOption(
            bufnr=self.host.bufnr,
            linenr=linenr,
            colnr=col + len(input) + 1,
            col=col,
            input=input,
            **kwargs,
        )

    async def idle(self) -> None:
        await asyncio.sleep(0)
        await self.completion.wait_until_idle()

    async def type(self, text: str) -> None:
        """Type ``text``, letting every handler finish after each key."""
        for character in text:
            await self.host.type_text(character)
            await self.idle()

    async def backspace(self, count: int = 1) -> None:
        for _ in range(count):
            await self.host.backspace()
            await self.idle()

    @property
    def menus(self) -> list[tuple[str, ...]]:
        return [menu.words for menu in self.host.menus]


@pytest.fixture
def word_source() -> Callable[..., WordSource]:
    return WordSource


@pytest.fixture
def harness() -> Callable[..., Harness]:
    return Harness
