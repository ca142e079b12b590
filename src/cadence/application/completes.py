"""Completion cache: the result set currently shown to the user."""

import asyncio
import itertools
from collections import OrderedDict
from typing import Awaitable, Callable, Optional, Sequence

from cadence.domain.protocols import Source
from cadence.domain.types import CompleteItem, CompleteOption
from cadence.logger import get_logger

logger = get_logger("completes")

SourceRunner = Callable[[Source, CompleteOption], Awaitable[list[CompleteItem]]]

_cids = itertools.count(1)


async def _run_source(source: Source, option: CompleteOption) -> list[CompleteItem]:
    try:
        return list(await source.do_complete(option))
    except Exception as e:
        logger.opt(exception=e).error(f"Source {source.name} failed: {e}")
        return []


class Completes:
    """Stores the option and merged items of the last completion request.

    Items handed out are stamped with ``user_data = {"cid": ..., "source": ...}``
    so accepted items can be traced back to this cache and their source.
    """

    def __init__(self, run_source: Optional[SourceRunner] = None, recent_limit: int = 50) -> None:
        self._run_source = run_source or _run_source
        self._recent_limit = recent_limit
        self._recent: OrderedDict[str, None] = OrderedDict()
        self._items: list[CompleteItem] = []
        self.option: Optional[CompleteOption] = None

    @property
    def items(self) -> list[CompleteItem]:
        return list(self._items)

    @property
    def recent(self) -> list[str]:
        """Recently accepted words, most recent first."""
        return list(reversed(self._recent))

    async def do_complete(
        self, sources: Sequence[Source], option: CompleteOption
    ) -> list[CompleteItem]:
        """Query every source concurrently, merge, store and return the items."""
        cid = next(_cids)
        results = await asyncio.gather(*(self._run_source(source, option) for source in sources))

        merged: list[CompleteItem] = []
        seen: set[str] = set()
        for source, items in zip(sources, results):
            for item in items:
                if not item.word or item.word in seen:
                    continue
                seen.add(item.word)
                item.user_data = {**item.user_data, "cid": cid, "source": source.name}
                merged.append(item)

        merged = self._rank(merged)
        self.option = option
        self._items = merged
        logger.debug(f"Completion {cid}: {len(merged)} item(s) from {len(sources)} source(s)")
        return self.filter_complete_items(option)

    def filter_complete_items(self, option: CompleteOption) -> list[CompleteItem]:
        """Stored items whose word starts with ``option.input`` (case-insensitive)."""
        prefix = option.input.lower()
        return [
            item
            for item in self._items
            if item.word.lower().startswith(prefix)
        ]

    def get_complete_item(self, text: str) -> Optional[CompleteItem]:
        for item in self._items:
            if item.word == text:
                return item
        return None

    def is_own_item(self, item: Optional[CompleteItem]) -> bool:
        return item is not None and item.cid is not None and item.source is not None

    def add_recent(self, word: str) -> None:
        if not word or self._recent_limit <= 0:
            return
        self._recent.pop(word, None)
        self._recent[word] = None
        while len(self._recent) > self._recent_limit:
            self._recent.popitem(last=False)

    def reset(self) -> None:
        self.option = None
        self._items = []

    def _rank(self, items: list[CompleteItem]) -> list[CompleteItem]:
        # recently accepted words first, most recent on top; stable otherwise
        order = {word: index for index, word in enumerate(self.recent)}
        return sorted(items, key=lambda item: order.get(item.word, len(order)))
