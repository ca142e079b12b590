"""Source registry with pluggable completion sources.

This module keeps every completion source (words of the buffer, dictionaries,
remote services) behind the Source protocol and decides which of them answer
a given request.

Key features:
- Source registration and lookup by name
- Eligibility by filetype and trigger character
- Single-source execution with a timeout, so one slow or failing source never
  blocks or aborts a completion attempt
- Routing of resolve/accept hooks to the source that produced an item

Architecture:
    Sources (central hub)
        ↓
    Source (protocol)
        ↓
    Concrete sources: AroundSource, DictionarySource, etc.
"""

import asyncio
from typing import Optional

from cadence.config import Configuration
from cadence.domain.protocols import Source
from cadence.domain.types import CompleteItem, CompleteOption
from cadence.logger import get_logger
from cadence.utils import is_word

logger = get_logger("sources")


class Sources:
    """Central registry for completion sources.

    Example:
        >>> sources = Sources(configuration)
        >>> sources.register(AroundSource(host))
        >>> sources.register(DictionarySource(["print", "property"]))
        >>> eligible = sources.get_complete_sources(option)
        >>> items = await sources.complete(eligible[0], option)
    """

    def __init__(self, configuration: Optional[Configuration] = None):
        self._configuration = configuration or Configuration()
        self._sources: dict[str, Source] = {}

    def register(self, source: Source) -> None:
        """Register a completion source.

        Raises:
            ValueError: If a source with the same name is already registered.
        """
        if source.name in self._sources:
            raise ValueError(f"Source '{source.name}' is already registered")
        self._sources[source.name] = source
        logger.info(f"Registered source: {source.name} ({source.source_type.value})")

    def unregister(self, name: str) -> None:
        """Unregister a source.

        Raises:
            KeyError: If no source is registered as ``name``.
        """
        if name not in self._sources:
            raise KeyError(f"Source '{name}' not found")
        del self._sources[name]
        logger.info(f"Unregistered source: {name}")

    @property
    def names(self) -> list[str]:
        return list(self._sources.keys())

    def get_source(self, name: str) -> Optional[Source]:
        return self._sources.get(name)

    def get_sources_for_filetype(self, filetype: str) -> list[Source]:
        """Every source serving ``filetype``, including disabled ones."""
        return [source for source in self._sources.values() if _serves(source, filetype)]

    def get_complete_sources(self, option: CompleteOption) -> list[Source]:
        """Enabled sources that should answer ``option``.

        A non-word trigger character restricts the request to the sources
        listing that character; otherwise each source's own
        ``should_complete`` decides.
        """
        character = option.trigger_character
        triggered = bool(character) and not is_word(character)
        result = []
        for source in self.get_sources_for_filetype(option.filetype):
            if not source.enable:
                continue
            if triggered:
                if character in source.trigger_characters:
                    result.append(source)
            elif source.should_complete(option):
                result.append(source)
        result.sort(key=lambda source: source.priority, reverse=True)
        return result

    def should_trigger(self, character: str, filetype: str) -> bool:
        """Whether any enabled source serving ``filetype`` triggers on ``character``."""
        return any(
            source.enable and character in source.trigger_characters
            for source in self.get_sources_for_filetype(filetype)
        )

    async def complete(self, source: Source, option: CompleteOption) -> list[CompleteItem]:
        """Run one source with the configured timeout.

        Failures and timeouts are logged and produce no items.
        """
        timeout = self._configuration.get("sourceTimeout", 5.0)
        try:
            items = await asyncio.wait_for(source.do_complete(option), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Source {source.name} timed out after {timeout}s")
            return []
        except Exception as e:
            logger.opt(exception=e).error(f"Source {source.name} failed: {e}")
            return []
        logger.debug(f"Source {source.name} returned {len(items)} item(s)")
        return list(items)

    async def do_complete_resolve(self, item: CompleteItem) -> None:
        source = self._owner(item)
        if source is None:
            return
        try:
            await source.on_complete_resolve(item)
        except Exception as e:
            logger.error(f"Error resolving item {item.word!r} from {source.name}: {e}")

    async def do_complete_done(self, item: CompleteItem) -> None:
        source = self._owner(item)
        if source is None:
            return
        try:
            await source.on_complete_done(item)
        except Exception as e:
            logger.error(f"Error on complete done of {item.word!r} from {source.name}: {e}")

    def _owner(self, item: CompleteItem) -> Optional[Source]:
        name = item.source
        return self._sources.get(name) if name else None

    def dispose(self) -> None:
        """Dispose every source that holds resources and clear the registry."""
        for source in self._sources.values():
            dispose = getattr(source, "dispose", None)
            if callable(dispose):
                try:
                    dispose()
                except Exception as e:
                    logger.error(f"Error disposing source {source.name}: {e}")
        if self._sources:
            logger.debug(f"Disposed {len(self._sources)} source(s)")
        self._sources.clear()


def _serves(source: Source, filetype: str) -> bool:
    return not source.filetypes or filetype in source.filetypes
