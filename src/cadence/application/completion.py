"""Completion session orchestrator.

Turns editor notifications into completion requests: decides whether a
keystroke starts a new session, narrows the current one, restarts it after
a correction, or stops it, while keeping at most one completion attempt in
flight and never displaying a result that a newer keystroke made stale.

Event handlers are synchronous event-bus subscribers. They record timing
state immediately and schedule the asynchronous part of their work as a
task; every host round-trip inside those tasks is a point where another
notification may be handled, so each display step re-checks the session's
search text first.
"""

import asyncio
from dataclasses import replace
from typing import Any, Awaitable, Callable, Optional

from cadence.application.increment import Increment
from cadence.application.workspace import Document, Workspace
from cadence.config import Configuration
from cadence.domain.events import (
    CompleteDone,
    EventBus,
    InsertCharPre,
    InsertEnter,
    InsertLeave,
    SessionStarted,
    SessionStopped,
    TextChangedI,
    TextChangedP,
)
from cadence.domain.protocols import CompletionCache, EditorHost, SourceRegistry
from cadence.domain.types import CompleteItem, CompleteOption, SourceStat
from cadence.logger import get_logger
from cadence.utils import is_word, now

logger = get_logger("completion")

# TextChangedP within this many seconds of a TextChangedI is the same keystroke.
CHANGED_I_DEDUP_WINDOW = 0.03


class Completion:
    """Orchestrates completion sessions for one editor host.

    Example:
        ```python
        completion = Completion(sources, completes, configuration, workspace)
        completion.init(host, event_bus)
        ...
        completion.dispose()
        ```
    """

    def __init__(
        self,
        sources: SourceRegistry,
        completes: CompletionCache,
        configuration: Optional[Configuration] = None,
        workspace: Optional[Workspace] = None,
        clock: Callable[[], float] = now,
    ) -> None:
        self._sources = sources
        self._completes = completes
        self._configuration = configuration or Configuration()
        self._workspace = workspace or Workspace()
        self._clock = clock
        self._host: Optional[EditorHost] = None
        self._event_bus: Optional[EventBus] = None
        self._increment: Optional[Increment] = None
        self._completing = False
        self._last_changed_i: Optional[float] = None
        self._document: Optional[Document] = None
        self._subscriptions: list[tuple[type, Callable[[Any], None]]] = []
        self._tasks: set[asyncio.Task] = set()
        self._disposed = False

    def init(self, host: EditorHost, event_bus: EventBus) -> None:
        """Wire the orchestrator to an editor host and its event bus."""
        self._host = host
        self._event_bus = event_bus
        self._increment = Increment(host, event_bus, clock=self._clock)
        self._subscribe(InsertCharPre, self._on_insert_char_pre)
        self._subscribe(InsertLeave, self._on_insert_leave)
        self._subscribe(InsertEnter, self._on_insert_enter)
        self._subscribe(TextChangedP, self._on_text_changed_p)
        self._subscribe(TextChangedI, self._on_text_changed_i)
        self._subscribe(CompleteDone, self._on_complete_done)
        # stop change tracking while the session edits the buffer
        self._subscribe(SessionStarted, self._on_session_started)
        self._subscribe(SessionStopped, self._on_session_stopped)
        logger.info("Completion initialized")

    def _subscribe(self, event_type: type, handler: Callable[[Any], None]) -> None:
        assert self._event_bus is not None
        self._event_bus.subscribe(event_type, handler)
        self._subscriptions.append((event_type, handler))

    @property
    def increment(self) -> Increment:
        if self._increment is None:
            raise RuntimeError("Completion not initialized")
        return self._increment

    @property
    def completing(self) -> bool:
        return self._completing

    @property
    def has_latest_changed_i(self) -> bool:
        last = self._last_changed_i
        return last is not None and self._clock() - last < CHANGED_I_DEDUP_WINDOW

    def _get_preference(self, name: str, default: Any) -> Any:
        return self._configuration.get(name, default)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def start_completion(self, option: CompleteOption) -> Optional[asyncio.Task]:
        """
        Start a completion attempt for a new trigger.

        The attempt runs as a task. While it is in flight further calls are
        ignored. The session is marked active before any source is queried,
        so handlers running during the query already see an open session.

        Returns:
            The task running the attempt, or None when one is already in flight
        """
        if self._completing:
            logger.debug("Completion in flight, start request ignored")
            return None
        self._completing = True
        self.increment.start(option)
        return self._spawn(self._complete_and_release(option), "complete")

    async def resume_completion(self, resume_input: str) -> None:
        """
        Narrow the cached result set to ``resume_input`` without querying sources.

        The filtered list is only displayed if the session's search still
        equals ``resume_input``; an empty result stops the session.
        """
        increment = self.increment
        option = self._completes.option
        if option is None:
            logger.debug("No cached result set to resume")
            return
        try:
            opt = option.with_input(resume_input)
            logger.debug(f"Resume options: {opt.to_dict()}")
            items = self._completes.filter_complete_items(opt)
            logger.debug(f"Filtered item length: {len(items)}")
            if not items:
                increment.stop()
                return
            # make sure input not changed
            if increment.search == resume_input:
                await self._show(opt.col, items)
        except Exception as e:
            logger.opt(exception=e).error(f"Error resuming completion: {e}")
            await self._echo_error(f"completion error: {e}")

    def toggle_source(self, name: str) -> None:
        if not name:
            return
        source = self._sources.get_source(name)
        if source is None:
            return
        toggle = getattr(source, "toggle", None)
        if callable(toggle):
            toggle()
            logger.info(f"Source {name} {'enabled' if source.enable else 'disabled'}")

    async def source_stat(self) -> list[SourceStat]:
        """Describe the sources serving the current buffer's filetype."""
        assert self._host is not None
        filetype = await self._host.get_filetype()
        return [
            SourceStat(
                name=source.name,
                filepath=source.filepath or "",
                type=source.source_type.value,
                disabled=not source.enable,
            )
            for source in self._sources.get_sources_for_filetype(filetype)
        ]

    async def wait_until_idle(self) -> None:
        """Wait until every scheduled handler task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def dispose(self) -> None:
        """Stop the session, drop subscriptions and release sources. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        if self._increment is not None:
            self._increment.stop()
        if self._event_bus is not None:
            for event_type, handler in self._subscriptions:
                self._event_bus.unsubscribe(event_type, handler)
        self._subscriptions.clear()
        for task in list(self._tasks):
            task.cancel()
        self._sources.dispose()
        logger.info("Completion disposed")

    # ------------------------------------------------------------------
    # Single-flight attempt
    # ------------------------------------------------------------------

    async def _complete_and_release(self, option: CompleteOption) -> None:
        try:
            await self._do_complete(option)
        except Exception as e:
            logger.opt(exception=e).error(f"Error happens on complete: {e}")
            self.increment.stop()
            await self._echo_error(str(e))
        finally:
            self._completing = False

    async def _do_complete(self, option: CompleteOption) -> None:
        increment = self.increment
        logger.debug(f"options: {option.to_dict()}")
        sources = self._sources.get_complete_sources(option)
        logger.debug(f"Activated sources: {','.join(source.name for source in sources)}")
        items = await self._completes.do_complete(sources, option)
        if not items:
            increment.stop()
            return
        if not increment.is_active:
            logger.debug("Session ended while sources were queried, dropping results")
            return
        # only typed characters extend search; a backspace during the query goes unnoticed here
        search = increment.search
        if search == option.input:
            await self._show(option.col, items)
        elif search:
            # user kept typing while the query was outstanding
            await self.resume_completion(search)
        else:
            increment.stop()

    async def _show(self, col: int, items: list[CompleteItem]) -> None:
        assert self._host is not None
        await self._host.set_context(col, items)
        await self._host.do_complete()

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_insert_char_pre(self, event: InsertCharPre) -> None:
        self.increment.record_insert(event.character)

    def _on_insert_leave(self, event: InsertLeave) -> None:
        self.increment.stop()
        assert self._host is not None
        self._spawn(self._host.hide(), "InsertLeave")

    def _on_insert_enter(self, event: InsertEnter) -> None:
        if self._get_preference("autoTrigger", "always") != "always":
            return
        if self._get_preference("triggerAfterInsertEnter", True):
            self._spawn(self._trigger_at_cursor(), "InsertEnter")

    def _on_text_changed_p(self, event: TextChangedP) -> None:
        increment = self.increment
        if increment.latest_insert:
            if not increment.is_active or self._completing:
                return
            self._spawn(self._resume_from_host(), "TextChangedP")
            return
        if self._completing or self.has_latest_changed_i:
            return
        self._spawn(self._resolve_selected_item(), "TextChangedP")

    def _on_text_changed_i(self, event: TextChangedI) -> None:
        self._last_changed_i = self._clock()
        self._spawn(
            self._handle_text_changed_i(self.increment.latest_insert_char),
            "TextChangedI",
        )

    def _on_complete_done(self, event: CompleteDone) -> None:
        item = event.item
        if item is None or not self._completes.is_own_item(item):
            return
        self._spawn(self._handle_complete_done(item), "CompleteDone")

    def _on_session_started(self, event: SessionStarted) -> None:
        self._document = self._workspace.get_document(event.option.bufnr)
        if self._document is not None:
            self._document.paused = True

    def _on_session_stopped(self, event: SessionStopped) -> None:
        if self._document is None:
            return
        self._document.paused = False

    # ------------------------------------------------------------------
    # Handler bodies
    # ------------------------------------------------------------------

    async def _resume_from_host(self) -> None:
        search = await self.increment.get_resume_input()
        if search:
            await self.resume_completion(search)

    async def _resolve_selected_item(self) -> None:
        assert self._host is not None
        option = self._completes.option
        if option is None:
            return
        search = await self._host.get_search(option.col)
        if search is None:
            return
        item = self._completes.get_complete_item(search)
        if item is not None:
            await self._sources.do_complete_resolve(item)

    async def _handle_text_changed_i(self, latest_insert_char: str) -> None:
        assert self._host is not None
        increment = self.increment
        if increment.is_active:
            if self._completing:
                return
            search = await increment.get_resume_input()
            if search:
                await self.resume_completion(search)
                return
            # menu not opened yet, keep the session
            if latest_insert_char and is_word(latest_insert_char):
                return
        elif increment.search and not latest_insert_char:
            # restart when user corrects the search
            option = self._completes.option
            if option is not None:
                linenr, _ = await self._host.get_cursor()
                if linenr == option.linenr:
                    search = await self._host.get_search(option.col)
                    if search is not None and len(search) < len(increment.search):
                        option = replace(option, input=search)
                        self._completes.option = option
                        increment.start(option)
                        await self.resume_completion(search)
                        return
        if increment.is_active or not latest_insert_char:
            return
        if not await self.should_trigger(latest_insert_char):
            return
        option = await self._host.get_complete_option()
        if option is None:
            return
        option = replace(option, trigger_character=latest_insert_char)
        logger.debug(f"Trigger completion with {option.to_dict()}")
        self.start_completion(option)

    async def _handle_complete_done(self, item: CompleteItem) -> None:
        try:
            self.increment.stop()
            self._completes.add_recent(item.word)
            await self._sources.do_complete_done(item)
            self._completes.reset()
        except Exception as e:
            logger.error(f"Error on complete done: {e}")

    async def _trigger_at_cursor(self) -> None:
        assert self._host is not None
        option = await self._host.get_complete_option()
        if option is not None:
            self.start_completion(option)

    async def should_trigger(self, character: str) -> bool:
        """Decide whether typing ``character`` opens a new completion session."""
        if not character or character == " ":
            return False
        if self._get_preference("autoTrigger", "always") == "none":
            return False
        assert self._host is not None
        if is_word(character):
            input = await self._host.get_input()
            return len(input) > 0
        filetype = await self._host.get_filetype()
        return self._sources.should_trigger(character, filetype)

    # ------------------------------------------------------------------
    # Task plumbing
    # ------------------------------------------------------------------

    def _spawn(self, coro: Awaitable[None], label: str) -> asyncio.Task:
        task = asyncio.create_task(self._guard(coro, label))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _guard(self, coro: Awaitable[None], label: str) -> None:
        try:
            await coro
        except Exception as e:
            logger.opt(exception=e).error(f"Error handling {label}: {e}")
            await self._echo_error(f"{label} error: {e}")

    async def _echo_error(self, message: str) -> None:
        if self._host is None:
            return
        try:
            await self._host.echo_error(message)
        except Exception as e:
            logger.error(f"Failed to report error to host: {e}")
