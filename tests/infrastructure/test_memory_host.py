"""Tests for the in-memory editor host."""

import pytest

from cadence.application import Workspace
from cadence.domain.events import (
    CompleteDone,
    EventBus,
    InsertCharPre,
    InsertEnter,
    InsertLeave,
    TextChangedI,
    TextChangedP,
)
from cadence.domain.types import CompleteItem
from cadence.infrastructure.host import MemoryHost


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def events(bus):
    recorded = []
    for event_type in [CompleteDone, InsertCharPre, InsertEnter, InsertLeave, TextChangedI, TextChangedP]:
        bus.subscribe(event_type, recorded.append)
    return recorded


def names(events):
    return [type(event).__name__ for event in events]


@pytest.mark.asyncio
async def test_typing_publishes_char_then_change(bus, events):
    host = MemoryHost(bus, lines=["x"])

    await host.type_text("ab")

    assert names(events) == ["InsertEnter", "InsertCharPre", "TextChangedI", "InsertCharPre", "TextChangedI"]
    assert host.line == "xab"
    assert await host.get_cursor() == (1, 4)


@pytest.mark.asyncio
async def test_complete_option_anchors_at_word_start(bus):
    host = MemoryHost(bus, lines=["print(fo"], filetype="python")

    assert await host.get_complete_option() is None

    host.insert_mode = True
    option = await host.get_complete_option()

    assert option.col == 6
    assert option.input == "fo"
    assert option.colnr == 9
    assert option.filetype == "python"
    assert await host.get_input() == "fo"
    assert await host.get_search(6) == "fo"
    assert await host.get_search(20) is None


@pytest.mark.asyncio
async def test_visible_menu_switches_to_popup_change(bus, events):
    host = MemoryHost(bus, lines=["f"])
    host.insert_mode = True
    await host.set_context(0, [CompleteItem(word="foo"), CompleteItem(word="far")])
    await host.do_complete()

    await host.type_text("o")
    assert host.menu_visible
    await host.type_text("x")
    assert not host.menu_visible

    assert names(events) == ["InsertCharPre", "TextChangedP", "InsertCharPre", "TextChangedI"]
    assert host.menus[0].words == ("foo", "far")


@pytest.mark.asyncio
async def test_empty_context_shows_nothing(bus):
    host = MemoryHost(bus)

    await host.do_complete()

    assert host.menus == []
    assert not host.menu_visible


@pytest.mark.asyncio
async def test_select_and_accept(bus, events):
    host = MemoryHost(bus, lines=["fo"])
    host.insert_mode = True
    await host.set_context(0, [CompleteItem(word="foo"), CompleteItem(word="fold")])
    await host.do_complete()

    selected = await host.select(1)
    assert selected.word == "fold"
    assert host.line == "fold"

    accepted = await host.accept(0)
    assert accepted.word == "foo"
    assert host.line == "foo"
    assert not host.menu_visible
    assert names(events) == ["TextChangedP", "CompleteDone"]
    assert events[-1].item is accepted

    assert await host.accept(0) is None


@pytest.mark.asyncio
async def test_backspace_stops_at_line_start(bus, events):
    host = MemoryHost(bus, lines=["ab"])
    host.insert_mode = True

    await host.backspace(5)

    assert host.line == ""
    assert names(events) == ["TextChangedI", "TextChangedI"]


@pytest.mark.asyncio
async def test_edits_reach_unpaused_document(bus):
    workspace = Workspace()
    host = MemoryHost(bus, lines=["a"], workspace=workspace)
    document = workspace.get_document(host.bufnr)

    await host.type_text("b")
    assert document.lines == ["ab"]

    document.paused = True
    await host.type_text("c")
    assert document.lines == ["ab"]
    assert host.line == "abc"


@pytest.mark.asyncio
async def test_leave_and_errors(bus, events):
    host = MemoryHost(bus)
    host.enter_insert()
    host.leave_insert()
    await host.echo_error("boom")

    assert names(events) == ["InsertEnter", "InsertLeave"]
    assert host.errors == ["boom"]
    assert not host.insert_mode
