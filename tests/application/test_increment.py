"""Tests for the session state machine."""

import pytest

from cadence.application.increment import LATEST_INSERT_WINDOW, Increment
from cadence.domain.events import EventBus, SessionStarted, SessionStopped
from cadence.domain.types import CompleteOption
from cadence.infrastructure.host import MemoryHost


class Clock:
    def __init__(self):
        self.now = 50.0

    def __call__(self):
        return self.now


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def host(bus):
    return MemoryHost(bus, lines=["foo"])


@pytest.fixture
def increment(host, bus, clock):
    return Increment(host, bus, clock=clock)


def make_option(input="fo", col=0, linenr=1):
    return CompleteOption(bufnr=1, linenr=linenr, colnr=col + len(input) + 1, col=col, input=input)


def test_start_and_stop(increment, bus):
    started, stopped = [], []
    bus.subscribe(SessionStarted, started.append)
    bus.subscribe(SessionStopped, stopped.append)

    increment.start(make_option("fo"))
    assert increment.is_active
    assert increment.search == "fo"

    increment.stop()
    increment.stop()

    assert not increment.is_active
    assert len(started) == 1
    assert len(stopped) == 1
    assert stopped[0].option.input == "fo"


def test_search_survives_stop(increment):
    increment.start(make_option("foo"))
    increment.stop()

    assert increment.search == "foo"


def test_restart_rearms_search(increment):
    increment.start(make_option("fooz"))
    increment.start(make_option("foo"))

    assert increment.is_active
    assert increment.search == "foo"


def test_latest_insert_expires(increment, clock):
    increment.record_insert("f")
    assert increment.latest_insert_char == "f"

    clock.now += LATEST_INSERT_WINDOW / 2
    assert increment.latest_insert.character == "f"

    clock.now += LATEST_INSERT_WINDOW
    assert increment.latest_insert is None
    assert increment.latest_insert_char == ""
    assert increment.last_insert.character == "f"


def test_insert_extends_search_only_while_active(increment):
    increment.record_insert("x")
    assert increment.search is None

    increment.start(make_option("ab"))
    increment.record_insert("c")

    assert increment.search == "abc"


@pytest.mark.asyncio
async def test_get_resume_input_reads_anchor(increment, host):
    host.colnr = 4
    increment.start(make_option("f"))

    assert await increment.get_resume_input() == "foo"
    assert increment.search == "foo"


@pytest.mark.asyncio
async def test_get_resume_input_when_idle(increment):
    assert await increment.get_resume_input() is None


@pytest.mark.asyncio
async def test_cursor_before_anchor_stops(increment, host):
    increment.start(make_option("o", col=2))
    host.colnr = 2

    assert await increment.get_resume_input() is None
    assert not increment.is_active


@pytest.mark.asyncio
async def test_cursor_on_other_line_stops(bus, clock):
    host = MemoryHost(bus, lines=["foo", "bar"])
    increment = Increment(host, bus, clock=clock)
    increment.start(make_option("fo", linenr=1))

    assert host.linenr == 2
    assert await increment.get_resume_input() is None
    assert not increment.is_active


def test_same_session_compares_anchor():
    option = make_option("fo", col=4)

    assert option.same_session(make_option("foo", col=4))
    assert not option.same_session(make_option("fo", col=3))
    assert not option.same_session(make_option("fo", col=4, linenr=2))
    assert not option.same_session(None)
