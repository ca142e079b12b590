"""Tests for the completion cache."""

import pytest

from cadence.application import Completes
from cadence.domain.types import CompleteItem, CompleteOption


def make_option(input):
    return CompleteOption(bufnr=1, linenr=1, colnr=len(input) + 1, col=0, input=input)


@pytest.mark.asyncio
async def test_merges_sources_in_order_and_stamps_items(word_source):
    first = word_source(["foo", "Format"], name="first")
    second = word_source(["foo", "fold", ""], name="second")
    completes = Completes()

    items = await completes.do_complete([first, second], make_option("f"))

    assert [item.word for item in items] == ["foo", "Format", "fold"]
    assert [item.source for item in items] == ["first", "first", "second"]
    assert len({item.cid for item in items}) == 1
    assert completes.option.input == "f"


@pytest.mark.asyncio
async def test_each_request_gets_a_new_cid(word_source):
    source = word_source(["foo"])
    completes = Completes()

    first = await completes.do_complete([source], make_option("f"))
    second = await completes.do_complete([source], make_option("f"))

    assert first[0].cid != second[0].cid


@pytest.mark.asyncio
async def test_failing_source_is_skipped(word_source):
    bad = word_source(["fizz"], name="bad", error=RuntimeError("boom"))
    good = word_source(["foo"], name="good")
    completes = Completes()

    items = await completes.do_complete([bad, good], make_option("f"))

    assert [item.word for item in items] == ["foo"]


@pytest.mark.asyncio
async def test_filter_is_case_insensitive_prefix(word_source):
    completes = Completes()
    await completes.do_complete([word_source(["Foo", "foobar", "bar"])], make_option(""))

    words = [item.word for item in completes.filter_complete_items(make_option("fo"))]

    assert words == ["Foo", "foobar"]
    assert completes.filter_complete_items(make_option("zz")) == []


@pytest.mark.asyncio
async def test_recent_words_rank_first(word_source):
    completes = Completes()
    completes.add_recent("foobar")
    completes.add_recent("format")

    items = await completes.do_complete([word_source(["foo", "foobar", "format"])], make_option("f"))

    assert [item.word for item in items] == ["format", "foobar", "foo"]


def test_recent_is_bounded_and_deduplicated():
    completes = Completes(recent_limit=2)
    for word in ["a", "b", "a", "c"]:
        completes.add_recent(word)

    assert completes.recent == ["c", "a"]


def test_recent_disabled_with_zero_limit():
    completes = Completes(recent_limit=0)
    completes.add_recent("foo")

    assert completes.recent == []


@pytest.mark.asyncio
async def test_get_complete_item_and_reset(word_source):
    completes = Completes()
    completes.add_recent("foo")
    await completes.do_complete([word_source(["foo", "foobar"])], make_option("f"))

    assert completes.get_complete_item("foobar").word == "foobar"
    assert completes.get_complete_item("fo") is None

    completes.reset()

    assert completes.option is None
    assert completes.items == []
    assert completes.recent == ["foo"]


@pytest.mark.asyncio
async def test_is_own_item(word_source):
    completes = Completes()
    items = await completes.do_complete([word_source(["foo"])], make_option("f"))

    assert completes.is_own_item(items[0])
    assert not completes.is_own_item(CompleteItem(word="foo"))
    assert not completes.is_own_item(None)
