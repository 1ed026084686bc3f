# tests/test_fetch_multiple.py
from __future__ import annotations

import asyncio
import logging

import pytest
import respx
from httpx import Response

source_mod = pytest.importorskip("datasource.fetch.source")

from datasource.exceptions import InvalidMinimum, NetworkFailure  # noqa: E402
from datasource.fetch.store import Kind  # noqa: E402

FILMS = [f"https://api.test/films/{i}/" for i in range(1, 5)]


def _mock_films():
    return [
        respx.get(url).mock(return_value=Response(200, json={"title": f"Episode {i}"}))
        for i, url in enumerate(FILMS, start=1)
    ]


def _titles(objects) -> list[str | None]:
    return [None if obj is None else obj["title"] for obj in objects]


async def _wait_for_change(fired: asyncio.Event) -> None:
    await asyncio.wait_for(fired.wait(), timeout=2.0)


# -------------------------------- threshold: immediate partial -----------------------


@respx.mock
def test_enough_cached_returns_immediately_with_placeholders():
    routes = _mock_films()
    events = []

    async def scenario():
        async with source_mod.DataSource() as ds:
            await ds.fetch_one(FILMS[0])
            await ds.fetch_one(FILMS[1])

            fired = asyncio.Event()

            def on_change(event):
                events.append(event)
                fired.set()

            ds.on_change = on_change
            partial = await ds.fetch_multiple(FILMS, minimum="50%")
            await _wait_for_change(fired)
            complete = await ds.fetch_multiple(FILMS, minimum="50%")
            return ds, partial, complete

    ds, partial, complete = asyncio.run(scenario())

    assert _titles(partial) == ["Episode 1", "Episode 2", None, None]
    assert _titles(complete) == ["Episode 1", "Episode 2", "Episode 3", "Episode 4"]
    assert len(events) == 1
    assert events[0].target is ds
    assert [r.call_count for r in routes] == [1, 1, 1, 1]


@respx.mock
def test_all_cached_returns_complete_without_change_event(changes):
    routes = _mock_films()

    async def scenario():
        async with source_mod.DataSource() as ds:
            for url in FILMS:
                await ds.fetch_one(url)
            ds.on_change = changes
            result = await ds.fetch_multiple(FILMS, minimum=True)
            await asyncio.sleep(0)
            return result

    result = asyncio.run(scenario())

    assert _titles(result) == ["Episode 1", "Episode 2", "Episode 3", "Episode 4"]
    assert changes.events == []
    assert sum(r.call_count for r in routes) == 4


def test_empty_url_list_returns_empty_list():
    async def scenario():
        async with source_mod.DataSource() as ds:
            return await ds.fetch_multiple([])

    assert asyncio.run(scenario()) == []


# -------------------------------- threshold: full wait -------------------------------


@respx.mock
def test_below_threshold_waits_for_everything_without_change_event(changes):
    routes = _mock_films()

    async def scenario():
        async with source_mod.DataSource() as ds:
            await ds.fetch_one(FILMS[0])
            await ds.fetch_one(FILMS[1])
            ds.on_change = changes
            result = await ds.fetch_multiple(FILMS)
            await asyncio.sleep(0)
            return ds, result

    ds, result = asyncio.run(scenario())

    assert _titles(result) == ["Episode 1", "Episode 2", "Episode 3", "Episode 4"]
    assert changes.events == []
    assert [r.call_count for r in routes] == [1, 1, 1, 1]
    assert all(ds.store.find(url, Kind.OBJECT).done for url in FILMS)


@respx.mock
def test_percentage_threshold_rounds_up(changes):
    _mock_films()

    async def scenario():
        async with source_mod.DataSource() as ds:
            await ds.fetch_one(FILMS[0])
            await ds.fetch_one(FILMS[1])
            ds.on_change = changes
            # ceil(4 * 0.6) == 3 > 2 cached
            return await ds.fetch_multiple(FILMS, minimum="60%")

    result = asyncio.run(scenario())

    assert None not in result
    assert changes.events == []


@respx.mock
def test_negative_minimum_means_all_but_n():
    _mock_films()

    async def scenario():
        async with source_mod.DataSource() as ds:
            for url in FILMS[:3]:
                await ds.fetch_one(url)
            return await ds.fetch_multiple(FILMS, minimum=-1)

    assert _titles(asyncio.run(scenario())) == ["Episode 1", "Episode 2", "Episode 3", None]


# -------------------------------- ordering -------------------------------------------


@respx.mock
def test_result_order_follows_input_order():
    url_a = "https://api.test/species/1/"
    url_b = "https://api.test/species/2/"
    respx.get(url_a).mock(return_value=Response(200, json={"name": "Human"}))
    respx.get(url_b).mock(return_value=Response(200, json={"name": "Droid"}))

    async def scenario():
        async with source_mod.DataSource() as ds:
            await ds.fetch_one(url_a)
            return await ds.fetch_multiple([url_b, url_a])

    result = asyncio.run(scenario())

    assert [obj["name"] for obj in result] == ["Droid", "Human"]


@respx.mock
def test_pending_fetch_one_is_reused_not_duplicated():
    routes = _mock_films()

    async def scenario():
        async with source_mod.DataSource() as ds:
            single = asyncio.ensure_future(ds.fetch_one(FILMS[2]))
            await asyncio.sleep(0)
            many = await ds.fetch_multiple(FILMS)
            return await single, many

    single, many = asyncio.run(scenario())

    assert many[2] is single
    assert [r.call_count for r in routes] == [1, 1, 1, 1]


# -------------------------------- failures -------------------------------------------


@respx.mock
def test_full_wait_propagates_failure_and_keeps_siblings_cached():
    respx.get(FILMS[0]).mock(return_value=Response(200, json={"title": "Episode 1"}))
    respx.get(FILMS[1]).mock(return_value=Response(404))

    async def scenario():
        async with source_mod.DataSource() as ds:
            with pytest.raises(NetworkFailure) as ei:
                await ds.fetch_multiple(FILMS[:2])
            # sibling fetch keeps running; its result still lands in the store
            await ds.fetch_one(FILMS[0])
            return ds, ei.value

    ds, err = asyncio.run(scenario())

    assert err.url == FILMS[1]
    assert ds.store.find(FILMS[0], Kind.OBJECT).done is True
    assert ds.store.find(FILMS[1], Kind.OBJECT).done is False


@respx.mock
def test_background_failure_is_logged_and_no_change_fires(changes, caplog):
    respx.get(FILMS[0]).mock(return_value=Response(200, json={"title": "Episode 1"}))
    respx.get(FILMS[1]).mock(return_value=Response(500))

    async def scenario():
        async with source_mod.DataSource() as ds:
            await ds.fetch_one(FILMS[0])
            ds.on_change = changes
            result = await ds.fetch_multiple(FILMS[:2], minimum=1)
        return result

    with caplog.at_level(logging.WARNING, logger="datasource.fetch.source"):
        result = asyncio.run(scenario())

    assert _titles(result) == ["Episode 1", None]
    assert changes.events == []
    assert any("background completion failed" in r.getMessage() for r in caplog.records)


def test_invalid_minimum_raises_before_any_request():
    async def scenario():
        async with source_mod.DataSource() as ds:
            with pytest.raises(InvalidMinimum):
                await ds.fetch_multiple(FILMS, minimum="most")
            return len(ds.store)

    assert asyncio.run(scenario()) == 0
