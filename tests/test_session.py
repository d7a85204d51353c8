import asyncio
import threading

import pytest

from conftest import BASE_URL, DummyResponse, HtmlResponse
from typedex.config import LookupConfig
from typedex.errors import InputEmpty, NotFound, UpstreamError
from typedex.session import LookupSession


def make_session(client, **overrides):
    config = LookupConfig(base_url=BASE_URL, **overrides)
    return LookupSession(config, client=client)


@pytest.mark.asyncio
async def test_search_german_name_with_live_types(client, fake_api):
    fake_api.add_types()
    async with make_session(client) as session:
        outcome = await session.search("Skorgro")
    assert outcome.ok
    result = outcome.result
    assert result.record.name == "gliscor"
    assert result.profile.multiplier_for("electric") == 0.0
    assert result.profile.multiplier_for("ice") == 4.0
    assert fake_api.count("type/ground") == 1
    assert fake_api.count("type/flying") == 1


@pytest.mark.asyncio
async def test_search_with_static_types_skips_type_requests(client, fake_api):
    async with make_session(client, use_static_types=True) as session:
        outcome = await session.search("charizard")
    assert outcome.ok
    assert [(s.type, s.multiplier) for s in outcome.result.strengths[:2]] == [("grass", 4.0), ("bug", 4.0)]
    assert fake_api.count("type/") == 0


@pytest.mark.asyncio
async def test_search_reports_errors_instead_of_raising(client, fake_api):
    fake_api.routes["pokemon/broken"] = DummyResponse({}, 500)
    async with make_session(client, use_static_types=True) as session:
        missing = await session.search("Xyzzy")
        empty = await session.search("  ")
        broken = await session.search("broken")
    assert isinstance(missing.error, NotFound)
    assert isinstance(empty.error, InputEmpty)
    assert isinstance(broken.error, UpstreamError)
    assert "500" in broken.error.detail
    assert not missing.ok


@pytest.mark.asyncio
async def test_prefetch_warms_index_for_resolution(client, fake_api):
    async with make_session(client, use_static_types=True) as session:
        await session.start_prefetch()
        assert session.start_prefetch() is session.start_prefetch()
        outcome = await session.search("Glumanda")
        suggestions = await session.suggest("glu")
    assert outcome.result.record.name == "charmander"
    assert [s.english_name for s in suggestions] == ["charmander", "charizard"]
    assert fake_api.count("pokemon?") == 1


@pytest.mark.asyncio
async def test_prefetch_failure_does_not_break_search(client, fake_api):
    fake_api.listing_status = 503
    async with make_session(client, use_static_types=True) as session:
        await session.start_prefetch()
        outcome = await session.search("pikachu")
        german = await session.search("Glurak")
    assert outcome.ok
    assert isinstance(german.error, NotFound)


@pytest.mark.asyncio
async def test_sessions_do_not_share_caches(client, fake_api):
    first = make_session(client, use_static_types=True)
    second = make_session(client, use_static_types=True)
    await first.search("Glurak")
    await second.search("Glurak")
    assert fake_api.count("pokemon?") == 2
    await first.close()
    await second.close()


@pytest.mark.asyncio
async def test_non_json_answers_become_outcomes(client, fake_api):
    fake_api.routes["pokemon/pikachu"] = HtmlResponse()
    fake_api.routes["pokemon-species/6"] = HtmlResponse()
    async with make_session(client, use_static_types=True) as session:
        broken = await session.search("pikachu")
        # Glurak's species page is unreadable, so it is missing from the index
        german = await session.search("Glurak")
        other = await session.search("Glumanda")
    assert isinstance(broken.error, UpstreamError)
    assert isinstance(german.error, NotFound)
    assert other.result.record.name == "charmander"


@pytest.mark.asyncio
async def test_close_while_search_waits_on_prefetch(client, fake_api):
    gate = threading.Event()
    fake_api.listing_gate = gate
    session = make_session(client, use_static_types=True)
    session.start_prefetch()
    search = asyncio.create_task(session.search("Glurak"))
    for _ in range(200):
        if fake_api.count("pokemon/glurak") and session.index.building:
            break
        await asyncio.sleep(0.01)
    await asyncio.sleep(0.05)
    await session.close()
    gate.set()
    outcome = await search
    assert outcome.ok
    assert outcome.result.record.name == "charizard"
    assert fake_api.count("pokemon?") == 1
