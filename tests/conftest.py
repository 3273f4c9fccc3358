"""Shared fixtures: a stubbed PokeAPI, a controllable clock and a wired service."""

import asyncio
from collections.abc import Callable

import httpx
import pytest

from pokedex.api.v1.endpoints.pokemon import limiter
from pokedex.db.memory_cache import MemoryCache
from pokedex.services.pokeapi_service import PokeApiService
from tests.fakes import BASE_URL, FakeClock, FakePokeApi


@pytest.fixture
def upstream() -> FakePokeApi:
    return FakePokeApi()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_client():
    """Build AsyncClients over a MockTransport handler; all are closed on teardown."""
    clients: list[httpx.AsyncClient] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        asyncio.run(client.aclose())


@pytest.fixture
def service(upstream: FakePokeApi, clock: FakeClock, make_client) -> PokeApiService:
    return PokeApiService(make_client(upstream.handler), cache=MemoryCache(clock=clock))


@pytest.fixture(autouse=True)
def _reset_rate_limiter() -> None:
    """Reset SlowAPI in-memory counters to avoid cross-test leakage."""
    storage = getattr(limiter, "_storage", None)
    if storage is not None and hasattr(storage, "reset"):
        storage.reset()
