from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import pytest
from cachetools import LRUCache, TTLCache

from modelstore import (
    CachedModelRepository,
    InMemoryModelRepository,
    LoadingCacheModelRepository,
    TTLCacheModelRepository,
)


@dataclass(frozen=True)
class Quote:
    id: str
    price: float


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl():
    clock = _Clock()
    repo = TTLCacheModelRepository(cache=TTLCache(maxsize=8, ttl=10, timer=clock))
    repo.create(Quote(id="AAPL", price=1.0))

    clock.now = 5
    assert repo.find("AAPL") is not None
    assert repo.exists("AAPL")

    clock.now = 11
    assert repo.find("AAPL") is None
    assert repo.exists("AAPL") is False
    assert repo.find_all() == []


def test_size_bound_evicts_oldest_entries():
    repo = TTLCacheModelRepository(cache=LRUCache(maxsize=2))
    for symbol in ("A", "B", "C"):
        repo.create(Quote(id=symbol, price=1.0))

    assert repo.find("A") is None
    assert sorted(q.id for q in repo.find_all()) == ["B", "C"]


def test_invalid_bounds_are_rejected():
    with pytest.raises(ValueError, match="maxsize"):
        TTLCacheModelRepository(maxsize=0)
    with pytest.raises(ValueError, match="ttl_s"):
        TTLCacheModelRepository(ttl_s=0)


def test_expired_cache_entry_is_a_get_miss_that_falls_back_to_source():
    clock = _Clock()
    cache = TTLCacheModelRepository(cache=TTLCache(maxsize=8, ttl=10, timer=clock))
    repo = CachedModelRepository(InMemoryModelRepository(), cache)
    repo.create(Quote(id="AAPL", price=1.0))
    repo.cache(Quote(id="AAPL", price=2.0))

    assert repo.get_or_find("AAPL").price == 2.0

    clock.now = 20
    assert repo.get("AAPL") is None
    assert repo.get_or_find("AAPL").price == 1.0


def test_loading_cache_loads_and_stores_on_miss():
    calls: list[str] = []

    def loader(id: str) -> Quote | None:
        calls.append(id)
        if id == "ghost":
            return None
        return Quote(id=id, price=42.0)

    repo = LoadingCacheModelRepository(loader, maxsize=8, ttl_s=60)

    assert repo.exists("AAPL") is False
    assert repo.find("AAPL") == Quote(id="AAPL", price=42.0)
    assert repo.find("AAPL") == Quote(id="AAPL", price=42.0)
    assert repo.find("ghost") is None
    assert calls == ["AAPL", "ghost"]
    assert [q.id for q in repo.find_all()] == ["AAPL"]


def test_loading_cache_find_many_loads_missing_ids():
    repo = LoadingCacheModelRepository(
        lambda id: Quote(id=id, price=0.0) if id != "ghost" else None
    )
    repo.create(Quote(id="A", price=1.0))

    found = repo.find_many(["A", "B", "ghost"])

    assert [(q.id, q.price) for q in found] == [("A", 1.0), ("B", 0.0)]
    assert repo.exists("B")


def test_loading_cache_does_not_block_other_callers_while_loading():
    loading = threading.Event()
    release = threading.Event()

    def slow_loader(id: str) -> Quote | None:
        loading.set()
        assert release.wait(timeout=5)
        return Quote(id=id, price=7.0)

    repo = LoadingCacheModelRepository(slow_loader, maxsize=8, ttl_s=60)

    with ThreadPoolExecutor(max_workers=1) as pool:
        pending = pool.submit(repo.find, "SLOW")
        assert loading.wait(timeout=5)

        # these would deadlock if the loader ran under the cache lock
        repo.create(Quote(id="FAST", price=1.0))
        assert repo.exists("FAST")
        assert repo.find_all() == [Quote(id="FAST", price=1.0)]

        release.set()
        assert pending.result(timeout=5) == Quote(id="SLOW", price=7.0)

    assert repo.exists("SLOW")
