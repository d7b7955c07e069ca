from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest

from modelstore import (
    ById,
    CachedModelRepository,
    InMemoryModelRepository,
    JsonFileModelRepository,
    RepositoryConfigError,
    StorageFailureError,
    TTLCacheModelRepository,
    UnsupportedQueryError,
    Where,
)


@dataclass(frozen=True)
class Track:
    id: str
    title: str
    genre: str = "techno"


def make_repository() -> tuple[
    CachedModelRepository[Track],
    InMemoryModelRepository[Track],
    InMemoryModelRepository[Track],
]:
    source: InMemoryModelRepository[Track] = InMemoryModelRepository()
    cache: InMemoryModelRepository[Track] = InMemoryModelRepository()
    return CachedModelRepository(source, cache), source, cache


def test_plain_operations_go_to_source_only():
    repo, source, cache = make_repository()
    track = Track(id="t1", title="one")

    repo.create(track)

    assert source.find("t1") == track
    assert cache.find("t1") is None
    assert repo.find("t1") == track
    assert repo.exists("t1")
    assert repo.get("t1") is None


def test_cache_then_get_reads_cache_only():
    repo, source, cache = make_repository()
    track = Track(id="t1", title="one")

    repo.cache(track)

    assert repo.get("t1") == track
    assert cache.find("t1") == track
    assert source.find("t1") is None


def test_get_never_consults_source():
    repo, _, _ = make_repository()
    repo.create(Track(id="t1", title="one"))

    assert repo.find("t1") is not None
    assert repo.get("t1") is None


def test_get_or_find_prefers_cached_copy():
    repo, _, _ = make_repository()
    repo.create(Track(id="t1", title="source copy"))
    repo.cache(Track(id="t1", title="cached copy"))

    assert repo.get_or_find("t1").title == "cached copy"


def test_get_or_find_falls_back_without_populating_cache():
    repo, _, cache = make_repository()
    track = Track(id="t1", title="one")
    repo.create(track)

    assert repo.get_or_find("t1") == track
    assert repo.get("t1") is None
    assert cache.find_all() == []


def test_get_or_find_returns_none_when_both_miss():
    repo, _, _ = make_repository()

    assert repo.get_or_find("ghost") is None
    assert repo.get_or_find_by_query(ById("ghost")) is None


def test_get_or_find_by_query_falls_back_without_populating_cache():
    repo, _, _ = make_repository()
    track = Track(id="t1", title="one", genre="house")
    repo.create(track)
    is_house = Where(lambda t: t.genre == "house")

    assert repo.get_by_query(is_house) is None
    assert repo.get_or_find_by_query(is_house) == track
    assert repo.get_by_query(is_house) is None


def test_batch_reads_are_cache_only():
    repo, _, _ = make_repository()
    for i in range(3):
        repo.create(Track(id=f"s{i}", title=f"source-{i}"))
    repo.cache(Track(id="c0", title="cached-0"))

    assert [t.id for t in repo.get_many(["s0", "s1", "c0"])] == ["c0"]
    assert [t.id for t in repo.get_many_by_query(Where(lambda t: True))] == ["c0"]
    assert [t.id for t in repo.get_all()] == ["c0"]


def test_get_many_respects_limit():
    repo, _, _ = make_repository()
    for i in range(5):
        repo.cache(Track(id=f"t{i}", title=str(i)))
    ids = [f"t{i}" for i in range(5)]

    assert len(repo.get_many(ids, 2)) == 2
    assert len(repo.get_many(ids, -1)) == 5
    assert len(repo.get_many_by_query(Where(lambda t: True), 3)) == 3


def test_delete_cached_moves_cache_only_entry_to_source():
    repo, source, cache = make_repository()
    track = Track(id="t1", title="one")
    repo.cache(track)

    repo.delete_cached("t1")

    assert repo.get("t1") is None
    assert repo.find("t1") == track
    assert cache.exists("t1") is False
    assert source.exists("t1")


def test_delete_cached_accepts_model_reference():
    repo, _, _ = make_repository()
    track = Track(id="t1", title="one")
    repo.cache(track)

    repo.delete_cached(track)

    assert repo.find("t1") == track


def test_delete_cached_overwrites_stale_source_copy():
    repo, _, _ = make_repository()
    repo.create(Track(id="t1", title="stale"))
    repo.cache(Track(id="t1", title="fresh"))

    repo.delete_cached("t1")

    assert repo.find("t1").title == "fresh"


def test_delete_cached_on_uncached_id_is_noop():
    repo, source, cache = make_repository()
    repo.create(Track(id="t1", title="one"))
    repo.cache(Track(id="t2", title="two"))

    repo.delete_cached("t1")
    repo.delete_cached("ghost")

    assert [t.id for t in source.find_all()] == ["t1"]
    assert [t.id for t in cache.find_all()] == ["t2"]


def test_delete_by_query_cached_evicts_first_match_to_source():
    repo, source, cache = make_repository()
    repo.cache(Track(id="t1", title="one", genre="house"))
    repo.cache(Track(id="t2", title="two", genre="house"))

    repo.delete_by_query_cached(Where(lambda t: t.genre == "house"))

    assert [t.id for t in source.find_all()] == ["t1"]
    assert [t.id for t in cache.find_all()] == ["t2"]


def test_delete_by_query_cached_without_match_is_noop():
    repo, source, cache = make_repository()
    repo.cache(Track(id="t1", title="one"))

    repo.delete_by_query_cached(Where(lambda t: t.genre == "jazz"))

    assert source.find_all() == []
    assert len(cache.find_all()) == 1


def test_delete_many_cached_evicts_whatever_the_cache_returns():
    repo, source, cache = make_repository()
    repo.cache(Track(id="t1", title="one"))
    repo.cache(Track(id="t2", title="two"))
    repo.create(Track(id="t3", title="three"))

    # Ids missing from the cache are skipped rather than guarded one by one,
    # unlike delete_cached.
    repo.delete_many_cached(["t1", "t2", "t3", "ghost"])

    assert cache.find_all() == []
    assert sorted(t.id for t in source.find_all()) == ["t1", "t2", "t3"]
    assert source.find("t3").title == "three"


def test_delete_many_cached_accepts_generators():
    repo, source, _ = make_repository()
    repo.cache(Track(id="t1", title="one"))

    repo.delete_many_cached(id for id in ["t1"])

    assert source.exists("t1")


def test_delete_many_by_query_cached_honours_limit():
    repo, source, cache = make_repository()
    for i in range(5):
        repo.cache(Track(id=f"t{i}", title=str(i)))

    repo.delete_many_by_query_cached(Where(lambda t: t.genre == "techno"), 2)

    assert len(source.find_all()) == 2
    assert len(cache.find_all()) == 3

    repo.delete_many_by_query_cached(Where(lambda t: t.genre == "techno"))

    assert len(source.find_all()) == 5
    assert cache.find_all() == []


def test_set_cache_repository_swaps_without_migrating(caplog):
    repo, _, old_cache = make_repository()
    repo.cache(Track(id="t1", title="one"))
    new_cache: TTLCacheModelRepository[Track] = TTLCacheModelRepository()

    with caplog.at_level(logging.INFO, logger="modelstore.cached"):
        repo.set_cache_repository(new_cache)

    assert repo.cache_repository is new_cache
    assert repo.get("t1") is None
    assert old_cache.find("t1") is not None
    assert "Cache repository swapped" in caplog.text

    repo.cache(Track(id="t2", title="two"))
    assert new_cache.find("t2") is not None
    assert old_cache.find("t2") is None


def test_cache_operations_without_cache_repository_raise():
    repo = CachedModelRepository(InMemoryModelRepository())
    repo.create(Track(id="t1", title="one"))

    with pytest.raises(RepositoryConfigError, match="no cache repository"):
        repo.get("t1")
    with pytest.raises(RepositoryConfigError):
        repo.delete_cached("t1")

    assert repo.find("t1") is not None


def test_unsupported_query_propagates_from_cache_and_source(tmp_path):
    source = JsonFileModelRepository(tmp_path, Track)
    cache: InMemoryModelRepository[Track] = InMemoryModelRepository()
    repo = CachedModelRepository(source, cache)
    repo.cache(Track(id="t1", title="one"))

    with pytest.raises(UnsupportedQueryError):
        repo.get_by_query("t1")
    with pytest.raises(UnsupportedQueryError):
        repo.delete_by_query_cached(42)
    with pytest.raises(UnsupportedQueryError):
        repo.find_by_query(Where(lambda t: True))
    with pytest.raises(UnsupportedQueryError):
        # Cache miss falls through to the file source, which rejects predicates.
        repo.get_or_find_by_query(Where(lambda t: t.genre == "jazz"))

    assert cache.find("t1") is not None
    assert source.find_all() == []


def test_storage_failures_propagate_unchanged():
    class _BrokenSource(InMemoryModelRepository[Track]):
        def create(self, model: Track) -> None:
            raise StorageFailureError("broken", "disk full")

    cache: InMemoryModelRepository[Track] = InMemoryModelRepository()
    repo = CachedModelRepository(_BrokenSource(), cache)
    repo.cache(Track(id="t1", title="one"))

    with pytest.raises(StorageFailureError, match="disk full"):
        repo.delete_cached("t1")

    # Non-atomic: the cache delete already happened.
    assert cache.find("t1") is None
