"""
cached_users.py: Minimal modelstore example.

Demonstrates a JSON-file source repository fronted by an in-process cache,
plus the executor-backed async wrapper.

Usage:
    python examples/cached_users.py
"""

import tempfile
from dataclasses import dataclass

from modelstore import (
    AsyncCachedModelRepository,
    CachedModelRepository,
    JsonFileModelRepository,
    TTLCacheModelRepository,
)


@dataclass(frozen=True)
class User:
    id: str
    name: str


def main() -> None:
    with tempfile.TemporaryDirectory() as folder:
        users = CachedModelRepository(
            JsonFileModelRepository(folder, User),
            TTLCacheModelRepository(maxsize=128, ttl_s=60),
        )

        users.create(User(id="emmily", name="Emmily"))
        print("cached:", users.get("emmily"))
        print("read-through:", users.get_or_find("emmily"))

        users.cache(User(id="guest", name="Guest"))
        users.delete_cached("guest")
        print("evicted to source:", users.find("guest"))

        with AsyncCachedModelRepository(users) as async_users:
            future = async_users.get_or_find_async("emmily")
            print("async:", future.result(timeout=5))


if __name__ == "__main__":
    main()
