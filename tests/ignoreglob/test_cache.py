from concurrent.futures import ThreadPoolExecutor
from typing import List

import pytest

from ignoreglob.cache import RegexTextCache, get_regex_cache, reset_regex_cache
from ignoreglob.config import GlobSettings, set_settings
from ignoreglob.glob import compile_regex_text, translate


def test_get_or_compute_stores_and_reuses_value() -> None:
    calls: List[str] = []

    def compute(glob: str) -> str:
        calls.append(glob)
        return glob.upper()

    cache = RegexTextCache(4)

    assert cache.get_or_compute("a", compute) == "A"
    assert cache.get_or_compute("a", compute) == "A"
    assert calls == ["a"]
    assert "a" in cache
    assert cache.get("a") == "A"
    assert cache.get("b") is None


def test_least_recently_used_entry_is_evicted() -> None:
    cache = RegexTextCache(2)

    cache.put("a", "1")
    cache.put("b", "2")
    assert cache.get("a") == "1"

    cache.put("c", "3")

    assert len(cache) == 2
    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache


def test_unbounded_cache_never_evicts() -> None:
    cache = RegexTextCache(None)

    for i in range(1000):
        cache.put(str(i), str(i))

    assert len(cache) == 1000


def test_clear_removes_all_entries() -> None:
    cache = RegexTextCache()
    cache.put("a", "1")

    cache.clear()

    assert len(cache) == 0


@pytest.mark.parametrize("max_items", [0, -1])
def test_invalid_capacity_is_rejected(max_items: int) -> None:
    with pytest.raises(ValueError):
        RegexTextCache(max_items)


def test_global_cache_is_created_lazily_with_configured_size() -> None:
    set_settings(GlobSettings(cache_size=3))

    cache = get_regex_cache()

    assert cache.max_items == 3
    assert get_regex_cache() is cache


def test_reset_regex_cache_replaces_global_instance() -> None:
    old = get_regex_cache()

    new = reset_regex_cache(10)

    assert new is not old
    assert get_regex_cache() is new


def test_concurrent_compilation_keeps_one_entry_per_glob() -> None:
    globs = ["*.py", "/build", "**/node_modules", "a/**/b", "[abc]?"] * 40

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(compile_regex_text, globs))

    for glob, result in zip(globs, results):
        assert result == translate(glob)

    cache = get_regex_cache()
    assert len(cache) == 5
    for glob in set(globs):
        assert cache.get(glob) == translate(glob)
