from collections import OrderedDict
from threading import RLock
from typing import Callable, Optional

from .utils.logging import LoggingDescriptor

DEFAULT_CACHE_SIZE = 512


class RegexTextCache:
    """Thread safe LRU map from glob text to translated regex text.

    Values are computed outside of the lock, so concurrent lookups of the same missing key may
    compute it more than once. The last writer wins; translation is deterministic so all writers
    store the same text.
    """

    _logger = LoggingDescriptor()

    def __init__(self, max_items: Optional[int] = DEFAULT_CACHE_SIZE) -> None:
        if max_items is not None and max_items < 1:
            raise ValueError(f"max_items must be positive or None, not {max_items!r}")

        self.max_items = max_items

        self._cache: "OrderedDict[str, str]" = OrderedDict()
        self._lock = RLock()

    def __contains__(self, glob: str) -> bool:
        with self._lock:
            return glob in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get(self, glob: str) -> Optional[str]:
        with self._lock:
            result = self._cache.get(glob)
            if result is not None:
                self._cache.move_to_end(glob)
            return result

    def put(self, glob: str, regex_text: str) -> None:
        with self._lock:
            self._cache[glob] = regex_text
            self._cache.move_to_end(glob)

            if self.max_items is not None:
                while len(self._cache) > self.max_items:
                    evicted, _ = self._cache.popitem(last=False)
                    self._logger.trace(lambda: f"evicted {evicted!r} from regex cache")

    def get_or_compute(self, glob: str, func: Callable[[str], str]) -> str:
        result = self.get(glob)
        if result is not None:
            return result

        result = func(glob)
        self.put(glob, result)
        return result

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()


_regex_cache: Optional[RegexTextCache] = None
_regex_cache_lock = RLock()


def get_regex_cache() -> RegexTextCache:
    global _regex_cache

    if _regex_cache is None:
        with _regex_cache_lock:
            if _regex_cache is None:
                from .config import get_settings

                _regex_cache = RegexTextCache(get_settings().cache_size)

    return _regex_cache


def reset_regex_cache(max_items: Optional[int] = DEFAULT_CACHE_SIZE) -> RegexTextCache:
    global _regex_cache

    with _regex_cache_lock:
        _regex_cache = RegexTextCache(max_items)

    return _regex_cache
