"""TTL cache wrapper for rule-set repositories.

Keys look like "tax:all", "tax:2023-01-01" and "tax:index"; invalidate()
takes fnmatch patterns such as "tax:*".
"""

import fnmatch
import logging
import threading
import time
from typing import Any, Callable, Optional

from .repository import RuleSetRepository
from .resolver import DateLike, parse_as_of
from .schemas import RuleSet, SelectableDate

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


class CachingRuleSetRepository(RuleSetRepository):
    """Wraps another repository and memoizes its reads for ttl_seconds."""

    def __init__(
        self,
        inner: RuleSetRepository,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.inner = inner
        self.family = inner.family
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def _key(self, suffix: str) -> str:
        return f"{self.family}:{suffix}"

    def _get_or_load(self, key: str, loader: Callable[[], Any]) -> Any:
        now = self._clock()
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None and cached[0] > now:
                return cached[1]

        # Load outside the lock; failures are not cached
        value = loader()
        with self._lock:
            self._entries[key] = (now + self.ttl_seconds, value)
        logger.debug(f"Cached {key} for {self.ttl_seconds}s")
        return value

    def load_all(self) -> list[RuleSet]:
        return list(self._get_or_load(self._key("all"), self.inner.load_all))

    def load_one(self, effective_start: DateLike) -> RuleSet:
        target = parse_as_of(effective_start)
        return self._get_or_load(self._key(target.isoformat()), lambda: self.inner.load_one(target))

    def list_index(self) -> list[SelectableDate]:
        return list(self._get_or_load(self._key("index"), self.inner.list_index))

    def invalidate(self, pattern: Optional[str] = None) -> int:
        """Drop cached entries matching pattern (all entries if None).

        Returns:
            Number of entries removed
        """
        with self._lock:
            if pattern is None:
                removed = len(self._entries)
                self._entries.clear()
            else:
                keys = [k for k in self._entries if fnmatch.fnmatchcase(k, pattern)]
                for key in keys:
                    del self._entries[key]
                removed = len(keys)
        if removed:
            logger.debug(f"Invalidated {removed} cache entr{'y' if removed == 1 else 'ies'} ({pattern or '*'})")
        return removed
