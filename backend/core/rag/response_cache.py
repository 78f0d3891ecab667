"""
In-memory response cache.

Memoizes full generated answers keyed by the raw text of the latest user
message. Writes happen once per completed generation; concurrent writers for
the same key race and the last one wins.

Known limitations:
- The key ignores conversation history, so two conversations asking the same
  question share one answer.
- Unbounded by default. Pass max_entries to cap it with least-recently-used
  eviction.

Dependencies: collections, dataclasses
System role: Answer memoization in front of retrieval and generation
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Cached answer for one query."""

    key: str
    value: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ResponseCache:
    """Query -> full answer cache."""

    def __init__(self, max_entries: int | None = None) -> None:
        """
        Args:
            max_entries: Optional LRU bound; None keeps every entry
        """
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._max_entries = max_entries
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def get(self, key: str) -> str | None:
        """Return the cached answer for ``key``, or None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._max_entries is not None:
            self._entries.move_to_end(key)
        return entry.value

    def get_entry(self, key: str) -> CacheEntry | None:
        """Return the full cache entry without touching recency."""
        return self._entries.get(key)

    def put(self, key: str, text: str) -> None:
        """Store the full answer for ``key``, replacing any earlier one."""
        self._entries[key] = CacheEntry(key=key, value=text)
        self._entries.move_to_end(key)
        if self._max_entries is not None:
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Response cache evicted entry", extra={"key_length": len(evicted)})

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
