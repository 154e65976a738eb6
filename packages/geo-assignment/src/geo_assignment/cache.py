from __future__ import annotations

import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, TypeVar, Union

from geo_assignment.containment import ContainmentIndex
from geo_assignment.models import AssignmentResult, BoundaryRecord, DistrictResult, Station


class CachePriority(IntEnum):
    LOW = 0
    NORMAL = 1
    HIGH = 2


@dataclass(frozen=True)
class DistrictIndexPayload:
    index: ContainmentIndex
    stations: Mapping[int, Station]


@dataclass(frozen=True)
class StationListPayload:
    stations: tuple[Station, ...]


@dataclass(frozen=True)
class BoundaryListPayload:
    items: tuple[BoundaryRecord, ...]


@dataclass(frozen=True)
class FeatureCollectionPayload:
    collection: dict[str, Any]


@dataclass(frozen=True)
class AssignmentPayload:
    result: AssignmentResult


@dataclass(frozen=True)
class DistrictLookupPayload:
    result: DistrictResult


CacheValue = Union[
    DistrictIndexPayload,
    StationListPayload,
    BoundaryListPayload,
    FeatureCollectionPayload,
    AssignmentPayload,
    DistrictLookupPayload,
]
_CACHE_VALUE_TYPES = (
    DistrictIndexPayload,
    StationListPayload,
    BoundaryListPayload,
    FeatureCollectionPayload,
    AssignmentPayload,
    DistrictLookupPayload,
)

T = TypeVar("T", bound=CacheValue)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: CacheValue
    expires_at: float
    priority: CachePriority = CachePriority.NORMAL


@dataclass(frozen=True)
class CacheStats:
    entries: int
    hits: int
    misses: int


class GeometryCache:
    """Process-local expiring cache guarded by a single lock.

    Concurrent misses on the same key all recompute and the last ``set``
    wins; there is no miss de-duplication.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        max_entries: int | None = None,
    ) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self._clock = clock
        self._max_entries = max_entries
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> CacheValue | None:
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def get_as(self, key: str, kind: type[T]) -> T | None:
        """Like ``get`` but a payload of another kind counts as a miss."""
        with self._lock:
            entry = self._live_entry(key)
            value = entry.value if entry is not None else None
            if not isinstance(value, kind):
                self._misses += 1
                return None
            self._hits += 1
            return value

    def set(
        self,
        key: str,
        value: CacheValue,
        ttl_seconds: float,
        priority: CachePriority = CachePriority.NORMAL,
    ) -> None:
        if not isinstance(value, _CACHE_VALUE_TYPES):
            raise TypeError(f"unsupported cache value type: {type(value).__name__}")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        with self._lock:
            entry = CacheEntry(
                key=key,
                value=value,
                expires_at=self._clock() + ttl_seconds,
                priority=priority,
            )
            self._entries[key] = entry
            self._enforce_capacity(keep=key)

    def contains(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate_prefix(self, prefix: str) -> int:
        with self._lock:
            keys = [key for key in self._entries if key.startswith(prefix)]
            for key in keys:
                self._entries.pop(key, None)
            return len(keys)

    def invalidate_all(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
            return removed

    def statistics(self) -> CacheStats:
        with self._lock:
            self._purge_expired()
            return CacheStats(entries=len(self._entries), hits=self._hits, misses=self._misses)

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            self._entries.pop(key, None)
            return None
        return entry

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            self._entries.pop(key, None)

    def _enforce_capacity(self, keep: str) -> None:
        if self._max_entries is None or len(self._entries) <= self._max_entries:
            return
        self._purge_expired()
        while len(self._entries) > self._max_entries:
            candidates = [entry for key, entry in self._entries.items() if key != keep]
            if not candidates:
                return
            victim = min(candidates, key=lambda entry: (entry.priority, entry.expires_at))
            self._entries.pop(victim.key, None)
