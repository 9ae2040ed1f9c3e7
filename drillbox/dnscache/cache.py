"""DNS caches with TTL expiry, wildcard lookup and background cleanup."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional, Union

from drillbox.dnscache.hashmap import HashMap

Duration = Union[float, int, timedelta]

CLEANUP_INTERVAL = 30.0


def _seconds(ttl: Duration) -> float:
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    return float(ttl)


@dataclass
class DNSRecord:
    """A cached domain-to-address mapping; ``ttl`` is in seconds."""

    domain: str
    ip: str
    ttl: float
    created_at: float = field(default_factory=time.monotonic)
    hit_count: int = 0

    def is_expired(self) -> bool:
        return time.monotonic() - self.created_at >= self.ttl


@dataclass(frozen=True)
class CacheStats:
    hits: int
    misses: int
    total_entries: int
    hit_rate: float
    memory_estimate: str


class DNSCache(ABC):
    """Behaviour shared by the DNS caches."""

    @abstractmethod
    def resolve(self, domain: str) -> Optional[str]:
        """Return the cached address for ``domain`` or None on a miss."""

    @abstractmethod
    def add_record(self, domain: str, ip: str, ttl: Duration) -> None:
        """Store ``domain`` -> ``ip`` for ``ttl``."""

    @abstractmethod
    def stats(self) -> CacheStats:
        """Return hit, miss and size figures."""

    @abstractmethod
    def close(self) -> None:
        """Stop background cleanup."""


def _hit_rate(hits: int, misses: int) -> float:
    total = hits + misses
    return hits / total if total else 0.0


class _Cleaner:
    """Runs a purge function periodically on a daemon thread."""

    def __init__(self, purge, message: str, interval: float) -> None:
        self._purge = purge
        self._message = message
        self._interval = interval
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            removed = self._purge()
            if removed > 0:
                print(self._message.format(removed))

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not threading.current_thread():
            self._thread.join()


class CustomDNSCache(DNSCache):
    """DNS cache stored in the bucketed HashMap."""

    def __init__(self, cleanup_interval: float = CLEANUP_INTERVAL) -> None:
        self._map = HashMap()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._cleaner = _Cleaner(
            self.purge_expired, "[Cleanup] Removed {} expired DNS records", cleanup_interval
        )

    def _lookup(self, domain: str) -> Optional[DNSRecord]:
        record = self._map.get(domain)
        if record is None:
            return None
        if record.is_expired():
            self._map.delete(domain)
            return None
        record.hit_count += 1
        return record

    def resolve(self, domain: str) -> Optional[str]:
        """Exact match first; a ``*.suffix`` query matches any cached key with that suffix."""
        with self._lock:
            record = self._lookup(domain)
            if record is not None:
                self._hits += 1
                return record.ip

            if domain.startswith("*."):
                suffix = domain[1:]
                for key, candidate in self._map.items():
                    if key.endswith(suffix) and not candidate.is_expired():
                        candidate.hit_count += 1
                        self._hits += 1
                        return candidate.ip

            self._misses += 1
            return None

    def add_record(self, domain: str, ip: str, ttl: Duration) -> None:
        with self._lock:
            self._map.put(domain, DNSRecord(domain, ip, _seconds(ttl)))

    def stats(self) -> CacheStats:
        with self._lock:
            entries = len(self._map)
            estimated = self._map.bucket_count() * 8 + entries * 64
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                total_entries=entries,
                hit_rate=_hit_rate(self._hits, self._misses),
                memory_estimate=f"{estimated / 1024:.2f} KB",
            )

    def purge_expired(self) -> int:
        """Remove every expired record; return how many were removed."""
        with self._lock:
            expired = [key for key, record in self._map.items() if record.is_expired()]
            for key in expired:
                self._map.delete(key)
            return len(expired)

    def close(self) -> None:
        self._cleaner.stop()

    def __enter__(self) -> CustomDNSCache:
        return self

    def __exit__(self, *args) -> None:
        self.close()


class BuiltInDNSCache(DNSCache):
    """DNS cache stored in a dict, resolving parent wildcards."""

    def __init__(self, cleanup_interval: float = CLEANUP_INTERVAL) -> None:
        self._storage: dict[str, DNSRecord] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._cleaner = _Cleaner(
            self.purge_expired, "[Cleanup-BuiltIn] Removed {} expired records", cleanup_interval
        )

    def _lookup(self, domain: str) -> Optional[DNSRecord]:
        record = self._storage.get(domain)
        if record is None:
            return None
        if record.is_expired():
            del self._storage[domain]
            return None
        record.hit_count += 1
        return record

    def resolve(self, domain: str) -> Optional[str]:
        """Exact match first, then ``*.parent`` records from nearest to farthest."""
        with self._lock:
            record = self._lookup(domain)
            if record is None:
                parts = domain.split(".")
                for start in range(1, len(parts)):
                    record = self._lookup("*." + ".".join(parts[start:]))
                    if record is not None:
                        break
            if record is not None:
                self._hits += 1
                return record.ip
            self._misses += 1
            return None

    def add_record(self, domain: str, ip: str, ttl: Duration) -> None:
        with self._lock:
            self._storage[domain] = DNSRecord(domain, ip, _seconds(ttl))

    def stats(self) -> CacheStats:
        with self._lock:
            entries = len(self._storage)
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                total_entries=entries,
                hit_rate=_hit_rate(self._hits, self._misses),
                memory_estimate=f"{entries} (exact count, built-in map memory is opaque)",
            )

    def purge_expired(self) -> int:
        """Remove every expired record; return how many were removed."""
        with self._lock:
            expired = [key for key, record in self._storage.items() if record.is_expired()]
            for key in expired:
                del self._storage[key]
            return len(expired)

    def close(self) -> None:
        self._cleaner.stop()

    def __enter__(self) -> BuiltInDNSCache:
        return self

    def __exit__(self, *args) -> None:
        self.close()


class CustomIntCache:
    """Thread-safe int-to-int cache on the bucketed HashMap."""

    def __init__(self) -> None:
        self._map = HashMap()
        self._lock = threading.Lock()

    def get(self, key: int) -> Optional[int]:
        """Return the value for ``key`` or None if absent."""
        with self._lock:
            return self._map.get(key)

    def put(self, key: int, value: int) -> None:
        with self._lock:
            self._map.put(key, value)