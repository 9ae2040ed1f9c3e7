"""Hash map with eight-slot buckets, overflow chains and FNV-1a hashing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Iterator, Optional

DEFAULT_CAPACITY = 16
LOAD_FACTOR = 0.75
SLOTS_PER_BUCKET = 8

_FNV_OFFSET = 14695981039346656037
_FNV_PRIME = 1099511628211
_MASK64 = (1 << 64) - 1


def _key_text(key: Hashable) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def fnv1a(key: Hashable) -> int:
    """Return the 64-bit FNV-1a hash of the key's text form."""
    value = _FNV_OFFSET
    for byte in _key_text(key).encode("utf-8"):
        value ^= byte
        value = (value * _FNV_PRIME) & _MASK64
    return value


@dataclass(slots=True)
class _Slot:
    key: Any
    value: Any


class _Bucket:
    __slots__ = ("slots", "overflow", "next")

    def __init__(self, overflow: bool = False) -> None:
        self.slots: list[Optional[_Slot]] = [None] * SLOTS_PER_BUCKET
        self.overflow = overflow
        self.next: Optional[_Bucket] = None


def _chain(bucket: Optional[_Bucket]) -> Iterator[_Bucket]:
    while bucket is not None:
        yield bucket
        bucket = bucket.next


class HashMap:
    """Map of hashable keys to values, grown when three quarters full."""

    def __init__(self) -> None:
        self._buckets = [_Bucket() for _ in range(DEFAULT_CAPACITY)]
        self._size = 0

    def _head(self, key: Hashable) -> _Bucket:
        return self._buckets[fnv1a(key) % len(self._buckets)]

    def _find(self, key: Hashable) -> Optional[tuple[_Bucket, int]]:
        for bucket in _chain(self._head(key)):
            for index, slot in enumerate(bucket.slots):
                if slot is not None and slot.key == key:
                    return bucket, index
        return None

    def put(self, key: Hashable, value: Any) -> None:
        """Insert ``key`` or replace its value."""
        if self._size + 1 > len(self._buckets) * SLOTS_PER_BUCKET * LOAD_FACTOR:
            self._resize()

        found = self._find(key)
        if found is not None:
            bucket, index = found
            slot = bucket.slots[index]
            assert slot is not None
            slot.value = value
            return

        bucket = self._head(key)
        while True:
            for index, slot in enumerate(bucket.slots):
                if slot is None:
                    bucket.slots[index] = _Slot(key, value)
                    self._size += 1
                    return
            if bucket.next is None:
                extra = _Bucket(overflow=True)
                extra.slots[0] = _Slot(key, value)
                bucket.next = extra
                self._size += 1
                return
            bucket = bucket.next

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the value for ``key``, or ``default`` if it is absent."""
        found = self._find(key)
        if found is None:
            return default
        bucket, index = found
        slot = bucket.slots[index]
        assert slot is not None
        return slot.value

    def delete(self, key: Hashable) -> bool:
        """Remove ``key``; tell whether it was present."""
        found = self._find(key)
        if found is None:
            return False
        bucket, index = found
        bucket.slots[index] = None
        self._size -= 1
        return True

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        try:
            return self._find(key) is not None  # type: ignore[arg-type]
        except TypeError:
            return False

    def items(self) -> Iterator[tuple[Any, Any]]:
        """Yield key/value pairs in bucket order."""
        for head in self._buckets:
            for bucket in _chain(head):
                for slot in bucket.slots:
                    if slot is not None:
                        yield slot.key, slot.value

    def __iter__(self) -> Iterator[Any]:
        for key, _ in self.items():
            yield key

    def bucket_count(self) -> int:
        """Return the number of primary buckets."""
        return len(self._buckets)

    def _resize(self) -> None:
        entries = list(self.items())
        self._buckets = [_Bucket() for _ in range(len(self._buckets) * 2)]
        self._size = 0
        for key, value in entries:
            self.put(key, value)

    def render(self) -> str:
        """Describe the internal bucket layout."""
        lines = [f"HashMap (size: {self._size}, capacity: {len(self._buckets)} buckets):"]
        for number, head in enumerate(self._buckets):
            parts = [f"Bucket {number}: "]
            for bucket in _chain(head):
                if bucket.overflow:
                    parts.append("(Overflow) ")
                for slot in bucket.slots:
                    if slot is not None:
                        parts.append(f"[{_key_text(slot.key)}: {slot.value}] ")
                parts.append(" -> ")
            parts.append("nil")
            lines.append("".join(parts))
        return "\n".join(lines)