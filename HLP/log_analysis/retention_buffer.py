"""
Retention Buffer Module - Fixed capacity FIFO store for parsed log entries

Keeps the most recent `capacity` entries. When full, the oldest entry
is evicted before the newest one is appended. Storage is a preallocated
ring so positional lookups stay O(1) no matter how often it wraps.
"""
from typing import Iterator, List, Optional

from .log_parser import LogEntry

DEFAULT_CAPACITY = 10_000


class RetentionBuffer:
    """
    Circular buffer of LogEntry objects

    Index 0 is always the oldest entry currently held.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """
        Initialize the buffer

        Args:
            capacity: Maximum number of entries retained (must be positive)

        Raises:
            ValueError: If capacity is not a positive integer
        """
        if not isinstance(capacity, int) or capacity <= 0:
            raise ValueError("capacity must be a positive integer")
        self._capacity = capacity
        self._slots: List[Optional[LogEntry]] = [None] * capacity
        self._head = 0  # slot of the oldest entry
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, entry: LogEntry) -> None:
        """Append an entry, evicting the oldest one first if the buffer is full"""
        if self._size == self._capacity:
            # Evict: the new entry takes the oldest slot
            self._slots[self._head] = entry
            self._head = (self._head + 1) % self._capacity
        else:
            self._slots[(self._head + self._size) % self._capacity] = entry
            self._size += 1

    def get(self, index: int) -> Optional[LogEntry]:
        """Get an entry by position, None if out of range"""
        if 0 <= index < self._size:
            return self._slots[(self._head + index) % self._capacity]
        return None

    def get_range(self, start: int, end: int) -> List[LogEntry]:
        """Entries in positions [start, end), clamped to what is held"""
        start = max(0, start)
        end = min(end, self._size)
        return [self._slots[(self._head + i) % self._capacity] for i in range(start, end)]

    def all(self) -> List[LogEntry]:
        """All entries, oldest first"""
        return self.get_range(0, self._size)

    def last_n(self, n: int) -> List[LogEntry]:
        """The most recent n entries, oldest first (everything if n >= len)"""
        if n >= self._size:
            return self.all()
        if n <= 0:
            return []
        return self.get_range(self._size - n, self._size)

    def clear(self) -> None:
        self._slots = [None] * self._capacity
        self._head = 0
        self._size = 0

    def is_empty(self) -> bool:
        return self._size == 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.all())
