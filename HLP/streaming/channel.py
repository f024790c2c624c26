"""
Message Channel - ordered hand-off between producers and the view state

Producers (stdin reader thread, stream reader task, keyboard, ticker)
send into one channel; the UI drains it and applies messages one at a
time, so the view state itself needs no locking.
"""
import queue
from threading import Event
from typing import Any, List, Optional


class LogChannel:
    """Thread-safe FIFO with an explicit closed state"""

    def __init__(self, maxsize: int = 0):
        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize=maxsize)
        self._closed = Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, item: Any) -> bool:
        """
        Enqueue an item

        Returns:
            False once the receiving side has closed the channel, so
            producers know to stop.
        """
        if self._closed.is_set():
            return False
        self._queue.put(item)
        return True

    def receive(self, timeout: Optional[float] = None) -> Optional[Any]:
        """Wait up to `timeout` seconds for the next item, None if nothing arrived"""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self, limit: Optional[int] = None) -> List[Any]:
        """Take every item currently queued (at most `limit`) without blocking"""
        items = []
        while limit is None or len(items) < limit:
            try:
                items.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return items

    def close(self) -> None:
        self._closed.set()
