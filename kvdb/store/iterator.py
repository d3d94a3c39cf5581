"""A bounded, thread-safe stream of key/value results."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterator as _PyIterator
from concurrent.futures import CancelledError

from kvdb.store.types import KV

_POLL_SECONDS = 0.05


class Iterator:
    """Streams results from a producer (the backend) to a consumer.

    The stream ends when the producer calls push_error() or push_finished()
    and the buffered items are consumed, or when the cancel event is set
    while the producer is pushing.
    """

    def __init__(self, cancelled: threading.Event | None = None, capacity: int = 100) -> None:
        self._cancelled = cancelled
        self._capacity = capacity
        self._items: deque[KV] = deque()
        self._cond = threading.Condition()
        self._finished = False
        self._pending_error: BaseException | None = None
        self._closed = False
        self._last_item: KV | None = None
        self._err: BaseException | None = None

    def next(self) -> bool:
        """Advance to the next item; False once the stream has ended."""
        if self._err is not None:
            return False
        with self._cond:
            while not self._items and not self._finished and self._pending_error is None:
                self._cond.wait()
            if self._items:
                self._last_item = self._items.popleft()
                self._cond.notify_all()
                return True
            if self._pending_error is not None:
                self._err = self._pending_error
            return False

    def item(self) -> KV | None:
        return self._last_item

    def err(self) -> BaseException | None:
        return self._err

    def push_item(self, res: KV) -> bool:
        """Queue an item, blocking while the buffer is full.

        Returns False, after recording a cancellation error, if the cancel
        event is set.
        """
        with self._cond:
            while not (self._cancelled is not None and self._cancelled.is_set()):
                if len(self._items) < self._capacity:
                    self._items.append(res)
                    self._cond.notify_all()
                    return True
                self._cond.wait(_POLL_SECONDS)
        self.push_error(CancelledError("context canceled"))
        return False

    def push_finished(self) -> None:
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._finished = True
            self._cond.notify_all()

    def push_error(self, err: BaseException) -> None:
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._pending_error = err
            self._cond.notify_all()

    def __iter__(self) -> _PyIterator[KV]:
        """Yield every item, raising the stream's error once items run out."""
        while self.next():
            item = self._last_item
            assert item is not None
            yield item
        if self._err is not None:
            raise self._err