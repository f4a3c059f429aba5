from typing import Generic, Iterator, Optional, TypeVar
import threading


T = TypeVar("T")


class SnapshotQueue(Generic[T]):
    """Single-slot handoff between one producer thread and one consumer.

    Publishing replaces whatever the consumer has not picked up yet, so a slow
    renderer only ever sees the newest state. Iterating yields items until the
    queue is closed and drained.
    """

    def __init__(self) -> None:
        self._lock = threading.Condition()
        self._pending: Optional[T] = None
        self._ready = False
        self._closed = False

    def publish(self, item: T) -> None:
        with self._lock:
            if self._closed:
                return
            self._pending = item
            self._ready = True
            self._lock.notify()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._lock.notify_all()

    def get(self, timeout: Optional[float] = None) -> Optional[T]:
        """Wait for the next item. Returns None once closed with nothing pending."""
        with self._lock:
            if not self._lock.wait_for(lambda: self._ready or self._closed, timeout):
                raise TimeoutError("snapshot queue get() timed out")
            if not self._ready:
                return None
            item, self._pending, self._ready = self._pending, None, False
            return item

    def __iter__(self) -> Iterator[T]:
        while (item := self.get()) is not None:
            yield item

    def __enter__(self) -> "SnapshotQueue[T]":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
