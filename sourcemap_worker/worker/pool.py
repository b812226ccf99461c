import threading
from collections import deque
from collections.abc import Callable, Hashable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from sourcemap_worker.logging.logger import Log


class WorkerPool:
    """Bounded-concurrency scheduler with a one-shot drain callback.

    ``submit`` never blocks: items wait in the pool's own queue until one of
    the ``concurrency`` slots frees up. Once ``close`` has been called, the
    drain callback fires exactly once, after the queue is empty and every
    dispatched task has settled. ``wait`` returns after the callback has run.
    """

    def __init__(
        self,
        handler: Callable[[Any], Any],
        concurrency: int = 3,
        on_drain: Callable[[], None] | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self._handler = handler
        self._concurrency = concurrency
        self._on_drain = on_drain
        self._lock = threading.Lock()
        self._queue: deque[Hashable] = deque()
        self._submitted: set[Hashable] = set()
        self._results: dict[Hashable, Any] = {}
        self._errors: dict[Hashable, BaseException] = {}
        self._in_flight = 0
        self._closed = False
        self._drain_fired = False
        self._drained = threading.Event()
        self._drain_error: Exception | None = None
        self._executor = ThreadPoolExecutor(
            max_workers=concurrency, thread_name_prefix="sourcemap-worker"
        )

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    @property
    def drained(self) -> bool:
        return self._drained.is_set()

    @property
    def drain_error(self) -> Exception | None:
        """Exception raised by the drain callback, if any."""
        return self._drain_error

    @property
    def results(self) -> dict[Hashable, Any]:
        """Handler return values keyed by submitted item."""
        with self._lock:
            return dict(self._results)

    @property
    def errors(self) -> dict[Hashable, BaseException]:
        """Exceptions that escaped the handler, keyed by submitted item."""
        with self._lock:
            return dict(self._errors)

    def submit(self, item: Hashable) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("Cannot submit to a closed worker pool")
            if item in self._submitted:
                raise ValueError(f"Item already submitted: {item}")
            self._submitted.add(item)
            self._queue.append(item)
            self._dispatch_locked()

    def close(self) -> None:
        """Stop accepting items; drain fires once outstanding work settles."""
        with self._lock:
            self._closed = True
            fire = self._should_drain_locked()
        if fire:
            self._fire_drain()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until drain has fired and its callback returned."""
        return self._drained.wait(timeout)

    def _dispatch_locked(self) -> None:
        while self._queue and self._in_flight < self._concurrency:
            item = self._queue.popleft()
            self._in_flight += 1
            self._executor.submit(self._run, item)

    def _run(self, item: Hashable) -> None:
        try:
            result = self._handler(item)
        except Exception as exc:
            Log.warning(f"Unhandled error processing {item}: {exc}")
            with self._lock:
                self._errors[item] = exc
        else:
            with self._lock:
                self._results[item] = result
        finally:
            with self._lock:
                self._in_flight -= 1
                self._dispatch_locked()
                fire = self._should_drain_locked()
            if fire:
                self._fire_drain()

    def _should_drain_locked(self) -> bool:
        if self._closed and not self._queue and self._in_flight == 0 and not self._drain_fired:
            self._drain_fired = True
            return True
        return False

    def _fire_drain(self) -> None:
        try:
            if self._on_drain is not None:
                self._on_drain()
        except Exception as exc:
            Log.error(f"Drain callback failed: {exc}")
            self._drain_error = exc
        finally:
            self._executor.shutdown(wait=False)
            self._drained.set()
