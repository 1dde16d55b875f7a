"""
Bounded worker pool for outbound Drive calls.

Work is submitted as an async callable and started immediately while
fewer than `max_workers` units are running; otherwise it waits in a FIFO
queue. Each submission gets its own future, so one failure never affects
sibling units.
"""
import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Set, Tuple

logger = logging.getLogger(__name__)

_Work = Tuple[Callable[..., Awaitable[Any]], tuple, dict, asyncio.Future]


class BoundedWorkerPool:
    """Caps the number of concurrently running coroutines."""

    def __init__(self, max_workers: int = 5):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._max_workers = max_workers
        self._running = 0
        self._pending: Deque[_Work] = deque()
        self._tasks: Set[asyncio.Task] = set()

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def in_flight(self) -> int:
        return self._running

    @property
    def pending(self) -> int:
        return len(self._pending)

    def submit(self, fn: Callable[..., Awaitable[Any]], *args, **kwargs) -> asyncio.Future:
        """Queue `fn(*args, **kwargs)` and return a future for its outcome.

        Must be called from a running event loop.
        """
        future = asyncio.get_running_loop().create_future()
        self._pending.append((fn, args, kwargs, future))
        if self._running >= self._max_workers:
            logger.debug("Pool full (%d running), %d queued", self._running, len(self._pending))
        self._start_pending()
        return future

    def _start_pending(self) -> None:
        while self._running < self._max_workers and self._pending:
            fn, args, kwargs, future = self._pending.popleft()
            self._running += 1
            task = asyncio.ensure_future(self._run(fn, args, kwargs, future))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run(self, fn, args, kwargs, future: asyncio.Future) -> None:
        try:
            result = await fn(*args, **kwargs)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            if not future.done():
                future.set_exception(exc)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            self._running -= 1
            self._start_pending()
