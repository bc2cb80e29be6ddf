from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from dataclasses import dataclass
from typing import Generic, TypeVar

from serpstream.search.types import SearchResult

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class _StreamEnd:
    error: BaseException | None = None


class ResultStream(Generic[T]):
    """Async iterator over search results produced by a background task.

    The producer is started on the first ``__anext__`` and hands each result
    over only once the consumer has taken the previous one. A producer error
    is raised from ``__anext__`` exactly once, then the stream is exhausted.
    Use ``async with`` (or ``aclose``) when abandoning a stream early so the
    producer and its HTTP client are torn down.
    """

    def __init__(
        self,
        results: Callable[[], AsyncIterator[SearchResult]],
        *,
        project: Callable[[SearchResult], T],
        cancel: asyncio.Event | None = None,
    ) -> None:
        self._results = results
        self._project = project
        self._cancel = cancel
        self._queue: asyncio.Queue[SearchResult | _StreamEnd] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None
        self._watcher: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> ResultStream[T]:
        return self

    async def __anext__(self) -> T:
        if self._closed:
            raise StopAsyncIteration
        self._start()

        event = await self._queue.get()
        self._queue.task_done()
        if isinstance(event, _StreamEnd):
            self._finish()
            if event.error is not None:
                raise event.error
            raise StopAsyncIteration
        return self._project(event)

    async def aclose(self) -> None:
        self._finish()
        tasks = [t for t in (self._task, self._watcher) if t is not None]
        for task in tasks:
            if not task.done():
                task.cancel()
        if tasks:
            await asyncio.wait(tasks)

    async def __aenter__(self) -> ResultStream[T]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _start(self) -> None:
        if self._task is not None:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._produce())
        if self._cancel is not None:
            self._watcher = loop.create_task(self._watch_cancel(self._cancel))

    def _finish(self) -> None:
        self._closed = True
        if self._watcher is not None and not self._watcher.done():
            self._watcher.cancel()

    def _cancelled(self) -> bool:
        return self._cancel is not None and self._cancel.is_set()

    async def _produce(self) -> None:
        error: BaseException | None = None
        try:
            async with aclosing(self._results()) as results:
                async for result in results:
                    if self._cancelled():
                        break
                    self._queue.put_nowait(result)
                    # rendezvous: wait until the consumer has taken it
                    await self._queue.join()
        except Exception as exc:  # delivered to the consumer as the terminal event
            error = exc
        finally:
            self._queue.put_nowait(_StreamEnd(error))

    async def _watch_cancel(self, cancel: asyncio.Event) -> None:
        await cancel.wait()
        if self._task is not None and not self._task.done():
            self._task.cancel()
