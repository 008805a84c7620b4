"""Search task - cancellable asynchronous search pass."""

import asyncio
import logging
from typing import AsyncIterable, AsyncIterator, Awaitable, Callable, Optional, Sequence, Union

from ..models.search import SearchResult
from .search_engine import SearchEngine

logger = logging.getLogger(__name__)

LineInput = Union[Sequence[str], AsyncIterable[str]]
TotalInput = Union[int, Callable[[], Awaitable[int]]]

_DONE = object()


class CancellationToken:
    """Cooperative stop flag shared between a task and its owner."""

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class SearchTask:
    """One search pass over a line sequence.

    Progress is ``results emitted / total lines``. It approximates how far the
    pass has got rather than measuring scanned lines, is clamped to 1.0 and
    only ever grows. A normal completion sets it to 1.0.

    Results can be consumed three ways: the ``on_result`` callback, ``async
    for result in task`` (each consumer of the channel sees every result
    once), or ``await task.wait()`` for the full list.
    """

    def __init__(
        self,
        engine: SearchEngine,
        query: str,
        context_size: Optional[int] = None,
        ignored_windows: frozenset[str] = frozenset(),
        on_result: Optional[Callable[["SearchTask", SearchResult], None]] = None,
        on_progress: Optional[Callable[["SearchTask", float], None]] = None,
        on_finished: Optional[Callable[["SearchTask"], None]] = None,
    ):
        """Initialize search task.

        Args:
            engine: Search engine used for the scan.
            query: Keyword.
            context_size: Context size override.
            ignored_windows: Windows excluded from this pass.
            on_result: Called with the task and every emitted result.
            on_progress: Called with the task and each new progress value.
            on_finished: Called with the task once the pass ends for any reason.
        """
        self._engine = engine
        self.query = query
        self._context_size = context_size
        self._ignored_windows = frozenset(ignored_windows)
        self._on_result = on_result
        self._on_progress = on_progress
        self._on_finished = on_finished

        self.token = CancellationToken()
        self.results: list[SearchResult] = []
        self.progress = 0.0
        self.total_lines = 0
        self.error: Optional[BaseException] = None
        self.done = False

        self._channel: asyncio.Queue = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None

    @property
    def emitted(self) -> int:
        return len(self.results)

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    @property
    def running(self) -> bool:
        return self._task is not None and not self.done and not self.cancelled

    def start(self, lines: LineInput, total_lines: TotalInput) -> "SearchTask":
        """Schedule the pass on the running event loop.

        Args:
            lines: In-memory line texts or an async line stream.
            total_lines: Line count, or a coroutine function returning it.
        """
        self._task = asyncio.get_running_loop().create_task(self._run(lines, total_lines))
        return self

    def cancel(self) -> None:
        """Stop emitting; results already emitted are kept."""
        if not self.token.cancelled:
            logger.info(f"Search cancelled after {self.emitted} results for '{self.query[:50]}'")
        self.token.cancel()

    async def wait(self) -> list[SearchResult]:
        """Wait for the pass to end and return what it emitted."""
        if self._task is not None:
            await asyncio.shield(self._task)
        return list(self.results)

    def __aiter__(self) -> AsyncIterator[SearchResult]:
        return self._iter_channel()

    async def _iter_channel(self) -> AsyncIterator[SearchResult]:
        while True:
            item = await self._channel.get()
            if item is _DONE:
                self._channel.put_nowait(_DONE)
                return
            yield item

    async def _run(self, lines: LineInput, total_lines: TotalInput) -> None:
        try:
            if callable(total_lines):
                total_lines = await total_lines()
            self.total_lines = total_lines

            collected = await self._collect(lines)
            if self.cancelled:
                return

            for result in self._engine.iter_search(
                collected,
                self.query,
                context_size=self._context_size,
                ignored_windows=self._ignored_windows,
                should_stop=lambda: self.token.cancelled,
            ):
                self._emit(result)

            if not self.cancelled:
                self._set_progress(1.0)
        except Exception as e:
            logger.error(f"Search error: {e}")
            self.error = e
        finally:
            self.done = True
            self._channel.put_nowait(_DONE)
            if self._on_finished is not None:
                self._on_finished(self)

    async def _collect(self, lines: LineInput) -> list[str]:
        if not hasattr(lines, "__aiter__"):
            return list(lines)

        collected = []
        try:
            async for line in lines:
                if self.cancelled:
                    break
                collected.append(line)
        finally:
            aclose = getattr(lines, "aclose", None)
            if aclose is not None:
                await aclose()
        return collected

    def _emit(self, result: SearchResult) -> None:
        self.results.append(result)
        self._channel.put_nowait(result)
        if self._on_result is not None:
            self._on_result(self, result)

        if self.total_lines > 0:
            self._set_progress(min(1.0, self.emitted / self.total_lines))
        else:
            self._set_progress(1.0)

    def _set_progress(self, value: float) -> None:
        if value <= self.progress:
            return
        self.progress = value
        if self._on_progress is not None:
            self._on_progress(self, value)
