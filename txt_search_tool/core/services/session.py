"""Session - edit buffer, result list and save state for one resource."""

import asyncio
import logging
from functools import partial
from typing import Callable, Optional

from ..errors import (
    EmptyContentOnSave,
    EmptyQuery,
    IOFailure,
    NoResourceSelected,
    SessionError,
)
from ..models.history import ReplaceHistoryEntry, ReplaceOutcome
from ..models.search import SearchResult
from ..models.session import ResourceMetadata, SessionSnapshot, SessionState
from ..protocols.line_source import LineSourceProtocol
from ..protocols.preference_store import PreferenceStoreProtocol
from ..protocols.write_sink import WriteSinkProtocol
from .ignore_filter import IgnoreFilter
from .replace_engine import LINE_SEPARATOR, ReplaceEngine
from .search_engine import SearchEngine
from .search_task import SearchTask

logger = logging.getLogger(__name__)

LAST_RESOURCE_KEY = "last_resource_id"

NO_RESULTS_MESSAGE = "No matching results found"

Listener = Callable[[str, "Session"], None]


class Session:
    """Owns all mutable state of one search-and-replace session.

    Reads go to the line source until the buffer holds content; from then on
    the buffer is the only read source until it is saved over or discarded.
    Every public operation reports failures through ``error_message`` and
    never raises. Listeners registered with ``subscribe`` are called with the
    name of each field that changed.
    """

    def __init__(
        self,
        line_source: LineSourceProtocol,
        write_sink: WriteSinkProtocol,
        search_engine: Optional[SearchEngine] = None,
        replace_engine: Optional[ReplaceEngine] = None,
        preference_store: Optional[PreferenceStoreProtocol] = None,
        context_size: Optional[int] = None,
    ):
        """Initialize session.

        Args:
            line_source: Reader for the bound resource.
            write_sink: Writer used by save and save-as.
            search_engine: Search engine.
            replace_engine: Replace engine.
            preference_store: Store remembering the last resource (optional).
            context_size: Window context size, defaults to the engine's.
        """
        self._line_source = line_source
        self._write_sink = write_sink
        self._search_engine = search_engine or SearchEngine()
        self._replace_engine = replace_engine or ReplaceEngine()
        self._preference_store = preference_store
        self.context_size = (
            self._search_engine.context_size if context_size is None else context_size
        )

        self._resource_id: Optional[str] = None
        self._metadata: Optional[ResourceMetadata] = None
        self._content = ""
        self._unsaved = False
        self._history: list[ReplaceHistoryEntry] = []

        self._query = ""
        self._replacement = ""
        self._results: list[SearchResult] = []
        self._ignore = IgnoreFilter()
        self._progress = 0.0
        self._searching = False
        self._replacing = False
        self._search_task: Optional[SearchTask] = None

        self._error: Optional[str] = None
        self._success: Optional[str] = None
        self._listeners: list[Listener] = []
        # Serializes operations that read or bind a resource and then commit.
        self._lock = asyncio.Lock()

    # -- observation -------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener and return a function removing it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, *fields: str) -> None:
        for name in fields:
            for listener in list(self._listeners):
                listener(name, self)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            resource_id=self._resource_id,
            metadata=self._metadata,
            state=self.state,
            query=self._query,
            replacement=self._replacement,
            results=tuple(self._results),
            visible_results=tuple(self.visible_results),
            remaining_count=self.remaining_count,
            progress=self._progress,
            searching=self._searching,
            replacing=self._replacing,
            has_unsaved_replacements=self._unsaved,
            history=tuple(self._history),
            error_message=self._error,
            success_message=self._success,
        )

    @property
    def state(self) -> SessionState:
        if self._resource_id is None:
            return SessionState.UNBOUND
        if self._unsaved:
            return SessionState.BUFFERED_DIRTY
        if self._content:
            return SessionState.BUFFERED_CLEAN
        return SessionState.BOUND_CLEAN

    @property
    def resource_id(self) -> Optional[str]:
        return self._resource_id

    @property
    def metadata(self) -> Optional[ResourceMetadata]:
        return self._metadata

    @property
    def content(self) -> str:
        return self._content

    @property
    def has_unsaved_replacements(self) -> bool:
        return self._unsaved

    @property
    def history(self) -> list[ReplaceHistoryEntry]:
        return list(self._history)

    @property
    def query(self) -> str:
        return self._query

    @property
    def replacement(self) -> str:
        return self._replacement

    @property
    def results(self) -> list[SearchResult]:
        return list(self._results)

    @property
    def visible_results(self) -> list[SearchResult]:
        return self._ignore.visible(self._results)

    @property
    def remaining_count(self) -> int:
        return len(self.visible_results)

    @property
    def ignore_filter(self) -> IgnoreFilter:
        return self._ignore

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def searching(self) -> bool:
        return self._searching

    @property
    def replacing(self) -> bool:
        return self._replacing

    @property
    def search_task(self) -> Optional[SearchTask]:
        return self._search_task

    @property
    def error_message(self) -> Optional[str]:
        return self._error

    @property
    def success_message(self) -> Optional[str]:
        return self._success

    # -- inputs and messages -----------------------------------------------

    def update_query(self, query: str) -> None:
        self._query = query
        self._notify("query")

    def update_replacement(self, replacement: str) -> None:
        self._replacement = replacement
        self._notify("replacement")

    def apply_history(self, entry: ReplaceHistoryEntry) -> None:
        """Reuse the query and replacement of a past bulk replace."""
        self.update_query(entry.query)
        self.update_replacement(entry.replacement)

    def clear_error(self) -> None:
        self._error = None
        self._notify("error_message")

    def clear_success(self) -> None:
        self._success = None
        self._notify("success_message")

    def _fail(self, error: SessionError) -> None:
        self._error = str(error)
        self._notify("error_message")

    def _succeed(self, message: str) -> None:
        self._success = message
        self._notify("success_message")

    def _require_resource(self) -> str:
        if self._resource_id is None:
            raise NoResourceSelected()
        return self._resource_id

    @staticmethod
    def _require_query(query: str) -> None:
        if not query:
            raise EmptyQuery()

    # -- resource and buffer -------------------------------------------------

    async def select_resource(self, resource_id: str) -> bool:
        """Bind the session to a resource, dropping any buffer.

        Waits for a replace, load or save in progress to commit first.

        Returns:
            True if the resource metadata could be read.
        """
        async with self._lock:
            try:
                metadata = await self._line_source.metadata(resource_id)
            except Exception as e:
                logger.error(f"Failed to read metadata of {resource_id}: {e}")
                self._fail(IOFailure("Reading file info", e))
                return False

            self._cancel_search()
            self._resource_id = resource_id
            self._metadata = metadata
            self._content = ""
            self._unsaved = False
            self._reset_results()
            self._searching = False
            self._error = None
        logger.info(f"Resource selected: {metadata.name} ({metadata.display_size})")
        self._notify("resource_id", "metadata", "state", "results", "progress",
                     "searching", "error_message")

        if self._preference_store is not None:
            try:
                self._preference_store.save_scalar(LAST_RESOURCE_KEY, resource_id)
            except Exception as e:
                logger.error(f"Failed to remember last resource: {e}")
        return True

    async def restore_last_resource(self) -> bool:
        """Select the resource remembered by the preference store."""
        if self._preference_store is None:
            return False
        try:
            resource_id = self._preference_store.load_scalar(LAST_RESOURCE_KEY)
        except Exception as e:
            logger.error(f"Failed to load last resource: {e}")
            self._fail(IOFailure("Loading preferences", e))
            return False
        if not resource_id:
            return False
        return await self.select_resource(resource_id)

    async def load(self) -> bool:
        """Read the whole resource into the buffer."""
        async with self._lock:
            try:
                resource_id = self._require_resource()
            except SessionError as e:
                self._fail(e)
                return False

            if self._content:
                logger.debug("Buffer already populated, resource not re-read")
                return True

            try:
                lines = [line async for line in self._line_source.open_lines(resource_id)]
            except Exception as e:
                logger.error(f"Failed to load {resource_id}: {e}")
                self._fail(IOFailure("Reading file", e))
                return False

            self._content = LINE_SEPARATOR.join(lines)
        logger.info(f"Loaded {len(lines)} lines from {resource_id}")
        self._notify("content", "state")
        return True

    def _buffer_lines(self) -> list[str]:
        return self._content.split(LINE_SEPARATOR)

    async def _read_lines(self, resource_id: str) -> list[str]:
        if self._content:
            return self._buffer_lines()
        return [line async for line in self._line_source.open_lines(resource_id)]

    # -- search --------------------------------------------------------------

    def start_search(self, query: Optional[str] = None, quiet: bool = False) -> Optional[SearchTask]:
        """Cancel any running search and start a new one.

        Must be called from a running event loop.

        Args:
            query: Keyword; defaults to the current query.
            quiet: Suppress the "no results" message.

        Returns:
            The running task, or None if the search could not start.
        """
        if query is not None:
            self.update_query(query)
        query = self._query

        try:
            resource_id = self._require_resource()
            self._require_query(query)
        except SessionError as e:
            self._fail(e)
            return None

        self._cancel_search()
        self._reset_results()
        self._searching = True
        self._error = None

        task = SearchTask(
            self._search_engine,
            query,
            context_size=self.context_size,
            ignored_windows=self._ignore.ignored_windows,
            on_result=self._on_search_result,
            on_progress=self._on_search_progress,
            on_finished=partial(self._on_search_finished, quiet=quiet),
        )

        if self._content:
            lines = self._buffer_lines()
            task.start(lines, len(lines))
        else:
            task.start(
                self._line_source.open_lines(resource_id),
                partial(self._line_source.count_lines, resource_id),
            )
        self._search_task = task

        logger.info(f"Search started for '{query[:50]}' (quiet={quiet})")
        self._notify("results", "progress", "searching", "error_message")
        return task

    async def search(self, query: Optional[str] = None, quiet: bool = False) -> list[SearchResult]:
        """Run a search to completion and return its results."""
        task = self.start_search(query, quiet)
        if task is None:
            return []
        return await task.wait()

    def stop_search(self) -> None:
        """Stop emitting results; the ones already listed stay."""
        self._cancel_search()
        self._searching = False
        self._notify("searching")

    def clear_results(self) -> None:
        """Drop the result list and un-hide ignored rows."""
        self._reset_results()
        self._notify("results", "progress")

    def _reset_results(self) -> None:
        self._results = []
        self._progress = 0.0
        self._ignore.reset_lines()

    def _cancel_search(self) -> None:
        if self._search_task is not None and not self._search_task.done:
            self._search_task.cancel()

    async def _settle_search(self) -> None:
        # Replacements wait for the running pass so its results match the buffer it read.
        task = self._search_task
        if task is not None and not task.done:
            await task.wait()

    def _on_search_result(self, task: SearchTask, result: SearchResult) -> None:
        if task is not self._search_task:
            return
        self._results.append(result)
        self._notify("results")

    def _on_search_progress(self, task: SearchTask, progress: float) -> None:
        if task is not self._search_task:
            return
        self._progress = progress
        self._notify("progress")

    def _on_search_finished(self, task: SearchTask, quiet: bool) -> None:
        if task is not self._search_task:
            return
        self._searching = False
        if task.error is not None:
            self._fail(IOFailure("Search", task.error))
        elif not task.cancelled and not self._results and not quiet:
            self._error = NO_RESULTS_MESSAGE
            self._notify("error_message")
        logger.info(f"Search finished: {task.emitted} results for '{task.query[:50]}'")
        self._notify("searching")

    # -- ignore --------------------------------------------------------------

    def ignore_result(self, result: SearchResult) -> None:
        """Hide a row from the current list."""
        self._ignore.ignore_by_lines(result.line_numbers)
        self._notify("results")

    def ignore_result_window(self, result: SearchResult) -> None:
        """Hide a row and keep its window out of later searches."""
        self._ignore.ignore_by_window(result.line_numbers, result.display_text)
        self._notify("results")

    # -- replace -------------------------------------------------------------

    async def replace_all(
        self, query: Optional[str] = None, replacement: Optional[str] = None
    ) -> Optional[ReplaceOutcome]:
        """Replace every occurrence in the buffer and search again quietly.

        The session is marked unsaved even when nothing matched. Concurrent
        replaces apply one after another, each on the previous one's output.
        """
        if query is not None:
            self.update_query(query)
        if replacement is not None:
            self.update_replacement(replacement)
        query, replacement = self._query, self._replacement

        async with self._lock:
            try:
                resource_id = self._require_resource()
                self._require_query(query)
            except SessionError as e:
                self._fail(e)
                return None

            self._set_replacing(True)
            self._error = None
            try:
                await self._settle_search()
                lines = await self._read_lines(resource_id)
                content, count = self._replace_engine.replace_all(lines, query, replacement)
            except Exception as e:
                logger.error(f"Replace all error: {e}")
                self._fail(IOFailure("Replace", e))
                return None
            finally:
                self._set_replacing(False)

            self._content = content
            self._unsaved = True
            self._history.insert(0, ReplaceHistoryEntry(query, replacement, count))
        self._notify("content", "state", "has_unsaved_replacements", "history")
        self._succeed(f"Replaced {count} occurrence(s), save the file to keep the changes")

        self.clear_results()
        await self.search(query, quiet=True)
        return ReplaceOutcome(content=content, count=count)

    async def replace_one(
        self, result: SearchResult, replacement: Optional[str] = None
    ) -> Optional[ReplaceOutcome]:
        """Replace the query in the lines of one result and drop that result.

        Does not add a history entry and does not search again.
        """
        replacement = self._replacement if replacement is None else replacement
        query = self._query

        async with self._lock:
            try:
                resource_id = self._require_resource()
                self._require_query(query)
            except SessionError as e:
                self._fail(e)
                return None

            self._set_replacing(True)
            self._error = None
            try:
                await self._settle_search()
                lines = await self._read_lines(resource_id)
                content, modified = self._replace_engine.replace_one(
                    lines, query, replacement, result.line_numbers
                )
            except Exception as e:
                logger.error(f"Replace one error: {e}")
                self._fail(IOFailure("Replace", e))
                return None
            finally:
                self._set_replacing(False)

            self._content = content
            self._unsaved = True
            self._results = [r for r in self._results if r.display_text != result.display_text]
        self._notify("content", "state", "has_unsaved_replacements", "results")
        self._succeed(f"Replaced {modified} line(s), save the file to keep the changes")
        return ReplaceOutcome(content=content, count=modified)

    def _set_replacing(self, value: bool) -> None:
        self._replacing = value
        self._notify("replacing")

    # -- save / discard ------------------------------------------------------

    async def save(self) -> bool:
        """Write the buffer back to the bound resource."""
        return await self._write(None, "Save")

    async def save_as(self, target_id: str) -> bool:
        """Write the buffer to another resource.

        The session stays bound to its original resource, so a later
        ``save`` still writes there.
        """
        return await self._write(target_id, "Save as")

    async def _write(self, target_id: Optional[str], operation: str) -> bool:
        # Checked under the lock: a resource change queued ahead of the write drops the buffer.
        async with self._lock:
            content = self._content
            try:
                if target_id is None:
                    target_id = self._require_resource()
                if not content:
                    raise EmptyContentOnSave()
            except SessionError as e:
                self._fail(e)
                return False

            self._error = None
            try:
                await self._write_sink.write(target_id, content)
            except Exception as e:
                logger.error(f"{operation} error for {target_id}: {e}")
                self._fail(IOFailure(operation, e))
                return False

            self._unsaved = False
        logger.info(f"{operation}: {len(content)} chars written to {target_id}")
        self._notify("has_unsaved_replacements", "state")
        self._succeed("Saved" if operation == "Save" else f"Saved as {target_id}")
        return True

    def discard(self) -> None:
        """Drop the buffer, the unsaved flag and the replacement history."""
        self._unsaved = False
        self._content = ""
        self._history = []
        logger.info("Unsaved replacements discarded")
        self._notify("content", "state", "has_unsaved_replacements", "history")
