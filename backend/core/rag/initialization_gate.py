"""
Initialization gate for the embedding index.

Guarantees the index is built at most once per process. The first caller
schedules the build as a single asyncio.Task; every caller, the first one
included, awaits that same task. State moves uninitialized -> building and
then to ready or failed, never back.

Requests that arrive while the build is in flight block until it resolves.
A failed build is not retried: every later caller gets IndexUnavailable until
the process restarts.

Dependencies: asyncio, backend.core.rag.embedding_index
System role: Lazy, race-free index lifecycle owner
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from backend.core.exceptions import IndexUnavailable
from backend.core.rag.embedding_index import EmbeddingIndex
from backend.models.index import IndexState, IndexStatus

logger = logging.getLogger(__name__)

IndexBuilder = Callable[[], Awaitable[EmbeddingIndex]]


class InitializationGate:
    """Owns the index build and hands the ready index to requests."""

    def __init__(self, build: IndexBuilder) -> None:
        """
        Args:
            build: Coroutine function producing the index; called at most once
        """
        self._build = build
        self._state = IndexState.UNINITIALIZED
        self._task: asyncio.Task[EmbeddingIndex] | None = None
        self._index: EmbeddingIndex | None = None
        self._error: BaseException | None = None

    @property
    def state(self) -> IndexState:
        return self._state

    @property
    def index(self) -> EmbeddingIndex | None:
        """The ready index, or None before the build succeeds."""
        return self._index

    def status(self) -> IndexStatus:
        """Snapshot for health reporting."""
        return IndexStatus(
            state=self._state,
            chunk_count=len(self._index) if self._index is not None else 0,
            error=str(self._error) if self._error is not None else None,
        )

    def start(self) -> "asyncio.Task[EmbeddingIndex]":
        """
        Schedule the build if it has not been scheduled yet.

        Must be called from a running event loop. Idempotent: later calls return
        the task created by the first one.

        Returns:
            asyncio.Task: The single shared build task
        """
        # No await between the check and the assignment, so racing callers
        # cannot both get here.
        if self._task is None:
            self._state = IndexState.BUILDING
            self._task = asyncio.get_running_loop().create_task(self._run_build())
            self._task.add_done_callback(self._consume_result)
            logger.info(f"{__name__}:start - Index build scheduled")
        return self._task

    async def ensure_ready(self) -> EmbeddingIndex:
        """
        Return the ready index, building it on first use.

        Returns:
            EmbeddingIndex: The process-wide index

        Raises:
            IndexUnavailable: The build failed (now or earlier)
        """
        if self._state is IndexState.READY and self._index is not None:
            return self._index
        if self._state is IndexState.FAILED:
            raise IndexUnavailable(f"Index unavailable: {self._error}") from self._error

        task = self.start()
        try:
            # Shielded so a cancelled request does not cancel the shared build.
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled():
                raise IndexUnavailable("Index unavailable: build was cancelled")
            raise
        except Exception as e:
            raise IndexUnavailable(f"Index unavailable: {e}") from e

    async def close(self) -> None:
        """Cancel an in-flight build (application shutdown)."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except (asyncio.CancelledError, Exception):
                pass

    async def _run_build(self) -> EmbeddingIndex:
        started = time.perf_counter()
        logger.info(f"{__name__}:_run_build - START")
        try:
            index = await self._build()
        except asyncio.CancelledError:
            self._state = IndexState.FAILED
            self._error = IndexUnavailable("index build cancelled")
            logger.warning(f"{__name__}:_run_build - Build cancelled")
            raise
        except Exception as e:
            self._state = IndexState.FAILED
            self._error = e
            logger.error(
                f"{__name__}:_run_build - FAILED after {time.perf_counter() - started:.2f}s: "
                f"{type(e).__name__}: {e}"
            )
            raise

        self._index = index
        self._state = IndexState.READY
        logger.info(
            f"{__name__}:_run_build - READY: {len(index)} chunks in {time.perf_counter() - started:.2f}s"
        )
        return index

    @staticmethod
    def _consume_result(task: "asyncio.Task[EmbeddingIndex]") -> None:
        # Mark the exception retrieved; waiters get it via ensure_ready().
        if not task.cancelled():
            task.exception()
