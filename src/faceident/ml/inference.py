"""Matching concurrency layer.

Architecture:
    FastAPI (async) -> asyncio.Semaphore(N) -> ThreadPoolExecutor(N) -> Matcher / Verifier

Scoring a large record collection is CPU-bound, so identification and
verification run off the event loop. ``max_concurrent`` bounds how many
matching calls score at once; callers beyond that wait for a slot and get
TimeoutError (HTTP 503) once the queue timeout expires.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Sequence

    from faceident.config import Settings
    from faceident.matching.matcher import Matcher
    from faceident.matching.types import Descriptor, FaceRecord, IdentificationResult, VerificationResult
    from faceident.matching.verifier import Verifier

logger = logging.getLogger(__name__)

T = TypeVar("T")

QUEUE_TIMEOUT_SECONDS: float = 5.0


class MatchingPool:
    """Runs identification and verification on a bounded worker pool."""

    def __init__(
        self,
        settings: Settings,
        matcher: Matcher,
        verifier: Verifier,
        queue_timeout: float = QUEUE_TIMEOUT_SECONDS,
    ) -> None:
        self.matcher = matcher
        self.verifier = verifier
        self._workers = settings.max_concurrent
        self._slots = asyncio.Semaphore(self._workers)
        self._executor = ThreadPoolExecutor(
            max_workers=self._workers,
            thread_name_prefix="faceident-matching",
        )
        self._queue_timeout = queue_timeout
        self._stats_lock = threading.Lock()
        self._scoring = 0
        self._waiting = 0
        self._records_scored = 0

    async def identify(
        self,
        query_descriptor: Descriptor,
        query_confidence: float,
        records: Sequence[FaceRecord[Any]],
        match_threshold: float,
    ) -> IdentificationResult[Any]:
        """Identify ``query_descriptor`` against ``records`` on a worker thread."""
        result = await self.submit(
            self.matcher.identify, query_descriptor, query_confidence, records, match_threshold
        )
        with self._stats_lock:
            self._records_scored += len(records)
        return result

    async def verify(
        self,
        descriptor_a: Descriptor,
        descriptor_b: Descriptor,
        match_threshold: float,
    ) -> VerificationResult:
        """Verify two descriptors on a worker thread."""
        return await self.submit(self.verifier.verify, descriptor_a, descriptor_b, match_threshold)

    async def submit(self, func: Callable[..., T], *args: object) -> T:
        """Run ``func(*args)`` once a matching slot is free.

        Raises:
            TimeoutError: If no slot frees up within the queue timeout.
        """
        async with self._slot():
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(self._executor, func, *args)

    @asynccontextmanager
    async def _slot(self) -> AsyncIterator[None]:
        with self._stats_lock:
            self._waiting += 1
        try:
            await asyncio.wait_for(self._slots.acquire(), timeout=self._queue_timeout)
        except TimeoutError:
            logger.warning(
                "All %d matching workers busy for %.1fs; rejecting request",
                self._workers,
                self._queue_timeout,
            )
            raise
        finally:
            with self._stats_lock:
                self._waiting -= 1

        with self._stats_lock:
            self._scoring += 1
        try:
            yield
        finally:
            self._slots.release()
            with self._stats_lock:
                self._scoring -= 1

    @property
    def active_count(self) -> int:
        """Number of matching calls currently running."""
        with self._stats_lock:
            return self._scoring

    @property
    def queue_depth(self) -> int:
        """Number of matching calls waiting for a worker."""
        with self._stats_lock:
            return self._waiting

    @property
    def records_scored(self) -> int:
        """Total records submitted to identification since startup."""
        with self._stats_lock:
            return self._records_scored

    def shutdown(self) -> None:
        """Shut down the worker threads."""
        self._executor.shutdown(wait=True)
