"""
Sift Analysis Server
=====================

Asynchronous request/response wrapper around :class:`SiftEngine`.

A single worker task consumes an :class:`asyncio.Queue` of requests and
completes them one at a time, offloading the analysis itself to the
default executor so the event loop stays responsive. Each caller awaits
exactly one reply, bounded by the server timeout; an elapsed wait raises
:class:`AnalysisTimeoutError` and is never turned into a result.

Successful results are kept in a fixed-capacity least-recently-used
cache keyed by the file's resolved path, size and modification time, so
a rewritten file is analysed again. Error results are not cached.

Usage::

    server = await start_server(cache_size=64, timeout=5.0)
    try:
        result = await server.analyze("sample.bin")
    finally:
        await server.stop()

    # or
    async with AnalysisServer() as server:
        result = await server.analyze("sample.bin")
"""

from __future__ import annotations

import asyncio
import os
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Optional, Union

from shared.logger import ToolkitLogger

from sift.core.engine import SiftEngine
from sift.core.errors import AnalysisTimeoutError, ServerStoppedError
from sift.core.models import AnalysisResult

logger = ToolkitLogger("sift.server")

CacheKey = tuple[str, int, int]


class CacheInfo(NamedTuple):
    hits: int
    misses: int
    size: int
    capacity: int


@dataclass
class _Request:
    source: Path
    reply: asyncio.Future


class AnalysisServer:
    """Single-worker analysis server with a bounded result cache.

    Args:
        engine: Engine used to read and analyse inputs.
        cache_size: Maximum number of cached results; 0 disables caching.
        timeout: Seconds a caller waits for its reply.
    """

    def __init__(
        self,
        engine: Optional[SiftEngine] = None,
        *,
        cache_size: int = 128,
        timeout: float = 5.0,
    ) -> None:
        if cache_size < 0:
            raise ValueError(f"cache_size must be >= 0, got {cache_size}")
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self.engine = engine or SiftEngine()
        self.timeout = timeout
        self._capacity = cache_size
        self._cache: OrderedDict[CacheKey, AnalysisResult] = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._queue: Optional[asyncio.Queue[_Request]] = None
        self._worker: Optional[asyncio.Task[None]] = None

    # ------------------------------------------------------------------ #
    #  Lifecycle
    # ------------------------------------------------------------------ #

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def start(self) -> AnalysisServer:
        """Start the worker task. Starting a running server is a no-op."""
        if not self.running:
            self._queue = asyncio.Queue()
            self._worker = asyncio.create_task(
                self._serve(self._queue), name="sift-server"
            )
            logger.info("Analysis server started")
        return self

    async def stop(self) -> None:
        """Stop the worker and fail every request still waiting.

        Pending callers receive :class:`ServerStoppedError`. Stopping a
        stopped server is a no-op.
        """
        worker, queue = self._worker, self._queue
        if worker is None or queue is None:
            return
        self._worker = None
        self._queue = None

        worker.cancel()
        try:
            await worker
        except asyncio.CancelledError:
            pass

        while not queue.empty():
            request = queue.get_nowait()
            if not request.reply.done():
                request.reply.set_exception(ServerStoppedError("server stopped"))
        logger.info("Analysis server stopped")

    async def __aenter__(self) -> AnalysisServer:
        return await self.start()

    async def __aexit__(self, *exc: object) -> None:
        await self.stop()

    # ------------------------------------------------------------------ #
    #  Requests
    # ------------------------------------------------------------------ #

    async def analyze(self, source: Union[str, Path]) -> AnalysisResult:
        """Submit *source* and wait for its result.

        Raises:
            ServerStoppedError: If the server is not running, or is
                stopped before replying.
            AnalysisTimeoutError: If no reply arrives within ``timeout``.
        """
        queue = self._queue
        if queue is None or not self.running:
            raise ServerStoppedError("server is not running")

        reply: asyncio.Future = asyncio.get_running_loop().create_future()
        await queue.put(_Request(Path(source), reply))
        try:
            return await asyncio.wait_for(reply, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("No reply for %s within %.1fs", source, self.timeout)
            raise AnalysisTimeoutError(
                f"no reply for {source} within {self.timeout}s"
            ) from None

    def cache_info(self) -> CacheInfo:
        return CacheInfo(self._hits, self._misses, len(self._cache), self._capacity)

    def cache_clear(self) -> None:
        self._cache.clear()
        self._hits = self._misses = 0

    # ------------------------------------------------------------------ #
    #  Worker
    # ------------------------------------------------------------------ #

    async def _serve(self, queue: asyncio.Queue[_Request]) -> None:
        loop = asyncio.get_running_loop()

        while True:
            request = await queue.get()
            try:
                if request.reply.done():
                    # caller already timed out
                    continue
                result = await self._handle(request.source, loop)
                if not request.reply.done():
                    request.reply.set_result(result)
            except asyncio.CancelledError:
                if not request.reply.done():
                    request.reply.set_exception(ServerStoppedError("server stopped"))
                raise
            except Exception as exc:
                logger.exception("Analysis of %s failed", request.source)
                if not request.reply.done():
                    request.reply.set_exception(exc)
            finally:
                queue.task_done()

    async def _handle(
        self, source: Path, loop: asyncio.AbstractEventLoop
    ) -> AnalysisResult:
        key = self._cache_key(source)
        if key is not None and key in self._cache:
            self._cache.move_to_end(key)
            self._hits += 1
            logger.debug("Cache hit for %s", source)
            return self._cache[key]

        self._misses += 1
        result = await loop.run_in_executor(None, self.engine.analyze_file, source)
        if key is not None and not result.is_error:
            self._remember(key, result)
        return result

    def _remember(self, key: CacheKey, result: AnalysisResult) -> None:
        if self._capacity == 0:
            return
        self._cache[key] = result
        self._cache.move_to_end(key)
        while len(self._cache) > self._capacity:
            evicted, _ = self._cache.popitem(last=False)
            logger.debug("Evicted %s from cache", evicted[0])

    @staticmethod
    def _cache_key(source: Path) -> Optional[CacheKey]:
        try:
            st = os.stat(source)
        except OSError:
            return None
        return (str(source.resolve()), st.st_size, st.st_mtime_ns)


async def start_server(
    engine: Optional[SiftEngine] = None,
    *,
    cache_size: Optional[int] = None,
    timeout: Optional[float] = None,
) -> AnalysisServer:
    """Create and start an :class:`AnalysisServer`.

    Cache size and timeout default to the engine's configuration.

    Returns:
        The running server; pass it to whatever needs to submit requests
        and call :meth:`AnalysisServer.stop` on it when done.
    """
    engine = engine or SiftEngine()
    server = AnalysisServer(
        engine,
        cache_size=engine.config.cache_size if cache_size is None else cache_size,
        timeout=engine.config.request_timeout if timeout is None else timeout,
    )
    return await server.start()
