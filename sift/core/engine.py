"""
Sift Analysis Engine
=====================

Reads inputs and runs them through the entropy analyzer. The engine is
the boundary where I/O failures are handled: an unreadable input becomes
an error-classified :class:`AnalysisResult` and the remaining inputs are
still analysed.

Multiple inputs are independent, so :meth:`SiftEngine.analyze_files`
fans them out to a thread pool and gathers the results back in input
order.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional, Union

from shared.config import SiftConfig
from shared.logger import ToolkitLogger

from sift.analyzers.entropy import EntropyAnalyzer
from sift.core.errors import InputUnavailableError
from sift.core.models import AnalysisResult

PathLike = Union[str, Path]

logger = ToolkitLogger("sift.engine")


class SiftEngine:
    """Orchestrates reading and analysing inputs.

    Usage::

        engine = SiftEngine(SiftConfig(block_size=512))
        result = engine.analyze_file("sample.bin")
        results = await engine.analyze_files(["a.bin", "b.bin"])

    Attributes:
        config: Run configuration.
    """

    def __init__(self, config: Optional[SiftConfig] = None) -> None:
        self.config = config or SiftConfig()
        self._analyzer = EntropyAnalyzer(block_size=self.config.block_size)

    # ------------------------------------------------------------------ #
    #  Byte source
    # ------------------------------------------------------------------ #

    def read_source(self, path: PathLike) -> bytes:
        """Read the whole of *path* into memory.

        Raises:
            InputUnavailableError: If the file cannot be read.
        """
        try:
            with open(path, "rb") as fh:
                return fh.read()
        except OSError as exc:
            reason = exc.strerror or exc.__class__.__name__
            raise InputUnavailableError(str(path), reason) from exc

    # ------------------------------------------------------------------ #
    #  Analysis
    # ------------------------------------------------------------------ #

    def analyze_bytes(self, data: bytes, source: str = "<bytes>") -> AnalysisResult:
        """Analyse an in-memory buffer with the configured block size."""
        return self._analyzer.analyze(data, source=source)

    def analyze_file(self, path: PathLike) -> AnalysisResult:
        """Read and analyse one file.

        Never raises for an unreadable file; the failure is logged and an
        error result is returned in its place.
        """
        source = str(path)
        with logger.operation("analyze_file"):
            try:
                data = self.read_source(path)
            except InputUnavailableError as exc:
                logger.error("%s", exc, source=source)
                return AnalysisResult.unavailable(source, exc.reason)

            with logger.timed(f"entropy analysis of {source}"):
                result = self.analyze_bytes(data, source=source)

        logger.debug(
            "%s: H=%.4f, %d bytes, %s",
            source,
            result.total_entropy,
            result.file_size,
            result.classification.value,
        )
        return result

    async def analyze_files(self, paths: Iterable[PathLike]) -> list[AnalysisResult]:
        """Analyse several files concurrently.

        Args:
            paths: Files to analyse.

        Returns:
            One result per path, in the order the paths were given.
        """
        paths = list(paths)
        if not paths:
            return []

        logger.info(
            "Analysing %d file(s) with block size %d",
            len(paths),
            self.config.block_size,
        )
        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(
            max_workers=min(self.config.max_workers, len(paths)),
            thread_name_prefix="sift",
        ) as pool:
            tasks = [
                loop.run_in_executor(pool, self.analyze_file, path)
                for path in paths
            ]
            results = await asyncio.gather(*tasks)

        failed = sum(1 for r in results if r.is_error)
        if failed:
            logger.warning("%d of %d input(s) could not be read", failed, len(paths))
        return list(results)
