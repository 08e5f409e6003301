"""Tests for sift.server -- async request/response server."""

from __future__ import annotations

import asyncio
import os
import time

import pytest

from shared.config import SiftConfig
from sift.core.engine import SiftEngine
from sift.core.errors import AnalysisTimeoutError, ServerStoppedError
from sift.server import AnalysisServer, start_server


class _SlowEngine(SiftEngine):
    def analyze_file(self, path):
        time.sleep(0.5)
        return super().analyze_file(path)


@pytest.fixture
def sample(tmp_path, cycling_bytes):
    path = tmp_path / "sample.bin"
    path.write_bytes(cycling_bytes)
    return path


class TestAnalysisServer:
    def test_replies_with_result(self, sample) -> None:
        async def scenario():
            async with AnalysisServer() as server:
                return await server.analyze(sample)

        result = asyncio.run(scenario())
        assert result.source == str(sample)
        assert result.total_entropy == 8.0

    def test_concurrent_requests_each_get_their_reply(self, tmp_path, zero_bytes, cycling_bytes) -> None:
        a = tmp_path / "a.bin"
        b = tmp_path / "b.bin"
        a.write_bytes(zero_bytes)
        b.write_bytes(cycling_bytes)

        async def scenario():
            async with AnalysisServer() as server:
                return await asyncio.gather(server.analyze(a), server.analyze(b))

        ra, rb = asyncio.run(scenario())
        assert ra.source == str(a) and ra.total_entropy == 0.0
        assert rb.source == str(b) and rb.total_entropy == 8.0

    def test_repeat_request_hits_cache(self, sample) -> None:
        async def scenario():
            async with AnalysisServer(cache_size=4) as server:
                first = await server.analyze(sample)
                second = await server.analyze(sample)
                return first, second, server.cache_info()

        first, second, info = asyncio.run(scenario())
        assert first == second
        assert info.hits == 1
        assert info.misses == 1
        assert info.size == 1

    def test_modified_file_is_reanalysed(self, sample) -> None:
        async def scenario():
            async with AnalysisServer() as server:
                before = await server.analyze(sample)
                sample.write_bytes(b"\x00" * 100)
                st = sample.stat()
                os.utime(sample, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))
                after = await server.analyze(sample)
                return before, after

        before, after = asyncio.run(scenario())
        assert before.total_entropy == 8.0
        assert after.total_entropy == 0.0

    def test_lru_eviction(self, tmp_path, zero_bytes) -> None:
        a = tmp_path / "a.bin"
        b = tmp_path / "b.bin"
        a.write_bytes(zero_bytes)
        b.write_bytes(zero_bytes)

        async def scenario():
            async with AnalysisServer(cache_size=1) as server:
                await server.analyze(a)
                await server.analyze(b)
                await server.analyze(a)
                return server.cache_info()

        info = asyncio.run(scenario())
        assert info.misses == 3
        assert info.hits == 0
        assert info.size == 1

    def test_error_results_not_cached(self, tmp_path) -> None:
        missing = tmp_path / "missing.bin"

        async def scenario():
            async with AnalysisServer() as server:
                result = await server.analyze(missing)
                return result, server.cache_info()

        result, info = asyncio.run(scenario())
        assert result.is_error
        assert info.size == 0

    def test_cache_disabled(self, sample) -> None:
        async def scenario():
            async with AnalysisServer(cache_size=0) as server:
                await server.analyze(sample)
                await server.analyze(sample)
                return server.cache_info()

        assert asyncio.run(scenario()).misses == 2

    def test_timeout_raises(self, sample) -> None:
        async def scenario():
            async with AnalysisServer(_SlowEngine(), timeout=0.05) as server:
                await server.analyze(sample)

        with pytest.raises(AnalysisTimeoutError):
            asyncio.run(scenario())

    def test_timeout_is_a_timeout_error(self) -> None:
        assert issubclass(AnalysisTimeoutError, TimeoutError)

    def test_request_after_stop(self, sample) -> None:
        async def scenario():
            server = AnalysisServer()
            await server.start()
            await server.stop()
            assert not server.running
            await server.analyze(sample)

        with pytest.raises(ServerStoppedError):
            asyncio.run(scenario())

    def test_stop_fails_pending_requests(self, sample, tmp_path) -> None:
        other = tmp_path / "other.bin"
        other.write_bytes(b"abc")

        async def scenario():
            server = await AnalysisServer(_SlowEngine(), timeout=5.0).start()
            in_flight = asyncio.create_task(server.analyze(sample))
            queued = asyncio.create_task(server.analyze(other))
            # let the worker pick up the first request
            await asyncio.sleep(0.1)
            await server.stop()
            return await asyncio.gather(in_flight, queued, return_exceptions=True)

        outcomes = asyncio.run(scenario())
        assert len(outcomes) == 2
        assert all(isinstance(o, ServerStoppedError) for o in outcomes)

    def test_request_before_start(self, sample) -> None:
        with pytest.raises(ServerStoppedError):
            asyncio.run(AnalysisServer().analyze(sample))

    def test_stop_is_idempotent(self) -> None:
        async def scenario():
            server = await AnalysisServer().start()
            await server.stop()
            await server.stop()

        asyncio.run(scenario())

    @pytest.mark.parametrize("kwargs", [{"cache_size": -1}, {"timeout": 0}, {"timeout": -1.0}])
    def test_invalid_arguments(self, kwargs) -> None:
        with pytest.raises(ValueError):
            AnalysisServer(**kwargs)


class TestStartServer:
    def test_defaults_from_engine_config(self, sample) -> None:
        engine = SiftEngine(SiftConfig(cache_size=3, request_timeout=2.5))

        async def scenario():
            server = await start_server(engine)
            try:
                result = await server.analyze(sample)
                return server, result
            finally:
                await server.stop()

        server, result = asyncio.run(scenario())
        assert server.timeout == 2.5
        assert server.cache_info().capacity == 3
        assert result.total_entropy == 8.0

    def test_explicit_overrides(self) -> None:
        async def scenario():
            server = await start_server(cache_size=0, timeout=1.0)
            running = server.running
            await server.stop()
            return server, running

        server, running = asyncio.run(scenario())
        assert running
        assert server.timeout == 1.0
        assert server.cache_info().capacity == 0
