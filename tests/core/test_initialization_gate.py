"""
Test suite for InitializationGate.

Covers build-once semantics under concurrency, failure propagation without
retry, cancellation isolation and lifecycle state reporting.

System role: Verification of lazy index initialization
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from backend.core.exceptions import IndexUnavailable, IngestionError
from backend.core.rag.initialization_gate import InitializationGate
from backend.models.index import IndexState


def fake_index(size: int) -> MagicMock:
    index = MagicMock()
    index.__len__.return_value = size
    return index


class ControlledBuild:
    """Build callable that blocks until released and counts invocations."""

    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result if result is not None else fake_index(7)
        self.error = error
        self.calls = 0
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def __call__(self):
        self.calls += 1
        self.started.set()
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.result


class TestInitializationGateBuildOnce:
    """Test suite for single-build guarantees."""

    @pytest.mark.asyncio
    async def test_concurrent_callers_should_share_one_build(self) -> None:
        """N concurrent first requests trigger exactly one build."""
        # Arrange
        build = ControlledBuild()
        gate = InitializationGate(build)

        # Act
        waiters = [asyncio.create_task(gate.ensure_ready()) for _ in range(20)]
        await build.started.wait()
        assert gate.state is IndexState.BUILDING
        build.release.set()
        results = await asyncio.gather(*waiters)

        # Assert
        assert build.calls == 1
        assert all(result is build.result for result in results)
        assert gate.state is IndexState.READY
        assert gate.index is build.result

    @pytest.mark.asyncio
    async def test_ready_gate_should_not_rebuild(self) -> None:
        build = AsyncMock(return_value=fake_index(1))
        gate = InitializationGate(build)

        first = await gate.ensure_ready()
        second = await gate.ensure_ready()

        assert first is second
        build.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_start_should_be_idempotent(self) -> None:
        build = ControlledBuild()
        gate = InitializationGate(build)

        first = gate.start()
        second = gate.start()
        build.release.set()
        await first

        assert first is second
        assert build.calls == 1


class TestInitializationGateFailure:
    """Test suite for failed builds."""

    @pytest.mark.asyncio
    async def test_failed_build_should_fail_every_waiter(self) -> None:
        # Arrange
        build = ControlledBuild(error=IngestionError("Corpus file not found: missing.txt"))
        gate = InitializationGate(build)

        # Act
        waiters = [asyncio.create_task(gate.ensure_ready()) for _ in range(5)]
        await build.started.wait()
        build.release.set()
        results = await asyncio.gather(*waiters, return_exceptions=True)

        # Assert
        assert all(isinstance(result, IndexUnavailable) for result in results)
        assert all("Corpus file not found" in str(result) for result in results)
        assert gate.state is IndexState.FAILED

    @pytest.mark.asyncio
    async def test_failed_build_should_not_be_retried(self) -> None:
        """Later requests keep failing without another build attempt."""
        cause = IngestionError("Corpus file not found: missing.txt")
        build = AsyncMock(side_effect=cause)
        gate = InitializationGate(build)

        for _ in range(3):
            with pytest.raises(IndexUnavailable) as exc_info:
                await gate.ensure_ready()
            assert exc_info.value.__cause__ is cause

        build.assert_awaited_once()
        assert gate.index is None

    @pytest.mark.asyncio
    async def test_index_unavailable_should_map_to_503(self) -> None:
        gate = InitializationGate(AsyncMock(side_effect=RuntimeError("boom")))

        with pytest.raises(IndexUnavailable) as exc_info:
            await gate.ensure_ready()

        assert exc_info.value.status_code == 503
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestInitializationGateCancellation:
    """Test suite for cancellation handling."""

    @pytest.mark.asyncio
    async def test_cancelled_waiter_should_not_cancel_build(self) -> None:
        # Arrange
        build = ControlledBuild()
        gate = InitializationGate(build)
        abandoned = asyncio.create_task(gate.ensure_ready())
        survivor = asyncio.create_task(gate.ensure_ready())
        await build.started.wait()

        # Act
        abandoned.cancel()
        with pytest.raises(asyncio.CancelledError):
            await abandoned
        build.release.set()

        # Assert
        assert await survivor is build.result
        assert gate.state is IndexState.READY

    @pytest.mark.asyncio
    async def test_close_should_cancel_in_flight_build(self) -> None:
        build = ControlledBuild()
        gate = InitializationGate(build)
        waiter = asyncio.create_task(gate.ensure_ready())
        await build.started.wait()

        await gate.close()

        with pytest.raises(IndexUnavailable, match="cancelled"):
            await waiter
        assert gate.state is IndexState.FAILED


class TestInitializationGateStatus:
    """Test suite for health reporting."""

    @pytest.mark.asyncio
    async def test_status_should_follow_lifecycle(self) -> None:
        # Arrange
        build = ControlledBuild()
        gate = InitializationGate(build)

        # Act & Assert
        assert gate.status().state is IndexState.UNINITIALIZED

        task = gate.start()
        assert gate.status().state is IndexState.BUILDING

        build.release.set()
        await task
        status = gate.status()
        assert status.state is IndexState.READY
        assert status.chunk_count == 7
        assert status.error is None

    @pytest.mark.asyncio
    async def test_status_should_report_build_error(self) -> None:
        gate = InitializationGate(AsyncMock(side_effect=IngestionError("Corpus file not found: x.txt")))

        with pytest.raises(IndexUnavailable):
            await gate.ensure_ready()

        status = gate.status()
        assert status.state is IndexState.FAILED
        assert "Corpus file not found" in status.error
        assert status.chunk_count == 0
