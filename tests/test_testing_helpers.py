"""Tests for percolate.testing — Countdown, drive and RecordingSource."""

import pytest

from percolate.handles import PinHandle
from percolate.testing import Countdown, RecordingSource, drive


class TestCountdown:
    @pytest.mark.parametrize("polls", [1, 2, 6])
    def test_takes_exactly_polls(self, polls: int) -> None:
        countdown = Countdown(polls, "v")
        assert drive(PinHandle(countdown)) == ("v", polls)
        assert countdown.polled == polls

    def test_rejects_zero(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            Countdown(0, None)

    @pytest.mark.asyncio
    async def test_awaitable_under_asyncio(self) -> None:
        assert await Countdown(3, "ok") == "ok"


class TestDrive:
    def test_gives_up(self) -> None:
        with pytest.raises(RuntimeError, match="not ready after 3 polls"):
            drive(PinHandle(Countdown(10, None)), max_polls=3)


class TestRecordingSource:
    @pytest.mark.asyncio
    async def test_counts_pulls_past_the_end(self) -> None:
        source = RecordingSource([1])
        assert await anext(source) == 1
        with pytest.raises(StopAsyncIteration):
            await anext(source)
        with pytest.raises(StopAsyncIteration):
            await anext(source)
        assert source.pulls == 3

    @pytest.mark.asyncio
    async def test_fails_once(self) -> None:
        source = RecordingSource(["a", "b"], fail_at=1, error=KeyError("b"))
        assert await anext(source) == "a"
        with pytest.raises(KeyError):
            await anext(source)
        assert await anext(source) == "b"

    @pytest.mark.asyncio
    async def test_aclose_ends_iteration(self) -> None:
        source = RecordingSource([1, 2])
        await source.aclose()
        assert source.closed
        with pytest.raises(StopAsyncIteration):
            await anext(source)

    def test_repr(self) -> None:
        assert repr(RecordingSource([1, 2])) == "<RecordingSource 0/2 pulls=0>"
