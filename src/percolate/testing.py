"""Test utilities for percolate users.

Pollable building blocks with observable behaviour::

    from percolate.projection import from_async
    from percolate.testing import Countdown, drive

    result, polls = drive(from_async(lambda v: Countdown(3, v)).apply("x"))
    assert (result, polls) == ("x", 3)
"""

from collections.abc import Generator
from typing import Self

from percolate.handles import PinHandle, Ready


class Countdown[B]:
    """Awaitable that needs exactly ``polls`` polls to produce ``value``.

    Polls ``1 .. polls-1`` yield a bare ``None`` (not ready); poll
    ``polls`` returns ``value``. Works under asyncio as well, where a bare
    yield just gives the event loop one turn.
    """

    def __init__(self, polls: int, value: B) -> None:
        if polls < 1:
            msg = f"polls must be at least 1, got {polls}"
            raise ValueError(msg)
        self.polls = polls
        self.value = value
        self.polled = 0
        self.closed = False

    def __await__(self) -> Generator[None, None, B]:
        try:
            while self.polled < self.polls - 1:
                self.polled += 1
                yield None
        except GeneratorExit:
            self.closed = True
            raise
        self.polled += 1
        return self.value


def drive[B](handle: PinHandle[B], *, max_polls: int = 10_000) -> tuple[B, int]:
    """Poll ``handle`` by hand until it is ready.

    Returns the result and the number of polls it took. Wake tokens are
    ignored, so only use this with computations that yield bare ``None``
    (like ``Countdown``) or never suspend.
    """
    for polls in range(1, max_polls + 1):
        state = handle.poll()
        if isinstance(state, Ready):
            return state.value, polls
    msg = f"handle not ready after {max_polls} polls"
    raise RuntimeError(msg)


class RecordingSource[T]:
    """Async iterator over a fixed list that records how it is used.

    - ``pulls`` counts every ``__anext__`` call, including ones after the end.
    - ``fail_at`` raises ``error`` once, in place of the item at that index;
      the next pull produces the item.
    - ``yield_between`` gives the event loop a turn before each item.
    - ``closed`` flips when ``aclose()`` is called.
    """

    def __init__(
        self,
        items: list[T],
        *,
        fail_at: int | None = None,
        error: BaseException | None = None,
        yield_between: bool = False,
    ) -> None:
        self.items = list(items)
        self.fail_at = fail_at
        self.error = error or RuntimeError("source failure")
        self.yield_between = yield_between
        self.position = 0
        self.pulls = 0
        self.closed = False

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> T:
        self.pulls += 1
        if self.yield_between:
            await Countdown(2, None)
        if self.closed or self.position >= len(self.items):
            raise StopAsyncIteration
        if self.fail_at is not None and self.position == self.fail_at:
            self.fail_at = None
            raise self.error
        item = self.items[self.position]
        self.position += 1
        return item

    async def aclose(self) -> None:
        self.closed = True

    def __repr__(self) -> str:
        return f"<RecordingSource {self.position}/{len(self.items)} pulls={self.pulls}>"

