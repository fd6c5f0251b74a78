"""Lookahead buffer in front of an async iterator.

``PeekStream`` is the only consumer of the source it wraps. Items pulled for
a peek wait in a FIFO queue until they are consumed; consuming always takes
from the queue first and only then pulls from the source.

Usage::

    from percolate.stream import PeekStream

    stream = PeekStream(tokens())
    head = await stream.peek(2)             # look, don't take
    if await stream.next_if(str.isidentifier):
        ...
    async for token in stream:              # plain advance
        ...

Ordering:
    - Pulls happen one at a time, in request order. A pull is never issued
      while another one is pending.
    - The queue never reorders and holds no more than was asked for.
    - Once the source raises ``StopAsyncIteration`` it is never polled again.

Re-entrancy:
    Overlapping operations on one stream (for example a ``peek`` started
    from inside a ``next_if`` predicate, or two tasks sharing a stream) are a
    caller error. With ``PeekConfig.guard_reentrancy`` on, the second
    operation raises ``ReentrancyError`` before touching anything.
"""

import logging
from collections import deque
from collections.abc import AsyncIterable, AsyncIterator, Iterator
from contextlib import contextmanager
from itertools import islice
from typing import Any, Self

import anyio

from percolate.config import PeekConfig
from percolate.errors import CapacityExceeded, ReentrancyError
from percolate.handles import MutRef
from percolate.predicate import (
    MutPredicateLike,
    PredicateLike,
    check,
    check_mut,
    into_mut_predicate,
    into_predicate,
)

logger = logging.getLogger("percolate.stream")


class PeekStream[T]:
    """Async iterator with lookahead, conditional and mutable peeking.

    The queue stores ``MutRef`` boxes, not copies: a write through a
    reference from ``peek_mut()`` is what later peeks and the eventual
    consumer see. A reference is released when its item is consumed.
    """

    __slots__ = ("_busy", "_closed", "_exhausted", "_queue", "_source", "config")

    def __init__(self, source: AsyncIterable[T], config: PeekConfig | None = None) -> None:
        if not isinstance(source, AsyncIterable):
            msg = f"PeekStream needs an async iterable, got {type(source).__name__}"
            raise TypeError(msg)
        self._source: AsyncIterator[T] = aiter(source)
        self._queue: deque[MutRef[T]] = deque()
        self._exhausted = False
        self._closed = False
        self._busy = False
        self.config = config or PeekConfig()

    # ── State ────────────────────────────────────────────────────────────

    @property
    def buffered(self) -> int:
        """Number of pulled items waiting to be consumed."""
        return len(self._queue)

    @property
    def exhausted(self) -> bool:
        """True once the source has reported its end."""
        return self._exhausted

    @property
    def is_terminated(self) -> bool:
        """True when nothing is left: queue empty and source exhausted."""
        return self._exhausted and not self._queue

    @property
    def closed(self) -> bool:
        return self._closed

    # ── Plain advance ────────────────────────────────────────────────────

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> T:
        with self._guard("__anext__"):
            if not self._queue and not await self._pull():
                raise StopAsyncIteration
            return self._pop()

    # ── Peeking ──────────────────────────────────────────────────────────

    async def peek(self, n: int = 1) -> list[T]:
        """Return up to ``n`` front items without consuming them.

        Fewer than ``n`` come back only when the source is exhausted.
        """
        return [ref.value for ref in await self.peek_mut(n)]

    async def peek_1(self, default: Any = None) -> T | Any:
        """Front item, or ``default`` if the stream is empty."""
        ref = await self.peek_1_mut()
        return default if ref is None else ref.value

    async def peek_n(self, depth: int, default: Any = None) -> T | Any:
        """The ``depth``-th item ahead (1-based), or ``default`` if the stream ends first."""
        ref = await self.peek_n_mut(depth)
        return default if ref is None else ref.value

    async def peek_mut(self, n: int = 1) -> list[MutRef[T]]:
        """Like ``peek()``, but return write-through references into the queue."""
        self._check_depth(n, minimum=0)
        with self._guard("peek"):
            await self._fill(n)
            return list(islice(self._queue, n))

    async def peek_1_mut(self) -> MutRef[T] | None:
        return await self.peek_n_mut(1)

    async def peek_n_mut(self, depth: int) -> MutRef[T] | None:
        self._check_depth(depth, minimum=1)
        with self._guard("peek"):
            if not await self._fill(depth):
                return None
            return self._queue[depth - 1]

    # ── Conditional advance ──────────────────────────────────────────────

    async def next_if(self, predicate: PredicateLike[T], default: Any = None) -> T | Any:
        """Consume and return the front item only if it satisfies ``predicate``.

        The predicate is converted before anything is pulled. It is never
        called on an exhausted stream. When it rejects the item, the queue
        is left exactly as it was and ``default`` is returned.
        """
        converted = into_predicate(predicate)
        with self._guard("next_if"):
            if not await self._fill(1):
                return default
            if await check(converted, self._queue[0].value) and self._queue:
                return self._pop()
            return default

    async def next_if_mut(self, predicate: MutPredicateLike[T], default: Any = None) -> T | Any:
        """Like ``next_if()``, but the predicate gets a ``MutRef`` to the front item.

        Changes the predicate makes stay in the queue when it rejects the
        item, and are part of the returned value when it accepts.
        """
        converted = into_mut_predicate(predicate)
        with self._guard("next_if_mut"):
            if not await self._fill(1):
                return default
            # An unguarded close() inside the predicate may have emptied the queue.
            if await check_mut(converted, self._queue[0]) and self._queue:
                return self._pop()
            return default

    async def next_if_eq(self, expected: object, default: Any = None) -> T | Any:
        """Consume the front item only if it equals ``expected``."""
        return await self.next_if(lambda item: item == expected, default)

    # ── Closing ──────────────────────────────────────────────────────────

    async def aclose(self) -> None:
        """Drop buffered items and close the source.

        The source's ``aclose()`` (when it has one and
        ``PeekConfig.close_source`` is set) runs shielded from cancellation.
        Idempotent; afterwards the stream behaves as exhausted. Closing from
        inside a pending operation (a ``next_if`` predicate, say) raises
        ``ReentrancyError`` while the guard is on.
        """
        if self._busy and self.config.guard_reentrancy:
            logger.warning("aclose() during a pending operation on %r", self)
            msg = "PeekStream.aclose() started while another operation is pending"
            raise ReentrancyError(msg)
        while self._queue:
            self._queue.popleft().release()
        self._exhausted = True
        if self._closed:
            return
        self._closed = True
        close = getattr(self._source, "aclose", None)
        if self.config.close_source and close is not None:
            with anyio.CancelScope(shield=True):
                await close()
        logger.debug("Closed %r", self)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        state = "exhausted" if self._exhausted else "open"
        return f"<PeekStream {state} buffered={len(self._queue)}>"

    # -- Internals --

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        if self._busy and self.config.guard_reentrancy:
            logger.warning("Overlapping %s() on %r", operation, self)
            msg = f"PeekStream.{operation}() started while another operation is pending"
            raise ReentrancyError(msg)
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _check_depth(self, n: int, *, minimum: int) -> None:
        if n < minimum:
            msg = f"lookahead must be at least {minimum}, got {n}"
            raise ValueError(msg)
        capacity = self.config.capacity
        if capacity is not None and n > capacity:
            raise CapacityExceeded(requested=n, capacity=capacity)

    async def _fill(self, n: int) -> bool:
        """Pull until ``n`` items are queued. False if the source ends first."""
        while len(self._queue) < n:
            if not await self._pull():
                return False
        return True

    async def _pull(self) -> bool:
        """Queue one more source item. False once the source is exhausted."""
        if self._exhausted:
            return False
        try:
            item = await anext(self._source)
        except StopAsyncIteration:
            self._exhausted = True
            logger.debug("Source of %r exhausted", self)
            return False
        self._queue.append(MutRef(item))
        return True

    def _pop(self) -> T:
        return self._queue.popleft().release()


def peekable[T](source: AsyncIterable[T], **config: Any) -> PeekStream[T]:
    """Wrap ``source`` in a ``PeekStream``; keyword arguments build its ``PeekConfig``.

    ::

        stream = peekable(tokens(), capacity=2)
    """
    return PeekStream(source, PeekConfig(**config))
