"""Poll results, pinned handles and exclusive references.

A *pollable computation* in Python is any awaitable. Polling it once means
advancing its ``__await__()`` iterator by one step:

- ``StopIteration``: the computation is **ready**; the exception carries
  the result.
- a yielded object: the computation is **not ready yet**. The object is the
  wake token (an ``asyncio.Future`` or ``None`` for a bare yield) the driver
  waits on before polling again.

``PinHandle`` owns such an iterator. It is created on the first poll and
never re-created or moved to another awaitable afterwards, so suspended
state inside the computation stays valid for the handle's lifetime.
Handles can be polled by hand (``poll()``) or awaited from any asyncio or
anyio task; both paths share the same state.

``MutRef`` is the exclusive, write-through reference handed to mutable
projections and returned by ``PeekStream.peek_mut()``.
"""

import logging
from collections.abc import Awaitable, Callable, Generator, Iterator
from dataclasses import dataclass
from typing import Any

from percolate._internal.invoke import close_awaitable
from percolate.errors import ContractError

logger = logging.getLogger("percolate.handles")


# ── Poll results ─────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Ready[B]:
    """The computation finished with ``value``."""

    value: B


@dataclass(frozen=True, slots=True)
class Pending:
    """The computation suspended; poll again once ``awaiting`` resolves."""

    awaiting: Any = None


type Poll[B] = Ready[B] | Pending


# ── Handles ──────────────────────────────────────────────────────────────


class PinHandle[B]:
    """Owning handle around one in-flight computation.

    One use, one output. After the result is produced the inner iterator
    is released. A *fused* handle keeps the result and reports
    ``Ready(result)`` on every later poll without running anything again;
    a non-fused handle raises ``ContractError`` when reused.

    ``on_drop`` runs exactly once, when the handle completes, fails or is
    closed.
    """

    __slots__ = ("_awaitable", "_closed", "_done", "_fused", "_iterator", "_on_drop", "_result")

    def __init__(
        self,
        awaitable: Awaitable[B],
        *,
        fused: bool = False,
        on_drop: Callable[[], None] | None = None,
    ) -> None:
        self._awaitable: Awaitable[B] | None = awaitable
        self._iterator: Iterator[Any] | None = None
        self._fused = fused
        self._on_drop = on_drop
        self._done = False
        self._closed = False
        self._result: B | None = None

    @property
    def fused(self) -> bool:
        return self._fused

    @property
    def done(self) -> bool:
        """True once the result has been produced."""
        return self._done

    @property
    def is_terminated(self) -> bool:
        """True once polling can no longer make progress (done, failed or closed)."""
        return self._done or self._closed

    @property
    def started(self) -> bool:
        """True once the first poll has reached the inner computation."""
        return self._awaitable is None

    def poll(self) -> Poll[B]:
        """Advance the computation by one step."""
        return self._step(None)

    def close(self) -> None:
        """Cancel the computation if it is still in flight and release it.

        Idempotent. A fused handle that already completed keeps answering
        ``Ready`` after ``close()``.
        """
        iterator, self._iterator = self._iterator, None
        awaitable, self._awaitable = self._awaitable, None
        if not self._done and not self._closed:
            if iterator is not None:
                close_awaitable(iterator)
                logger.debug("Closed in-flight handle %r", self)
            elif awaitable is not None:
                close_awaitable(awaitable)
            self._closed = True
        self._drop()

    def __await__(self) -> Generator[Any, None, B]:
        state = self._step(None)
        while isinstance(state, Pending):
            try:
                yield state.awaiting
            except GeneratorExit:
                self.close()
                raise
            except BaseException as exc:
                # Cancellation and other exceptions thrown in by the driver
                # belong to the inner computation.
                state = self._step(exc)
            else:
                state = self._step(None)
        return state.value

    def __repr__(self) -> str:
        if self._done:
            status = "done"
        elif self._closed:
            status = "closed"
        elif self.started:
            status = "running"
        else:
            status = "idle"
        fused = " fused" if self._fused else ""
        return f"<PinHandle {status}{fused}>"

    # -- Internals --

    def _step(self, exc: BaseException | None) -> Poll[B]:
        if self._done:
            if self._fused:
                return Ready(self._result)  # type: ignore[arg-type]
            msg = "handle polled again after it produced its result"
            raise ContractError(msg)
        if self._closed:
            msg = "handle polled after it was closed or failed"
            raise ContractError(msg)

        if self._iterator is None:
            if exc is not None:
                # Nothing started yet, so the exception is the driver's own.
                self.close()
                raise exc
            awaitable, self._awaitable = self._awaitable, None
            self._iterator = awaitable.__await__()  # type: ignore[union-attr]

        try:
            if exc is None:
                token = self._iterator.send(None)  # type: ignore[attr-defined]
            else:
                token = self._iterator.throw(exc)  # type: ignore[attr-defined]
        except StopIteration as stop:
            self._finish(stop.value)
            return Ready(stop.value)
        except BaseException:
            self._iterator = None
            self._closed = True
            self._drop()
            raise
        return Pending(token)

    def _finish(self, value: B) -> None:
        self._done = True
        self._iterator = None
        if self._fused:
            self._result = value
        self._drop()

    def _drop(self) -> None:
        on_drop, self._on_drop = self._on_drop, None
        if on_drop is not None:
            on_drop()


# ── References ───────────────────────────────────────────────────────────


class MutRef[T]:
    """Exclusive, write-through reference to one stored value.

    The owner of the storage (for example a ``PeekStream`` queue) holds the
    ``MutRef`` itself, so a write through ``value`` is what every later
    reader sees. When the owner gives the value away it calls
    ``release()``; any access after that raises ``ContractError``.

    ::

        ref = MutRef(1)
        ref.value += 1
        ref.update(lambda v: v * 10)
        assert ref.release() == 20
    """

    __slots__ = ("_released", "_value")

    def __init__(self, value: T) -> None:
        self._value = value
        self._released = False

    @property
    def value(self) -> T:
        self._check()
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        self._check()
        self._value = value

    @property
    def released(self) -> bool:
        return self._released

    def get(self) -> T:
        return self.value

    def set(self, value: T) -> None:
        self.value = value

    def update(self, fn: Callable[[T], T]) -> T:
        """Replace the value with ``fn(value)`` and return the new value."""
        self.value = fn(self.value)
        return self._value

    def release(self) -> T:
        """Give up the reference and hand back the final value."""
        self._check()
        self._released = True
        value, self._value = self._value, None  # type: ignore[assignment]
        return value

    def _check(self) -> None:
        if self._released:
            msg = "MutRef used after its value was consumed"
            raise ContractError(msg)

    def __repr__(self) -> str:
        if self._released:
            return "MutRef(<released>)"
        return f"MutRef({self._value!r})"
