"""Synchronous projections.

The wrapped function runs on the first poll and the handle reports
``Ready`` on that same poll; it never suspends. All blocking
handles are fused: once complete they answer ``Ready`` forever without
calling the function again.
"""

import functools
import inspect
import logging
from collections.abc import Callable, Generator
from typing import Any

from percolate._internal.invoke import close_awaitable
from percolate.errors import ContractError
from percolate.handles import MutRef, PinHandle
from percolate.projection.base import MutProjection, Projection, RefProjection

logger = logging.getLogger("percolate.projection")


class _Blocking[B]:
    """Awaitable that runs ``call`` when first polled and never suspends."""

    __slots__ = ("_call",)

    def __init__(self, call: Callable[[], B]) -> None:
        self._call = call

    def __await__(self) -> Generator[Any, None, B]:
        result = self._call()
        if inspect.isawaitable(result):
            close_awaitable(result)
            logger.warning("Blocking projection %r returned an awaitable", self._call)
            msg = (
                f"blocking projection returned {type(result).__name__}; "
                "wrap async functions with from_async()"
            )
            raise ContractError(msg)
        return result
        yield  # makes __await__ a generator


class BlockingProjection[A, B](Projection[A, B]):
    """``Projection`` over ``fn: A -> B``."""

    __slots__ = ("fn",)

    fused = True

    def __init__(self, fn: Callable[[A], B]) -> None:
        self.fn = fn

    def apply(self, value: A) -> PinHandle[B]:
        return PinHandle(_Blocking(functools.partial(self.fn, value)), fused=self.fused)

    def __repr__(self) -> str:
        return f"BlockingProjection({self.fn!r})"


class BlockingRefProjection[A, B](RefProjection[A, B]):
    """``RefProjection`` over ``fn: A -> B``; ``fn`` only looks at its argument."""

    __slots__ = ("fn",)

    fused = True

    def __init__(self, fn: Callable[[A], B]) -> None:
        self.fn = fn

    def apply_ref(self, value: A) -> PinHandle[B]:
        return PinHandle(_Blocking(functools.partial(self.fn, value)), fused=self.fused)

    def __repr__(self) -> str:
        return f"BlockingRefProjection({self.fn!r})"


class BlockingMutProjection[A, B](MutProjection[A, B]):
    """``MutProjection`` over ``fn: MutRef[A] -> B``.

    ``fn`` may write through the reference before deciding::

        def bump(ref):
            ref.value += 1
            return ref.value > 10
    """

    __slots__ = ("fn",)

    fused = True

    def __init__(self, fn: Callable[[MutRef[A]], B]) -> None:
        self.fn = fn

    def apply_mut(self, ref: MutRef[A]) -> PinHandle[B]:
        return PinHandle(_Blocking(functools.partial(self.fn, ref)), fused=self.fused)

    def __repr__(self) -> str:
        return f"BlockingMutProjection({self.fn!r})"
