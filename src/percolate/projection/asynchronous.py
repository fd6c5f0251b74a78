"""Asynchronous projections.

``apply`` calls the wrapped function straight away and takes ownership of
the awaitable it returns. Every poll of the handle is forwarded to that
awaitable until it reports ready; the handle then reports ready with the
same value and lets go of it. Closing the handle early closes the inner
computation.
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from percolate.errors import ContractError
from percolate.handles import MutRef, PinHandle
from percolate.projection.base import MutProjection, Projection, RefProjection


def _own(projection: Any, result: Any) -> PinHandle[Any]:
    if not inspect.isawaitable(result):
        kind = type(result).__name__
        msg = f"async projection {projection.fn!r} returned {kind}, expected an awaitable"
        raise ContractError(msg)
    return PinHandle(result, fused=projection.fused)


class AsyncProjection[A, B](Projection[A, B]):
    """``Projection`` over ``fn: A -> Awaitable[B]``."""

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[A], Awaitable[B]]) -> None:
        self.fn = fn

    def apply(self, value: A) -> PinHandle[B]:
        return _own(self, self.fn(value))

    def __repr__(self) -> str:
        return f"AsyncProjection({self.fn!r})"


class AsyncRefProjection[A, B](RefProjection[A, B]):
    """``RefProjection`` over ``fn: A -> Awaitable[B]``."""

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[A], Awaitable[B]]) -> None:
        self.fn = fn

    def apply_ref(self, value: A) -> PinHandle[B]:
        return _own(self, self.fn(value))

    def __repr__(self) -> str:
        return f"AsyncRefProjection({self.fn!r})"


class AsyncMutProjection[A, B](MutProjection[A, B]):
    """``MutProjection`` over ``fn: MutRef[A] -> Awaitable[B]``."""

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[MutRef[A]], Awaitable[B]]) -> None:
        self.fn = fn

    def apply_mut(self, ref: MutRef[A]) -> PinHandle[B]:
        return _own(self, self.fn(ref))

    def __repr__(self) -> str:
        return f"AsyncMutProjection({self.fn!r})"
