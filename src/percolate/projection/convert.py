"""Turn plain callables into projections.

Accept ``def`` and ``async def`` functions at the same call site::

    async def project(value, projection):
        return await into_projection(projection).apply(value)

Existing projections pass through unchanged. Async callables (coroutine
functions, objects with an ``async def __call__``, and ``functools.partial``
of either) become the async variant; everything else the blocking one.

A plain ``def`` that *returns* an awaitable (``lambda x: fetch(x)``) cannot
be told apart before it runs. Wrap those explicitly with ``from_async()``.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from percolate._internal.invoke import is_async_callable
from percolate._internal.types import AnyFn, AsyncFn, SyncFn
from percolate.handles import MutRef
from percolate.projection.asynchronous import (
    AsyncMutProjection,
    AsyncProjection,
    AsyncRefProjection,
)
from percolate.projection.base import MutProjection, Projection, RefProjection
from percolate.projection.blocking import (
    BlockingMutProjection,
    BlockingProjection,
    BlockingRefProjection,
)

# -- Explicit constructors --


def from_blocking[A, B](fn: SyncFn[A, B]) -> BlockingProjection[A, B]:
    return BlockingProjection(fn)


def from_async[A, B](fn: AsyncFn[A, B]) -> AsyncProjection[A, B]:
    return AsyncProjection(fn)


def from_ref_blocking_mut[A, B](fn: SyncFn[A, B]) -> BlockingRefProjection[A, B]:
    return BlockingRefProjection(fn)


def from_mut_blocking_mut[A, B](fn: Callable[[MutRef[A]], B]) -> BlockingMutProjection[A, B]:
    return BlockingMutProjection(fn)


def from_async_ref[A, B](fn: AsyncFn[A, B]) -> AsyncRefProjection[A, B]:
    return AsyncRefProjection(fn)


def from_async_mut[A, B](fn: Callable[[MutRef[A]], Awaitable[B]]) -> AsyncMutProjection[A, B]:
    return AsyncMutProjection(fn)


# -- Auto-detection --


def _callable(kind: str, fn: Any) -> None:
    if not callable(fn):
        msg = f"cannot build a {kind} from {type(fn).__name__}"
        raise TypeError(msg)


def into_projection(fn: Projection[Any, Any] | AnyFn[Any, Any]) -> Projection[Any, Any]:
    """Projection consuming its argument.

    ``async def`` functions (and partials or objects with an async
    ``__call__``) become ``AsyncProjection``; anything else callable becomes
    ``BlockingProjection``. A plain ``def`` that returns an awaitable looks
    synchronous here, and its handle raises ``ContractError`` on the first
    poll; wrap such callables with ``from_async()`` instead.
    """
    if isinstance(fn, Projection):
        return fn
    _callable("projection", fn)
    if is_async_callable(fn):
        return AsyncProjection(fn)
    return BlockingProjection(fn)


def into_ref_projection(fn: RefProjection[Any, Any] | AnyFn[Any, Any]) -> RefProjection[Any, Any]:
    """Projection borrowing its argument."""
    if isinstance(fn, RefProjection):
        return fn
    _callable("ref projection", fn)
    if is_async_callable(fn):
        return AsyncRefProjection(fn)
    return BlockingRefProjection(fn)


def into_mut_projection(fn: MutProjection[Any, Any] | AnyFn[MutRef[Any], Any]) -> MutProjection[Any, Any]:
    """Projection receiving a ``MutRef``.

    Reference projections are accepted as they are; a plain callable is
    called with the ``MutRef`` itself.
    """
    if isinstance(fn, MutProjection):
        return fn
    _callable("mut projection", fn)
    if is_async_callable(fn):
        return AsyncMutProjection(fn)
    return BlockingMutProjection(fn)


async def project[A, B](value: A, projection: Projection[A, B] | AnyFn[A, B]) -> B:
    """Apply any projection-like to ``value`` and await the result."""
    return await into_projection(projection).apply(value)
