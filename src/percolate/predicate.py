"""Predicates are reference projections towards ``bool``.

``Predicate[T]`` borrows the value it tests; ``MutPredicate[T]`` receives an
exclusive ``MutRef`` and may change the value while deciding. Both accept
``def`` and ``async def`` functions.

Prefer these names over the projection ones in signatures; they read
better::

    async def keep_if(source, predicate: PredicateLike[T]) -> T | None:
        item = await source
        return item if await check(predicate, item) else None

That exact pattern ships as ``filter_awaitable()``.
"""

from collections.abc import Awaitable
from typing import Any

from percolate._internal.types import AnyFn, SyncFn
from percolate.handles import MutRef
from percolate.projection import (
    BlockingRefProjection,
    MutProjection,
    RefProjection,
    into_mut_projection,
    into_ref_projection,
)

type Predicate[T] = RefProjection[T, bool]
type MutPredicate[T] = MutProjection[T, bool]

# Anything ``into_predicate`` / ``into_mut_predicate`` accepts
type PredicateLike[T] = Predicate[T] | AnyFn[T, bool]
type MutPredicateLike[T] = MutPredicate[T] | AnyFn[MutRef[T], bool]


def into_predicate(predicate: PredicateLike[Any]) -> Predicate[Any]:
    return into_ref_projection(predicate)


def into_mut_predicate(predicate: MutPredicateLike[Any]) -> MutPredicate[Any]:
    return into_mut_projection(predicate)


def from_blocking[T](predicate: SyncFn[T, bool]) -> BlockingRefProjection[T, bool]:
    """Fused synchronous predicate; alias of ``from_ref_blocking_mut``."""
    return BlockingRefProjection(predicate)


async def check[T](predicate: PredicateLike[T], value: T) -> bool:
    """Drive ``predicate`` on ``value`` to completion."""
    return bool(await into_predicate(predicate).apply_ref(value))


async def check_mut[T](predicate: MutPredicateLike[T], ref: MutRef[T]) -> bool:
    """Drive ``predicate`` on ``ref`` to completion; it may write through ``ref``."""
    return bool(await into_mut_predicate(predicate).apply_mut(ref))


def filter_awaitable[T](
    source: Awaitable[T],
    predicate: PredicateLike[T],
    default: Any = None,
) -> Awaitable[T | Any]:
    """Await ``source`` and keep its result only if it satisfies ``predicate``.

    The predicate is converted right away, on the call, so a bad predicate
    raises before anything is awaited.
    """
    converted = into_predicate(predicate)

    async def _filtered() -> T | Any:
        item = await source
        if await check(converted, item):
            return item
        return default

    return _filtered()
