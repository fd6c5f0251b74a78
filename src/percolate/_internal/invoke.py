"""Invoke helpers: tell sync and async callables apart.

Projections and predicates can be built from ``def`` or ``async def``
functions. Any code that converts a user-provided callable must pick the
right variant. This module keeps the sync/async check in exactly one place.

Usage::

    from percolate._internal.invoke import is_async_callable

    if is_async_callable(fn):
        ...
"""

import functools
import inspect
from typing import Any


def is_async_callable(fn: Any) -> bool:
    """Return True if calling *fn* produces an awaitable.

    Sees through ``functools.partial`` and callable objects whose
    ``__call__`` is ``async def``::

        async def fetch(key): ...
        is_async_callable(fetch)                        # True
        is_async_callable(functools.partial(fetch))     # True
        is_async_callable(len)                          # False
    """
    while isinstance(fn, functools.partial):
        fn = fn.func
    if inspect.iscoroutinefunction(fn):
        return True
    call = getattr(fn, "__call__", None)  # noqa: B004
    return call is not None and not inspect.isroutine(fn) and inspect.iscoroutinefunction(call)


def close_awaitable(obj: Any) -> None:
    """Close an awaitable nobody is going to await.

    Un-awaited coroutines otherwise trigger a ``RuntimeWarning`` when
    they are garbage collected. Futures and other awaitables without a
    ``close()`` method are left alone.
    """
    close = getattr(obj, "close", None)
    if close is not None:
        close()
