"""Shared type aliases used across percolate modules."""

from collections.abc import Awaitable, Callable

# Synchronous transformation
type SyncFn[A, B] = Callable[[A], B]

# Asynchronous transformation, returns something to await
type AsyncFn[A, B] = Callable[[A], Awaitable[B]]

# Either of the above; resolved by percolate.projection.convert
type AnyFn[A, B] = SyncFn[A, B] | AsyncFn[A, B]
