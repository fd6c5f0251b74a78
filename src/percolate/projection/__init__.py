"""Projections asynchronously transform an input ``A`` into an output ``B``.

Synchronous and asynchronous functions sit behind one capability,
``apply(value) -> PinHandle[B]``::

    from percolate.projection import into_projection

    double = into_projection(lambda x: x * 2)
    assert await double.apply(21) == 42

    async def fetch(key):
        ...

    handle = into_projection(fetch).apply("user:1")
    user = await handle
"""

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
from percolate.projection.convert import (
    from_async,
    from_async_mut,
    from_async_ref,
    from_blocking,
    from_mut_blocking_mut,
    from_ref_blocking_mut,
    into_mut_projection,
    into_projection,
    into_ref_projection,
    project,
)

__all__ = [
    "AsyncMutProjection",
    "AsyncProjection",
    "AsyncRefProjection",
    "BlockingMutProjection",
    "BlockingProjection",
    "BlockingRefProjection",
    "MutProjection",
    "Projection",
    "RefProjection",
    "from_async",
    "from_async_mut",
    "from_async_ref",
    "from_blocking",
    "from_mut_blocking_mut",
    "from_ref_blocking_mut",
    "into_mut_projection",
    "into_projection",
    "into_ref_projection",
    "project",
]
