"""Percolate: async combinators: sync/async projections and lookahead streams.

One interface for ``def`` and ``async def`` transformations and predicates,
and a peek buffer for async iterators.

Basic usage::

    from percolate import PeekStream, into_projection

    double = into_projection(lambda x: x * 2)
    assert await double.apply(21) == 42

    stream = PeekStream(source())
    head = await stream.peek(2)
    first = await stream.next_if(lambda item: item == head[0])
"""

__version__ = "0.1.0"
__all__ = [
    "CapacityExceeded",
    "ConfigurationError",
    "ContractError",
    "MutProjection",
    "MutRef",
    "PeekConfig",
    "PeekStream",
    "PercolateError",
    "Pending",
    "PinHandle",
    "Projection",
    "Ready",
    "ReentrancyError",
    "RefProjection",
    "into_mut_predicate",
    "into_mut_projection",
    "into_predicate",
    "into_projection",
    "into_ref_projection",
    "peekable",
]

# Public name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "CapacityExceeded": "percolate.errors",
    "ConfigurationError": "percolate.errors",
    "ContractError": "percolate.errors",
    "PercolateError": "percolate.errors",
    "ReentrancyError": "percolate.errors",
    "PeekConfig": "percolate.config",
    "MutRef": "percolate.handles",
    "Pending": "percolate.handles",
    "PinHandle": "percolate.handles",
    "Ready": "percolate.handles",
    "MutProjection": "percolate.projection",
    "Projection": "percolate.projection",
    "RefProjection": "percolate.projection",
    "into_mut_projection": "percolate.projection",
    "into_projection": "percolate.projection",
    "into_ref_projection": "percolate.projection",
    "into_mut_predicate": "percolate.predicate",
    "into_predicate": "percolate.predicate",
    "PeekStream": "percolate.stream.peek",
    "peekable": "percolate.stream.peek",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import percolate`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
