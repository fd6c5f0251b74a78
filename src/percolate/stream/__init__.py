"""Stream adapters.

``PeekStream`` adds lookahead to any async iterator::

    from percolate.stream import peekable

    stream = peekable(source())
    first, second = await stream.peek(2)
"""

from percolate.stream.peek import PeekStream, peekable

__all__ = [
    "PeekStream",
    "peekable",
]
