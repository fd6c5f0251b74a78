"""Percolate exception hierarchy.

Shared across handles, projections, predicates and the peek stream so every
module raises and catches the same types.

Failures raised by wrapped functions or by a wrapped source are never
wrapped in these types; they pass through unchanged.
"""

from dataclasses import dataclass


class PercolateError(Exception):
    """Base for all percolate-specific errors."""


class ConfigurationError(PercolateError):
    """Raised when a ``PeekConfig`` is invalid.

    Typically raised from ``PeekConfig.__post_init__`` at construction.
    """


class ContractError(PercolateError):
    """A caller broke the usage contract of a handle, reference or stream.

    Examples: polling a completed non-fused handle, a blocking projection
    returning an awaitable, or touching a released ``MutRef``. These are
    programming errors, not recoverable conditions.
    """


class ReentrancyError(ContractError):
    """A second operation was started on a ``PeekStream`` while one was pending."""


@dataclass(frozen=True, slots=True)
class CapacityExceeded(PercolateError):  # noqa: N818
    """A lookahead request went past the configured ``capacity``."""

    requested: int
    capacity: int

    def __str__(self) -> str:
        return f"lookahead of {self.requested} exceeds capacity {self.capacity}"
