"""Peek stream configuration.

PeekConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

from percolate.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class PeekConfig:
    """Peek stream configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = PeekConfig(capacity=4, guard_reentrancy=False)
    """

    # Lookahead limit (None = unbounded)
    capacity: int | None = None

    # Fail fast with ReentrancyError when operations overlap
    guard_reentrancy: bool = True

    # aclose() also closes the wrapped source
    close_source: bool = True

    def __post_init__(self) -> None:
        if self.capacity is not None:
            if isinstance(self.capacity, bool) or not isinstance(self.capacity, int):
                msg = f"capacity must be an int or None, got {type(self.capacity).__name__}"
                raise ConfigurationError(msg)
            if self.capacity < 1:
                msg = f"capacity must be at least 1, got {self.capacity}"
                raise ConfigurationError(msg)
