"""Projection protocols.

A projection transforms an input ``A`` into an output ``B`` and hands the
work back as a ``PinHandle[B]``, a pollable computation that yields
exactly one result. Callers never need to know whether the transformation
behind it is synchronous or asynchronous.

Three ways to pass the argument:

- ``Projection.apply(value)``: the value is given away.
- ``RefProjection.apply_ref(value)``: the value is only looked at.
- ``MutProjection.apply_mut(ref)``: an exclusive ``MutRef`` the
  projection may write through; it stays valid until the handle completes.

Every ``RefProjection`` can stand in for a ``MutProjection``: it simply
receives ``ref.value``.
"""

from abc import ABC, abstractmethod
from typing import ClassVar

from percolate.handles import MutRef, PinHandle


class Projection[A, B](ABC):
    """Consumes ``A``, produces ``B``."""

    __slots__ = ()

    #: Handles from this projection keep answering Ready once complete.
    fused: ClassVar[bool] = False

    @abstractmethod
    def apply(self, value: A) -> PinHandle[B]: ...


class MutProjection[A, B](ABC):
    """Produces ``B`` from an exclusive reference to ``A``."""

    __slots__ = ()

    #: See ``Projection.fused``.
    fused: ClassVar[bool] = False

    @abstractmethod
    def apply_mut(self, ref: MutRef[A]) -> PinHandle[B]: ...


class RefProjection[A, B](MutProjection[A, B]):
    """Produces ``B`` from a borrowed ``A``."""

    __slots__ = ()

    @abstractmethod
    def apply_ref(self, value: A) -> PinHandle[B]: ...

    def apply_mut(self, ref: MutRef[A]) -> PinHandle[B]:
        return self.apply_ref(ref.value)
