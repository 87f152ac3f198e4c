"""
Exception hierarchy for econoptim.

Every error raised by an optimization run derives from
:class:`OptimizationError` and carries the iterate and iteration count at
which it occurred, so a failed run can be diagnosed from the exception alone.
"""

from __future__ import annotations

from typing import Optional

import numpy as np


class OptimizationError(Exception):
    """Base exception for all econoptim errors.

    Attributes:
        x: Last iterate when the error was raised, if known.
        nit: Iteration count when the error was raised, if known.
    """

    def __init__(
        self,
        message: str,
        x: Optional[np.ndarray] = None,
        nit: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.x = None if x is None else np.array(x, dtype=float, copy=True)
        self.nit = nit

    @property
    def kind(self) -> str:
        """Short name used to tag failed results."""
        return type(self).__name__


class DomainError(OptimizationError):
    """Objective (or a derivative) was evaluated outside its valid domain."""


class SingularHessianError(OptimizationError):
    """
    Hessian is singular or numerically rank-deficient.

    Attributes:
        hessian: The offending matrix.
        condition: Ratio of largest to smallest singular value (``inf`` when
            the smallest is exactly zero).
    """

    def __init__(
        self,
        message: str,
        x: Optional[np.ndarray] = None,
        nit: Optional[int] = None,
        hessian: Optional[np.ndarray] = None,
        condition: Optional[float] = None,
    ) -> None:
        super().__init__(message, x=x, nit=nit)
        self.hessian = hessian
        self.condition = condition


class LineSearchError(OptimizationError):
    """No step length along the search direction gave sufficient decrease."""


class DimensionMismatchError(OptimizationError, ValueError):
    """
    Array dimensions disagree with the problem dimension.

    Raised before any iteration for a malformed initial point, gradient,
    Hessian or initial simplex.
    """

    def __init__(
        self,
        message: str,
        expected: Optional[tuple] = None,
        actual: Optional[tuple] = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


__all__ = [
    "OptimizationError",
    "DomainError",
    "SingularHessianError",
    "LineSearchError",
    "DimensionMismatchError",
]
