"""Counted, validated access to a problem's objective and derivatives."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from ..exceptions import DimensionMismatchError, DomainError
from .core import Array, Problem
from .utils import approx_grad, approx_hessian


class Evaluator:
    """
    Wrap a :class:`Problem` for a single run.

    Counts evaluations, checks output shapes and finiteness, and substitutes
    finite differences for missing derivatives when allowed.
    """

    def __init__(self, problem: Problem, dim: int, numerical_derivatives: bool = True):
        self.problem = problem
        self.dim = dim
        self.numerical_derivatives = numerical_derivatives
        self.nfev = 0
        self.njev = 0
        self.nhev = 0
        # first finite value returned by fun(), i.e. f(x0) for every strategy
        self.initial_x: Optional[Array] = None
        self.initial_fun = math.nan

    def value_at_start(self, x0: Array) -> float:
        """Return f(x0) if it was evaluated successfully, else ``nan``."""
        if self.initial_x is not None and np.array_equal(self.initial_x, x0):
            return self.initial_fun
        return math.nan

    def _raw_fun(self, x: Array) -> float:
        self.nfev += 1
        return float(self.problem.fun(x))

    def trial_fun(self, x: Array) -> float:
        """Evaluate the objective, returning non-finite values as ``inf``."""
        value = self._raw_fun(x)
        if not np.isfinite(value):
            return float("inf")
        return value

    def fun(self, x: Array) -> float:
        value = self._raw_fun(x)
        if not np.isfinite(value):
            raise DomainError(f"Objective returned non-finite value {value}.", x=x)
        if self.initial_x is None:
            self.initial_x = np.array(x, dtype=float, copy=True)
            self.initial_fun = value
        return value

    def grad(self, x: Array) -> Array:
        if self.problem.grad is not None:
            self.njev += 1
            g = np.asarray(self.problem.grad(x), dtype=float)
        elif self.numerical_derivatives:
            g, evals = approx_grad(self.problem.fun, x, return_evals=True)
            self.nfev += int(evals)
        else:
            raise ValueError(
                "Problem has no gradient and numerical_derivatives is disabled."
            )
        if g.shape != (self.dim,):
            raise DimensionMismatchError(
                f"Gradient has shape {g.shape}, expected ({self.dim},).",
                expected=(self.dim,),
                actual=g.shape,
            )
        if not np.all(np.isfinite(g)):
            raise DomainError("Gradient contains non-finite values.", x=x)
        return g

    def hess(self, x: Array) -> Array:
        if self.problem.hess is not None:
            self.nhev += 1
            h = np.asarray(self.problem.hess(x), dtype=float)
        elif self.numerical_derivatives:
            h, evals = approx_hessian(self.problem.fun, x, return_evals=True)
            self.nfev += int(evals)
        else:
            raise ValueError(
                "Problem has no Hessian and numerical_derivatives is disabled."
            )
        if h.shape != (self.dim, self.dim):
            raise DimensionMismatchError(
                f"Hessian has shape {h.shape}, expected ({self.dim}, {self.dim}).",
                expected=(self.dim, self.dim),
                actual=h.shape,
            )
        if not np.all(np.isfinite(h)):
            raise DomainError("Hessian contains non-finite values.", x=x)
        return h


__all__ = ["Evaluator"]
