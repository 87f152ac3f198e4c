"""Core interfaces shared across the optimization algorithms.

Defines the problem container, the algorithm and status enumerations, the run
configuration and the immutable result record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Tuple

import numpy as np

from ..exceptions import OptimizationError

Array = np.ndarray
Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]
Hessian = Callable[[Array], Array]

RTOL = 1e-8
ATOL = 1e-8
GTOL = 1e-8
FATOL = 1e-8
SINGULAR_TOL = 1e-12


class Algorithm(Enum):
    """Available step strategies."""

    NEWTON = "newton"
    BFGS = "bfgs"
    NELDER_MEAD = "nelder-mead"

    @classmethod
    def coerce(cls, value: "Algorithm | str") -> "Algorithm":
        """Accept an enum member or its (case-insensitive) name/value."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "-")
        aliases = {"neldermead": "nelder-mead", "nm": "nelder-mead", "simplex": "nelder-mead"}
        key = aliases.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown algorithm {value!r}; expected one of: {valid}.")

    @property
    def uses_gradient(self) -> bool:
        return self is not Algorithm.NELDER_MEAD


class Status(Enum):
    """Termination reason of an optimization run."""

    CONVERGED = "converged"
    MAX_ITER = "max_iter"
    ALGORITHM_FAILURE = "algorithm_failure"


@dataclass(frozen=True)
class Problem:
    """Container describing an optimization problem."""

    fun: Objective
    grad: Optional[Gradient] = None
    hess: Optional[Hessian] = None
    dim: Optional[int] = None


@dataclass(frozen=True)
class SimplexCoefficients:
    """Nelder-Mead reflection, expansion, contraction and shrink coefficients."""

    reflection: float = 1.0
    expansion: float = 2.0
    contraction: float = 0.5
    shrink: float = 0.5

    def __post_init__(self) -> None:
        if self.reflection <= 0:
            raise ValueError(f"reflection must be positive, got {self.reflection}.")
        if self.expansion <= max(1.0, self.reflection):
            raise ValueError(
                f"expansion must exceed max(1, reflection), got {self.expansion}."
            )
        if not (0 < self.contraction < 1):
            raise ValueError(f"contraction must lie in (0, 1), got {self.contraction}.")
        if not (0 < self.shrink < 1):
            raise ValueError(f"shrink must lie in (0, 1), got {self.shrink}.")


_CAMEL_KEYS = {
    "absoluteTolerance": "atol",
    "relativeTolerance": "rtol",
    "gradientTolerance": "gtol",
    "maxIterations": "maxiter",
    "lineSearch": "line_search",
}

_LINE_SEARCHES = ("armijo", "wolfe")


@dataclass(frozen=True)
class OptimizeConfig:
    """
    Options recognised by :func:`econoptim.optimize.optimize`.

    Attributes:
        algorithm: Step strategy to run.
        atol: Absolute step tolerance ``||x_new - x|| < atol``; None disables.
        rtol: Relative step tolerance ``||x_new - x|| / ||x|| < rtol``; None
            disables. Falls back to an absolute test when ``||x||`` is ~0.
        gtol: Gradient-norm tolerance for Newton and BFGS; None disables.
        fatol: Largest spread of simplex objective values accepted as
            converged by Nelder-Mead.
        maxiter: Iteration cap. Reaching it is reported as ``MAX_ITER``.
        line_search: ``"armijo"`` or ``"wolfe"`` step-length policy for BFGS.
        numerical_derivatives: Use finite differences when the problem lacks
            an analytic gradient or Hessian.
        singular_tol: Relative singular-value threshold below which a Newton
            Hessian is treated as singular.
        simplex: Nelder-Mead coefficients.
        initial_simplex: Optional ``(d + 1, d)`` starting simplex.
        history: Record every iterate on the result.
    """

    algorithm: Algorithm = Algorithm.BFGS
    atol: Optional[float] = ATOL
    rtol: Optional[float] = RTOL
    gtol: Optional[float] = GTOL
    fatol: float = FATOL
    maxiter: int = 1000
    line_search: str = "armijo"
    numerical_derivatives: bool = True
    singular_tol: float = SINGULAR_TOL
    simplex: SimplexCoefficients = field(default_factory=SimplexCoefficients)
    initial_simplex: Optional[Array] = None
    history: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "algorithm", Algorithm.coerce(self.algorithm))
        if self.atol is None and self.rtol is None:
            raise ValueError("At least one of atol or rtol must be set.")
        for name in ("atol", "rtol", "gtol"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}.")
        if self.fatol < 0:
            raise ValueError(f"fatol must be non-negative, got {self.fatol}.")
        if int(self.maxiter) != self.maxiter or self.maxiter < 0:
            raise ValueError(f"maxiter must be a non-negative integer, got {self.maxiter}.")
        if self.line_search not in _LINE_SEARCHES:
            raise ValueError(
                f"line_search must be one of {_LINE_SEARCHES}, got {self.line_search!r}."
            )
        if not (0 < self.singular_tol < 1):
            raise ValueError(f"singular_tol must lie in (0, 1), got {self.singular_tol}.")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "OptimizeConfig":
        """Build a config from keyword options, accepting camel-case aliases."""
        kwargs = {_CAMEL_KEYS.get(key, key): value for key, value in options.items()}
        if isinstance(kwargs.get("simplex"), Mapping):
            kwargs["simplex"] = SimplexCoefficients(**kwargs["simplex"])
        return cls(**kwargs)


@dataclass(frozen=True, eq=False)
class IterationState:
    """Snapshot of one iteration handed between the controller and a strategy."""

    x: Array
    fun: float
    nit: int
    step_norm: float = float("inf")
    grad_norm: Optional[float] = None


@dataclass(frozen=True, eq=False)
class OptimizeResult:
    """
    Immutable record returned by every run.

    Attributes:
        x: Final (or last valid) iterate. Read-only.
        fun: Objective value at ``x``.
        status: Termination reason.
        message: Human-readable explanation of ``status``.
        nit: Iterations performed.
        nfev: Objective evaluations, including finite-difference ones.
        njev: Analytic gradient evaluations.
        nhev: Analytic Hessian evaluations.
        grad_norm: Gradient norm at ``x`` for gradient-based algorithms.
        algorithm: Strategy that produced the result.
        error: The terminating exception for ``ALGORITHM_FAILURE`` results.
        history: Iterates, when requested.
    """

    x: Array
    fun: float
    status: Status
    message: str
    nit: int
    nfev: int
    njev: int
    nhev: int
    algorithm: Algorithm
    grad_norm: Optional[float] = None
    error: Optional[OptimizationError] = None
    history: Tuple[Array, ...] = ()

    def __post_init__(self) -> None:
        x = np.array(self.x, dtype=float, copy=True)
        x.setflags(write=False)
        object.__setattr__(self, "x", x)

    @property
    def success(self) -> bool:
        return self.status is Status.CONVERGED

    @property
    def failure(self) -> Optional[str]:
        """Kind of algorithm failure, e.g. ``"SingularHessianError"``."""
        if self.error is None:
            return None
        return self.error.kind

    def raise_for_status(self) -> "OptimizeResult":
        """Re-raise the stored error of a failed run; return self otherwise."""
        if self.error is not None:
            raise self.error
        return self


__all__ = [
    "Array",
    "Objective",
    "Gradient",
    "Hessian",
    "Algorithm",
    "Status",
    "Problem",
    "SimplexCoefficients",
    "OptimizeConfig",
    "IterationState",
    "OptimizeResult",
    "ATOL",
    "RTOL",
    "GTOL",
    "FATOL",
    "SINGULAR_TOL",
]
