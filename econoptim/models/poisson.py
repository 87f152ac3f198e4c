"""
Poisson regression log-likelihood as an optimization problem.

For counts ``y_i`` with covariates ``x_i`` and a log link, the kernel of the
log-likelihood is

    l(beta) = sum_i [ -exp(x_i^T beta) + y_i x_i^T beta ]

(the ``-log(y_i!)`` term does not depend on ``beta``). The model exposes the
negative kernel, its score and Hessian, and bundles them into a
:class:`~econoptim.optimize.Problem` closed over the data.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..exceptions import DimensionMismatchError
from ..optimize import OptimizeConfig, OptimizeResult, Problem, optimize


@dataclass(frozen=True)
class PoissonModel:
    """Design matrix ``X`` (n, p) and count response ``y`` (n,)."""

    X: np.ndarray
    y: np.ndarray

    def __post_init__(self) -> None:
        X = np.array(self.X, dtype=float, copy=True)
        y = np.array(self.y, dtype=float, copy=True)
        if X.ndim == 1:
            X = X[:, None]
        if X.ndim != 2:
            raise DimensionMismatchError(f"X must be 2-D, got shape {X.shape}.")
        if y.shape != (X.shape[0],):
            raise DimensionMismatchError(
                f"y has shape {y.shape}, expected ({X.shape[0]},).",
                expected=(X.shape[0],),
                actual=y.shape,
            )
        if np.any(y < 0) or not np.all(np.isfinite(y)):
            raise ValueError("y must contain finite, non-negative counts.")
        X.setflags(write=False)
        y.setflags(write=False)
        object.__setattr__(self, "X", X)
        object.__setattr__(self, "y", y)

    @property
    def n_params(self) -> int:
        return self.X.shape[1]

    def _eta(self, beta: np.ndarray) -> np.ndarray:
        return self.X @ np.asarray(beta, dtype=float)

    def negloglik(self, beta: np.ndarray) -> float:
        """Negative log-likelihood kernel; may be ``inf`` if ``exp`` overflows."""
        eta = self._eta(beta)
        with np.errstate(over="ignore"):
            return float(np.sum(np.exp(eta) - self.y * eta))

    def loglik(self, beta: np.ndarray) -> float:
        """Full log-likelihood including the ``-log(y_i!)`` constant."""
        constant = sum(math.lgamma(v + 1.0) for v in self.y)
        return -self.negloglik(beta) - constant

    def score(self, beta: np.ndarray) -> np.ndarray:
        """Gradient of :meth:`negloglik`: ``X^T (mu - y)``."""
        mu = np.exp(self._eta(beta))
        return self.X.T @ (mu - self.y)

    def hessian(self, beta: np.ndarray) -> np.ndarray:
        """Hessian of :meth:`negloglik`: ``X^T diag(mu) X``."""
        mu = np.exp(self._eta(beta))
        return (self.X * mu[:, None]).T @ self.X

    def problem(self, with_hessian: bool = True) -> Problem:
        return Problem(
            fun=self.negloglik,
            grad=self.score,
            hess=self.hessian if with_hessian else None,
            dim=self.n_params,
        )

    def fit(
        self, x0: Optional[np.ndarray] = None, config: Optional[OptimizeConfig] = None
    ) -> OptimizeResult:
        """Maximize the likelihood; ``x0`` defaults to zeros."""
        if x0 is None:
            x0 = np.zeros(self.n_params)
        return optimize(self.problem(), x0, config)

    def covariance(self, beta: np.ndarray) -> np.ndarray:
        """Inverse observed information at ``beta``."""
        return np.linalg.inv(self.hessian(beta))

    def standard_errors(self, beta: np.ndarray) -> np.ndarray:
        return np.sqrt(np.diag(self.covariance(beta)))


def simulate_poisson(
    n: int, beta: np.ndarray, rng: Optional[np.random.Generator] = None
) -> PoissonModel:
    """Draw ``n`` observations with an intercept and standard-normal covariates."""
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}.")
    rng = rng if rng is not None else np.random.default_rng()
    beta = np.asarray(beta, dtype=float)
    covariates = rng.standard_normal((n, beta.size - 1))
    X = np.column_stack([np.ones(n), covariates])
    y = rng.poisson(np.exp(X @ beta))
    return PoissonModel(X=X, y=y)


__all__ = ["PoissonModel", "simulate_poisson"]
