"""Quasi-Newton (BFGS) minimization with an inverse-Hessian approximation."""

from __future__ import annotations

import numpy as np

from ..exceptions import LineSearchError
from ..logging import get_logger
from .core import Algorithm, Array, IterationState
from .line_search import backtracking_armijo, wolfe_line_search
from .strategy import GradientStrategy
from .utils import symmetrize

logger = get_logger(__name__)


class BFGSStrategy(GradientStrategy):
    """
    Full-memory BFGS.

    The inverse-Hessian approximation starts at the identity and receives the
    rank-2 BFGS correction after every accepted step. When the curvature
    condition ``s^T y > 0`` fails the correction is skipped, keeping the
    approximation positive definite; ``curvature_skips`` counts these.
    """

    algorithm = Algorithm.BFGS

    def __init__(self, evaluator, config):
        super().__init__(evaluator, config)
        self.inv_hessian: Array = np.empty((0, 0))
        self.curvature_skips = 0

    def initialize(self, x0: Array) -> IterationState:
        fx = self.evaluator.fun(x0)
        self._grad = self.evaluator.grad(x0)
        self.inv_hessian = np.eye(x0.size)
        return IterationState(
            x=x0, fun=fx, nit=0, grad_norm=float(np.linalg.norm(self._grad))
        )

    def _step_length(self, x: Array, direction: Array, grad: Array, fx: float) -> float:
        ev = self.evaluator
        if self.config.line_search == "wolfe":
            alpha, _ = wolfe_line_search(ev.trial_fun, ev.grad, x, direction)
        else:
            alpha, _ = backtracking_armijo(ev.trial_fun, x, direction, grad, fx=fx)
        return alpha

    def _search(self, state: IterationState, grad: Array) -> Array:
        """Return the accepted displacement, retrying once along -grad."""
        n = state.x.size
        direction = -self.inv_hessian @ grad
        if float(np.dot(direction, grad)) >= 0:
            logger.debug("iteration %d: not a descent direction, resetting B", state.nit)
            self.inv_hessian = np.eye(n)
            direction = -grad
        try:
            alpha = self._step_length(state.x, direction, grad, state.fun)
        except LineSearchError as exc:
            if np.array_equal(direction, -grad):
                raise LineSearchError(str(exc), x=state.x, nit=state.nit) from exc
            logger.debug("iteration %d: line search failed, retrying steepest descent", state.nit)
            self.inv_hessian = np.eye(n)
            direction = -grad
            try:
                alpha = self._step_length(state.x, direction, grad, state.fun)
            except LineSearchError as retry_exc:
                raise LineSearchError(str(retry_exc), x=state.x, nit=state.nit) from retry_exc
        return alpha * direction

    def _update(self, s: Array, y: Array, nit: int) -> None:
        ys = float(np.dot(y, s))
        if ys <= 0:
            self.curvature_skips += 1
            logger.debug("iteration %d: curvature condition violated (s.y=%.3e), skipping update", nit, ys)
            return
        rho = 1.0 / ys
        identity = np.eye(s.size)
        outer_sy = np.outer(s, y)
        self.inv_hessian = symmetrize(
            (identity - rho * outer_sy) @ self.inv_hessian @ (identity - rho * outer_sy.T)
            + rho * np.outer(s, s)
        )

    def step(self, state: IterationState) -> IterationState:
        grad = self._grad
        if not np.any(grad):
            return IterationState(
                x=state.x, fun=state.fun, nit=state.nit + 1, step_norm=0.0, grad_norm=0.0
            )
        s = self._search(state, grad)
        x_new = state.x + s
        f_new = self.evaluator.fun(x_new)
        grad_new = self.evaluator.grad(x_new)
        self._update(s, grad_new - grad, state.nit + 1)
        self._grad = grad_new
        step_norm = float(np.linalg.norm(s))
        logger.debug("bfgs step %d: |dx|=%.3e f=%.10g", state.nit + 1, step_norm, f_new)
        return IterationState(
            x=x_new,
            fun=f_new,
            nit=state.nit + 1,
            step_norm=step_norm,
            grad_norm=float(np.linalg.norm(grad_new)),
        )


__all__ = ["BFGSStrategy"]
