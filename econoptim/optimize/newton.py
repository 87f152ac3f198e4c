"""Newton's method for unconstrained minimization."""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..exceptions import SingularHessianError
from ..logging import get_logger
from .core import Algorithm, Array, IterationState
from .strategy import GradientStrategy
from .utils import condition_number, is_singular

logger = get_logger(__name__)


class NewtonStrategy(GradientStrategy):
    """
    Full Newton step ``x_new = x - H(x)^{-1} grad(x)``.

    No damping or regularization is applied: a singular Hessian ends the run
    with :class:`~econoptim.exceptions.SingularHessianError`. Convergence is
    quadratic near a non-degenerate stationary point, which may be a saddle
    or a maximum as well as a minimum.
    """

    algorithm = Algorithm.NEWTON

    def __init__(self, evaluator, config):
        super().__init__(evaluator, config)
        self._hess: Optional[Array] = None

    def initialize(self, x0: Array) -> IterationState:
        fx = self.evaluator.fun(x0)
        self._grad = self.evaluator.grad(x0)
        # evaluated eagerly so that a malformed Hessian fails before iterating
        self._hess = self.evaluator.hess(x0)
        return IterationState(
            x=x0, fun=fx, nit=0, grad_norm=float(np.linalg.norm(self._grad))
        )

    def _newton_direction(self, state: IterationState, grad: Array, hess: Array) -> Array:
        tol = self.config.singular_tol
        if is_singular(hess, tol):
            raise SingularHessianError(
                f"Hessian is singular at iteration {state.nit} "
                f"(condition number {condition_number(hess):.3e}).",
                x=state.x,
                nit=state.nit,
                hessian=hess,
                condition=condition_number(hess),
            )
        try:
            return np.linalg.solve(hess, -grad)
        except np.linalg.LinAlgError as exc:
            raise SingularHessianError(
                f"Hessian could not be factorized at iteration {state.nit}: {exc}",
                x=state.x,
                nit=state.nit,
                hessian=hess,
                condition=condition_number(hess),
            ) from exc

    def step(self, state: IterationState) -> IterationState:
        if self._hess is None:
            self._hess = self.evaluator.hess(state.x)
        direction = self._newton_direction(state, self._grad, self._hess)
        x_new = state.x + direction
        f_new = self.evaluator.fun(x_new)
        self._grad = self.evaluator.grad(x_new)
        self._hess = None
        step_norm = float(np.linalg.norm(direction))
        logger.debug("newton step %d: |dx|=%.3e f=%.10g", state.nit + 1, step_norm, f_new)
        return IterationState(
            x=x_new,
            fun=f_new,
            nit=state.nit + 1,
            step_norm=step_norm,
            grad_norm=float(np.linalg.norm(self._grad)),
        )


__all__ = ["NewtonStrategy"]
