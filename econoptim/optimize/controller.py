"""Convergence controller driving a step strategy to termination."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Type

import numpy as np

from ..exceptions import DimensionMismatchError, OptimizationError
from ..logging import get_logger
from .core import (
    Algorithm,
    Array,
    Gradient,
    Hessian,
    IterationState,
    Objective,
    OptimizeConfig,
    OptimizeResult,
    Problem,
    Status,
)
from .evaluation import Evaluator
from .nelder_mead import NelderMeadStrategy
from .newton import NewtonStrategy
from .quasi_newton import BFGSStrategy
from .strategy import StepStrategy
from .utils import as_vector

logger = get_logger(__name__)

# Below this norm the relative step test degenerates to an absolute one.
SCALE_FLOOR = 1e-12

STRATEGIES: Dict[Algorithm, Type[StepStrategy]] = {
    Algorithm.NEWTON: NewtonStrategy,
    Algorithm.BFGS: BFGSStrategy,
    Algorithm.NELDER_MEAD: NelderMeadStrategy,
}


@dataclass(frozen=True)
class StoppingRule:
    """Absolute and relative tests on the size of the last step."""

    atol: Optional[float] = None
    rtol: Optional[float] = None

    def __post_init__(self) -> None:
        if self.atol is None and self.rtol is None:
            raise ValueError("StoppingRule needs atol or rtol.")

    def satisfied(self, step_norm: float, scale: float) -> bool:
        """Return True if ``step_norm`` is small in absolute or relative terms.

        ``scale`` is the norm of the iterate the step started from.
        """
        if self.atol is not None and step_norm < self.atol:
            return True
        if self.rtol is not None:
            if scale > SCALE_FLOOR:
                return step_norm / scale < self.rtol
            threshold = self.atol if self.atol is not None else self.rtol
            return step_norm < threshold
        return False


def make_strategy(evaluator: Evaluator, config: OptimizeConfig) -> StepStrategy:
    """Instantiate the strategy registered for ``config.algorithm``."""
    return STRATEGIES[config.algorithm](evaluator, config)


def _result(
    state: IterationState,
    evaluator: Evaluator,
    config: OptimizeConfig,
    status: Status,
    message: str,
    history: list,
    error: Optional[OptimizationError] = None,
) -> OptimizeResult:
    return OptimizeResult(
        x=state.x,
        fun=state.fun,
        status=status,
        message=message,
        nit=state.nit,
        nfev=evaluator.nfev,
        njev=evaluator.njev,
        nhev=evaluator.nhev,
        algorithm=config.algorithm,
        grad_norm=state.grad_norm,
        error=error,
        history=tuple(history),
    )


def _attach_context(exc: OptimizationError, state: IterationState) -> None:
    if exc.x is None:
        exc.x = np.array(state.x, copy=True)
    if exc.nit is None:
        exc.nit = state.nit


def optimize(
    problem: Problem,
    x0: Array,
    config: Optional[OptimizeConfig] = None,
    *,
    callback: Optional[Callable[[IterationState], None]] = None,
) -> OptimizeResult:
    """
    Minimize ``problem.fun`` starting from ``x0``.

    Parameters
    ----------
    problem:
        Objective with optional analytic gradient and Hessian.
    x0:
        Initial point; copied, never modified.
    config:
        Algorithm choice, tolerances and iteration cap. Defaults to BFGS
        with :class:`OptimizeConfig` defaults.
    callback:
        Called with the new :class:`IterationState` after every iteration.

    Returns
    -------
    OptimizeResult
        ``CONVERGED`` when a stopping rule fired, ``MAX_ITER`` when the
        iteration cap was hit first, ``ALGORITHM_FAILURE`` when the objective
        left its domain, the Newton Hessian was singular or the BFGS line
        search failed. Failed results hold the last valid iterate and the
        terminating exception in ``error``.

    Raises
    ------
    DimensionMismatchError
        If ``x0``, the gradient, the Hessian or the initial simplex do not
        match the problem dimension.
    """
    config = config or OptimizeConfig()
    x = as_vector(x0, problem.dim)
    evaluator = Evaluator(problem, x.size, config.numerical_derivatives)
    strategy = make_strategy(evaluator, config)
    rule = StoppingRule(config.atol, config.rtol)
    name = config.algorithm.value
    history: list = []

    try:
        if config.maxiter == 0:
            # no iterations: skip derivative and simplex set-up
            state = IterationState(x=x, fun=evaluator.fun(x), nit=0)
        else:
            state = strategy.initialize(x)
    except DimensionMismatchError:
        raise
    except OptimizationError as exc:
        start = IterationState(x=x, fun=evaluator.value_at_start(x), nit=0)
        _attach_context(exc, start)
        logger.warning("%s failed at the initial point: %s", name, exc)
        return _result(
            start, evaluator, config, Status.ALGORITHM_FAILURE,
            f"{exc.kind}: {exc}", history, error=exc,
        )

    if config.history:
        history.append(state.x.copy())

    status = Status.MAX_ITER
    message = "Maximum iterations reached."
    error: Optional[OptimizationError] = None

    while state.nit < config.maxiter:
        previous = state
        try:
            state = strategy.step(previous)
        except DimensionMismatchError:
            raise
        except OptimizationError as exc:
            _attach_context(exc, previous)
            error = exc
            status = Status.ALGORITHM_FAILURE
            message = f"{exc.kind}: {exc}"
            state = previous
            logger.warning("%s failed after %d iterations: %s", name, previous.nit, exc)
            break
        if config.history:
            history.append(state.x.copy())
        if callback is not None:
            callback(state)
        reason = strategy.has_converged(state, previous, rule)
        if reason is not None:
            status = Status.CONVERGED
            message = reason
            break

    logger.info(
        "%s finished: %s after %d iterations, f=%.10g (nfev=%d)",
        name,
        status.value,
        state.nit,
        state.fun,
        evaluator.nfev,
    )
    return _result(state, evaluator, config, status, message, history, error=error)


def minimize(
    fun: Objective,
    x0: Array,
    grad: Optional[Gradient] = None,
    hess: Optional[Hessian] = None,
    algorithm: Algorithm | str = Algorithm.BFGS,
    callback: Optional[Callable[[IterationState], None]] = None,
    **options,
) -> OptimizeResult:
    """Convenience wrapper building the :class:`Problem` and config from keywords.

    Example
    -------
    >>> import numpy as np
    >>> res = minimize(lambda x: float(x @ x), np.array([1.0, -2.0]), algorithm="nelder-mead")
    >>> res.success
    True
    """
    problem = Problem(fun=fun, grad=grad, hess=hess)
    config = OptimizeConfig.from_mapping({"algorithm": algorithm, **options})
    return optimize(problem, x0, config, callback=callback)


__all__ = ["StoppingRule", "STRATEGIES", "make_strategy", "optimize", "minimize"]
