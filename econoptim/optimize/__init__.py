"""Unconstrained numerical optimization with interchangeable algorithms.

Example
-------
>>> import numpy as np
>>> from econoptim.optimize import Algorithm, OptimizeConfig, Problem, optimize
>>> problem = Problem(
...     fun=lambda x: float(x @ x),
...     grad=lambda x: 2 * x,
...     hess=lambda x: 2 * np.eye(2),
... )
>>> res = optimize(problem, np.array([5.0, 5.0]), OptimizeConfig(algorithm="newton"))
>>> res.status, res.nit
(<Status.CONVERGED: 'converged'>, 1)
"""

from .controller import STRATEGIES, StoppingRule, make_strategy, minimize, optimize
from .core import (
    ATOL,
    FATOL,
    GTOL,
    RTOL,
    SINGULAR_TOL,
    Algorithm,
    IterationState,
    OptimizeConfig,
    OptimizeResult,
    Problem,
    SimplexCoefficients,
    Status,
)
from .evaluation import Evaluator
from .line_search import backtracking_armijo, wolfe_line_search
from .multistart import MultiStartResult, multistart
from .nelder_mead import NelderMeadStrategy, initial_simplex
from .newton import NewtonStrategy
from .quasi_newton import BFGSStrategy
from .strategy import GradientStrategy, StepStrategy
from .utils import approx_grad, approx_hessian, condition_number, is_pos_def, is_singular

__all__ = [
    "ATOL",
    "Algorithm",
    "BFGSStrategy",
    "Evaluator",
    "FATOL",
    "GTOL",
    "GradientStrategy",
    "IterationState",
    "MultiStartResult",
    "NelderMeadStrategy",
    "NewtonStrategy",
    "OptimizeConfig",
    "OptimizeResult",
    "Problem",
    "RTOL",
    "SINGULAR_TOL",
    "STRATEGIES",
    "SimplexCoefficients",
    "Status",
    "StepStrategy",
    "StoppingRule",
    "approx_grad",
    "approx_hessian",
    "backtracking_armijo",
    "condition_number",
    "initial_simplex",
    "is_pos_def",
    "is_singular",
    "make_strategy",
    "minimize",
    "multistart",
    "optimize",
    "wolfe_line_search",
]
