"""econoptim - numerical optimization for econometric estimation.

Newton, BFGS and Nelder-Mead minimizers behind one convergence controller,
with a Poisson likelihood model and a PyTorch autograd adapter.
"""

__version__ = "0.1.0"

from .exceptions import (
    DimensionMismatchError,
    DomainError,
    LineSearchError,
    OptimizationError,
    SingularHessianError,
)
from .logging import configure_logging, get_logger, set_log_level
from .models import PoissonModel, simulate_poisson
from .optimize import (
    Algorithm,
    IterationState,
    MultiStartResult,
    OptimizeConfig,
    OptimizeResult,
    Problem,
    SimplexCoefficients,
    Status,
    StoppingRule,
    minimize,
    multistart,
    optimize,
)

__all__ = [
    "__version__",
    "Algorithm",
    "DimensionMismatchError",
    "DomainError",
    "IterationState",
    "LineSearchError",
    "MultiStartResult",
    "OptimizationError",
    "OptimizeConfig",
    "OptimizeResult",
    "PoissonModel",
    "Problem",
    "SimplexCoefficients",
    "SingularHessianError",
    "Status",
    "StoppingRule",
    "configure_logging",
    "get_logger",
    "minimize",
    "multistart",
    "optimize",
    "set_log_level",
    "simulate_poisson",
]
