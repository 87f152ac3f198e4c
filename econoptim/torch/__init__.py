"""PyTorch integration for econoptim.

Lets an objective be written with torch operations and differentiated by
autograd instead of by hand or by finite differences.

Example:
    >>> import numpy as np
    >>> from econoptim.optimize import OptimizeConfig, optimize
    >>> from econoptim.torch import problem_from_torch
    >>> problem = problem_from_torch(lambda t: ((t - 1.0) ** 2).sum(), dim=2)
    >>> res = optimize(problem, np.zeros(2), OptimizeConfig(algorithm="newton"))
    >>> bool(res.success)
    True
"""

from econoptim.torch.objective import (
    TorchObjective,
    as_float_tensor,
    infer_device,
    problem_from_torch,
)

__all__ = ["TorchObjective", "as_float_tensor", "infer_device", "problem_from_torch"]
