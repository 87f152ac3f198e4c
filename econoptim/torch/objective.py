"""Build optimization problems from PyTorch scalar functions.

The objective is written once with ``torch`` operations; its gradient and
Hessian are obtained from ``torch.autograd.functional`` and returned to the
optimizer as float64 NumPy arrays.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np
import torch

from ..exceptions import DimensionMismatchError
from ..optimize import Problem

TorchObjective = Callable[[torch.Tensor], torch.Tensor]


def infer_device(device: Optional[torch.device | str]) -> torch.device:
    """Return ``device`` as a ``torch.device``, defaulting to the CPU."""
    if device is None:
        return torch.device("cpu")
    return torch.device(device)


def as_float_tensor(x: np.ndarray, device: Optional[torch.device] = None) -> torch.Tensor:
    """Convert a parameter vector to a float64 tensor on ``device``."""
    return torch.as_tensor(np.asarray(x, dtype=float), dtype=torch.float64, device=infer_device(device))


def _to_numpy(t: torch.Tensor) -> np.ndarray:
    return t.detach().cpu().numpy().astype(float)


def problem_from_torch(
    fn: TorchObjective,
    dim: Optional[int] = None,
    device: Optional[torch.device | str] = None,
    with_hessian: bool = True,
) -> Problem:
    """
    Wrap a torch scalar function as a :class:`~econoptim.optimize.Problem`.

    Parameters
    ----------
    fn:
        Maps a 1-D float64 tensor to a 0-d tensor.
    dim:
        Optional problem dimension, checked against ``x0`` by the optimizer.
    device:
        Device on which ``fn`` is evaluated (default CPU).
    with_hessian:
        Also provide an autograd Hessian, as required by Newton's method.
    """
    target = infer_device(device)

    def _scalar(x: torch.Tensor) -> torch.Tensor:
        out = fn(x)
        if out.numel() != 1:
            raise DimensionMismatchError(
                f"Objective must return a scalar, got shape {tuple(out.shape)}.",
                expected=(),
                actual=tuple(out.shape),
            )
        return out.reshape(())

    def fun(x: np.ndarray) -> float:
        with torch.no_grad():
            return float(_scalar(as_float_tensor(x, target)).item())

    def grad(x: np.ndarray) -> np.ndarray:
        jac = torch.autograd.functional.jacobian(_scalar, as_float_tensor(x, target))
        return _to_numpy(jac)

    def hess(x: np.ndarray) -> np.ndarray:
        h = torch.autograd.functional.hessian(_scalar, as_float_tensor(x, target))
        return _to_numpy(h)

    return Problem(fun=fun, grad=grad, hess=hess if with_hessian else None, dim=dim)


__all__ = ["TorchObjective", "infer_device", "as_float_tensor", "problem_from_torch"]
