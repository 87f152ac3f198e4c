"""Finite-difference derivatives and small linear-algebra helpers.

These are pure NumPy implementations suitable for the small, dense problems
met in likelihood estimation.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..exceptions import DimensionMismatchError
from .core import Array, Objective


def approx_grad(
    fun: Objective, x: Array, eps: float = 1e-6, return_evals: bool = False
) -> Array | tuple[Array, int]:
    """Compute a central-difference gradient approximation.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated.
    eps:
        Perturbation size, scaled by ``max(1, |x_i|)`` per coordinate.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.asarray(x, dtype=float).copy()
    grad = np.zeros_like(x, dtype=float)
    evals = 0
    for i in range(x.size):
        h = eps * max(1.0, abs(x[i]))
        ei = np.zeros_like(x)
        ei[i] = h
        fx_plus = fun(x + ei)
        fx_minus = fun(x - ei)
        evals += 2
        grad[i] = (fx_plus - fx_minus) / (2.0 * h)
    if return_evals:
        return grad, evals
    return grad


def approx_hessian(
    fun: Objective, x: Array, eps: float = 1e-4, return_evals: bool = False
) -> Array | tuple[Array, int]:
    """Approximate the Hessian using second-order central differences."""
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.asarray(x, dtype=float)
    n = x.size
    hess = np.zeros((n, n), dtype=float)
    fx = fun(x)
    evals = 1
    for i in range(n):
        ei = np.zeros_like(x)
        ei[i] = eps
        f_ip = fun(x + ei)
        f_im = fun(x - ei)
        evals += 2
        hess[i, i] = (f_ip - 2 * fx + f_im) / (eps**2)
        for j in range(i + 1, n):
            ej = np.zeros_like(x)
            ej[j] = eps
            f_pp = fun(x + ei + ej)
            f_pm = fun(x + ei - ej)
            f_mp = fun(x - ei + ej)
            f_mm = fun(x - ei - ej)
            evals += 4
            value = (f_pp - f_pm - f_mp + f_mm) / (4 * eps**2)
            hess[i, j] = value
            hess[j, i] = value
    if return_evals:
        return hess, evals
    return hess


def symmetrize(mat: Array) -> Array:
    """Return the symmetric part ``0.5 * (mat + mat.T)``."""
    return 0.5 * (mat + mat.T)


def is_pos_def(mat: Array, tol: float = 1e-12) -> bool:
    """Check if a matrix is positive definite via eigenvalues."""
    eigvals = np.linalg.eigvalsh(symmetrize(mat))
    return bool(np.all(eigvals > tol))


def condition_number(mat: Array) -> float:
    """Ratio of largest to smallest singular value; ``inf`` if singular."""
    sv = np.linalg.svd(mat, compute_uv=False)
    if sv.size == 0 or sv[-1] == 0.0:
        return float("inf")
    return float(sv[0] / sv[-1])


def is_singular(mat: Array, tol: float) -> bool:
    """True when the smallest singular value is at most ``tol`` times the largest."""
    sv = np.linalg.svd(mat, compute_uv=False)
    return bool(sv[0] == 0.0 or sv[-1] <= tol * sv[0])


def as_vector(x: Array, dim: Optional[int] = None, name: str = "x0") -> Array:
    """Copy ``x`` into a 1-D float vector, checking its length against ``dim``."""
    vec = np.array(x, dtype=float, copy=True)
    if vec.ndim != 1 or vec.size == 0:
        raise DimensionMismatchError(
            f"{name} must be a non-empty 1-D array, got shape {vec.shape}.",
            expected=(dim,) if dim is not None else None,
            actual=vec.shape,
        )
    if dim is not None and vec.size != dim:
        raise DimensionMismatchError(
            f"{name} has length {vec.size} but the problem dimension is {dim}.",
            expected=(dim,),
            actual=vec.shape,
        )
    return vec


__all__ = [
    "approx_grad",
    "approx_hessian",
    "symmetrize",
    "is_pos_def",
    "condition_number",
    "is_singular",
    "as_vector",
]
