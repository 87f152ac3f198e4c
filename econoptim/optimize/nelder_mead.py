"""Derivative-free Nelder-Mead simplex search.

Follows the standard formulation of Lagarias et al. (1998): reflection,
expansion, outside and inside contraction, then shrink toward the best
vertex. Only objective values are used, so there is no guarantee of reaching
a stationary point; the search is a local heuristic.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..exceptions import DimensionMismatchError
from ..logging import get_logger
from .core import Algorithm, Array, IterationState
from .strategy import StepStrategy

logger = get_logger(__name__)

NONZERO_DELTA = 0.05
ZERO_DELTA = 0.00025


def initial_simplex(x0: Array) -> Array:
    """Build ``x0`` plus one vertex per coordinate, perturbed by 5% (or 0.00025)."""
    n = x0.size
    sim = np.empty((n + 1, n), dtype=float)
    sim[0] = x0
    for k in range(n):
        y = np.array(x0, copy=True)
        y[k] = (1 + NONZERO_DELTA) * y[k] if y[k] != 0 else ZERO_DELTA
        sim[k + 1] = y
    return sim


class NelderMeadStrategy(StepStrategy):
    """Simplex of ``d + 1`` vertices, kept sorted from best to worst."""

    algorithm = Algorithm.NELDER_MEAD

    def __init__(self, evaluator, config):
        super().__init__(evaluator, config)
        self.simplex: Array = np.empty((0, 0))
        self.values: Array = np.empty(0)
        self.last_action: Optional[str] = None

    def initialize(self, x0: Array) -> IterationState:
        n = x0.size
        if self.config.initial_simplex is not None:
            sim = np.array(self.config.initial_simplex, dtype=float, copy=True)
            if sim.shape != (n + 1, n):
                raise DimensionMismatchError(
                    f"initial_simplex has shape {sim.shape}, expected ({n + 1}, {n}).",
                    expected=(n + 1, n),
                    actual=sim.shape,
                )
        else:
            sim = initial_simplex(x0)
        values = np.array([self.evaluator.fun(vertex) for vertex in sim])
        self.simplex, self.values = sim, values
        self._sort()
        return self._state(nit=0)

    def _sort(self) -> None:
        order = np.argsort(self.values, kind="stable")
        self.simplex = self.simplex[order]
        self.values = self.values[order]

    def diameter(self) -> float:
        """Largest distance from the best vertex to any other vertex."""
        return float(np.max(np.linalg.norm(self.simplex[1:] - self.simplex[0], axis=1)))

    def value_spread(self) -> float:
        return float(np.max(np.abs(self.values[1:] - self.values[0])))

    def _state(self, nit: int) -> IterationState:
        return IterationState(
            x=self.simplex[0].copy(),
            fun=float(self.values[0]),
            nit=nit,
            step_norm=self.diameter(),
        )

    def _replace_worst(self, vertex: Array, value: float, action: str) -> None:
        self.simplex[-1] = vertex
        self.values[-1] = value
        self.last_action = action

    def step(self, state: IterationState) -> IterationState:
        coef = self.config.simplex
        fun = self.evaluator.fun
        sim, fsim = self.simplex, self.values

        centroid = sim[:-1].mean(axis=0)
        worst = sim[-1]
        xr = centroid + coef.reflection * (centroid - worst)
        fr = fun(xr)

        if fr < fsim[0]:
            xe = centroid + coef.expansion * (centroid - worst)
            fe = fun(xe)
            if fe < fr:
                self._replace_worst(xe, fe, "expand")
            else:
                self._replace_worst(xr, fr, "reflect")
        elif fr < fsim[-2]:
            self._replace_worst(xr, fr, "reflect")
        else:
            if fr < fsim[-1]:
                xc = centroid + coef.contraction * (xr - centroid)
                fc = fun(xc)
                accepted = fc <= fr
                action = "contract-outside"
            else:
                xc = centroid + coef.contraction * (worst - centroid)
                fc = fun(xc)
                accepted = fc < fsim[-1]
                action = "contract-inside"
            if accepted:
                self._replace_worst(xc, fc, action)
            else:
                self._shrink()

        self._sort()
        new_state = self._state(nit=state.nit + 1)
        logger.debug(
            "nelder-mead step %d: %s f=%.10g diameter=%.3e",
            new_state.nit,
            self.last_action,
            new_state.fun,
            new_state.step_norm,
        )
        return new_state

    def _shrink(self) -> None:
        sigma = self.config.simplex.shrink
        best = self.simplex[0]
        for j in range(1, self.simplex.shape[0]):
            self.simplex[j] = best + sigma * (self.simplex[j] - best)
            self.values[j] = self.evaluator.fun(self.simplex[j])
        self.last_action = "shrink"

    def has_converged(self, state, previous, rule) -> Optional[str]:
        if self.value_spread() <= self.config.fatol and rule.satisfied(
            state.step_norm, float(np.linalg.norm(previous.x))
        ):
            return "Simplex size and value spread below tolerance."
        return None


__all__ = ["NelderMeadStrategy", "initial_simplex"]
