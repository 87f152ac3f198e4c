"""Common interface for the per-iteration update rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import numpy as np

from .core import Algorithm, Array, IterationState, OptimizeConfig
from .evaluation import Evaluator

if TYPE_CHECKING:
    from .controller import StoppingRule


class StepStrategy(ABC):
    """
    One algorithm's state and update rule for a single run.

    The controller calls :meth:`initialize` once, then :meth:`step` until
    :meth:`has_converged` reports a reason or the iteration cap is hit. A
    fresh instance is built for every run.
    """

    algorithm: Algorithm

    def __init__(self, evaluator: Evaluator, config: OptimizeConfig):
        self.evaluator = evaluator
        self.config = config

    @abstractmethod
    def initialize(self, x0: Array) -> IterationState:
        """Evaluate the starting point and allocate algorithm state."""

    @abstractmethod
    def step(self, state: IterationState) -> IterationState:
        """Perform one iteration and return the new state."""

    @abstractmethod
    def has_converged(
        self, state: IterationState, previous: IterationState, rule: "StoppingRule"
    ) -> Optional[str]:
        """Return a message when ``state`` satisfies the stopping criteria."""


class GradientStrategy(StepStrategy):
    """Base for strategies that track the gradient at the current iterate."""

    def __init__(self, evaluator: Evaluator, config: OptimizeConfig):
        super().__init__(evaluator, config)
        self._grad: Optional[Array] = None

    def has_converged(
        self, state: IterationState, previous: IterationState, rule: "StoppingRule"
    ) -> Optional[str]:
        gtol = self.config.gtol
        if gtol is not None and state.grad_norm is not None and state.grad_norm <= gtol:
            return "Gradient tolerance satisfied."
        if rule.satisfied(state.step_norm, float(np.linalg.norm(previous.x))):
            return "Step tolerance satisfied."
        return None


__all__ = ["StepStrategy", "GradientStrategy"]
