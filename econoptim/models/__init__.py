"""Likelihood objectives for common econometric models."""

from .poisson import PoissonModel, simulate_poisson

__all__ = ["PoissonModel", "simulate_poisson"]
