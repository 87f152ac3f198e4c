"""
Example: Poisson maximum likelihood with three optimizers

Fits a Poisson regression to a small synthetic count dataset with Newton's
method, BFGS and Nelder-Mead, then compares estimates, standard errors and
iteration counts. Also shows a multi-start run and a deliberately singular
Hessian being reported instead of crashing.
"""

import numpy as np

from econoptim import (
    OptimizeConfig,
    PoissonModel,
    Problem,
    Status,
    multistart,
    optimize,
    simulate_poisson,
)


def example_algorithms_compared():
    """Example: the same likelihood under each algorithm."""
    print("=" * 60)
    print("Example 1: Poisson regression, Newton vs BFGS vs Nelder-Mead")
    print("=" * 60)

    model = simulate_poisson(500, np.array([0.3, 0.8]), np.random.default_rng(7))
    x0 = np.array([0.0, 1.0])

    for algorithm in ("newton", "bfgs", "nelder-mead"):
        result = model.fit(x0, OptimizeConfig(algorithm=algorithm))
        print(f"{algorithm:>12}: status={result.status.value} nit={result.nit} nfev={result.nfev}")
        print(f"{'':>12}  beta={np.round(result.x, 5)} -loglik={result.fun:.6f}")

    newton = model.fit(x0, OptimizeConfig(algorithm="newton"))
    print(f"Standard errors: {np.round(model.standard_errors(newton.x), 5)}")
    print()


def example_multistart():
    """Example: restarting from several points on a two-well objective."""
    print("=" * 60)
    print("Example 2: Multi-start search for the lower of two minima")
    print("=" * 60)

    problem = Problem(
        fun=lambda x: float((x[0] ** 2 - 1.0) ** 2 + 0.15 * x[0]),
        grad=lambda x: np.array([4.0 * x[0] * (x[0] ** 2 - 1.0) + 0.15]),
        dim=1,
    )
    starts = [np.array([s]) for s in (-2.0, -0.5, 0.5, 2.0)]
    outcome = multistart(problem, starts, max_workers=2)
    for start, res in zip(starts, outcome.results):
        print(f"start={start[0]:+.1f} -> x={res.x[0]:+.6f} f={res.fun:+.6f}")
    print(f"Best minimum: x={outcome.best.x[0]:+.6f}")
    print()


def example_singular_hessian():
    """Example: Newton on an objective with a flat direction."""
    print("=" * 60)
    print("Example 3: Singular Hessian reported as an algorithm failure")
    print("=" * 60)

    problem = Problem(
        fun=lambda x: float((x[0] - x[1]) ** 2),
        grad=lambda x: 2.0 * (x[0] - x[1]) * np.array([1.0, -1.0]),
        hess=lambda x: np.array([[2.0, -2.0], [-2.0, 2.0]]),
    )
    result = optimize(problem, np.array([1.0, 0.0]), OptimizeConfig(algorithm="newton"))
    print(f"Status: {result.status.value}")
    if result.status == Status.ALGORITHM_FAILURE:
        print(f"Failure: {result.failure}")
        print(f"Last iterate: {result.x}")
    print()


if __name__ == "__main__":
    example_algorithms_compared()
    example_multistart()
    example_singular_hessian()
    print("Poisson MLE example complete")
