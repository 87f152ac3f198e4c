import dataclasses

import numpy as np
import pytest

from econoptim.exceptions import DimensionMismatchError, DomainError
from econoptim.optimize import (
    Algorithm,
    OptimizeConfig,
    Problem,
    Status,
    StoppingRule,
    minimize,
    optimize,
)


def quadratic_problem() -> Problem:
    return Problem(
        fun=lambda x: float((x[0] - 1.0) ** 2 + 3.0 * (x[1] + 0.5) ** 2),
        grad=lambda x: np.array([2.0 * (x[0] - 1.0), 6.0 * (x[1] + 0.5)]),
        hess=lambda x: np.diag([2.0, 6.0]),
        dim=2,
    )


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_zero_iterations_returns_initial_point(algorithm: Algorithm):
    x0 = np.array([4.0, -3.0])
    res = optimize(quadratic_problem(), x0, OptimizeConfig(algorithm=algorithm, maxiter=0))
    assert res.status is Status.MAX_ITER
    assert not res.success
    assert res.nit == 0
    assert np.array_equal(res.x, x0)
    assert res.fun == quadratic_problem().fun(x0)
    assert res.nfev == 1
    assert res.njev == 0
    assert res.nhev == 0


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_zero_iterations_skip_finite_difference_setup(algorithm: Algorithm):
    problem = Problem(fun=quadratic_problem().fun, dim=2)
    res = optimize(problem, np.array([4.0, -3.0]), OptimizeConfig(algorithm=algorithm, maxiter=0))
    assert res.status is Status.MAX_ITER
    assert res.nfev == 1


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_repeated_runs_are_identical(algorithm: Algorithm):
    config = OptimizeConfig(algorithm=algorithm)
    first = optimize(quadratic_problem(), np.array([2.0, 2.0]), config)
    second = optimize(quadratic_problem(), np.array([2.0, 2.0]), config)
    assert first.status is second.status
    assert first.nit == second.nit
    assert first.nfev == second.nfev
    assert np.array_equal(first.x, second.x)


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_all_algorithms_agree_on_quadratic(algorithm: Algorithm):
    res = optimize(quadratic_problem(), np.array([2.0, 2.0]), OptimizeConfig(algorithm=algorithm))
    assert res.success
    assert res.algorithm is algorithm
    assert np.allclose(res.x, np.array([1.0, -0.5]), atol=1e-6)


def test_iteration_cap_reports_non_convergence():
    def rosen(x: np.ndarray) -> float:
        return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2

    res = optimize(Problem(fun=rosen), np.array([-1.2, 1.0]), OptimizeConfig(maxiter=3))
    assert res.status is Status.MAX_ITER
    assert res.nit == 3
    assert res.error is None
    assert res.message == "Maximum iterations reached."


def test_initial_point_is_not_modified():
    x0 = np.array([2.0, 2.0])
    optimize(quadratic_problem(), x0)
    assert np.array_equal(x0, np.array([2.0, 2.0]))


def test_result_is_immutable():
    res = optimize(quadratic_problem(), np.array([2.0, 2.0]))
    assert not res.x.flags.writeable
    with pytest.raises(dataclasses.FrozenInstanceError):
        res.fun = 0.0  # type: ignore[misc]


def test_history_and_callback():
    seen = []
    config = OptimizeConfig(algorithm="bfgs", history=True)
    res = optimize(quadratic_problem(), np.array([2.0, 2.0]), config, callback=seen.append)
    assert len(res.history) == res.nit + 1
    assert len(seen) == res.nit
    assert np.array_equal(res.history[0], np.array([2.0, 2.0]))
    assert np.array_equal(res.history[-1], res.x)
    assert [state.nit for state in seen] == list(range(1, res.nit + 1))


def test_domain_error_at_initial_point():
    problem = Problem(fun=lambda x: float("nan"), grad=lambda x: np.zeros(1))
    res = optimize(problem, np.array([1.0]))
    assert res.status is Status.ALGORITHM_FAILURE
    assert res.failure == "DomainError"
    assert res.nit == 0
    assert np.isnan(res.fun)
    assert np.array_equal(res.error.x, np.array([1.0]))
    with pytest.raises(DomainError):
        res.raise_for_status()


def test_failure_at_initial_point_keeps_computed_value():
    problem = Problem(fun=lambda x: float(x @ x), grad=lambda x: np.array([np.inf]))
    res = optimize(problem, np.array([2.0]))
    assert res.status is Status.ALGORITHM_FAILURE
    assert res.failure == "DomainError"
    assert res.nit == 0
    assert res.fun == 4.0
    assert np.array_equal(res.x, np.array([2.0]))


def test_simplex_failure_at_start_keeps_value_of_x0():
    # finite at x0 = 1.0, undefined at the perturbed vertex 1.05
    problem = Problem(fun=lambda x: float(x[0] ** 2) if x[0] <= 1.0 else float("nan"))
    res = optimize(problem, np.array([1.0]), OptimizeConfig(algorithm="nelder-mead"))
    assert res.status is Status.ALGORITHM_FAILURE
    assert res.failure == "DomainError"
    assert res.fun == 1.0


def test_results_compare_by_identity():
    config = OptimizeConfig(algorithm="newton")
    first = optimize(quadratic_problem(), np.array([2.0, 2.0]), config)
    second = optimize(quadratic_problem(), np.array([2.0, 2.0]), config)
    assert first == first
    assert first != second


def test_objective_may_raise_domain_error_itself():
    def fun(x: np.ndarray) -> float:
        if x[0] <= 0:
            raise DomainError("log of non-positive value", x=x)
        return float(np.log(x[0]) ** 2)

    res = optimize(Problem(fun=fun), np.array([-1.0]), OptimizeConfig(algorithm="nelder-mead"))
    assert res.failure == "DomainError"


def test_successful_result_raise_for_status_returns_self():
    res = optimize(quadratic_problem(), np.array([2.0, 2.0]))
    assert res.raise_for_status() is res
    assert res.failure is None


@pytest.mark.parametrize(
    "x0",
    [np.zeros((2, 1)), np.zeros(0), np.zeros(3)],
)
def test_dimension_mismatch_fails_fast(x0: np.ndarray):
    with pytest.raises(DimensionMismatchError):
        optimize(quadratic_problem(), x0)


def test_gradient_dimension_checked_before_iterating():
    problem = Problem(fun=lambda x: float(x @ x), grad=lambda x: np.zeros(3))
    with pytest.raises(DimensionMismatchError):
        optimize(problem, np.ones(2))


def test_stopping_rule_absolute_and_relative():
    rule = StoppingRule(atol=1e-6, rtol=1e-3)
    assert rule.satisfied(1e-7, scale=1.0)
    assert rule.satisfied(1e-2, scale=100.0)
    assert not rule.satisfied(1e-2, scale=1.0)


def test_stopping_rule_relative_falls_back_near_zero():
    rule = StoppingRule(atol=None, rtol=1e-4)
    assert rule.satisfied(1e-5, scale=0.0)
    assert not rule.satisfied(1e-3, scale=0.0)
    both = StoppingRule(atol=1e-8, rtol=1e-4)
    assert not both.satisfied(1e-5, scale=1e-14)


def test_stopping_rule_requires_a_tolerance():
    with pytest.raises(ValueError):
        StoppingRule()


def test_config_validation():
    with pytest.raises(ValueError):
        OptimizeConfig(atol=None, rtol=None)
    with pytest.raises(ValueError):
        OptimizeConfig(maxiter=-1)
    with pytest.raises(ValueError):
        OptimizeConfig(line_search="exact")
    with pytest.raises(ValueError):
        OptimizeConfig(algorithm="simulated-annealing")


def test_config_from_mapping_accepts_camel_case():
    config = OptimizeConfig.from_mapping(
        {
            "absoluteTolerance": 1e-5,
            "relativeTolerance": 1e-4,
            "maxIterations": 25,
            "algorithm": "NelderMead",
            "simplex": {"expansion": 3.0},
        }
    )
    assert config.atol == 1e-5
    assert config.rtol == 1e-4
    assert config.maxiter == 25
    assert config.algorithm is Algorithm.NELDER_MEAD
    assert config.simplex.expansion == 3.0


def test_minimize_convenience_wrapper():
    res = minimize(
        lambda x: float(x @ x),
        np.array([1.0, -2.0]),
        grad=lambda x: 2 * x,
        algorithm="bfgs",
        maxiter=50,
    )
    assert res.success
    assert np.allclose(res.x, 0.0, atol=1e-8)
