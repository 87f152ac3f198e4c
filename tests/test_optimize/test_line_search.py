import numpy as np
import pytest

from econoptim.exceptions import LineSearchError
from econoptim.optimize.line_search import backtracking_armijo, wolfe_line_search


def quadratic_fun(x: np.ndarray) -> float:
    return float(x.T @ x)


def quadratic_grad(x: np.ndarray) -> np.ndarray:
    return 2 * x


def test_backtracking_armijo_monotone():
    x = np.array([1.0, -2.0])
    grad = quadratic_grad(x)
    direction = -grad
    alpha, nevals = backtracking_armijo(quadratic_fun, x, direction, grad)
    assert 0 < alpha <= 1.0
    new_val = quadratic_fun(x + alpha * direction)
    assert new_val <= quadratic_fun(x) + 1e-4 * alpha * (grad @ direction)
    assert nevals > 0


def test_backtracking_armijo_reuses_known_value():
    x = np.array([1.0, -2.0])
    grad = quadratic_grad(x)
    _, with_fx = backtracking_armijo(quadratic_fun, x, -grad, grad, fx=quadratic_fun(x))
    _, without_fx = backtracking_armijo(quadratic_fun, x, -grad, grad)
    assert without_fx == with_fx + 1


def test_backtracking_armijo_rejects_non_finite_trials():
    def fun(x: np.ndarray) -> float:
        return float("inf") if x[0] > 2.0 else float((x[0] - 1.0) ** 2)

    x = np.array([0.0])
    grad = np.array([-2.0])
    alpha, _ = backtracking_armijo(fun, x, np.array([4.0]), grad)
    assert alpha * 4.0 <= 2.0


def test_backtracking_armijo_raises_when_no_decrease():
    x = np.array([1.0, 1.0])
    grad = quadratic_grad(x)
    with pytest.raises(LineSearchError):
        backtracking_armijo(quadratic_fun, x, grad, -grad, max_iter=10)


def rosen(x: np.ndarray) -> float:
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def rosen_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


def test_wolfe_conditions_rosenbrock():
    x = np.array([-1.2, 1.0])
    grad = rosen_grad(x)
    direction = -grad
    alpha, _ = wolfe_line_search(rosen, rosen_grad, x, direction)
    phi0 = rosen(x)
    phi_alpha = rosen(x + alpha * direction)
    directional_derivative = rosen_grad(x + alpha * direction) @ direction
    assert phi_alpha <= phi0 + 1e-4 * alpha * (grad @ direction)
    assert abs(directional_derivative) <= 0.9 * abs(grad @ direction)


def test_backtracking_armijo_raises_on_invalid_params():
    x = np.array([1.0])
    grad = quadratic_grad(x)
    with pytest.raises(ValueError):
        backtracking_armijo(quadratic_fun, x, -grad, grad, c=1.5)
    with pytest.raises(ValueError):
        backtracking_armijo(quadratic_fun, x, -grad, grad, rho=1.1)


def test_wolfe_rejects_ascent_direction():
    x = np.array([1.0, 1.0])
    with pytest.raises(ValueError):
        wolfe_line_search(quadratic_fun, quadratic_grad, x, quadratic_grad(x))


def test_wolfe_zoom_phase_triggered():
    x = np.array([-1.2, 1.0])
    grad = rosen_grad(x)
    direction = -grad
    alpha, _ = wolfe_line_search(
        rosen,
        rosen_grad,
        x,
        direction,
        alpha0=5.0,
    )
    assert alpha < 1.0
    assert rosen(x + alpha * direction) <= rosen(x) + 1e-4 * alpha * (grad @ direction)
