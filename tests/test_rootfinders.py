"""Unit tests for the root-finding algorithms."""

import pytest
import jax
import jax.numpy as jnp

from jax_rootfind.rootfinders import (
    NewtonRaphson,
    Secant,
    RootFinderProtocol,
    Status,
)


@pytest.fixture
def sqrt3_problem():
    """
    Non-linear equation: x^2 - 3 = 0

    Roots at x = ±sqrt(3). Starting from x0 = 1, Newton-Raphson converges
    to the positive root.
    """
    f = lambda x: x**2 - 3.0
    df = lambda x: 2.0 * x
    x0 = 1.0
    soln = jnp.sqrt(3.0)
    return f, df, x0, soln


@pytest.fixture
def cubic_problem():
    """
    Wallis' cubic: x^3 - 2x - 5 = 0

    Single real root at x ≈ 2.0945514815423265, with f'(x) = 3x^2 - 2
    non-zero between the starting points 2 and 3.
    """
    f = lambda x: x**3 - 2.0 * x - 5.0
    df = lambda x: 3.0 * x**2 - 2.0
    soln = 2.0945514815423265
    return f, df, soln


class TestNewtonRaphson:

    def test_sqrt3(self, sqrt3_problem):
        f, df, x0, expected = sqrt3_problem
        result = NewtonRaphson(tol=1e-15, maxiter=100)(f, x0, dfun=df)
        assert result.reason is Status.CONVERGED
        assert jnp.abs(result.root - expected) <= 1e-15
        assert result.iterations < 100

    def test_cubic(self, cubic_problem):
        f, df, expected = cubic_problem
        result = NewtonRaphson(tol=1e-12, maxiter=50)(f, 2.0, dfun=df)
        assert result.converged
        assert jnp.isclose(result.root, expected, atol=1e-12, rtol=0.0)
        assert result.iterations < 50

    def test_autodiff(self, sqrt3_problem):
        f, _, x0, expected = sqrt3_problem
        result = NewtonRaphson(tol=1e-12)(f, x0)
        assert result.converged
        assert jnp.isclose(result.root, expected, atol=1e-12, rtol=0.0)

    def test_zero_derivative(self):
        """f'(x0) = 0 stops on the first pass and returns x0 unchanged."""
        result = NewtonRaphson()(lambda x: x**2, 0.0, dfun=lambda x: 2.0 * x)
        assert result.reason is Status.DEGENERATE
        assert result.root == 0.0
        assert result.iterations == 0

    def test_eps_is_configurable(self, sqrt3_problem):
        """A large eps turns an ordinary slope into a degenerate one."""
        f, df, x0, _ = sqrt3_problem
        result = NewtonRaphson(eps=10.0)(f, x0, dfun=df)
        assert result.reason is Status.DEGENERATE
        assert result.root == x0

    def test_fixed_point(self, sqrt3_problem):
        f, df, x0, _ = sqrt3_problem
        solver = NewtonRaphson(tol=1e-12)
        root = solver(f, x0, dfun=df).root
        again = solver(f, root, dfun=df)
        assert again.converged
        assert jnp.abs(again.root - root) <= 1e-12
        assert again.iterations == 0

    def test_zero_maxiter(self, sqrt3_problem):
        """A budget of zero still performs one pass: x1 = 1 - (-2)/2 = 2."""
        f, df, x0, _ = sqrt3_problem
        result = NewtonRaphson(tol=1e-15, maxiter=0)(f, x0, dfun=df)
        assert result.reason is Status.EXHAUSTED
        assert result.root == 2.0
        assert result.iterations == 0

    def test_exhausted_iterations_within_budget(self, sqrt3_problem):
        f, df, x0, _ = sqrt3_problem
        result = NewtonRaphson(tol=1e-15, maxiter=2)(f, x0, dfun=df)
        assert result.reason is Status.EXHAUSTED
        assert result.iterations == 2
        # Third pass: 1 -> 2 -> 1.75 -> 1.7321428...
        assert jnp.isclose(result.root, 97.0 / 56.0, atol=1e-15, rtol=0.0)

    def test_nan_runs_to_exhaustion(self):
        f = lambda x: jnp.sqrt(x) - 1.0
        result = NewtonRaphson(maxiter=5)(f, -1.0)
        assert result.reason is Status.EXHAUSTED
        assert result.iterations == 5
        assert jnp.isnan(result.root)

    def test_warns_when_exhausted(self, sqrt3_problem, capsys):
        f, df, x0, _ = sqrt3_problem
        NewtonRaphson(tol=1e-15, maxiter=1)(f, x0, dfun=df)
        jax.effects_barrier()
        captured = capsys.readouterr()
        assert "did not converge within 1 iterations" in captured.out

    def test_jit(self, sqrt3_problem):
        f, df, _, expected = sqrt3_problem
        solver = NewtonRaphson(tol=1e-12)

        @jax.jit
        def solve(x0):
            return solver(f, x0, dfun=df)

        result = solve(jnp.array(1.0))
        assert result.converged
        assert jnp.isclose(result.root, expected, atol=1e-12, rtol=0.0)

    def test_history(self, sqrt3_problem):
        f, df, x0, expected = sqrt3_problem
        xs, result = NewtonRaphson(tol=1e-12, maxiter=10).history(f, x0, dfun=df)
        assert xs.shape == (12,)
        assert xs[0] == 1.0
        assert xs[1] == 2.0
        assert jnp.all(xs[int(result.iterations) + 1:] == result.root)

        # Quadratic convergence: e_{k+1} = e_k^2 / (2 x_k) <= e_k^2 here
        errors = jnp.abs(xs - expected)
        for k in range(1, 4):
            assert errors[k + 1] <= errors[k] ** 2

    def test_invalid_settings(self):
        with pytest.raises(ValueError):
            NewtonRaphson(tol=0.0)
        with pytest.raises(ValueError):
            NewtonRaphson(maxiter=-1)
        with pytest.raises(ValueError):
            NewtonRaphson(eps=-1.0)

    def test_non_scalar_guess(self, sqrt3_problem):
        f, df, _, _ = sqrt3_problem
        with pytest.raises(ValueError):
            NewtonRaphson()(f, jnp.ones((3,)), dfun=df)


class TestSecant:

    def test_sqrt3(self, sqrt3_problem):
        f, _, x0, expected = sqrt3_problem
        result = Secant(tol=1e-12, maxiter=100)(f, x0, 2.0)
        assert result.converged
        assert jnp.isclose(result.root, expected, atol=1e-12, rtol=0.0)

    def test_cubic(self, cubic_problem):
        f, _, expected = cubic_problem
        result = Secant(tol=1e-12, maxiter=50)(f, 2.0, 3.0)
        assert result.converged
        assert jnp.isclose(result.root, expected, atol=1e-12, rtol=0.0)
        assert result.iterations < 50

    def test_default_second_point(self, sqrt3_problem):
        f, _, x0, expected = sqrt3_problem
        result = Secant(tol=1e-12)(f, x0)
        assert result.converged
        assert jnp.isclose(result.root, expected, atol=1e-12, rtol=0.0)

    def test_coincident_points(self, sqrt3_problem):
        """x0 == x1 leaves the slope undefined: degenerate, returns x1."""
        f, _, _, _ = sqrt3_problem
        result = Secant()(f, 1.5, 1.5)
        assert result.reason is Status.DEGENERATE
        assert result.root == 1.5
        assert result.iterations == 0

    def test_flat_slope(self):
        """Equal function values give a zero secant slope."""
        result = Secant()(lambda x: x**2 - 3.0, -1.0, 1.0)
        assert result.reason is Status.DEGENERATE
        assert result.root == 1.0

    def test_fixed_point(self, sqrt3_problem):
        f, _, x0, _ = sqrt3_problem
        solver = Secant(tol=1e-10)
        root = solver(f, x0, 2.0).root
        again = solver(f, root)
        assert again.converged
        assert jnp.abs(again.root - root) <= 1e-10

    def test_zero_maxiter(self, sqrt3_problem):
        """One pass: slope (1 - (-2)) / (2 - 1) = 3, so x = 2 - 1/3."""
        f, _, x0, _ = sqrt3_problem
        result = Secant(tol=1e-15, maxiter=0)(f, x0, 2.0)
        assert result.reason is Status.EXHAUSTED
        assert jnp.isclose(result.root, 5.0 / 3.0, atol=1e-15, rtol=0.0)
        assert result.iterations == 0

    def test_matches_newton_raphson(self):
        """Close starting points give the same root as the exact derivative."""
        f = lambda x: jnp.exp(x) - 2.0
        df = lambda x: jnp.exp(x)
        newton = NewtonRaphson(tol=1e-12)(f, 1.0, dfun=df)
        secant = Secant(tol=1e-10)(f, 1.0, 1.001)
        assert newton.converged and secant.converged
        assert jnp.isclose(secant.root, newton.root, atol=1e-8, rtol=0.0)
        assert jnp.isclose(secant.root, jnp.log(2.0), atol=1e-8, rtol=0.0)

    def test_history(self, sqrt3_problem):
        f, _, x0, expected = sqrt3_problem
        xs, result = Secant(tol=1e-12, maxiter=20).history(f, x0, 2.0)
        assert xs.shape == (22,)
        assert xs[0] == 2.0
        assert jnp.isclose(xs[-1], expected, atol=1e-12, rtol=0.0)
        assert jnp.all(xs[int(result.iterations) + 1:] == result.root)

    def test_invalid_settings(self):
        with pytest.raises(ValueError):
            Secant(tol=-1e-6)
        with pytest.raises(ValueError):
            Secant(maxiter=2.5)


def test_protocol():
    assert isinstance(NewtonRaphson(), RootFinderProtocol)
    assert isinstance(Secant(), RootFinderProtocol)
