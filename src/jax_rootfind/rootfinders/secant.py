"""Secant method for scalar root finding without an explicit derivative."""

from typing import Optional, Tuple

from flax import nnx
from jax import Array
import jax.numpy as jnp

from ..custom_types import ScalarFunction
from ..defaults import TOL, MAXITER, EPS
from .iteration import (
    IterationState,
    RootResult,
    StepFunction,
    advance,
    as_scalar,
    initial_state,
    iterate,
    iterate_with_history,
    to_result,
    validate_settings,
    warn_if_unconverged,
)

# relative and absolute offsets used to derive a second point from x0
REL_OFFSET = 1e-4
ABS_OFFSET = 1e-4


def second_point(x0: Array) -> Array:
    """Default second starting point, a small step away from x0."""
    return x0 * (1 + REL_OFFSET) + jnp.where(x0 >= 0, ABS_OFFSET, -ABS_OFFSET)


class Secant(nnx.Module):
    """
    Secant (finite-difference Newton) root-finding algorithm.

    The derivative is replaced by the slope through the two most recent
    approximations:

    $$ s_k = \\frac{f(x_k) - f(x_{k-1})}{x_k - x_{k-1}}, \\qquad
    x_{k+1} = x_k - f(x_k) / s_k $$

    The iteration is DEGENERATE when either |x_k - x_{k-1}| or |s_k| falls
    below eps. In particular x0 == x1 stops immediately and returns x1.

    Implements: RootFinderProtocol

    Attributes:
        tol: Convergence tolerance on the step size |x_{k+1} - x_k|
        maxiter: Index of the last permitted iteration. The loop makes at
            most maxiter + 1 passes.
        eps: Threshold below which the secant denominator or slope is
            treated as zero
    """

    def __init__(self, tol: float = TOL, maxiter: int = MAXITER, eps: float = EPS):
        validate_settings(tol, maxiter, eps)
        self.tol = tol
        self.maxiter = int(maxiter)
        self.eps = eps

    def _prepare(
        self,
        fun: ScalarFunction,
        x0: Array,
        x1: Optional[Array],
    ) -> Tuple[IterationState, StepFunction]:
        x0 = as_scalar(x0)
        x1 = second_point(x0) if x1 is None else as_scalar(x1)
        state0 = initial_state(x1, x0, fun(x0))

        def step(state):
            x, x_prev = state.x, state.x_prev
            fx = fun(x)
            dx = x - x_prev
            coincident = jnp.abs(dx) < self.eps
            slope = (fx - state.f_prev) / jnp.where(coincident, 1.0, dx)
            degenerate = coincident | (jnp.abs(slope) < self.eps)
            x_next = x - fx / jnp.where(degenerate, 1.0, slope)
            return advance(state, x_next, fx, degenerate, self.tol, self.maxiter)

        return state0, step

    def __call__(
        self,
        fun: ScalarFunction,
        x0: Array,
        x1: Optional[Array] = None,
    ) -> RootResult:
        """
        Find a root of fun(x) = 0 using the secant method.

        Args:
            fun: Objective function, scalar -> scalar
            x0: First starting point
            x1: Second starting point. If None, a point close to x0 is used.

        Returns:
            RootResult holding the final approximation and the reason the
            iteration stopped
        """
        state0, step = self._prepare(fun, x0, x1)
        state = iterate(step, state0)
        warn_if_unconverged("Secant", self.maxiter, state)
        return to_result(state)

    def history(
        self,
        fun: ScalarFunction,
        x0: Array,
        x1: Optional[Array] = None,
    ) -> Tuple[Array, RootResult]:
        """
        Same as calling the solver, but also returns every approximation.

        Returns:
            xs: Approximations, shape (maxiter + 2,), starting with x1.
                Entries after termination repeat the final approximation.
            result: RootResult of the solve
        """
        state0, step = self._prepare(fun, x0, x1)
        state, xs = iterate_with_history(step, state0, self.maxiter)
        warn_if_unconverged("Secant", self.maxiter, state)
        return xs, to_result(state)
