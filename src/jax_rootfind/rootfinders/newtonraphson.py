"""Newton-Raphson method for scalar root finding."""

from typing import Optional, Tuple

from flax import nnx
import jax
from jax import Array
import jax.numpy as jnp

from ..custom_types import ScalarFunction, DerivativeFunction
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


class NewtonRaphson(nnx.Module):
    """
    Newton-Raphson root-finding algorithm for scalar functions.

    Iterative update: $x \\leftarrow x - f(x) / f'(x)$

    Implements: RootFinderProtocol

    Attributes:
        tol: Convergence tolerance on the step size |x_{k+1} - x_k|
        maxiter: Index of the last permitted iteration. The loop makes at
            most maxiter + 1 passes.
        eps: Derivatives with magnitude below eps end the iteration with
            status DEGENERATE, leaving the approximation unchanged.
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
        dfun: Optional[DerivativeFunction],
    ) -> Tuple[IterationState, StepFunction]:
        if dfun is None:
            dfun = jax.grad(fun)

        x0 = as_scalar(x0)
        state0 = initial_state(x0, x0, jnp.full_like(x0, jnp.nan))

        def step(state):
            x = state.x
            fx = fun(x)
            dfx = dfun(x)
            degenerate = jnp.abs(dfx) < self.eps
            x_next = x - fx / jnp.where(degenerate, 1.0, dfx)
            return advance(state, x_next, fx, degenerate, self.tol, self.maxiter)

        return state0, step

    def __call__(
        self,
        fun: ScalarFunction,
        x0: Array,
        dfun: Optional[DerivativeFunction] = None,
    ) -> RootResult:
        """
        Find a root of fun(x) = 0 using the Newton-Raphson method.

        Args:
            fun: Objective function, scalar -> scalar
            x0: Initial guess
            dfun: Derivative of fun. If None, it is obtained with `jax.grad`.

        Returns:
            RootResult holding the final approximation and the reason the
            iteration stopped
        """
        state0, step = self._prepare(fun, x0, dfun)
        state = iterate(step, state0)
        warn_if_unconverged("Newton-Raphson", self.maxiter, state)
        return to_result(state)

    def history(
        self,
        fun: ScalarFunction,
        x0: Array,
        dfun: Optional[DerivativeFunction] = None,
    ) -> Tuple[Array, RootResult]:
        """
        Same as calling the solver, but also returns every approximation.

        Returns:
            xs: Approximations, shape (maxiter + 2,), starting with x0.
                Entries after termination repeat the final approximation.
            result: RootResult of the solve
        """
        state0, step = self._prepare(fun, x0, dfun)
        state, xs = iterate_with_history(step, state0, self.maxiter)
        warn_if_unconverged("Newton-Raphson", self.maxiter, state)
        return xs, to_result(state)
