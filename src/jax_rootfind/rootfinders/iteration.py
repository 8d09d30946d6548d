"""
Iteration state, termination reasons and the loop shared by the root finders.

Both root finders advance a scalar approximation with an update of the form

$$ x_{k+1} = x_k - \\frac{f(x_k)}{s_k} $$

and differ only in how the slope $s_k$ is obtained. Everything else
(termination checks, the iteration budget, the loop itself) lives here.
"""

import enum
from typing import Callable, NamedTuple, Tuple, TypeAlias

import jax
from jax import Array
import jax.numpy as jnp


class Status(enum.IntEnum):
    """Reason an iteration stopped. ITERATING while the loop is running."""

    ITERATING = 0
    CONVERGED = 1
    DEGENERATE = 2
    EXHAUSTED = 3


class IterationState(NamedTuple):
    """
    Carry of the root-finding loop.

    Attributes:
        x: Current approximation
        x_prev: Previous approximation
        f_prev: Objective evaluated at x_prev. NaN until the first evaluation.
        k: Index of the current iteration
        status: A `Status` value stored as an int32 array
    """

    x: Array
    x_prev: Array
    f_prev: Array
    k: Array
    status: Array


class RootResult(NamedTuple):
    """
    Outcome of a root-finding solve.

    Attributes:
        root: Most recently computed approximation
        status: A `Status` value stored as an int32 array
        iterations: Index of the final iteration, never larger than maxiter.
            The loop made iterations + 1 passes.
    """

    root: Array
    status: Array
    iterations: Array

    @property
    def converged(self) -> Array:
        return self.status == Status.CONVERGED.value

    @property
    def reason(self) -> Status:
        """Termination reason. Requires a concrete (non-traced) result."""
        return Status(int(self.status))


StepFunction: TypeAlias = Callable[[IterationState], IterationState]


def validate_settings(tol: float, maxiter: int, eps: float) -> None:
    """Raise ValueError for settings the iteration cannot work with."""
    if not tol > 0:
        raise ValueError(f"tol must be positive, got {tol}.")
    if int(maxiter) != maxiter or maxiter < 0:
        raise ValueError(
            f"maxiter must be a non-negative integer, got {maxiter}."
        )
    if not eps >= 0:
        raise ValueError(f"eps must be non-negative, got {eps}.")


def as_scalar(x) -> Array:
    """Promote an initial guess to a 0-dimensional array of the default float type."""
    x = jnp.asarray(x, dtype=jnp.result_type(float))
    if x.ndim != 0:
        raise ValueError(
            f"Expected a scalar initial guess, got shape {x.shape}. "
            "Use find_roots to solve for a batch of initial guesses."
        )
    return x


def initial_state(x: Array, x_prev: Array, f_prev: Array) -> IterationState:
    return IterationState(
        x=x,
        x_prev=x_prev,
        f_prev=jnp.asarray(f_prev, dtype=x.dtype),
        k=jnp.asarray(0, dtype=jnp.int32),
        status=jnp.asarray(Status.ITERATING.value, dtype=jnp.int32),
    )


def advance(
    state: IterationState,
    x_next: Array,
    f_x: Array,
    degenerate: Array,
    tol: float,
    maxiter: int,
) -> IterationState:
    """
    Accept an update and decide whether to keep iterating.

    A degenerate step leaves the approximation unchanged. Otherwise the step
    converges once |x_next - x| <= tol, and the budget is exhausted after
    the pass with index maxiter. NaN steps fail every check and run to
    exhaustion.

    Args:
        state: State before the update
        x_next: Proposed next approximation
        f_x: Objective evaluated at state.x
        degenerate: True if the slope used for x_next is unusable
        tol: Convergence tolerance on the step size
        maxiter: Index of the last permitted iteration

    Returns:
        State after the update
    """
    x = state.x
    x_next = jnp.where(degenerate, x, x_next).astype(x.dtype)
    converged = jnp.abs(x_next - x) <= tol

    exhausted = state.k >= maxiter
    status = jnp.where(
        degenerate,
        Status.DEGENERATE.value,
        jnp.where(
            converged,
            Status.CONVERGED.value,
            jnp.where(
                exhausted, Status.EXHAUSTED.value, Status.ITERATING.value
            ),
        ),
    ).astype(jnp.int32)

    running = status == Status.ITERATING.value
    k = jnp.where(running, state.k + 1, state.k).astype(jnp.int32)

    return IterationState(
        x=x_next,
        x_prev=x,
        f_prev=jnp.asarray(f_x, dtype=x.dtype),
        k=k,
        status=status,
    )


def iterate(step: StepFunction, state0: IterationState) -> IterationState:
    """Apply `step` until the state leaves ITERATING."""

    def cond_fun(state):
        return state.status == Status.ITERATING.value

    return jax.lax.while_loop(cond_fun, step, state0)


def iterate_with_history(
    step: StepFunction, state0: IterationState, maxiter: int
) -> Tuple[IterationState, Array]:
    """
    Apply `step` for the full iteration budget, recording every approximation.

    Passes after termination leave the state untouched, so the tail of the
    history repeats the final approximation.

    Args:
        step: Update for a single iteration
        state0: Initial state
        maxiter: Index of the last permitted iteration

    Returns:
        final_state: State at termination
        xs: Approximations, shape (maxiter + 2,). xs[0] is the starting
            point and xs[i] the approximation after pass i.
    """

    def scan_fn(state, _):
        state = jax.lax.cond(
            state.status == Status.ITERATING.value,
            step,
            lambda s: s,
            state,
        )
        return state, state.x

    final_state, xs = jax.lax.scan(scan_fn, state0, None, length=maxiter + 1)

    return final_state, jnp.concatenate([state0.x[None], xs])


def to_result(state: IterationState) -> RootResult:
    return RootResult(root=state.x, status=state.status, iterations=state.k)


def warn_if_unconverged(name: str, maxiter: int, state: IterationState) -> None:
    """Print a runtime warning when the iteration did not converge."""

    def warn_callback(status, iters, x):
        status = int(status)
        if status == Status.EXHAUSTED:
            print(
                f"WARNING: {name} did not converge within {maxiter} iterations. "
                f"Final approximation: {float(x):.6e}"
            )
        elif status == Status.DEGENERATE:
            print(
                f"WARNING: {name} stopped at iteration {int(iters)}: "
                "slope too close to zero. "
                f"Final approximation: {float(x):.6e}"
            )
        return None

    jax.debug.callback(warn_callback, state.status, state.k, state.x)
