import time
from typing import Optional, Tuple

import jax
from jax import Array
import jax.numpy as jnp

from .custom_types import ScalarFunction, DerivativeFunction
from .defaults import TOL, MAXITER, EPS
from .rootfinders import RootFinderProtocol, RootResult, NewtonRaphson, Secant


def newton_raphson(
    fun: ScalarFunction,
    dfun: Optional[DerivativeFunction],
    x0: Array,
    tol: float = TOL,
    maxiter: int = MAXITER,
    eps: float = EPS,
) -> Array:
    """
    Approximate a root of fun using the Newton-Raphson method.

    The iteration stops when the step size drops to tol or below, when
    |dfun(x)| < eps, or after maxiter + 1 passes, and returns the latest
    approximation in every case. Use `NewtonRaphson` directly to find out
    which of these happened.

    Args:
        fun: Objective function, scalar -> scalar
        dfun: Derivative of fun. If None, `jax.grad(fun)` is used.
        x0: Initial guess
        tol: Convergence tolerance on the step size
        maxiter: Index of the last permitted iteration
        eps: Degeneracy threshold for the derivative

    Returns:
        Approximate root, a 0-dimensional array

    Example usage:
    ```python
    import jax
    from jax_rootfind import newton_raphson

    jax.config.update("jax_enable_x64", True)

    root = newton_raphson(lambda x: x**2 - 3, lambda x: 2 * x, 1.0, tol=1e-15)
    # root ≈ 1.7320508075688772
    ```
    """
    method = NewtonRaphson(tol=tol, maxiter=maxiter, eps=eps)
    return method(fun, x0, dfun=dfun).root


def secant(
    fun: ScalarFunction,
    x0: Array,
    x1: Array,
    tol: float = TOL,
    maxiter: int = MAXITER,
    eps: float = EPS,
) -> Array:
    """
    Approximate a root of fun using the secant method.

    Args:
        fun: Objective function, scalar -> scalar
        x0: First starting point
        x1: Second starting point, distinct from x0. If x1 == x0 the
            iteration stops immediately and x1 is returned.
        tol: Convergence tolerance on the step size
        maxiter: Index of the last permitted iteration
        eps: Degeneracy threshold for the secant denominator and slope

    Returns:
        Approximate root, a 0-dimensional array
    """
    method = Secant(tol=tol, maxiter=maxiter, eps=eps)
    return method(fun, x0, x1=x1).root


def find_root(
    fun: ScalarFunction,
    x0: Array,
    method: Optional[RootFinderProtocol] = None,
    **kwargs,
) -> RootResult:
    """
    Find a root of fun(x) = 0 with the given root-finding method.

    Args:
        fun: Objective function, scalar -> scalar
        x0: Initial guess
        method: Root finder instance (e.g., NewtonRaphson(), Secant()).
            Default: NewtonRaphson with automatic differentiation.
        **kwargs: Passed on to the method (e.g., dfun= or x1=)

    Returns:
        RootResult with the root, the termination status and the index of
        the final iteration

    Example usage:
    ```python
    import jax.numpy as jnp
    from jax_rootfind import find_root, Secant, Status

    result = find_root(jnp.cos, 1.0, Secant(tol=1e-8), x1=1.1)
    assert result.reason is Status.CONVERGED
    ```
    """
    if method is None:
        method = NewtonRaphson()
    return method(fun, x0, **kwargs)


def find_roots(
    fun: ScalarFunction,
    x0s: Array,
    method: Optional[RootFinderProtocol] = None,
    **kwargs,
) -> RootResult:
    """
    Solve independently from each initial guess in a batch, using `jax.vmap`.

    Array-valued keyword arguments (e.g., x1=) are batched alongside x0s and
    must have the same length. Callables (e.g., dfun=) are shared.

    Args:
        fun: Objective function, scalar -> scalar
        x0s: Initial guesses, shape (n,)
        method: Root finder instance. Default: NewtonRaphson().
        **kwargs: Passed on to the method

    Returns:
        RootResult whose fields have shape (n,)
    """
    if method is None:
        method = NewtonRaphson()

    x0s = jnp.asarray(x0s, dtype=jnp.result_type(float))
    if x0s.ndim != 1:
        raise ValueError(
            f"x0s must be a one-dimensional batch of guesses, got shape {x0s.shape}."
        )

    shared = {k: v for k, v in kwargs.items() if v is None or callable(v)}
    batched = {
        k: jnp.asarray(v, dtype=x0s.dtype)
        for k, v in kwargs.items()
        if k not in shared
    }
    for k, v in batched.items():
        if v.shape != x0s.shape:
            raise ValueError(
                f"{k} must have the same shape as x0s {x0s.shape}, got {v.shape}."
            )

    def solve_one(x0, batched_kwargs):
        return method(fun, x0, **shared, **batched_kwargs)

    return jax.vmap(solve_one)(x0s, batched)


def solve_with_history(
    fun: ScalarFunction,
    x0: Array,
    method: Optional[RootFinderProtocol] = None,
    verbose: bool = False,
    **kwargs,
) -> Tuple[Array, RootResult]:
    """
    Find a root of fun(x) = 0 and keep every intermediate approximation.

    Runs the full iteration budget with `jax.lax.scan`; once the method
    terminates the remaining entries repeat the final approximation.

    Args:
        fun: Objective function, scalar -> scalar
        x0: Initial guess
        method: Root finder instance. Default: NewtonRaphson().
        verbose: Print progress information
        **kwargs: Passed on to the method (e.g., dfun= or x1=)

    Returns:
        xs: Approximations, shape (maxiter + 2,)
        result: RootResult of the solve

    Example usage:
    ```python
    import jax.numpy as jnp
    from jax_rootfind import solve_with_history, NewtonRaphson

    xs, result = solve_with_history(
        lambda x: x**2 - 3, 1.0, NewtonRaphson(tol=1e-12, maxiter=20)
    )
    errors = jnp.abs(xs - jnp.sqrt(3.0))
    ```
    """
    if method is None:
        method = NewtonRaphson()

    if verbose:
        method_name = type(method).__name__
        print(f"Solving with {method_name}")

    start_wallclock = time.time()

    xs, result = method.history(fun, x0, **kwargs)

    if verbose:
        elapsed_wallclock = time.time() - start_wallclock
        print(
            f"Finished with status {result.reason.name} after "
            f"{int(result.iterations) + 1} passes in {elapsed_wallclock:.3f}s"
        )

    return xs, result
