"""Protocol for scalar root-finding algorithms."""

from typing import Protocol, Tuple, runtime_checkable

from jax import Array

from ..custom_types import ScalarFunction
from .iteration import RootResult


@runtime_checkable
class RootFinderProtocol(Protocol):
    """
    Protocol for scalar root-finding algorithms.

    Any class implementing `__call__` and `history` with these signatures can
    be used with `find_root`, `find_roots` and `solve_with_history`.
    Additional keyword arguments carry the slope information a method needs
    (an explicit derivative, or a second starting point).
    """

    def __call__(self, fun: ScalarFunction, x0: Array, **kwargs) -> RootResult:
        """
        Find a root of fun(x) = 0.

        Args:
            fun: Objective function, scalar -> scalar
            x0: Initial guess

        Returns:
            RootResult with the final approximation and termination status
        """
        ...

    def history(
        self, fun: ScalarFunction, x0: Array, **kwargs
    ) -> Tuple[Array, RootResult]:
        """
        Find a root of fun(x) = 0, returning every approximation as well.

        Returns:
            xs: Approximations, shape (maxiter + 2,)
            result: RootResult of the solve
        """
        ...
