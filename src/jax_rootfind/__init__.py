"""
JAX scalar root finding

Newton-Raphson and secant iterations for scalar functions written in JAX,
reporting why each solve stopped (converged, degenerate slope, or iteration
budget exhausted).

Main components:
- rootfinders: Root-finding algorithms and the shared iteration loop
- solve: Functional interfaces, batched solves and iteration histories
"""

# Root-finding algorithms
from .rootfinders import (
    RootFinderProtocol,
    IterationState,
    RootResult,
    Status,
    NewtonRaphson,
    Secant,
)

# Solver interfaces
from .solve import (
    newton_raphson,
    secant,
    find_root,
    find_roots,
    solve_with_history,
)

__all__ = [
    # Solver interfaces
    "newton_raphson",
    "secant",
    "find_root",
    "find_roots",
    "solve_with_history",

    # Root-finding algorithms
    "RootFinderProtocol",
    "NewtonRaphson",
    "Secant",

    # Results
    "IterationState",
    "RootResult",
    "Status",
]
