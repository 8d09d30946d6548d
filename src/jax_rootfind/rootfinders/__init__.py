"""Scalar root-finding algorithms."""

from .protocol import RootFinderProtocol
from .iteration import IterationState, RootResult, Status
from .newtonraphson import NewtonRaphson
from .secant import Secant


__all__ = [
    "RootFinderProtocol",
    "IterationState",
    "RootResult",
    "Status",
    "NewtonRaphson",
    "Secant",
]
