"""Type aliases to improve type hint readability."""

from typing import Callable, TypeAlias
from jax import Array

ScalarFunction: TypeAlias = Callable[[Array], Array]
DerivativeFunction: TypeAlias = Callable[[Array], Array]
