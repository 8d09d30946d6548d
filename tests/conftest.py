"""Shared test configuration."""

import jax

# Tolerances down to 1e-15 need double precision.
jax.config.update("jax_enable_x64", True)
