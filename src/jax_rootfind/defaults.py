"""Default settings shared by the root finders."""

# Convergence tolerance on the step size |x_{k+1} - x_k|
TOL = 1e-10

# Iteration budget. The bound is inclusive: at most MAXITER + 1 passes.
MAXITER = 100

# Slopes (and secant denominators) smaller than this in magnitude are
# treated as degenerate and end the iteration.
EPS = 1e-12
