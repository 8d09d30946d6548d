import jax
import jax.numpy as jnp
from matplotlib import pyplot as plt

from jax_rootfind import solve_with_history, NewtonRaphson, Secant

jax.config.update("jax_enable_x64", True)


def main(x0=1.0, x1=2.0, tol=1e-15, maxiter=20):
    """
    Solve x^2 - 3 = 0 with Newton-Raphson and the secant method, then plot
    the error of each approximation against the exact root sqrt(3).

    Arguments:
        x0 - Initial guess (default 1.0)
        x1 - Second starting point for the secant method (default 2.0)
        tol - Convergence tolerance on the step size (default 1e-15)
        maxiter - Iteration budget (default 20)
    """
    f = lambda x: x**2 - 3.0
    df = lambda x: 2.0 * x
    exact = jnp.sqrt(3.0)

    xs_newton, newton = solve_with_history(
        f, x0, NewtonRaphson(tol=tol, maxiter=maxiter), verbose=True, dfun=df
    )
    xs_secant, secant = solve_with_history(
        f, x0, Secant(tol=tol, maxiter=maxiter), verbose=True, x1=x1
    )

    for name, result in [("Newton-Raphson", newton), ("Secant", secant)]:
        print(
            f"{name}: root = {float(result.root):.15e}, "
            f"status = {result.reason.name}, iterations = {int(result.iterations)}"
        )

    # Only plot up to termination, the rest of the history repeats the root
    n_newton = int(newton.iterations) + 2
    n_secant = int(secant.iterations) + 2
    err_newton = jnp.abs(xs_newton[:n_newton] - exact)
    err_secant = jnp.abs(xs_secant[:n_secant] - exact)

    fig, ax = plt.subplots()
    ax.semilogy(err_newton, '-', marker='.', label="Newton-Raphson")
    ax.semilogy(err_secant, '--', marker='.', label="Secant")
    ax.legend()
    ax.set_xlabel('iteration')
    ax.set_ylabel('$|x_k - \\sqrt{3}|$')
    plt.show()


if __name__ == "__main__":
    main()
