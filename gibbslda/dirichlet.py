import numpy as np
from scipy.special import psi

max_iter = 30
converge_criteria = 0.001
alpha_floor = 1e-8


def refit_alpha(alpha, DT, max_iter=max_iter, converge_criteria=converge_criteria, floor=alpha_floor):
    """Estimating an asymmetric dirichlet parameter in the collapsed sampling environment of Dir-Mult

    Minka's fixed-point iteration:

        alpha_k <- alpha_k * sum_d [psi(n_dk + alpha_k) - psi(alpha_k)]
                           / sum_d [psi(n_d + sum(alpha)) - psi(sum(alpha))]

    Parameters
    ----------

    alpha: initial guess on the dirichlet parameter (K-dim)
    DT: assignment count, N x K matrix
    max_iter: upper bound on the number of fixed-point steps
    converge_criteria: stop once the summed absolute change falls below this
    floor: components that would become non-positive are clamped to this value

    Returns
    -------
    new_alpha: ndarray, strictly positive and finite
    """
    alpha = np.array(alpha, dtype=float)
    z = np.asarray(DT, dtype=float)
    z_sum = z.sum(1)

    for _ in range(max_iter):
        alpha_sum = alpha.sum()
        numerator = (psi(z + alpha) - psi(alpha)).sum(0)
        denominator = (psi(z_sum + alpha_sum) - psi(alpha_sum)).sum()
        if not denominator > 0:
            break

        new_alpha = alpha * (numerator / denominator)
        new_alpha[~np.isfinite(new_alpha) | (new_alpha < floor)] = floor

        change = np.abs(new_alpha - alpha).sum()
        alpha = new_alpha
        if change < converge_criteria:
            break

    return alpha
