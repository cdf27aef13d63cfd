"""
Prox of a shifted composite L2 norm through regularized normal equations.

The prox at ``q`` with step ``sigma`` is ``y = q + A^T s`` where ``s`` solves
the trust-region-like subproblem

    (A A^T + alpha I) s = -(A q + b),   ||s|| <= lam * sigma,

with ``alpha >= 0`` and ``alpha = 0`` unless the bound is active. Each
system is solved with a Cholesky factorization of the explicitly formed
Gram matrix.
"""

from __future__ import annotations

from typing import Union

import numpy as np

from .core import EPS, MAX_ITER, ProxInfo, ShiftedCompositeNormL2, linearized_residual
from .linalg import Factorization, gram_cholesky, solve_factored
from .secular import radius_search


def prox_cholesky(
    y: np.ndarray,
    psi: ShiftedCompositeNormL2,
    q: np.ndarray,
    sigma: float,
    max_iter: int = MAX_ITER,
    eps: float = EPS,
    return_info: bool = False,
) -> Union[np.ndarray, tuple[np.ndarray, ProxInfo]]:
    """
    Evaluate the prox of ``psi`` at ``q`` into ``y``.

    Parameters
    ----------
    y:
        Output buffer of length ``n``; overwritten and returned.
    psi:
        Shifted penalty providing ``A``, ``b`` and scratch buffers.
    q:
        Point at which the prox is evaluated.
    sigma:
        Positive step size; the correction radius is ``lam * sigma``.
    max_iter:
        Maximum number of Newton updates of the regularization.
    eps:
        Absolute tolerance on ``| ||s|| - lam * sigma |``.
    return_info:
        Also return a :class:`ProxInfo` describing the radius search.
    """

    if max_iter < 1:
        raise ValueError("max_iter must be at least 1")
    q, radius = linearized_residual(y, psi, q, sigma)
    a_mat = psi.A
    np.negative(psi.g, out=psi.g)

    def factorize(alpha: float) -> Factorization:
        return gram_cholesky(a_mat, alpha)

    def solve(fact: Factorization, rhs: np.ndarray, out: np.ndarray) -> np.ndarray:
        return solve_factored(fact, rhs, out=out)

    info = radius_search(a_mat, psi.g, radius, factorize, solve, psi.sol, max_iter, eps)

    np.matmul(a_mat.T, psi.sol, out=y)
    y += q
    if return_info:
        return y, info
    return y


__all__ = ["prox_cholesky"]
