"""
Prox of a shifted composite L2 norm through QR factorizations.

Solves the same subproblem as :mod:`shiftedprox.shifted.cholesky` but
obtains the triangular factor of ``A A^T + alpha I`` from the QR
decomposition of ``[A^T; sqrt(alpha) I]``, so the condition number of ``A``
is not squared. Every solve is followed by one step of iterative refinement
on the regularized normal equations when its residual exceeds
``eps_machine ** 0.75``.
"""

from __future__ import annotations

from typing import Union

import numpy as np

from ..logging import get_logger
from .core import EPS, MAX_ITER, ProxInfo, ShiftedCompositeNormL2, linearized_residual
from .linalg import Factorization, apply_regularized_gram, augmented_qr, solve_factored
from .secular import radius_search

logger = get_logger(__name__)

REFINEMENT_TOL = np.finfo(float).eps ** 0.75


def refined_solve(
    psi: ShiftedCompositeNormL2,
    fact: Factorization,
    rhs: np.ndarray,
    out: np.ndarray,
    refine: bool = True,
) -> np.ndarray:
    """
    Solve ``(A A^T + alpha I) out = rhs`` and refine once if needed.

    Uses ``psi.res`` and ``psi.dsol`` as scratch space.
    """

    solve_factored(fact, rhs, out=out)
    if not refine:
        return out
    apply_regularized_gram(psi.A, fact.alpha, out, out=psi.res)
    np.subtract(rhs, psi.res, out=psi.res)
    res_norm = float(np.linalg.norm(psi.res))
    if res_norm > REFINEMENT_TOL:
        logger.debug("refining solution, residual norm %.3e", res_norm)
        solve_factored(fact, psi.res, out=psi.dsol)
        out += psi.dsol
    return out


def prox_qr(
    y: np.ndarray,
    psi: ShiftedCompositeNormL2,
    q: np.ndarray,
    sigma: float,
    max_iter: int = MAX_ITER,
    eps: float = EPS,
    refine: bool = True,
    return_info: bool = False,
) -> Union[np.ndarray, tuple[np.ndarray, ProxInfo]]:
    """
    Evaluate the prox of ``psi`` at ``q`` into ``y`` using QR factors.

    Accepts the same arguments as :func:`prox_cholesky` plus ``refine``,
    which toggles the iterative refinement step.
    """

    if max_iter < 1:
        raise ValueError("max_iter must be at least 1")
    q, radius = linearized_residual(y, psi, q, sigma)
    a_mat = psi.A
    np.negative(psi.g, out=psi.g)

    def factorize(alpha: float) -> Factorization:
        return augmented_qr(a_mat, alpha)

    def solve(fact: Factorization, rhs: np.ndarray, out: np.ndarray) -> np.ndarray:
        return refined_solve(psi, fact, rhs, out, refine=refine)

    info = radius_search(a_mat, psi.g, radius, factorize, solve, psi.sol, max_iter, eps)

    np.matmul(a_mat.T, psi.sol, out=y)
    y += q
    if return_info:
        return y, info
    return y


__all__ = ["REFINEMENT_TOL", "refined_solve", "prox_qr"]
