"""
Factorizations of the regularized Gram matrix ``A A^T + alpha I``.

Both factorization routes return a lower-triangular factor ``L`` with
``L L^T = A A^T + alpha I`` wrapped in a :class:`Factorization`. Numerical
singularity is reported through :attr:`Factorization.status` rather than an
exception so that callers can branch to a regularized retry explicitly. Any
other failure (for example non-finite input rejected by SciPy's finite
check) propagates unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np
import scipy.linalg as la


class FactorStatus(Enum):
    """Outcome of a factorization attempt."""

    OK = "ok"
    SINGULAR = "singular"


@dataclass
class Factorization:
    """
    Lower-triangular factor of ``A A^T + alpha I``.

    Attributes:
        status: ``OK`` when ``lower`` is usable, ``SINGULAR`` otherwise.
        lower: The factor ``L`` (``None`` when singular).
        alpha: Regularization the factor was computed for.
    """

    status: FactorStatus
    lower: Optional[np.ndarray]
    alpha: float

    @property
    def ok(self) -> bool:
        return self.status is FactorStatus.OK


def _singular(alpha: float) -> Factorization:
    return Factorization(status=FactorStatus.SINGULAR, lower=None, alpha=alpha)


def _degenerate_pivots(diag: np.ndarray, scale: int) -> bool:
    pivots = diag * diag
    if pivots.size == 0:
        return False
    return float(pivots.min()) <= scale * np.finfo(float).eps * float(pivots.max())


def gram_cholesky(a_mat: np.ndarray, alpha: float = 0.0) -> Factorization:
    """
    Cholesky factor of the (regularized) normal-equations matrix.

    Forms ``A A^T + alpha I`` explicitly, which squares the condition number
    of ``A``. Pivots that are numerically zero relative to the largest one
    are treated as singular even when LAPACK accepts them.
    """

    m, n = a_mat.shape
    gram = a_mat @ a_mat.T
    if alpha != 0.0:
        gram[np.diag_indices(m)] += alpha
    try:
        lower = la.cholesky(gram, lower=True, check_finite=True)
    except la.LinAlgError:
        return _singular(alpha)
    if _degenerate_pivots(np.diag(lower), max(m, n)):
        return _singular(alpha)
    return Factorization(status=FactorStatus.OK, lower=lower, alpha=alpha)


def augmented_qr(a_mat: np.ndarray, alpha: float = 0.0) -> Factorization:
    """
    Factor of ``A A^T + alpha I`` from a QR decomposition.

    Computes ``R`` from the QR factorization of ``[A^T; sqrt(alpha) I]``
    and returns ``L = R^T`` with a positive diagonal. The Gram matrix is
    never formed.
    """

    m, n = a_mat.shape
    if alpha > 0.0:
        stacked = np.vstack([a_mat.T, np.sqrt(alpha) * np.eye(m)])
    else:
        stacked = a_mat.T
    if stacked.shape[0] < m:
        return _singular(alpha)
    (r_full,) = la.qr(stacked, mode="r", check_finite=True)
    r_mat = r_full[:m, :]
    diag = np.diag(r_mat)
    if _degenerate_pivots(diag, max(m, n)):
        return _singular(alpha)
    signs = np.where(diag < 0.0, -1.0, 1.0)
    lower = (signs[:, None] * r_mat).T
    return Factorization(status=FactorStatus.OK, lower=lower, alpha=alpha)


def solve_factored(
    fact: Factorization, rhs: np.ndarray, out: Optional[np.ndarray] = None
) -> np.ndarray:
    """Solve ``L L^T x = rhs`` with the factor held by ``fact``."""

    sol = la.cho_solve((fact.lower, True), rhs, check_finite=False)
    if out is None:
        return sol
    out[...] = sol
    return out


def forward_solve(fact: Factorization, rhs: np.ndarray) -> np.ndarray:
    """Return ``L^{-1} rhs``."""

    return la.solve_triangular(fact.lower, rhs, lower=True, check_finite=False)


def apply_regularized_gram(
    a_mat: np.ndarray, alpha: float, vec: np.ndarray, out: Optional[np.ndarray] = None
) -> np.ndarray:
    """Compute ``(A A^T + alpha I) vec`` without forming the Gram matrix."""

    result = a_mat @ (a_mat.T @ vec)
    if alpha != 0.0:
        result += alpha * vec
    if out is None:
        return result
    out[...] = result
    return out


__all__ = [
    "FactorStatus",
    "Factorization",
    "gram_cholesky",
    "augmented_qr",
    "solve_factored",
    "forward_solve",
    "apply_regularized_gram",
]
