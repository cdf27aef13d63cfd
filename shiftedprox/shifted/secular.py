"""
Radius search on the regularization parameter of ``(A A^T + alpha I) s = -g``.

For ``alpha >= 0`` let ``s(alpha)`` solve the regularized normal equations.
The prox of a shifted composite L2 norm needs either the unregularized
solution when ``||s(0)|| <= radius`` or the ``alpha > 0`` with
``||s(alpha)|| = radius``. The latter is found with Newton's method on the
secular equation ``1 / ||s(alpha)|| = 1 / radius``::

    alpha <- alpha + (||s|| / ||w||)**2 * (||s|| - radius) / radius

where ``w = L^{-1} s`` and ``L L^T = A A^T + alpha I``. Started from the
left of the root the iterates increase monotonically and converge
quadratically. Every iterate is kept inside the bracket

    max(0, ||g|| / radius - ||A||_F**2) <= alpha <= ||g|| / radius

which always contains the root; a step leaving it is replaced by the
bracket midpoint.

References:
    - Moré & Sorensen, *Computing a trust region step* (1983)
    - Nocedal & Wright, *Numerical Optimization* (2006), Algorithm 4.3
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from ..logging import get_logger
from .core import ProxInfo, ProxStatus
from .linalg import Factorization, forward_solve

logger = get_logger(__name__)

Factorizer = Callable[[float], Factorization]
FactoredSolve = Callable[[Factorization, np.ndarray, np.ndarray], np.ndarray]


def newton_update(alpha: float, step_norm: float, w_norm: float, radius: float) -> float:
    """One Newton step on ``1 / ||s(alpha)|| - 1 / radius``."""
    return alpha + (step_norm / w_norm) ** 2 * (step_norm - radius) / radius


@dataclass
class RadiusBracket:
    """Interval known to contain the root of the secular equation."""

    low: float
    high: float

    @classmethod
    def from_problem(cls, g_norm: float, radius: float, fro_sq: float) -> "RadiusBracket":
        high = g_norm / radius
        return cls(low=max(0.0, high - fro_sq), high=high)

    def update(self, alpha: float, step_norm: float, radius: float) -> None:
        if step_norm > radius:
            self.low = max(self.low, alpha)
        else:
            self.high = min(self.high, alpha)

    def resolved(self, alpha: float) -> bool:
        """True once the bracket has shrunk to a few ulps around ``alpha``."""
        return self.high - self.low <= 4.0 * np.spacing(alpha)

    def safeguard(self, alpha: float) -> float:
        if self.low <= alpha <= self.high and alpha > 0.0:
            return alpha
        if self.low < self.high:
            return 0.5 * (self.low + self.high)
        return alpha


def regularization_floor(a_mat: np.ndarray) -> float:
    """Smallest ``alpha`` whose regularized Gram matrix factors reliably."""
    m, n = a_mat.shape
    fro_sq = float(np.sum(a_mat * a_mat))
    return 10.0 * max(m, n) * np.finfo(float).eps * max(1.0, fro_sq)


def radius_search(
    a_mat: np.ndarray,
    rhs: np.ndarray,
    radius: float,
    factorize: Factorizer,
    solve: FactoredSolve,
    sol: np.ndarray,
    max_iter: int,
    eps: float,
) -> ProxInfo:
    """
    Solve ``(A A^T + alpha I) sol = rhs`` with ``||sol|| <= radius``.

    ``rhs`` is ``-g``. The result is written to ``sol``. A singular
    unregularized system is logged once and restarted from
    ``alpha = ||g|| / radius``; exhausting ``max_iter`` updates is logged and
    the last iterate is kept.

    Raises:
        numpy.linalg.LinAlgError: If a regularized system cannot be factored.
    """

    g_norm = float(np.linalg.norm(rhs))
    if g_norm == 0.0:
        sol[...] = 0.0
        return ProxInfo(status=ProxStatus.INTERIOR, nit=0, alpha=0.0, step_norm=0.0, radius=radius)

    fro_sq = float(np.sum(a_mat * a_mat))
    bracket = RadiusBracket.from_problem(g_norm, radius, fro_sq)
    alpha_floor = regularization_floor(a_mat)
    rank_deficient = False

    alpha = 0.0
    fact = factorize(alpha)
    if fact.ok:
        solve(fact, rhs, sol)
        step_norm = float(np.linalg.norm(sol))
        if step_norm <= radius:
            return ProxInfo(
                status=ProxStatus.INTERIOR,
                nit=0,
                alpha=0.0,
                step_norm=step_norm,
                radius=radius,
            )
    else:
        rank_deficient = True
        alpha = max(bracket.high, alpha_floor)
        logger.warning(
            "Jacobian is not full row rank; restarting with regularization alpha = %g",
            alpha,
        )
        fact = _factorize_regularized(factorize, alpha)
        solve(fact, rhs, sol)
        step_norm = float(np.linalg.norm(sol))

    status = ProxStatus.BOUNDARY
    nit = 0
    visited = {alpha}
    while abs(step_norm - radius) > eps:
        if nit >= max_iter:
            logger.warning(
                "Maximum number of iterations (%d) reached with |‖s‖ - Δ| = %.3e; "
                "the returned prox value may be inexact",
                max_iter,
                abs(step_norm - radius),
            )
            status = ProxStatus.MAX_ITER
            break
        bracket.update(alpha, step_norm, radius)
        if step_norm < radius and alpha <= alpha_floor:
            status = ProxStatus.INTERIOR
            break
        w_norm = float(np.linalg.norm(forward_solve(fact, sol)))
        alpha_new = max(
            bracket.safeguard(newton_update(alpha, step_norm, w_norm, radius)),
            alpha_floor,
        )
        # iterates stalled or cycling within rounding of the root
        if (
            alpha_new in visited
            or abs(alpha_new - alpha) <= 4.0 * np.spacing(alpha)
            or bracket.resolved(alpha)
        ):
            break
        visited.add(alpha_new)
        alpha = alpha_new
        fact = _factorize_regularized(factorize, alpha)
        solve(fact, rhs, sol)
        step_norm = float(np.linalg.norm(sol))
        nit += 1
        logger.debug("iteration %d: alpha = %.16e, ‖s‖ = %.16e", nit, alpha, step_norm)

    return ProxInfo(
        status=status,
        nit=nit,
        alpha=alpha,
        step_norm=step_norm,
        radius=radius,
        rank_deficient=rank_deficient,
    )


def _factorize_regularized(factorize: Factorizer, alpha: float) -> Factorization:
    fact = factorize(alpha)
    if not fact.ok:
        raise np.linalg.LinAlgError(
            f"regularized Gram matrix is not positive definite for alpha = {alpha:g}"
        )
    return fact


__all__ = [
    "newton_update",
    "RadiusBracket",
    "regularization_floor",
    "radius_search",
]
