"""
The unshifted Euclidean norm penalty ``h(x) = lam * ||x||_2``.

This is the outer function of the composite penalties in
:mod:`shiftedprox.shifted`. Only its weight and its own proximal operator are
needed there; the shifted composite prox never calls :meth:`NormL2.prox`.

References:
    - Parikh & Boyd, *Proximal Algorithms* (2014), Section 6.5.1
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class NormL2:
    """
    Weighted Euclidean norm ``x -> lam * ||x||_2``.

    Attributes:
        lam: Positive penalty weight. Immutable once the penalty is built.
    """

    lam: float

    def __post_init__(self) -> None:
        if not np.isfinite(self.lam) or self.lam <= 0.0:
            raise ValueError("NormL2 weight lam must be positive and finite")
        object.__setattr__(self, "lam", float(self.lam))

    def __call__(self, x: np.ndarray) -> float:
        return self.lam * float(np.linalg.norm(np.asarray(x, dtype=float)))

    def prox(
        self, q: np.ndarray, sigma: float, out: Optional[np.ndarray] = None
    ) -> np.ndarray:
        """
        Block soft-thresholding, the prox of ``sigma * lam * ||.||_2`` at ``q``.

        Returns ``max(0, 1 - lam * sigma / ||q||) * q``, which is the zero
        vector whenever ``||q|| <= lam * sigma``.
        """

        if sigma <= 0.0:
            raise ValueError("sigma must be positive")
        q = np.asarray(q, dtype=float)
        if out is None:
            out = np.empty_like(q)
        q_norm = float(np.linalg.norm(q))
        radius = self.lam * sigma
        if q_norm <= radius:
            out[...] = 0.0
        else:
            np.multiply(q, 1.0 - radius / q_norm, out=out)
        return out


__all__ = ["NormL2"]
