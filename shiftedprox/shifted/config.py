"""Configuration of prox evaluations for use inside outer solvers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .core import EPS, MAX_ITER, ShiftedCompositeNormL2
from .prox import METHODS, prox

ProxFn = Callable[..., np.ndarray]


@dataclass(frozen=True)
class ProxConfig:
    """
    Settings for evaluating the prox of a shifted composite L2 norm.

    Args:
        method: ``"cholesky"`` or ``"qr"``. Defaults to ``"cholesky"``.
        max_iter: Maximum number of regularization updates. Defaults to 100.
        eps: Absolute tolerance on ``| ||s|| - lam * sigma |``. Defaults to
            1e-16.
        refine: Apply iterative refinement after each solve. Only used by
            the QR method. Defaults to True.
    """

    method: str = "cholesky"
    max_iter: int = MAX_ITER
    eps: float = EPS
    refine: bool = True


def create_prox(config: Optional[ProxConfig] = None) -> ProxFn:
    """
    Build a prox callable ``f(y, psi, q, sigma, return_info=False)`` from a configuration.

    Raises:
        ValueError: If the method is unsupported, ``max_iter`` is smaller
            than one or ``eps`` is negative.
    """
    if config is None:
        config = ProxConfig()

    method = config.method.lower()
    if method not in METHODS:
        raise ValueError(
            f"Unsupported prox method '{config.method}'. Supported methods: {list(METHODS)}"
        )
    if config.max_iter < 1:
        raise ValueError("max_iter must be at least 1")
    if config.eps < 0.0:
        raise ValueError("eps must be non-negative")

    options = {"max_iter": config.max_iter, "eps": config.eps}
    if method == "qr":
        options["refine"] = config.refine

    def configured_prox(
        y: np.ndarray,
        psi: ShiftedCompositeNormL2,
        q: np.ndarray,
        sigma: float,
        return_info: bool = False,
    ):
        return prox(y, psi, q, sigma, method=method, return_info=return_info, **options)

    return configured_prox


__all__ = ["ProxConfig", "create_prox"]
