"""Entry point selecting between the Cholesky and QR prox implementations."""

from __future__ import annotations

from typing import Union

import numpy as np

from .cholesky import prox_cholesky
from .core import ProxInfo, ShiftedCompositeNormL2
from .qr import prox_qr

_METHODS = {
    "cholesky": prox_cholesky,
    "qr": prox_qr,
}

METHODS = tuple(_METHODS)


def prox(
    y: np.ndarray,
    psi: ShiftedCompositeNormL2,
    q: np.ndarray,
    sigma: float,
    method: str = "cholesky",
    **options,
) -> Union[np.ndarray, tuple[np.ndarray, ProxInfo]]:
    """
    Evaluate ``argmin_t ||t - q||^2 / (2 sigma) + psi(t)`` into ``y``.

    Args:
        y: Output buffer of length ``n``.
        psi: Shifted composite L2 penalty.
        q: Point at which the prox is evaluated.
        sigma: Positive step size.
        method: ``"cholesky"`` (normal equations) or ``"qr"``.
        **options: Forwarded to the selected implementation (``max_iter``,
            ``eps``, ``return_info`` and, for ``"qr"``, ``refine``).

    Returns:
        ``y``, or ``(y, info)`` when ``return_info=True``.

    Raises:
        ValueError: If ``method`` is unknown.
    """
    try:
        impl = _METHODS[method.lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported prox method '{method}'. Supported methods: {list(METHODS)}"
        ) from None
    return impl(y, psi, q, sigma, **options)


__all__ = ["METHODS", "prox"]
