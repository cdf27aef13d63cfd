"""
Proximal operators of shifted composite L2 norms.

Example
-------
>>> import numpy as np
>>> from shiftedprox.shifted import ShiftedCompositeNormL2, prox
>>> def c(out, x):
...     out[:] = 0.0
>>> def J(out, x):
...     out[:] = np.eye(2)
>>> psi = ShiftedCompositeNormL2(1.0, c, J, np.eye(2), np.zeros(2))
>>> y = prox(np.empty(2), psi, np.array([2.0, 0.0]), 1.0)
>>> np.allclose(y, [1.0, 0.0])
True
"""

from . import cholesky, config, core, linalg, qr, secular
from .cholesky import prox_cholesky
from .config import ProxConfig, create_prox
from .core import (
    EPS,
    MAX_ITER,
    CompositeNormL2,
    DimensionMismatch,
    InplaceCallback,
    PreconditionError,
    ProxInfo,
    ProxStatus,
    ShiftedCompositeNormL2,
    expression,
    name,
    parameters,
    shifted,
    shifted_at,
)
from .linalg import FactorStatus, Factorization, augmented_qr, gram_cholesky
from .prox import METHODS, prox
from .qr import prox_qr

__all__ = [
    "cholesky",
    "config",
    "core",
    "linalg",
    "qr",
    "secular",
    # Core types
    "InplaceCallback",
    "CompositeNormL2",
    "ShiftedCompositeNormL2",
    "DimensionMismatch",
    "PreconditionError",
    "ProxStatus",
    "ProxInfo",
    "FactorStatus",
    "Factorization",
    "EPS",
    "MAX_ITER",
    "METHODS",
    # Construction and accessors
    "shifted",
    "shifted_at",
    "name",
    "expression",
    "parameters",
    # Prox evaluation
    "prox",
    "prox_cholesky",
    "prox_qr",
    "gram_cholesky",
    "augmented_qr",
    "ProxConfig",
    "create_prox",
]
