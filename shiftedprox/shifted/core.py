"""
Composite L2 penalties linearized around a base point.

A :class:`CompositeNormL2` represents ``x -> lam * ||c(x)||_2`` for a
user-supplied constraint map ``c`` with Jacobian ``J``. Shifting it at a
point ``xk`` replaces ``c`` by its linear model and yields a
:class:`ShiftedCompositeNormL2`::

    psi(t) = lam * ||c(xk) + J(xk) t||_2

The callbacks follow the in-place convention ``c(out, x)`` / ``J(out, x)``:
they must fill a preallocated ``(m,)`` vector or ``(m, n)`` matrix and
return nothing. Shifting always allocates fresh ``A``/``b`` buffers, so a
shifted instance captured by an outer solver is never modified by a later
shift.

References:
    - Aravkin, Baraldi & Orban, *A proximal quasi-Newton trust-region
      method for nonsmooth regularized optimization* (2022)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, ClassVar, Optional

import numpy as np
import scipy.sparse as sp

from ..norms import NormL2

InplaceCallback = Callable[[np.ndarray, np.ndarray], None]

MAX_ITER = 100
EPS = 1e-16


class DimensionMismatch(ValueError):
    """Raised when array shapes are inconsistent with the penalty."""


class PreconditionError(RuntimeError):
    """Raised when an operation needs a shifted penalty but got an unshifted one."""


class ProxStatus(Enum):
    """How the radius search in a prox evaluation terminated."""

    INTERIOR = "interior"
    BOUNDARY = "boundary"
    MAX_ITER = "max_iter"


@dataclass
class ProxInfo:
    """
    Diagnostics of a single prox evaluation.

    Attributes:
        status: Termination reason of the radius search.
        nit: Number of regularization updates performed.
        alpha: Final regularization (Lagrange multiplier of ``||s|| <= radius``).
        step_norm: Norm of the returned correction ``s``.
        radius: Target radius ``lam * sigma``.
        rank_deficient: True if the unregularized system was singular.
    """

    status: ProxStatus
    nit: int
    alpha: float
    step_norm: float
    radius: float
    rank_deficient: bool = False


def _as_jacobian(a_mat: np.ndarray) -> np.ndarray:
    # sparse Jacobians are densified; the factorizations work on dense arrays
    if sp.issparse(a_mat):
        a_mat = a_mat.toarray()
    a_mat = np.asarray(a_mat, dtype=float)
    if a_mat.ndim != 2:
        raise DimensionMismatch(f"Jacobian must be a 2-D array, got shape {a_mat.shape}")
    return a_mat


def _as_constraint(b_vec: np.ndarray, a_mat: np.ndarray) -> np.ndarray:
    b_vec = np.asarray(b_vec, dtype=float)
    if b_vec.ndim != 1 or b_vec.shape[0] != a_mat.shape[0]:
        raise DimensionMismatch(
            "Wrong input dimensions, there should be as many constraints as rows "
            f"in the Jacobian (b has shape {b_vec.shape}, A has shape {a_mat.shape})"
        )
    return b_vec


def _as_point(x: np.ndarray, n: int, what: str = "xk") -> np.ndarray:
    x = np.asarray(x, dtype=float)
    if x.shape != (n,):
        raise DimensionMismatch(f"{what} must have shape ({n},), got {x.shape}")
    return x


@dataclass(eq=False)
class CompositeNormL2:
    """
    Unshifted composite penalty ``x -> lam * ||c(x)||_2``.

    ``A`` and ``b`` only fix the shapes ``(m, n)`` and ``(m,)`` used when
    shifting; their contents are not meaningful. No prox is available until
    the penalty is shifted with :meth:`shift`.
    """

    is_shifted: ClassVar[bool] = False

    lam: float
    c: InplaceCallback
    J: InplaceCallback
    A: np.ndarray
    b: np.ndarray
    h: NormL2 = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.A = _as_jacobian(self.A)
        self.b = _as_constraint(self.b, self.A)
        self.h = NormL2(self.lam)
        self.lam = self.h.lam

    @property
    def shape(self) -> tuple[int, int]:
        return self.A.shape

    def __call__(self, x: np.ndarray) -> float:
        x = _as_point(x, self.A.shape[1], what="x")
        value = np.empty_like(self.b)
        self.c(value, x)
        return self.h(value)

    def shift(self, xk: np.ndarray) -> "ShiftedCompositeNormL2":
        """Return a new penalty linearized at ``xk``; ``self`` is left untouched."""
        xk = _as_point(xk, self.A.shape[1])
        b_vec = np.empty_like(self.b)
        self.c(b_vec, xk)
        a_mat = np.empty_like(self.A)
        self.J(a_mat, xk)
        return ShiftedCompositeNormL2(self.lam, self.c, self.J, a_mat, b_vec)

    def prox(self, q: np.ndarray, sigma: float, **options) -> np.ndarray:
        raise PreconditionError(
            f"{self.name()} has no proximal operator until it is shifted; call shift(xk) first"
        )

    def name(self) -> str:
        return "composite L2 norm"

    def expression(self) -> str:
        return "x ↦ ‖c(x)‖₂"

    def parameters(self) -> str:
        return f"λ = {self.lam}"


@dataclass(eq=False)
class ShiftedCompositeNormL2(CompositeNormL2):
    """
    Composite L2 penalty linearized at a base point.

    Holds ``A = J(xk)`` and ``b = c(xk)`` together with scratch vectors
    ``g``, ``res``, ``sol`` and ``dsol`` of length ``m`` that are reused by
    every prox evaluation on this instance. Their contents between calls
    carry no meaning, and an instance must not be shared by concurrent prox
    evaluations.
    """

    is_shifted: ClassVar[bool] = True

    g: np.ndarray = field(init=False, repr=False)
    res: np.ndarray = field(init=False, repr=False)
    sol: np.ndarray = field(init=False, repr=False)
    dsol: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.g = np.empty_like(self.b)
        self.res = np.empty_like(self.b)
        self.sol = np.empty_like(self.b)
        self.dsol = np.empty_like(self.b)

    def __call__(self, y: np.ndarray) -> float:
        y = _as_point(y, self.A.shape[1], what="y")
        return self.h(self.b + self.A @ y)

    def prox(
        self,
        q: np.ndarray,
        sigma: float,
        out: Optional[np.ndarray] = None,
        **options,
    ) -> np.ndarray:
        """Allocate (or reuse ``out``) and evaluate :func:`shiftedprox.shifted.prox`."""
        from .prox import prox

        if out is None:
            out = np.empty(self.A.shape[1], dtype=float)
        return prox(out, self, q, sigma, **options)

    def name(self) -> str:
        return "shifted L2 norm"

    def expression(self) -> str:
        return "t ↦ ‖c(xk) + J(xk)t‖₂"

    def parameters(self) -> str:
        return f"c(xk) = {self.b}\n" + " " * 14 + f"J(xk) = {self.A}\n"


def linearized_residual(
    y: np.ndarray, psi: CompositeNormL2, q: np.ndarray, sigma: float
) -> tuple[np.ndarray, float]:
    """
    Check the arguments of a prox call and form ``g = A q + b`` in ``psi.g``.

    Returns the validated ``q`` and the target radius ``lam * sigma``.

    Raises:
        PreconditionError: If ``psi`` is not shifted.
        DimensionMismatch: If ``y`` or ``q`` do not have length ``n``.
        ValueError: If ``sigma`` is not positive.
    """

    if not psi.is_shifted:
        raise PreconditionError(
            f"prox is only defined for shifted penalties, got {psi.name()}; "
            "call shift(xk) first"
        )
    n = psi.A.shape[1]
    q = _as_point(q, n, what="q")
    if not isinstance(y, np.ndarray) or y.shape != (n,) or y.dtype != np.float64:
        raise DimensionMismatch(f"output buffer y must be a float64 array of shape ({n},)")
    if np.shares_memory(y, q):
        q = q.copy()
    if not sigma > 0.0:
        raise ValueError("sigma must be positive")
    np.matmul(psi.A, q, out=psi.g)
    psi.g += psi.b
    return q, psi.lam * sigma


def shifted_at(
    lam: float,
    c: InplaceCallback,
    J: InplaceCallback,
    A: np.ndarray,
    b: np.ndarray,
    xk: np.ndarray,
) -> ShiftedCompositeNormL2:
    """
    Evaluate ``c`` and ``J`` at ``xk`` into ``b`` and ``A`` and wrap them.

    Unlike :func:`shifted`, the supplied buffers are written in place and
    become the buffers of the returned penalty. A sparse ``A`` is copied
    to a dense array first, so only that copy receives ``J(xk)``.
    """

    a_mat = _as_jacobian(A)
    b_vec = _as_constraint(b, a_mat)
    xk = _as_point(xk, a_mat.shape[1])
    c(b_vec, xk)
    J(a_mat, xk)
    return ShiftedCompositeNormL2(lam, c, J, a_mat, b_vec)


def shifted(psi: CompositeNormL2, xk: np.ndarray) -> ShiftedCompositeNormL2:
    """Shift an unshifted or already shifted penalty to a new base point."""

    if not isinstance(psi, CompositeNormL2):
        raise TypeError(f"cannot shift object of type {type(psi).__name__}")
    return psi.shift(xk)


def name(psi: CompositeNormL2) -> str:
    return psi.name()


def expression(psi: CompositeNormL2) -> str:
    return psi.expression()


def parameters(psi: CompositeNormL2) -> str:
    return psi.parameters()


__all__ = [
    "InplaceCallback",
    "MAX_ITER",
    "EPS",
    "DimensionMismatch",
    "PreconditionError",
    "ProxStatus",
    "ProxInfo",
    "CompositeNormL2",
    "ShiftedCompositeNormL2",
    "linearized_residual",
    "shifted_at",
    "shifted",
    "name",
    "expression",
    "parameters",
]
