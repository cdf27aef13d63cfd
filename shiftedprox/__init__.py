"""shiftedprox - proximal operators of linearized composite L2 penalties."""

__version__ = "0.1.0"

from .logging import configure_logging, get_logger, set_log_level

# Penalties
from .norms import NormL2
from .shifted import (
    CompositeNormL2,
    DimensionMismatch,
    PreconditionError,
    ProxConfig,
    ProxInfo,
    ProxStatus,
    ShiftedCompositeNormL2,
    create_prox,
    expression,
    name,
    parameters,
    prox,
    prox_cholesky,
    prox_qr,
    shifted,
    shifted_at,
)

__all__ = [
    "__version__",
    # Logging
    "configure_logging",
    "get_logger",
    "set_log_level",
    # Penalties
    "NormL2",
    "CompositeNormL2",
    "ShiftedCompositeNormL2",
    # Errors and diagnostics
    "DimensionMismatch",
    "PreconditionError",
    "ProxInfo",
    "ProxStatus",
    # Operations
    "shifted",
    "shifted_at",
    "name",
    "expression",
    "parameters",
    "prox",
    "prox_cholesky",
    "prox_qr",
    "ProxConfig",
    "create_prox",
]
