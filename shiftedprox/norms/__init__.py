"""Unshifted norm penalties."""

from .core import NormL2

__all__ = ["NormL2"]
