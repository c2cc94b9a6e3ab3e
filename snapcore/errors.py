"""Custom exceptions for the SnapCrust suite."""
from __future__ import annotations


class SnapCrustError(Exception):
    """Base exception for snapsphere / snapcrust errors."""


class ConfigurationError(SnapCrustError, ValueError):
    """Invalid options or missing construction parameters."""


class MeshError(SnapCrustError, ValueError):
    """A mesh failed an explicit validity check."""


class ConservationError(SnapCrustError, ArithmeticError):
    """A conserved quantity changed by more than the allowed threshold.

    Only raised in strict mode; otherwise the same condition is reported
    through :class:`snapcore.warnings.ConservationWarning`.
    """

    def __init__(self, violation):
        super().__init__(str(violation))
        self.violation = violation


__all__ = [
    "SnapCrustError",
    "ConfigurationError",
    "MeshError",
    "ConservationError",
]
