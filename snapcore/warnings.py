"""Structured warning classes for the SnapCrust suite."""
from __future__ import annotations


class SnapCrustWarning(UserWarning):
    """Base warning class for snapcrust."""


class ConservationWarning(SnapCrustWarning):
    """A transport or reaction delta created or destroyed mass."""

    def __init__(self, violation):
        super().__init__(str(violation))
        self.violation = violation


__all__ = [
    "SnapCrustWarning",
    "ConservationWarning",
]
