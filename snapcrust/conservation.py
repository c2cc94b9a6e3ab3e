"""
snapcrust/conservation.py
-------------------------
Reporting of conserved-quantity violations.

A violation is a diagnostic, not a crash: it is logged, raised as a
ConservationWarning (turn warnings into errors to halt a debug run) and
handed back to the caller. Strict mode raises ConservationError instead.
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass

from snapcore.errors import ConservationError
from snapcore.warnings import ConservationWarning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConservationViolation:
    """
    Attributes:
        kind: "transport" (global sum check) or "reaction" (per-cell check).
        field: Name of the checked quantity, e.g. "sima" or "sial+sima".
        magnitude: Net transport sum, or the largest per-cell |sial + sima|.
        threshold: The allowed magnitude.
        cell_ids: Offending cells. Empty for transport checks, which are global.
    """
    kind: str
    field: str
    magnitude: float
    threshold: float
    cell_ids: tuple = ()

    def __str__(self):
        where = ""
        if self.cell_ids:
            shown = ", ".join(str(i) for i in self.cell_ids[:8])
            more = "" if len(self.cell_ids) <= 8 else f", ... ({len(self.cell_ids)} cells)"
            where = f" at cell(s) {shown}{more}"
        return (f"{self.kind} delta of {self.field} is not conserved{where}: "
                f"magnitude {self.magnitude:.6e} exceeds threshold {self.threshold:.6e}")


def report_violation(violation, strict=False, stacklevel=3):
    """ stacklevel counts from warnings.warn: 3 is the caller of the caller. """
    logger.warning("%s", violation)
    if strict:
        raise ConservationError(violation)
    warnings.warn(ConservationWarning(violation), stacklevel=stacklevel)
    return violation
