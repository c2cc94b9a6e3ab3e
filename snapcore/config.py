"""
snapcore/config.py
------------------
Option containers for Grid construction and conservation checking.
Options are plain dataclasses; reading them from files is left to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass, fields

from .errors import ConfigurationError


@dataclass
class GridOptions:
    """
    Construction options for :class:`snapcrust.grid.Grid`.

    Attributes:
        voronoi_resolution_factor (float): Scales the spatial partition size,
            P = (factor * sqrt(num_cells))**2 sample points. Larger values give
            tighter regions and fewer misassigned near-boundary queries.
        refine_nearest (bool): Follow the partition lookup with a greedy walk
            over neighbors so answers match the exact nearest vertex.
    """
    voronoi_resolution_factor: float = 2.0
    refine_nearest: bool = True

    def validate(self):
        if self.voronoi_resolution_factor < 0:
            raise ConfigurationError(
                f"voronoi_resolution_factor must be >= 0, got {self.voronoi_resolution_factor}")
        return self


@dataclass
class ConservationOptions:
    """
    Defaults for the conservation assertions.

    Attributes:
        threshold (float): Allowed magnitude of mass creation/destruction.
        strict (bool): Raise ConservationError instead of warning.
    """
    threshold: float = 1e-2
    strict: bool = False

    def validate(self):
        if self.threshold < 0:
            raise ConfigurationError(f"threshold must be >= 0, got {self.threshold}")
        return self


def from_mapping(cls, mapping):
    """
    Builds an options dataclass from a plain dict, rejecting unknown keys.

    Example:
        opts = from_mapping(GridOptions, {"voronoi_resolution_factor": 3})
    """
    mapping = dict(mapping or {})
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(mapping) - known)
    if unknown:
        raise ConfigurationError(f"unknown {cls.__name__} option(s): {', '.join(unknown)}")
    return cls(**mapping).validate()


__all__ = ["GridOptions", "ConservationOptions", "from_mapping"]
