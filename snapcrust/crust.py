"""
snapcrust/crust.py
------------------
A Crust is a set of rasters describing a planet's crust, one value per grid
cell. The module level functions extend the raster algebra to whole Crusts:
every function takes its output Crust explicitly, and the output may be one
of the inputs.
"""
import logging
from dataclasses import dataclass
from uuid import uuid4

import numpy as np

from snapcore.config import ConservationOptions
from snapcore.errors import ConfigurationError
from . import rasters
from .conservation import ConservationViolation, report_violation
from .numerics import fill_into_selection_kernel

logger = logging.getLogger(__name__)

DEFAULT_CONSERVATION = ConservationOptions()


@dataclass
class RockColumn:
    ''' The state of a single cell. '''
    sial: float = 0.0
    sima: float = 0.0
    age: float = 0.0


class Crust:
    """
    Per-cell crust fields, sized to the owning grid.

    Attributes:
        sial (np.ndarray): Thickness of the buoyant, unsubductable component
            ("felsic" or "continental" crust). Conserved.
        sima (np.ndarray): Thickness of the dense, subductable component
            ("mafic" or "oceanic" crust). Conserved.
        age (np.ndarray): Age of the subductable component. Not conserved.
    """
    FIELDS = ('sial', 'sima', 'age')

    def __init__(self, grid=None, uuid=None):
        if grid is None:
            raise ConfigurationError('missing parameter: "grid"')
        self.uuid = uuid or uuid4().hex
        self.grid = grid

        self.sial = rasters.new_raster(grid)
        self.sima = rasters.new_raster(grid)
        self.age = rasters.new_raster(grid)

    def __len__(self):
        return self.sial.shape[0]

    def get_value(self, i):
        return get_value(self, i)

    def set_value(self, i, rock_column):
        set_value(self, i, rock_column)

    def __repr__(self):
        return f"Crust(uuid={self.uuid!r}, cells={len(self)})"


def get_value(crust, i):
    return RockColumn(sial=float(crust.sial[i]),
                      sima=float(crust.sima[i]),
                      age=float(crust.age[i]))


def set_value(crust, i, rock_column):
    crust.sial[i] = rock_column.sial
    crust.sima[i] = rock_column.sima
    crust.age[i]  = rock_column.age


def copy(source, destination):
    rasters.copy(source.sial, destination.sial)
    rasters.copy(source.sima, destination.sima)
    rasters.copy(source.age, destination.age)
    return destination


def fill(crust, rock_column):
    rasters.fill(crust.sial, rock_column.sial)
    rasters.fill(crust.sima, rock_column.sima)
    rasters.fill(crust.age, rock_column.age)
    return crust


def copy_into_selection(crust, copied_crust, selection, result_crust):
    """ Cells where selection == 1 come from copied_crust, the rest from crust. """
    selection = rasters.as_selection(selection)
    for name in Crust.FIELDS:
        rasters.copy_into_selection(getattr(crust, name), getattr(copied_crust, name),
                                    selection, getattr(result_crust, name))
    return result_crust


def fill_into_selection(crust, rock_column, selection, result_crust):
    """
    Cells where selection == 1 are set to rock_column; the rest keep the
    values of crust. Reads the selection once for all three fields.
    """
    selection = rasters.as_selection(selection)
    if selection.shape != result_crust.sial.shape:
        raise ValueError(f"selection has shape {selection.shape}, "
                         f"crust has {len(result_crust)} cells")

    if result_crust is not crust:
        copy(crust, result_crust)

    fill_into_selection_kernel(selection,
                               result_crust.sial, result_crust.sima, result_crust.age,
                               float(rock_column.sial), float(rock_column.sima),
                               float(rock_column.age))
    return result_crust


def get_ids(crust, ids, result_crust):
    """ result[i] = crust[ids[i]] for every position i of ids. """
    rasters.get_ids(crust.sial, ids, result_crust.sial)
    rasters.get_ids(crust.sima, ids, result_crust.sima)
    rasters.get_ids(crust.age, ids, result_crust.age)
    return result_crust


def mult_field(crust, field, result_crust):
    rasters.mult_field(crust.sial, field, result_crust.sial)
    rasters.mult_field(crust.sima, field, result_crust.sima)
    rasters.mult_field(crust.age, field, result_crust.age)
    return result_crust


def add_delta(crust, crust_delta, result_crust):
    rasters.add_field(crust.sial, crust_delta.sial, result_crust.sial)
    rasters.add_field(crust.sima, crust_delta.sima, result_crust.sima)
    rasters.add_field(crust.age, crust_delta.age, result_crust.age)
    return result_crust


def fix_delta(crust_delta, crust):
    """
    Clamps the conserved fields of crust_delta in place so that
    add_delta(crust, crust_delta, ...) cannot drive sial or sima negative.
    Run it before add_delta for any delta that may over-subtract
    (erosion, subduction). Age is left alone.
    """
    rasters.fix_nonnegative_conserved_quantity_delta(crust_delta.sial, crust.sial)
    rasters.fix_nonnegative_conserved_quantity_delta(crust_delta.sima, crust.sima)
    return crust_delta


def _resolve(threshold, strict, options):
    options = options or DEFAULT_CONSERVATION
    threshold = options.threshold if threshold is None else threshold
    strict = options.strict if strict is None else strict
    return threshold, strict


def assert_conserved_transport_delta(crust_delta, threshold=None, strict=None, options=None):
    """
    A transport moves sial and sima between cells: the global sum of each
    delta field must stay within threshold of zero.

    Returns:
        list[ConservationViolation]: Empty when conserved.
    """
    threshold, strict = _resolve(threshold, strict, options)
    violations = []
    for name in ('sima', 'sial'):
        v = rasters.assert_conserved_quantity_delta(
            getattr(crust_delta, name), threshold, name=name, strict=strict,
            stacklevel=4)
        if v is not None:
            violations.append(v)
    return violations


def assert_conserved_reaction_delta(crust_delta, threshold=None, scratch=None,
                                    strict=None, options=None):
    """
    A reaction converts sial <-> sima within a cell: per cell,
    (delta.sial + delta.sima)**2 must not exceed threshold**2.

    Args:
        scratch (np.ndarray, optional): Work raster, overwritten.

    Returns:
        list[ConservationViolation]: Empty when conserved, else one entry
            listing every offending cell.
    """
    threshold, strict = _resolve(threshold, strict, options)

    total = scratch if scratch is not None else np.empty_like(crust_delta.sial)
    rasters.fill(total, 0)
    rasters.add_field(total, crust_delta.sima, total)
    rasters.add_field(total, crust_delta.sial, total)
    rasters.mult_field(total, total, total)

    bad = np.flatnonzero(rasters.gt_scalar(total, threshold * threshold))
    if bad.size == 0:
        return []

    violation = ConservationViolation(
        kind="reaction", field="sial+sima",
        magnitude=float(np.sqrt(total[bad].max())),
        threshold=threshold,
        cell_ids=tuple(int(i) for i in bad))
    return [report_violation(violation, strict=strict)]


def total_mass(crust):
    ''' (sum of sial, sum of sima), accumulated in float64. '''
    return (float(np.sum(crust.sial, dtype=np.float64)),
            float(np.sum(crust.sima, dtype=np.float64)))
