"""
snapcrust/rasters.py
--------------------
Elementwise algebra over per-cell arrays ("rasters").

Every operation writes into an explicit output array `out`, which may be one
of the inputs. Nothing here allocates behind the caller's back except where
`out` is left as None, in which case a new array is returned.
"""
import numpy as np

from .conservation import ConservationViolation, report_violation

RASTER_DTYPE = np.float32


def new_raster(grid, fill_value=0.0, dtype=RASTER_DTYPE):
    """ Allocates one value per grid cell. """
    return np.full(grid.num_cells, fill_value, dtype=dtype)


def _out_like(out, like):
    return np.empty_like(like) if out is None else out


def copy(src, out=None):
    out = _out_like(out, src)
    if out is not src:
        np.copyto(out, src)
    return out


def fill(out, value):
    out[...] = value
    return out


def get_ids(src, ids, out=None):
    """
    Gather: out[i] = src[ids[i]] for every position i of `ids`.
    Entries of `out` past len(ids) are left untouched.
    """
    out = _out_like(out, src)
    ids = np.asarray(ids)
    # Fancy indexing copies first, so out may alias src
    out[:ids.shape[0]] = src[ids]
    return out


def add_field(a, b, out=None):
    return np.add(a, b, out=_out_like(out, a))


def mult_field(a, b, out=None):
    return np.multiply(a, b, out=_out_like(out, a))


def add_scalar(a, scalar, out=None):
    return np.add(a, scalar, out=_out_like(out, a), casting='unsafe')


def mult_scalar(a, scalar, out=None):
    return np.multiply(a, scalar, out=_out_like(out, a), casting='unsafe')


def gt_scalar(a, scalar, out=None):
    """ Selection raster (uint8, 1 where a > scalar). """
    if out is None:
        out = np.empty(a.shape, dtype=np.uint8)
    np.greater(a, scalar, out=out, casting='unsafe')
    return out


def as_selection(selection):
    """ Boolean or integer mask -> uint8 raster of 0/1. """
    selection = np.asarray(selection)
    if selection.dtype == np.uint8:
        return selection
    return selection.astype(np.uint8)


def copy_into_selection(a, b, selection, out=None):
    """ out[i] = b[i] where selection[i] == 1, else a[i]. """
    out = _out_like(out, a)
    np.copyto(out, np.where(as_selection(selection) == 1, b, a))
    return out


def fill_into_selection(a, value, selection, out=None):
    """ out[i] = value where selection[i] == 1, else a[i]. """
    out = copy(a, out)
    out[as_selection(selection) == 1] = value
    return out


def arrow_differential(field, grid, out=None):
    """ field[j] - field[i] for every arrow (i, j). Works for scalar or vector fields. """
    diff = field[grid.arrows[:, 1]] - field[grid.arrows[:, 0]]
    if out is None:
        return diff
    np.copyto(out, diff)
    return out


def edge_differential(field, grid, out=None):
    """ field[j] - field[i] for every edge (i, j), i < j. """
    diff = field[grid.edges[:, 1]] - field[grid.edges[:, 0]]
    if out is None:
        return diff
    np.copyto(out, diff)
    return out


def fix_nonnegative_conserved_quantity_delta(delta, quantity):
    """
    Clamps `delta` in place so that quantity + delta cannot go negative:
    delta[i] = -quantity[i] wherever delta[i] < -quantity[i].
    Positive deltas are never modified.
    """
    np.maximum(delta, -quantity, out=delta)
    return delta


def assert_conserved_quantity_delta(delta, threshold, name="quantity", strict=False,
                                    stacklevel=3):
    """
    Checks that a transport delta neither creates nor destroys the quantity:
    |sum(delta)| must not exceed `threshold`.

    Returns:
        ConservationViolation | None: The violation, after it has been reported.
    """
    # float64 accumulator; a float32 sum drifts on large grids
    total = float(np.sum(delta, dtype=np.float64))
    if abs(total) <= threshold:
        return None

    violation = ConservationViolation(
        kind="transport", field=name, magnitude=total, threshold=threshold)
    return report_violation(violation, strict=strict, stacklevel=stacklevel)
