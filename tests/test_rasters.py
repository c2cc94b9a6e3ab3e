import warnings

import numpy as np
import pytest

from snapcore.errors import ConservationError
from snapcore.warnings import ConservationWarning
from snapcrust import rasters


def test_new_raster(grid):
    r = rasters.new_raster(grid, 2.5)
    assert r.dtype == np.float32
    assert r.shape == (grid.num_cells,)
    assert np.all(r == 2.5)


def test_copy_and_fill():
    a = np.arange(5, dtype=np.float32)
    b = rasters.copy(a, np.zeros(5, dtype=np.float32))
    rasters.fill(a, 7)
    np.testing.assert_array_equal(b, [0, 1, 2, 3, 4])
    assert rasters.copy(a, a) is a


def test_get_ids_gathers_and_leaves_tail():
    src = np.array([10, 11, 12, 13, 14], dtype=np.float32)
    out = np.full(5, -1, dtype=np.float32)
    rasters.get_ids(src, [4, 0, 4], out)
    np.testing.assert_array_equal(out, [14, 10, 14, -1, -1])


def test_get_ids_may_alias():
    src = np.array([10, 11, 12], dtype=np.float32)
    rasters.get_ids(src, [2, 1, 0], src)
    np.testing.assert_array_equal(src, [12, 11, 10])


def test_selection_ops():
    a = np.array([1, 2, 3, 4], dtype=np.float32)
    b = np.array([9, 9, 9, 9], dtype=np.float32)
    sel = np.array([True, False, True, False])
    np.testing.assert_array_equal(rasters.copy_into_selection(a, b, sel), [9, 2, 9, 4])
    np.testing.assert_array_equal(rasters.fill_into_selection(a, 0, sel), [0, 2, 0, 4])
    # inputs untouched when out is a new array
    np.testing.assert_array_equal(a, [1, 2, 3, 4])


def test_arithmetic():
    a = np.array([1, -2, 3], dtype=np.float32)
    np.testing.assert_array_equal(rasters.add_field(a, a), [2, -4, 6])
    np.testing.assert_array_equal(rasters.mult_field(a, a), [1, 4, 9])
    np.testing.assert_array_equal(rasters.add_scalar(a, 1), [2, -1, 4])
    np.testing.assert_array_equal(rasters.mult_scalar(a, 2), [2, -4, 6])
    np.testing.assert_array_equal(rasters.gt_scalar(a, 0), [1, 0, 1])
    assert rasters.gt_scalar(a, 0).dtype == np.uint8


def test_fix_nonnegative_conserved_quantity_delta():
    q = np.array([1.0, 2.0, 0.0, 5.0], dtype=np.float32)
    d = np.array([-3.0, -1.0, -1.0, 4.0], dtype=np.float32)
    rasters.fix_nonnegative_conserved_quantity_delta(d, q)
    np.testing.assert_array_equal(d, [-1.0, -1.0, 0.0, 4.0])
    assert np.all(q + d >= 0)


def test_differentials(grid):
    field = np.arange(grid.num_cells, dtype=np.float32)
    d = rasters.edge_differential(field, grid)
    np.testing.assert_array_equal(d, grid.edges[:, 1] - grid.edges[:, 0])
    assert np.all(d > 0)
    d = rasters.arrow_differential(field, grid)
    assert d.sum() == 0


def test_conserved_quantity_passes():
    delta = np.array([1.0, -0.5, -0.5], dtype=np.float32)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert rasters.assert_conserved_quantity_delta(delta, 1e-6) is None


def test_conserved_quantity_signals():
    delta = np.array([1.0, -0.5, -0.25], dtype=np.float32)
    with pytest.warns(ConservationWarning) as record:
        v = rasters.assert_conserved_quantity_delta(delta, 1e-3, name="sima")
    assert v.kind == "transport"
    assert v.field == "sima"
    assert v.magnitude == pytest.approx(0.25)
    assert record[0].message.violation is v


def test_conserved_quantity_strict_raises():
    with pytest.raises(ConservationError) as exc:
        rasters.assert_conserved_quantity_delta(np.ones(3, dtype=np.float32), 0.1, strict=True)
    assert exc.value.violation.magnitude == pytest.approx(3.0)


def test_conserved_quantity_warning_points_at_the_caller():
    with pytest.warns(ConservationWarning) as record:
        rasters.assert_conserved_quantity_delta(np.ones(3, dtype=np.float32), 0.1)
    assert record[0].filename == __file__
