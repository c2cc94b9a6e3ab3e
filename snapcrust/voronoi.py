"""
snapcrust/voronoi.py
--------------------
Constant time point -> nearest cell lookups on a sphere.

The sphere is covered by a cube-map: 6 faces with side x side cells each.
Every cell stores the id of the vertex nearest to its center, as answered by
an exact nearest-point structure (a scipy cKDTree). The result approximates
the Voronoi diagram of the mesh vertices: a query costs one projection and
one array read, and is exact everywhere except within about one cell width
of a Voronoi boundary.
"""
import logging
import math

import numpy as np

from .numerics import N_CUBE_FACES, partition_lookup_kernel

logger = logging.getLogger(__name__)


def side_for_point_num(point_num):
    """ Smallest cube-map side whose 6 * side**2 cells cover point_num samples. """
    return max(1, int(math.ceil(math.sqrt(max(point_num, 0.0) / N_CUBE_FACES))))


def cube_cell_centers(side):
    """
    Returns the [6, side, side, 3] centers of every cube-map cell, on the
    surface of the unit cube. Indexing matches numerics.cube_cell().
    """
    c = (np.arange(side, dtype=np.float64) + 0.5) / side * 2.0 - 1.0
    uu, vv = np.meshgrid(c, c, indexing='ij')
    one = np.ones_like(uu)

    centers = np.empty((N_CUBE_FACES, side, side, 3), dtype=np.float64)
    # (x, y, z) for each face, see the face table in numerics.py
    centers[0] = np.stack([ one,  uu,  vv], axis=-1)
    centers[1] = np.stack([-one,  uu,  vv], axis=-1)
    centers[2] = np.stack([ vv,  one,  uu], axis=-1)
    centers[3] = np.stack([ vv, -one,  uu], axis=-1)
    centers[4] = np.stack([ uu,  vv,  one], axis=-1)
    centers[5] = np.stack([ uu,  vv, -one], axis=-1)
    return centers


def as_points(points):
    """ Coerces a point, a sequence of points, or a Vertex into [N, 3] float64. """
    if hasattr(points, 'to_array'):
        points = points.to_array()
    return np.ascontiguousarray(points, dtype=np.float64).reshape(-1, 3)


class VoronoiSphere:
    """
    Approximate spherical Voronoi partition for O(1) nearest-id queries.

    Attributes:
        cell_ids (np.ndarray): [6, side, side] nearest vertex id per cube-map cell.
    """
    def __init__(self, cell_ids):
        cell_ids = np.ascontiguousarray(cell_ids, dtype=np.int64)
        if cell_ids.ndim != 3 or cell_ids.shape[0] != N_CUBE_FACES or \
                cell_ids.shape[1] != cell_ids.shape[2]:
            raise ValueError(f"cell_ids must have shape (6, side, side), got {cell_ids.shape}")
        cell_ids.flags.writeable = False
        self.cell_ids = cell_ids

    @classmethod
    def from_kdtree(cls, point_num, kdtree, radius=1.0):
        """
        Builds the partition by asking the exact structure for the nearest
        vertex of every cell center.

        Args:
            point_num (float): Requested number of sample points.
            kdtree (scipy.spatial.cKDTree): Exact structure over vertex positions.
            radius (float): Sphere radius the cell centers are projected onto.
        """
        side = side_for_point_num(point_num)
        centers = cube_cell_centers(side).reshape(-1, 3)
        centers *= radius / np.linalg.norm(centers, axis=1)[:, None]

        _, ids = kdtree.query(centers)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("VoronoiSphere: requested=%d side=%d samples=%d",
                         int(point_num), side, centers.shape[0])
        return cls(np.asarray(ids).reshape(N_CUBE_FACES, side, side))

    @property
    def side(self):
        return self.cell_ids.shape[1]

    @property
    def point_num(self):
        return self.cell_ids.size

    @property
    def max_id(self):
        return int(self.cell_ids.max())

    def get_nearest_ids(self, points):
        """ Vectorized lookup: [N, 3] points -> [N] vertex ids. """
        return partition_lookup_kernel(as_points(points), self.cell_ids)

    def get_nearest_id(self, point):
        return int(self.get_nearest_ids(point)[0])

    def __repr__(self):
        return f"VoronoiSphere(side={self.side}, samples={self.point_num})"
