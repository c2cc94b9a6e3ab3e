"""
snapcrust/grid.py
-----------------
The static, compiled representation of a sphere mesh.
One stop shop for cell lookups: by neighbor, by position, and by the index
of a per-face-corner render buffer. Built once, read-only afterwards.
"""
import logging

import numpy as np
from scipy.spatial import cKDTree

from snapcore.config import GridOptions
from snapcore.errors import ConfigurationError
from . import rasters
from .numerics import greedy_walk_kernel
from .voronoi import VoronoiSphere, as_points

logger = logging.getLogger(__name__)


def _frozen(arr):
    arr.flags.writeable = False
    return arr


class Grid:
    def __init__(self, mesh, voronoi=None, voronoi_resolution_factor=None, options=None):
        """
        Compiles a snapsphere.SphereMesh into adjacency arrays and a spatial index.

        Args:
            mesh (SphereMesh): Closed triangulated sphere. Assumed valid.
            voronoi (VoronoiSphere, optional): Precomputed partition, shared by
                a family of Grids with the same geometry.
            voronoi_resolution_factor (float, optional): Overrides
                options.voronoi_resolution_factor.
            options (GridOptions, optional): Construction options.
        """
        options = options or GridOptions()
        if voronoi_resolution_factor is not None:
            options = GridOptions(voronoi_resolution_factor=voronoi_resolution_factor,
                                  refine_nearest=options.refine_nearest)
        self.options = options.validate()

        self.mesh = mesh
        self.vertices = mesh.vertices
        self.faces = mesh.faces
        n_cells = mesh.num_vertices

        # --- 1. Render Buffer Map ---
        # Flattened face corners: buffer index -> cell id
        self.buffer_array_to_cell = _frozen(
            self.faces.astype(np.uint32).reshape(-1))

        # --- 2. Neighbors ---
        # Builder phase: one set per vertex, duplicates absorbed by the sets
        neighbor_sets = [set() for _ in range(n_cells)]
        for a, b, c in self.faces.tolist():
            neighbor_sets[a].update((b, c))
            neighbor_sets[b].update((a, c))
            neighbor_sets[c].update((a, b))

        # Freeze: per-vertex arrays plus one CSR arena for the kernels
        self.neighbor_lookup = [_frozen(np.array(sorted(s), dtype=np.int64))
                                for s in neighbor_sets]
        counts = np.fromiter((len(s) for s in neighbor_sets), dtype=np.int64, count=n_cells)
        offsets = np.zeros(n_cells + 1, dtype=np.int64)
        np.cumsum(counts, out=offsets[1:])
        self.neighbor_offsets = _frozen(offsets)
        self.neighbor_ids = _frozen(
            np.concatenate(self.neighbor_lookup) if n_cells else np.zeros(0, dtype=np.int64))

        # --- 3. Edges & Arrows ---
        self._build_topology()

        # --- 4. Positions ---
        self.pos = _frozen(np.array(self.vertices, dtype=np.float64))
        self.pos_arrow_differential = _frozen(rasters.arrow_differential(self.pos, self))
        self.pos_edge_differential = _frozen(rasters.edge_differential(self.pos, self))

        # --- 5. Spatial Index ---
        # Exact structure: O(log N) and the oracle for the partition
        self._kdtree = cKDTree(self.pos)

        # Partition: O(1) lookups, reused when one is supplied
        factor = self.options.voronoi_resolution_factor
        self.voronoi_point_num = (factor * np.sqrt(n_cells)) ** 2
        if voronoi is not None:
            if voronoi.max_id >= n_cells:
                raise ConfigurationError(
                    f"voronoi references cell {voronoi.max_id}, grid has {n_cells} cells")
            self._voronoi = voronoi
        else:
            self._voronoi = VoronoiSphere.from_kdtree(
                self.voronoi_point_num, self._kdtree, radius=mesh.radius or 1.0)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Grid: %d cells, %d edges, %d arrows, partition side=%d",
                         self.num_cells, self.num_edges, self.num_arrows, self._voronoi.side)

    def _build_topology(self):
        # an "edge" is an unordered vertex pair: [1,2] is stored, [2,1] is not
        # an "arrow" is an ordered pair (directed edge): both [1,2] and [2,1]
        edges = []
        edge_lookup = [[] for _ in self.neighbor_lookup]
        arrows = []
        arrow_lookup = [[] for _ in self.neighbor_lookup]

        # Single scan; i < j picks one canonical orientation per edge
        for i, neighbors in enumerate(self.neighbor_lookup):
            for j in neighbors.tolist():
                arrow_lookup[i].append(len(arrows))
                arrows.append((i, j))

                if i < j:
                    e = len(edges)
                    edges.append((i, j))
                    edge_lookup[i].append(e)
                    edge_lookup[j].append(e)

        self.edges = _frozen(np.array(edges, dtype=np.int64).reshape(-1, 2))
        self.arrows = _frozen(np.array(arrows, dtype=np.int64).reshape(-1, 2))
        self.edge_lookup = [_frozen(np.array(l, dtype=np.int64)) for l in edge_lookup]
        self.arrow_lookup = [_frozen(np.array(l, dtype=np.int64)) for l in arrow_lookup]

    # --- Sizes ---
    @property
    def num_cells(self):
        return self.pos.shape[0]

    @property
    def num_edges(self):
        return self.edges.shape[0]

    @property
    def num_arrows(self):
        return self.arrows.shape[0]

    # --- Queries ---
    @staticmethod
    def get_distance(a, b):
        ''' Squared Euclidean distance. Same ordering as true distance, no sqrt. '''
        d = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
        return float(np.dot(d, d))

    def get_voronoi(self):
        ''' The spatial partition, for reuse by Grids of the same geometry. '''
        return self._voronoi

    def get_nearest_ids(self, points):
        """
        Vectorized nearest cell lookup: [N, 3] points -> [N] cell ids.
        Partition lookup, then (if options.refine_nearest) a greedy neighbor walk.
        """
        points = as_points(points)
        ids = self._voronoi.get_nearest_ids(points)
        if self.options.refine_nearest and self.num_cells:
            ids = greedy_walk_kernel(points, ids, self.pos,
                                     self.neighbor_offsets, self.neighbor_ids)
        return ids

    def get_nearest_id(self, point):
        return int(self.get_nearest_ids(point)[0])

    def get_nearest_id_exact(self, point):
        ''' Brute-force quality answer from the kd-tree, O(log N). '''
        _, idx = self._kdtree.query(as_points(point)[0])
        return int(idx)

    def get_neighbor_ids(self, cell_id):
        return self.neighbor_lookup[cell_id]

    def __repr__(self):
        return f"Grid(cells={self.num_cells}, edges={self.num_edges})"
