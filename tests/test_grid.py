import numpy as np
import pytest

from snapcore.config import GridOptions
from snapcore.errors import ConfigurationError
from snapcrust import Grid, VoronoiSphere
from snapcrust.voronoi import cube_cell_centers, side_for_point_num
from snapsphere import icosahedron, icosphere


def _random_directions(n, seed=0):
    rng = np.random.default_rng(seed)
    p = rng.normal(size=(n, 3))
    return p / np.linalg.norm(p, axis=1)[:, None]


# --- Topology ---

def test_neighbor_symmetry(grid):
    for v in range(grid.num_cells):
        for w in grid.get_neighbor_ids(v):
            assert v in grid.get_neighbor_ids(w)


def test_neighbors_match_faces(grid, mesh):
    for a, b, c in mesh.faces.tolist():
        assert b in grid.neighbor_lookup[a] and c in grid.neighbor_lookup[a]
    # A vertex never neighbors itself
    for v, nbrs in enumerate(grid.neighbor_lookup):
        assert v not in nbrs


def test_edges_are_canonical_and_unique(grid, mesh):
    edges = grid.edges
    assert np.all(edges[:, 0] < edges[:, 1])
    assert len({tuple(e) for e in edges.tolist()}) == grid.num_edges
    # Closed triangulation: every edge shared by two faces
    assert grid.num_edges == 3 * mesh.num_faces // 2


def test_arrows_are_both_directions(grid):
    arrows = {tuple(a) for a in grid.arrows.tolist()}
    assert len(arrows) == grid.num_arrows
    assert grid.num_arrows == sum(len(n) for n in grid.neighbor_lookup)
    assert grid.num_arrows == 2 * grid.num_edges
    for i, j in arrows:
        assert (j, i) in arrows


def test_lookups(grid):
    for v in range(grid.num_cells):
        for e in grid.edge_lookup[v]:
            assert v in grid.edges[e]
        for a in grid.arrow_lookup[v]:
            assert grid.arrows[a, 0] == v
        assert len(grid.edge_lookup[v]) == len(grid.neighbor_lookup[v])
        assert len(grid.arrow_lookup[v]) == len(grid.neighbor_lookup[v])


def test_csr_matches_neighbor_lookup(grid):
    for v in range(grid.num_cells):
        lo, hi = grid.neighbor_offsets[v], grid.neighbor_offsets[v + 1]
        np.testing.assert_array_equal(grid.neighbor_ids[lo:hi], grid.get_neighbor_ids(v))


def test_buffer_array_to_cell(grid, mesh):
    assert grid.buffer_array_to_cell.shape == (3 * mesh.num_faces,)
    np.testing.assert_array_equal(grid.buffer_array_to_cell[3:6], mesh.faces[1])


def test_position_differentials(grid):
    i, j = grid.arrows[7]
    np.testing.assert_allclose(grid.pos_arrow_differential[7], grid.pos[j] - grid.pos[i])
    i, j = grid.edges[3]
    np.testing.assert_allclose(grid.pos_edge_differential[3], grid.pos[j] - grid.pos[i])


def test_grid_is_read_only(grid):
    with pytest.raises(ValueError):
        grid.edges[0, 0] = 5
    with pytest.raises(ValueError):
        grid.neighbor_lookup[0][0] = 5


def test_get_distance_is_squared():
    assert Grid.get_distance([0, 0, 0], [1, 2, 2]) == pytest.approx(9.0)


# --- Spatial Index ---

def test_nearest_id_of_every_vertex_is_itself(grid):
    ids = grid.get_nearest_ids(grid.pos)
    np.testing.assert_array_equal(ids, np.arange(grid.num_cells))
    assert grid.get_nearest_id(grid.pos[17]) == 17
    assert grid.get_nearest_id(grid.mesh.vertex(42)) == 42


def test_nearest_id_agrees_with_exact(grid):
    pts = _random_directions(2000)
    exact = np.array([grid.get_nearest_id_exact(p) for p in pts])
    # Equidistant ties are the only expected mismatches
    assert np.mean(grid.get_nearest_ids(pts) == exact) >= 0.99


def test_partition_alone_is_approximate_but_close(mesh):
    g = Grid(mesh, options=GridOptions(voronoi_resolution_factor=8.0, refine_nearest=False))
    pts = _random_directions(2000, seed=1)
    exact = np.array([g.get_nearest_id_exact(p) for p in pts])
    agreement = np.mean(g.get_nearest_ids(pts) == exact)
    assert agreement > 0.6


def test_partition_is_exact_at_cell_centers(grid):
    vor = grid.get_voronoi()
    centers = cube_cell_centers(vor.side).reshape(-1, 3)
    _, exact = grid._kdtree.query(centers / np.linalg.norm(centers, axis=1)[:, None])
    np.testing.assert_array_equal(vor.get_nearest_ids(centers), exact)


def test_partition_size_follows_resolution_factor(mesh):
    g = Grid(mesh, voronoi_resolution_factor=3.0)
    assert g.voronoi_point_num == pytest.approx(9.0 * mesh.num_vertices)
    assert g.get_voronoi().side == side_for_point_num(9.0 * mesh.num_vertices)
    assert g.get_voronoi().point_num >= 9.0 * mesh.num_vertices


def test_zero_resolution_factor_still_answers(mesh):
    g = Grid(mesh, voronoi_resolution_factor=0.0)
    assert g.get_voronoi().side == 1
    assert g.get_nearest_id(g.pos[99]) == 99


def test_negative_resolution_factor_rejected(mesh):
    with pytest.raises(ConfigurationError):
        Grid(mesh, voronoi_resolution_factor=-1.0)


def test_precomputed_voronoi_is_reused(grid, mesh):
    g2 = Grid(mesh, voronoi=grid.get_voronoi())
    assert g2.get_voronoi() is grid.get_voronoi()
    assert g2.get_nearest_id(grid.pos[5]) == 5


def test_precomputed_voronoi_from_larger_mesh_rejected(grid):
    with pytest.raises(ConfigurationError):
        Grid(icosahedron(), voronoi=grid.get_voronoi())


def test_large_radius_sphere():
    g = Grid(icosphere(2, radius=6371.0))
    np.testing.assert_array_equal(g.get_nearest_ids(g.pos), np.arange(g.num_cells))
    # Direction only: a point far off the surface maps to the same cell
    assert g.get_nearest_id(g.pos[10] * 3.0) == 10


def test_voronoi_shape_checked():
    with pytest.raises(ValueError):
        VoronoiSphere(np.zeros((5, 2, 2), dtype=np.int64))
