"""
ex01_icosphere_grid.py
----------------------
Goal: Build an icosphere, inspect it, compile it into a Grid and
query nearest cells.
"""
import numpy as np

from snapcore.log import configure_logging
from snapsphere import icosphere, MeshQuality
from snapcrust import Grid


def run():
    configure_logging("INFO")

    print("1. Generating icosphere (5 subdivisions)...")
    mesh = icosphere(5, radius=6371.0)
    MeshQuality(mesh).print_report()

    print("2. Compiling Grid...")
    grid = Grid(mesh)
    print(f"   -> {grid.num_cells} cells, {grid.num_edges} edges, {grid.num_arrows} arrows")

    print("3. Nearest cell queries...")
    rng = np.random.default_rng(42)
    pts = rng.normal(size=(10000, 3))
    pts *= 6371.0 / np.linalg.norm(pts, axis=1)[:, None]
    ids = grid.get_nearest_ids(pts)
    exact = np.array([grid.get_nearest_id_exact(p) for p in pts[:500]])
    print(f"   -> agreement with kd-tree: {np.mean(ids[:500] == exact) * 100:.2f} %")

    print("4. Reusing the partition for a sibling grid...")
    sibling = Grid(mesh, voronoi=grid.get_voronoi())
    print(f"   -> shared: {sibling.get_voronoi() is grid.get_voronoi()}")


if __name__ == "__main__":
    run()
