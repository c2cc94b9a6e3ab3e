"""
snapsphere/icosphere.py
-----------------------
Closed sphere meshes from a subdivided icosahedron.
An icosphere with n subdivisions has 10 * 4**n + 2 vertices and 20 * 4**n faces.
"""
import logging
import math

import numpy as np

from .mesh import SphereMesh
from .refine import refine_global

logger = logging.getLogger(__name__)

_PHI = (1.0 + math.sqrt(5.0)) / 2.0

ICOSAHEDRON_VERTICES = np.array([
    [-1, 0,  _PHI], [ 1, 0,  _PHI], [-1, 0, -_PHI], [ 1, 0, -_PHI],
    [0,  _PHI, -1], [0,  _PHI,  1], [0, -_PHI, -1], [0, -_PHI,  1],
    [ _PHI, -1, 0], [ _PHI,  1, 0], [-_PHI, -1, 0], [-_PHI,  1, 0],
], dtype=np.float64)

ICOSAHEDRON_FACES = np.array([
    [0, 11, 5], [0, 5, 1], [0, 1, 7], [0, 7, 10], [0, 10, 11],
    [1, 5, 9], [5, 11, 4], [11, 10, 2], [10, 7, 6], [7, 1, 8],
    [3, 9, 4], [3, 4, 2], [3, 2, 6], [3, 6, 8], [3, 8, 9],
    [4, 9, 5], [2, 4, 11], [6, 2, 10], [8, 6, 7], [9, 8, 1],
], dtype=np.int64)


def icosahedron(radius=1.0):
    """ The 12 vertex / 20 face base mesh, scaled onto a sphere of `radius`. """
    verts = ICOSAHEDRON_VERTICES / np.linalg.norm(ICOSAHEDRON_VERTICES, axis=1)[:, None]
    return SphereMesh.from_arrays(verts * radius, ICOSAHEDRON_FACES)


def icosphere(subdivisions=0, radius=1.0):
    """
    Builds a geodesic sphere by repeated 1-to-4 refinement of an icosahedron.

    Args:
        subdivisions (int): Number of refinement passes (>= 0).
        radius (float): Sphere radius.
    """
    if subdivisions < 0:
        raise ValueError("subdivisions must be >= 0")

    mesh = icosahedron(radius)
    for _ in range(subdivisions):
        mesh = refine_global(mesh, snap=True)

    logger.debug("icosphere: n=%d -> %d vertices, %d faces",
                 subdivisions, mesh.num_vertices, mesh.num_faces)
    return mesh
