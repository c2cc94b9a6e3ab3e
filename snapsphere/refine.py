import numpy as np

from . import mesh as sp_mesh


def _snap_to_sphere(xyz, radius):
    ''' Pushes a point radially onto the sphere of the given radius. '''
    norm = np.linalg.norm(xyz)
    if norm == 0.0:
        return xyz
    return xyz * (radius / norm)


def refine_global(old_mesh, snap=True):
    """
    Performs 1-to-4 subdivision on the entire mesh.
    Returns a NEW SphereMesh object.

    Args:
        old_mesh (SphereMesh): Mesh to subdivide.
        snap (bool): Move every new midpoint onto the sphere of the old
            mesh's mean radius. Without it the midpoints stay on the chords.
    """
    new_mesh = sp_mesh.SphereMesh()
    radius = old_mesh.radius

    # --- 1. Copy Old Vertices ---
    # Ids are preserved: vertex i of the old mesh is vertex i of the new one
    for x, y, z in old_mesh.vertices:
        new_mesh.add_vertex(x, y, z)

    # --- 2. Create Midpoints for Every Edge ---
    # (lo, hi) -> new midpoint id, so both faces of an edge share it
    edge_to_midpoint = {}
    coords = old_mesh.vertices

    def get_mid(id_a, id_b):
        key = (id_a, id_b) if id_a < id_b else (id_b, id_a)
        mid = edge_to_midpoint.get(key)
        if mid is None:
            xyz = 0.5 * (coords[id_a] + coords[id_b])
            if snap:
                xyz = _snap_to_sphere(xyz, radius)
            mid = new_mesh.add_vertex(*xyz)
            edge_to_midpoint[key] = mid
        return mid

    # --- 3. Build New Faces (1 -> 4) ---
    for a, b, c in old_mesh.faces.tolist():
        m_ab = get_mid(a, b)
        m_bc = get_mid(b, c)
        m_ca = get_mid(c, a)

        # Corners keep the parent winding
        new_mesh.add_face(a, m_ab, m_ca)
        new_mesh.add_face(m_ab, b, m_bc)
        new_mesh.add_face(m_ca, m_bc, c)
        # Center
        new_mesh.add_face(m_ab, m_bc, m_ca)

    return new_mesh
