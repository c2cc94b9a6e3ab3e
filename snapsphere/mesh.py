"""
snapsphere/mesh.py
------------------
Container for a closed triangulated sphere: ordered vertices and ordered
triangular faces. This is the input consumed by snapcrust.grid.Grid.
"""
import numpy as np

from snapcore.errors import MeshError
from .topology import Vertex, Face


class SphereMesh:
    def __init__(self):
        self._coords = []
        self._faces = []
        # Array views are rebuilt lazily after any add_*
        self._vertex_array = None
        self._face_array = None

    @classmethod
    def from_arrays(cls, vertices, faces):
        """
        Builds a mesh from an (N, 3) coordinate array and an (F, 3) index array.
        """
        vertices = np.asarray(vertices, dtype=np.float64)
        faces = np.asarray(faces, dtype=np.int64)
        if vertices.ndim != 2 or vertices.shape[1] != 3:
            raise MeshError(f"vertices must have shape (N, 3), got {vertices.shape}")
        if faces.ndim != 2 or faces.shape[1] != 3:
            raise MeshError(f"faces must have shape (F, 3), got {faces.shape}")

        mesh = cls()
        mesh._coords = [tuple(v) for v in vertices.tolist()]
        mesh._faces = [tuple(f) for f in faces.tolist()]
        return mesh

    def add_vertex(self, x, y, z):
        """Appends a vertex and returns its id."""
        self._coords.append((float(x), float(y), float(z)))
        self._vertex_array = None
        return len(self._coords) - 1

    def add_face(self, a, b, c):
        """Appends a triangle (three vertex ids) and returns its index."""
        self._faces.append((int(a), int(b), int(c)))
        self._face_array = None
        return len(self._faces) - 1

    # --- Array Views ---
    @property
    def vertices(self):
        if self._vertex_array is None:
            self._vertex_array = np.array(self._coords, dtype=np.float64).reshape(-1, 3)
        return self._vertex_array

    @property
    def faces(self):
        if self._face_array is None:
            self._face_array = np.array(self._faces, dtype=np.int64).reshape(-1, 3)
        return self._face_array

    @property
    def num_vertices(self):
        return len(self._coords)

    @property
    def num_faces(self):
        return len(self._faces)

    @property
    def radius(self):
        ''' Mean distance of the vertices from the origin. '''
        if not self._coords:
            return 0.0
        return float(np.linalg.norm(self.vertices, axis=1).mean())

    # --- Object Views ---
    def vertex(self, vid):
        x, y, z = self._coords[vid]
        return Vertex(vid, x, y, z)

    def face(self, fid):
        a, b, c = self._faces[fid]
        return Face(fid, a, b, c)

    def iter_faces(self):
        for fid in range(len(self._faces)):
            yield self.face(fid)

    def edge_counts(self):
        """Maps every undirected edge (lo, hi) to the number of faces sharing it."""
        counts = {}
        for face in self.iter_faces():
            for key in face.edge_keys():
                counts[key] = counts.get(key, 0) + 1
        return counts

    def validate(self):
        """
        Explicit validity check: face ids in range and every edge shared by
        exactly two faces (closed surface). Grid construction assumes this
        holds and never calls it.
        """
        n = self.num_vertices
        if self.num_faces:
            f = self.faces
            bad = np.nonzero((f < 0) | (f >= n))
            if bad[0].size:
                fid = int(bad[0][0])
                raise MeshError(f"face {fid} references vertex {int(f[fid, bad[1][0]])}, "
                                f"mesh has {n} vertices")

        for key, count in self.edge_counts().items():
            if count != 2:
                raise MeshError(f"edge {key} is shared by {count} face(s), expected 2")
        return self

    def __repr__(self):
        return f"SphereMesh(vertices={self.num_vertices}, faces={self.num_faces})"
