import numpy as np


class Vertex:
    ''' Represents one point of a spherical triangle mesh.

    Uses `__slots__` since sphere meshes hold tens of thousands of vertices.
    The vertex id is implicit: it is the position of the vertex within the
    owning mesh, and it doubles as the grid cell id downstream.

    Attributes:
        id (int): Zero based vertex index
        x, y, z (float): Cartesian coordinates
    '''
    __slots__ = ['id', 'x', 'y', 'z']

    def __init__(self, vid, x, y, z):
        self.id = int(vid)
        self.x  = float(x)
        self.y  = float(y)
        self.z  = float(z)

    def to_array(self):
        ''' Returns coordinates as a numpy array for calculation. '''
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def __repr__(self):
        return (f'Vertex(id = {self.id:5d}: x = {self.x:8.4f}, '
                f'y = {self.y:8.4f}, z = {self.z:8.4f})')


class Face:
    ''' A triangular face referencing three vertex ids (a, b, c).

    Winding order is kept as given; nothing downstream depends on it.
    '''
    __slots__ = ['id', 'a', 'b', 'c']

    def __init__(self, fid, a, b, c):
        self.id = int(fid)
        self.a = int(a)
        self.b = int(b)
        self.c = int(c)

    @property
    def vertex_ids(self):
        return (self.a, self.b, self.c)

    def edge_keys(self):
        ''' The three undirected edges as sorted (lo, hi) tuples. '''
        a, b, c = self.a, self.b, self.c
        return (tuple(sorted((a, b))),
                tuple(sorted((b, c))),
                tuple(sorted((c, a))))

    def __repr__(self):
        return f"Face(id={self.id}, vertices=({self.a}, {self.b}, {self.c}))"
