# snapsphere/__init__.py

__version__ = "1.0"

# Import Primitives
from .topology import Vertex, Face

# Import the Mesh class
from .mesh import SphereMesh

# Import Builders
from .icosphere import icosahedron, icosphere
from .refine import refine_global
from .quality import MeshQuality
