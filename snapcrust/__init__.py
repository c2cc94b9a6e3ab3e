"""
snapcrust: Crust fields on a spherical grid.
"""
from .grid import Grid
from .voronoi import VoronoiSphere
from .crust import Crust, RockColumn
from .conservation import ConservationViolation

__version__ = "0.1.0"
