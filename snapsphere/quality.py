"""
snapsphere/quality.py
---------------------
Tools for inspecting sphere mesh fidelity.
Calculates Valence, Minimum Angle, Aspect Ratio and Area per face/vertex.
"""
import logging

import numpy as np
import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)


class MeshQuality:
    """
    Inspector class for a SphereMesh object.

    Usage:
        inspector = MeshQuality(mesh)
        inspector.analyze()
        inspector.print_report()
        inspector.plot_histograms()
    """
    def __init__(self, mesh):
        self.mesh = mesh
        # Metric Storage
        self.areas = np.zeros(0)
        self.min_angles = np.zeros(0)
        self.aspect_ratios = np.zeros(0)
        self.valences = np.zeros(0, dtype=int)

        self._analyzed = False

    def analyze(self):
        """
        Computes face metrics (vectorized over all faces) and vertex valence.
        """
        v = self.mesh.vertices
        f = self.mesh.faces

        p1 = v[f[:, 0]]
        p2 = v[f[:, 1]]
        p3 = v[f[:, 2]]

        # Edge lengths opposite to each corner
        a = np.linalg.norm(p2 - p1, axis=1)
        b = np.linalg.norm(p3 - p2, axis=1)
        c = np.linalg.norm(p1 - p3, axis=1)

        # Chord triangle area (3D cross product)
        self.areas = 0.5 * np.linalg.norm(np.cross(p2 - p1, p3 - p1), axis=1)

        # Aspect Ratio: circumradius / (2 * inradius), 1.0 for equilateral
        s = 0.5 * (a + b + c)
        with np.errstate(divide='ignore', invalid='ignore'):
            r_in = self.areas / s
            r_circ = (a * b * c) / (4.0 * self.areas)
            ar = r_circ / (2.0 * r_in)
        self.aspect_ratios = np.where(self.areas > 1e-15, ar, 999.0)

        # Angles (Cosine Rule)
        angles = []
        for opp, adj1, adj2 in [(a, b, c), (b, a, c), (c, a, b)]:
            denom = 2.0 * adj1 * adj2
            with np.errstate(divide='ignore', invalid='ignore'):
                cos_theta = (adj1**2 + adj2**2 - opp**2) / denom
            cos_theta = np.clip(np.nan_to_num(cos_theta, nan=1.0), -1.0, 1.0)
            angles.append(np.degrees(np.arccos(cos_theta)))
        self.min_angles = np.min(np.vstack(angles), axis=0) if len(f) else np.zeros(0)

        # Valence (distinct neighbors per vertex)
        neighbors = [set() for _ in range(self.mesh.num_vertices)]
        for i, j, k in f.tolist():
            neighbors[i].update((j, k))
            neighbors[j].update((i, k))
            neighbors[k].update((i, j))
        self.valences = np.array([len(n) for n in neighbors], dtype=int)

        self._analyzed = True
        return self

    def report(self):
        """ Summary statistics as a plain dict. """
        if not self._analyzed: self.analyze()

        return {
            "num_vertices": int(self.mesh.num_vertices),
            "num_faces": int(self.mesh.num_faces),
            "area_min": float(self.areas.min()),
            "area_max": float(self.areas.max()),
            "min_angle": float(self.min_angles.min()),
            "max_aspect_ratio": float(self.aspect_ratios.max()),
            "valence_min": int(self.valences.min()),
            "valence_max": int(self.valences.max()),
        }

    def print_report(self):
        """ Logs the summary at INFO level. """
        r = self.report()

        logger.info("--- Mesh Quality Report (%d Vertices, %d Faces) ---",
                    r["num_vertices"], r["num_faces"])
        logger.info("Area: min %.2e, max %.2e", r["area_min"], r["area_max"])
        logger.info("Valence: min %d, max %d", r["valence_min"], r["valence_max"])

        min_ang = r["min_angle"]
        if min_ang < 10.0:
            logger.warning("Min Angle: %.2f deg [!] Slivers Detected", min_ang)
        else:
            logger.info("Min Angle: %.2f deg", min_ang)

        max_ar = r["max_aspect_ratio"]
        if max_ar > 10.0:
            logger.warning("Max Aspect Ratio: %.2f [!] Highly Stretched", max_ar)
        else:
            logger.info("Max Aspect Ratio: %.2f", max_ar)
        return r

    def plot_histograms(self):
        """ Visualizes the distribution of quality metrics. Returns the figure. """
        if not self._analyzed: self.analyze()

        fig, ax = plt.subplots(1, 3, figsize=(15, 4))

        # --- ROBUST HISTOGRAM HELPER ---
        def safe_hist(axis, data, color, title, xlabel):
            if len(data) == 0: return

            # Identical values (variance = 0) need a manual bin range
            dmin, dmax = data.min(), data.max()
            if np.isclose(dmin, dmax):
                padding = max(1e-6, abs(dmin)*0.1)
                bins = np.linspace(dmin - padding, dmax + padding, 10)
                axis.hist(data, bins=bins, color=color, edgecolor='black')
            else:
                axis.hist(data, bins=20, color=color, edgecolor='black')

            axis.set_title(title)
            axis.set_xlabel(xlabel)

        safe_hist(ax[0], self.min_angles, 'skyblue', "Minimum Angle", "Degrees")
        safe_hist(ax[1], self.valences, 'lightgreen', "Valence", "Neighbors")
        safe_hist(ax[2], self.areas, 'salmon', "Face Areas", "Area")

        fig.tight_layout()
        return fig
