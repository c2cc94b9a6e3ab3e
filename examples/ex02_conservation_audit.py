"""
ex02_conservation_audit.py
--------------------------
Goal: Move crust between neighboring cells and verify that the
transport delta conserves sial and sima.
"""
import numpy as np

from snapcore.log import configure_logging
from snapsphere import icosphere
from snapcrust import Grid, Crust, RockColumn
from snapcrust import crust as cr


def run():
    configure_logging("INFO")
    grid = Grid(icosphere(3))

    # 1. Ocean everywhere, a continent over one hemisphere
    crust = Crust(grid)
    cr.fill(crust, RockColumn(sial=0.0, sima=7.0, age=0.0))
    continent = (grid.pos[:, 2] > 0.3).astype(np.uint8)
    cr.fill_into_selection(crust, RockColumn(sial=30.0, sima=7.0, age=200.0), continent, crust)

    initial = cr.total_mass(crust)

    # 2. Each edge moves 10% of the difference from the thicker cell to the thinner
    delta = Crust(grid)
    i, j = grid.edges[:, 0], grid.edges[:, 1]
    for name in ("sial", "sima"):
        field = getattr(crust, name)
        flux = 0.1 * (field[i] - field[j])
        d = getattr(delta, name)
        np.add.at(d, i, -flux)
        np.add.at(d, j, flux)

    cr.fix_delta(delta, crust)
    violations = cr.assert_conserved_transport_delta(delta, threshold=1e-2)
    cr.add_delta(crust, delta, crust)

    final = cr.total_mass(crust)
    print(f"Initial (sial, sima): {initial}")
    print(f"Final   (sial, sima): {final}")
    print("SUCCESS: Global Conservation Verified." if not violations else "WARNING: Mass leakage detected.")


if __name__ == "__main__":
    run()
