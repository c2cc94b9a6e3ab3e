''' snapcore: Shared utilities for the SnapCrust suite of tools.

- Versioning follows Major.Minor.Patch:

    Major (1.x.x): API change. Old scripts might not run.

    Minor (x.2.x): New feature (e.g., a new raster operation), old scripts still work.

    Patch (x.x.5): Bug fix.

'''
__version__ = "0.7.0"
