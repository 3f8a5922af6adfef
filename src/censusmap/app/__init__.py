"""
CensusMap - Application Layer.

Modules:
- regions: Build joined region tables (attributes + boundaries).
"""

# Explicitly empty to prevent eager loading.
# Users should use: from censusmap.app.regions import build_region_table
