"""
CensusMap - Visualization Styles & Theme Constants.
"""

# Regions without attribute data (unmatched in the left join)
MISSING_STYLE = dict(
    color="lightgrey",
    edgecolor="white",
    hatch="///",
    label="No data",
)
EDGE_STYLE = dict(edgecolor="white", linewidth=0.3)
COLORBAR_STYLE = dict(thickness=12, len=0.75)

DEFAULT_CMAP = "viridis"
DEFAULT_COLORSCALE = "Viridis"
MAP_STYLE = "carto-positron"
