"""
CensusMap - Choropleth Maps.

Static maps go through GeoDataFrame.plot (matplotlib, mapclassify schemes);
interactive maps go through plotly's tile-based choropleth.
"""
from __future__ import annotations

from typing import Any, Optional

import geopandas as gpd

from censusmap.settings import logger
from censusmap.viz import styles
from censusmap.viz.utils import prepare_web_geodata, _require_mapclassify


def _require_pyplot() -> Any:
    """Lazy loader for matplotlib."""
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError:
        raise ImportError(
            "The 'matplotlib' library is required for static maps. "
            "Please install it via `pip install censusmap[viz]`."
        )


def _require_plotly() -> Any:
    """Lazy loader for plotly (express, graph_objects)."""
    try:
        import plotly.express as px
        import plotly.graph_objects as go
        return px, go
    except ImportError:
        raise ImportError(
            "The 'plotly' library is required for interactive maps. "
            "Please install it via `pip install censusmap[viz]`."
        )


def plot_static_choropleth(
    gdf: gpd.GeoDataFrame,
    column: str,
    *,
    scheme: Optional[str] = None,
    k: int = 5,
    cmap: str = styles.DEFAULT_CMAP,
    ax: Any = None,
    title: Optional[str] = None,
):
    """
    Draws a static choropleth and returns the matplotlib Axes.

    Regions without data (unmatched in the join) are drawn with MISSING_STYLE.
    With `scheme` (e.g. 'quantiles', 'fisher_jenks') values are classed via
    mapclassify; otherwise a continuous colour bar is used.
    """
    plt = _require_pyplot()

    if ax is None:
        _, ax = plt.subplots(figsize=(10, 10))

    if gdf.empty:
        logger.warning("    ⚠️ Nothing to plot: region table is empty.")
        ax.set_axis_off()
        if title:
            ax.set_title(title)
        return ax

    kwargs = dict(
        column=column,
        cmap=cmap,
        legend=True,
        ax=ax,
        missing_kwds=styles.MISSING_STYLE,
        **styles.EDGE_STYLE,
    )
    if scheme:
        _require_mapclassify()
        # Cap k at the number of distinct values or mapclassify complains
        distinct = gdf[column].dropna().nunique()
        kwargs.update(scheme=scheme, k=max(1, min(k, distinct)))

    gdf.plot(**kwargs)

    ax.set_axis_off()
    ax.set_title(title or column)
    return ax


def plot_interactive_choropleth(
    gdf: gpd.GeoDataFrame,
    column: str,
    *,
    id_col: str = "region_code",
    hover_name: Optional[str] = "region_name",
    title: Optional[str] = None,
    zoom: float = 8,
    opacity: float = 0.7,
):
    """
    Builds an interactive plotly choropleth map centred on the data.
    """
    px, go = _require_plotly()

    gdf_web, geojson, _ = prepare_web_geodata(gdf, id_col)

    if gdf_web.empty:
        logger.warning("    ⚠️ Nothing to map: region table is empty.")
        fig = go.Figure()
        fig.update_layout(title=title or column, map={"style": styles.MAP_STYLE})
        return fig

    minx, miny, maxx, maxy = gdf_web.total_bounds
    center = {"lat": (miny + maxy) / 2, "lon": (minx + maxx) / 2}

    fig = px.choropleth_map(
        gdf_web.drop(columns=gdf_web.geometry.name),
        geojson=geojson,
        locations=id_col,
        color=column,
        hover_name=hover_name if hover_name in gdf_web.columns else None,
        color_continuous_scale=styles.DEFAULT_COLORSCALE,
        map_style=styles.MAP_STYLE,
        center=center,
        zoom=zoom,
        opacity=opacity,
        title=title or column,
    )
    fig.update_layout(
        margin={"r": 0, "t": 40, "l": 0, "b": 0},
        coloraxis_colorbar={**styles.COLORBAR_STYLE, "title": column},
    )
    return fig
