"""
CensusMap - Core Geo Operations (CRS Tagging & Reprojection).

Tagging only annotates the geometry column; reprojection moves coordinates
and is delegated to geopandas/pyproj.
"""
import geopandas as gpd
from typing import Any, Optional

from censusmap.settings import logger


def tag_crs(gdf: gpd.GeoDataFrame, crs: Any) -> gpd.GeoDataFrame:
    """
    Assigns `crs` to the geometry column if it has none.

    A table that already carries a CRS is returned unchanged, which makes
    repeated tagging a no-op. Coordinates are never transformed here.
    """
    if gdf.crs is None:
        logger.info(f"    🏷️  Tagging geometries with {crs}.")
        return gdf.set_crs(crs)

    if not gdf.crs.equals(crs):
        logger.info(
            f"    ℹ️  Geometries already tagged with {gdf.crs.to_string()}; "
            f"not relabelling as {crs}."
        )
    return gdf


def reproject(
    geoms: gpd.GeoSeries,
    source_crs: Any,
    target_crs: Any,
) -> gpd.GeoSeries:
    """
    Pure reprojection: returns new geometries in `target_crs`.
    The input series is interpreted as being in `source_crs`.
    """
    series = gpd.GeoSeries(geoms).set_crs(source_crs, allow_override=True)
    return series.to_crs(target_crs)


def to_target_crs(gdf: gpd.GeoDataFrame, target_crs: Optional[Any]) -> gpd.GeoDataFrame:
    """Reprojects a tagged table when a target is given and differs."""
    if target_crs is None:
        return gdf

    if gdf.crs is None:
        raise ValueError("Cannot reproject geometries without a CRS. Tag them first.")

    # equals() also matches "EPSG:4326" against an equivalent CRS object
    if gdf.crs.equals(target_crs):
        return gdf

    logger.info(f"    🌐 Reprojecting {gdf.crs.to_string()} -> {target_crs}.")
    out = gdf.copy()
    geom_col = out.geometry.name
    out[geom_col] = reproject(gdf.geometry, gdf.crs, target_crs)
    return out.set_crs(target_crs, allow_override=True)
