"""
CensusMap - Core Geo Utilities.
"""
import geopandas as gpd

def clean_geometries(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Fixes invalid geometries using buffer(0).
    Only applies fix to geometries marked as invalid to save time.
    """
    if gdf.empty:
        return gdf

    # Null geometries report is_valid=False too; leave them alone
    invalid_mask = ~gdf.is_valid & gdf.geometry.notna()

    if invalid_mask.any():
        gdf = gdf.copy()
        gdf.loc[invalid_mask, gdf.geometry.name] = gdf.loc[invalid_mask].geometry.buffer(0)

    return gdf
