"""
CensusMap - Application Layer for Region Tables.

Orchestrates loading (Infra), slicing/normalization/joining (Logic) and CRS
handling (Core Geo) to produce one choropleth-ready GeoDataFrame.
"""
import geopandas as gpd
from typing import Any, Optional

from censusmap.core.catalog.sources import AttributeSourceSpec, GeometrySourceSpec
from censusmap.core.geo import crs as crs_ops
from censusmap.core.logic import join as join_logic
from censusmap.core.logic.keys import normalize_region_codes
from censusmap.core.types import AttributeInput, GeometryInput
from censusmap.settings import logger, get_default_crs, resolve_key_policy


def build_region_table(
    attributes: AttributeInput,
    geometries: GeometryInput,
    *,
    year: Optional[int] = None,
    parent_region: Optional[str] = None,
    attribute_spec: Optional[AttributeSourceSpec] = None,
    geometry_spec: Optional[GeometrySourceSpec] = None,
    key_policy: Optional[str] = None,
    crs: Optional[Any] = None,
    target_crs: Optional[Any] = None,
) -> gpd.GeoDataFrame:
    """
    Joins regional attributes onto regional boundaries.

    Runs load -> filter -> normalize keys -> left join -> tag CRS, then
    optionally reprojects. The output has exactly one row per geometry left
    after the parent-region filter.

    Args:
        attributes: DataFrame or .csv/.parquet path of attribute records.
        geometries: GeoDataFrame, vector file, zipped shapefile or URL.
        year: Keep only attribute rows for this year (None keeps all).
        parent_region: Keep only geometries in this parent region
                       (e.g. 'Greater Sydney'). None keeps all.
        attribute_spec: Column mapping for the attribute source.
        geometry_spec: Column mapping for the geometry source.
        key_policy: 'raise' or 'skip' for unconvertible region codes.
                    Defaults to the configured policy.
        crs: CRS assigned when the joined table has none.
             Defaults to the configured default CRS (EPSG:4326).
        target_crs: If given, reproject the result to this CRS.

    Returns:
        GeoDataFrame keyed by integer 'region_code'.
    """
    # Adapters are imported lazily to keep this module free of I/O deps
    from censusmap.infra.adapters.attributes import load_attribute_table
    from censusmap.infra.adapters.geometries import load_geometry_table

    policy = resolve_key_policy(key_policy)
    tag = crs if crs is not None else get_default_crs()

    # 1. Load
    logger.info("    📦 Loading sources...")
    df_attr = load_attribute_table(attributes, attribute_spec)
    gdf_geo = load_geometry_table(geometries, geometry_spec)

    # 2. Slice
    df_attr = join_logic.filter_attributes(df_attr, year)
    gdf_geo = join_logic.filter_geometries(gdf_geo, parent_region)

    # 3. Normalize join keys (once, for both sides)
    df_attr = normalize_region_codes(df_attr, source="attributes", policy=policy)
    gdf_geo = normalize_region_codes(gdf_geo, source="geometries", policy=policy)

    # 4. Join
    logger.info(f"    🔗 Joining {len(df_attr)} attribute rows onto {len(gdf_geo)} geometries...")
    joined = join_logic.join_regions(gdf_geo, df_attr)

    # 5. CRS
    joined = crs_ops.tag_crs(joined, tag)
    joined = crs_ops.to_target_crs(joined, target_crs)

    logger.info(f"    ✅ Region table ready: {len(joined)} rows.")
    return joined

