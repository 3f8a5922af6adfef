"""
CensusMap - Core Logic for the Tabular-Spatial Join.

Pure functions that slice the attribute and geometry tables and combine them
with left-join semantics: every geometry survives, attributes may be null.
"""
import warnings

import pandas as pd
import geopandas as gpd
from typing import Optional

from censusmap.core.errors import EmptySliceWarning, JoinIntegrityError
from censusmap.core.types import REGION_CODE, PARENT_REGION, YEAR
from censusmap.settings import logger


def _warn_empty(message: str) -> None:
    logger.warning(f"    ⚠️ {message}")
    warnings.warn(message, EmptySliceWarning, stacklevel=3)


def filter_attributes(df: pd.DataFrame, year: Optional[int]) -> pd.DataFrame:
    """
    Keeps only the attribute rows for `year`.
    Years stored as text ("2016") are compared numerically.
    """
    if year is None:
        return df.copy()

    years = pd.to_numeric(df[YEAR], errors="coerce")
    out = df.loc[years == int(year)].copy()

    if out.empty:
        _warn_empty(f"No attribute rows found for year {year}.")
    else:
        logger.info(f"    📅 Year {year}: kept {len(out)} of {len(df)} attribute rows.")
    return out


def filter_geometries(
    gdf: gpd.GeoDataFrame,
    parent_region: Optional[str],
) -> gpd.GeoDataFrame:
    """
    Keeps only the geometry rows whose parent region equals `parent_region`.
    """
    if parent_region is None:
        return gdf.copy()

    if PARENT_REGION not in gdf.columns:
        raise KeyError(
            f"Cannot filter by parent region: column '{PARENT_REGION}' "
            "is missing from the geometry table."
        )

    out = gdf.loc[gdf[PARENT_REGION] == parent_region].copy()

    if out.empty:
        _warn_empty(f"No geometry rows found for parent region '{parent_region}'.")
    else:
        logger.info(
            f"    🗺️  '{parent_region}': kept {len(out)} of {len(gdf)} geometries."
        )
    return out


def join_regions(
    geometries: gpd.GeoDataFrame,
    attributes: pd.DataFrame,
    *,
    key: str = REGION_CODE,
) -> gpd.GeoDataFrame:
    """
    Left-joins attributes onto geometries by `key`.

    Both tables must already carry normalized int64 keys. Columns present on
    both sides keep the geometry value; the attribute copy gets an
    '_attributes' suffix.

    Raises:
        JoinIntegrityError: if either side repeats a key, if a geometry row
            has no shape, or if the output row count drifts.
    """
    repeated = geometries[key].duplicated(keep=False)
    if repeated.any():
        dupes = sorted(geometries.loc[repeated, key].unique().tolist())
        raise JoinIntegrityError(
            f"Geometry table has duplicate region codes {dupes[:5]}."
        )

    if geometries.geometry.isna().any():
        raise JoinIntegrityError(
            f"{int(geometries.geometry.isna().sum())} geometry row(s) have no shape."
        )

    duplicated = attributes[key].duplicated(keep=False)
    if duplicated.any():
        dupes = sorted(attributes.loc[duplicated, key].unique().tolist())
        raise JoinIntegrityError(
            f"Attribute table has duplicate region codes {dupes[:5]} "
            "within the selected slice. Filter by year first."
        )

    joined = geometries.merge(
        attributes,
        on=key,
        how="left",
        suffixes=("", "_attributes"),
    )

    if len(joined) != len(geometries):
        raise JoinIntegrityError(
            f"Join produced {len(joined)} rows from {len(geometries)} geometries."
        )

    unmatched = (~geometries[key].isin(attributes[key])).sum()
    if unmatched:
        logger.warning(
            f"    ⚠️ {unmatched} geometries have no matching attribute row. "
            "Their attribute fields are null."
        )

    # merge() keeps the left frame's class; restore geometry/CRS if it didn't
    if not isinstance(joined, gpd.GeoDataFrame):
        joined = gpd.GeoDataFrame(
            joined, geometry=geometries.geometry.name, crs=geometries.crs
        )
    return joined
