"""
CensusMap - Visualization Helpers.

Contains utility functions for classifying values, generating legend labels
and preparing geometries for web maps.
"""

import json
import numpy as np
import pandas as pd
import geopandas as gpd
from typing import Any, Dict, List, Tuple


def _require_mapclassify() -> Any:
    """Lazy loader for mapclassify."""
    try:
        import mapclassify
        return mapclassify
    except ImportError:
        raise ImportError(
            "The 'mapclassify' library is required for classed choropleths. "
            "Please install it via `pip install censusmap[viz]`."
        )


def classify_values(values: pd.Series, scheme: str = "quantiles", k: int = 5) -> np.ndarray:
    """
    Classifies a numeric column with a mapclassify scheme and returns the
    upper bin edges. Nulls (unmatched regions) are ignored.
    """
    mapclassify = _require_mapclassify()
    y = pd.to_numeric(values, errors="coerce").dropna().to_numpy()
    if y.size == 0:
        return np.array([])
    classifier = mapclassify.classify(y, scheme=scheme, k=k)
    return np.asarray(classifier.bins)


def labels_from_bins(bins: np.ndarray) -> List[str]:
    """
    Build readable class labels from ascending bin edges (exclusive left, inclusive right).
    For bins = [b1, b2, ..., bk], labels are:
      '≤ b1', '(b1, b2]', '(b2, b3]', ..., '(b_{k-1}, b_k]'
    """
    if len(bins) == 0:
        return []

    labels = [f"≤ {bins[0]:,.0f}"]
    for a, b in zip(bins[:-1], bins[1:]):
        labels.append(f"({a:,.0f}, {b:,.0f}]")
    return labels


def prepare_web_geodata(
    gdf: gpd.GeoDataFrame,
    id_col: str,
) -> Tuple[gpd.GeoDataFrame, Dict[str, Any], List[str]]:
    """
    Prepares a GeoDataFrame for a plotly choropleth map.

    Steps:
    1. Removes rows with missing IDs/Geometry.
    2. Projects to EPSG:4326 (Required by web maps).
    3. Extracts GeoJSON with the ID as feature id.

    Returns:
        tuple: (processed_gdf, geojson_dict, location_ids_list)
    """
    gdf_clean = gdf.dropna(subset=[id_col, gdf.geometry.name]).copy()

    if gdf_clean.crs is not None and not gdf_clean.crs.equals("EPSG:4326"):
        gdf_clean = gdf_clean.to_crs("EPSG:4326")

    # Standardize ID to string to avoid JSON key issues
    gdf_clean[id_col] = gdf_clean[id_col].astype(str)

    geo_base = gdf_clean[[id_col, gdf_clean.geometry.name]].set_index(id_col)
    geojson = json.loads(geo_base.to_json())
    locs = geo_base.index.tolist()

    return gdf_clean, geojson, locs
