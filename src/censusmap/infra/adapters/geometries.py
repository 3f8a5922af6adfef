"""
CensusMap - Infrastructure Adapter for Boundary Geometries.

Reads boundary tables from memory, vector files, zipped shapefiles or remote
archives, and maps their columns onto canonical names.
"""
import geopandas as gpd
from pathlib import Path
from typing import Optional

from censusmap.core.catalog.sources import GeometrySourceSpec
from censusmap.core.errors import SourceLoadError
from censusmap.core.geo.utils import clean_geometries
from censusmap.core.types import GeometryInput, REGION_CODE
from censusmap.infra.storage.cache import (
    cache_key,
    extract_archive,
    fetch_to_cache,
    first_match,
)
from censusmap.settings import get_cache_dir, logger

# Output drivers by file suffix. Shapefile is read-only here: its 10-char
# field names would truncate the canonical columns.
DRIVERS = {
    ".gpkg": "GPKG",
    ".geojson": "GeoJSON",
    ".json": "GeoJSON",
}
WRITE_SUFFIXES = frozenset(DRIVERS) | {".parquet"}


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _resolve_archive(zip_path: Path, spec: GeometrySourceSpec) -> Path:
    """Extracts a zip into the cache and finds the vector member to read."""
    extract_dir = (
        get_cache_dir() / "boundaries"
        / cache_key(str(zip_path.resolve()))
    )
    extract_archive(zip_path, dest=extract_dir)

    member = first_match(extract_dir, spec.member_glob)
    if member is None:
        raise SourceLoadError(
            f"No file matching '{spec.member_glob}' inside {zip_path.name}."
        )
    return member


def _read_vector(path: Path, spec: GeometrySourceSpec) -> gpd.GeoDataFrame:
    logger.info(f"    🗺️  Reading geometries from {path.name}...")
    try:
        if spec.layer:
            return gpd.read_file(path, layer=spec.layer)
        return gpd.read_file(path)
    except Exception as e:
        raise SourceLoadError(f"Could not read geometry file {path}: {e}") from e


def load_geometry_table(
    source: GeometryInput,
    spec: Optional[GeometrySourceSpec] = None,
) -> gpd.GeoDataFrame:
    """
    Loads a boundary table and maps it onto canonical columns.

    Args:
        source: A GeoDataFrame (copied), a vector file path, a .zip archive
            holding a shapefile, or an http(s) URL to such an archive.
        spec: Column mapping and reading options.

    Returns:
        gpd.GeoDataFrame with 'region_code', 'geometry' and, when mapped,
        'region_name' / 'parent_region_name'.
    """
    spec = spec or GeometrySourceSpec()

    if isinstance(source, gpd.GeoDataFrame):
        gdf = source.copy()
    else:
        if isinstance(source, str) and _is_url(source):
            rel = Path("downloads") / cache_key(source, suffix=".zip")
            path = fetch_to_cache(source, relpath=rel)
        else:
            path = Path(source)
            if not path.exists():
                raise SourceLoadError(f"Geometry file not found: {path}")

        if path.suffix.lower() == ".zip":
            path = _resolve_archive(path, spec)

        gdf = _read_vector(path, spec)

    if gdf.crs is None and spec.crs:
        gdf = gdf.set_crs(spec.crs)

    gdf = gdf.rename(columns=spec.column_map)

    missing = [c for c in spec.required_columns if c not in gdf.columns]
    if missing:
        raise SourceLoadError(
            f"Geometry table is missing required columns {missing}. "
            f"Available: {list(gdf.columns)}"
        )

    gdf = clean_geometries(gdf)

    # Shapefiles may carry null shapes; a region row must have a geometry
    no_shape = gdf.geometry.isna() | gdf.geometry.is_empty
    if no_shape.any():
        logger.warning(
            f"    ⚠️ Dropped {int(no_shape.sum())} geometry row(s) without a shape: "
            f"{gdf.loc[no_shape, REGION_CODE].tolist()[:5]}"
        )
        gdf = gdf.loc[~no_shape]

    logger.info(f"    ✅ Loaded {len(gdf)} geometries.")
    return gdf


def write_geometry_table(gdf: gpd.GeoDataFrame, path: Path) -> Path:
    """
    Writes a geometry table to disk, choosing the driver from the suffix.
    Not called by the join pipeline itself.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix not in WRITE_SUFFIXES:
        raise ValueError(
            f"Unsupported output type '{suffix}'. Use one of {sorted(WRITE_SUFFIXES)}."
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".parquet":
        gdf.to_parquet(path)
    else:
        gdf.to_file(path, driver=DRIVERS[suffix])
    logger.info(f"    💾 Wrote {len(gdf)} rows to {path}.")
    return path
