import matplotlib
matplotlib.use("Agg")

import pytest
import pandas as pd
import geopandas as gpd
from shapely.geometry import box

from censusmap.settings import Settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Points the cache at a temp dir and re-reads env for every test."""
    monkeypatch.setenv("CENSUSMAP_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.delenv("CENSUSMAP_DEFAULT_CRS", raising=False)
    monkeypatch.delenv("CENSUSMAP_KEY_POLICY", raising=False)
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def g1():
    return box(151.0, -34.0, 151.1, -33.9)


@pytest.fixture
def g2():
    return box(151.2, -34.0, 151.3, -33.9)


@pytest.fixture
def attributes_df():
    """Two years of population for region A, codes stored as text."""
    return pd.DataFrame({
        "region_name": ["A", "A"],
        "region_code": ["100", "100"],
        "year": [2016, 2011],
        "persons": [500, 400],
    })


@pytest.fixture
def geometries_gdf(g1, g2):
    """Two regions in different parent regions, codes stored as text, no CRS."""
    df = pd.DataFrame({
        "region_code": ["100", "200"],
        "region_name": ["A", "B"],
        "parent_region_name": ["RegionX", "RegionY"],
        "geometry": [g1, g2],
    })
    return gpd.GeoDataFrame(df, geometry="geometry")


@pytest.fixture
def metro_geometries_gdf(g1, g2):
    """Three regions in one parent region; only two have attributes."""
    g3 = box(151.4, -34.0, 151.5, -33.9)
    df = pd.DataFrame({
        "region_code": ["100", "200", "300"],
        "region_name": ["A", "B", "C"],
        "parent_region_name": ["Greater Sydney"] * 3,
        "geometry": [g1, g2, g3],
    })
    return gpd.GeoDataFrame(df, geometry="geometry", crs="EPSG:4326")


@pytest.fixture
def metro_attributes_df():
    return pd.DataFrame({
        "region_name": ["A", "B", "A", "B"],
        "region_code": [100, 200, 100, 200],
        "year": [2016, 2016, 2011, 2011],
        "persons": [500, 700, 400, 650],
    })


@pytest.fixture
def joined_gdf(metro_geometries_gdf, metro_attributes_df):
    from censusmap.app.regions import build_region_table
    return build_region_table(metro_attributes_df, metro_geometries_gdf, year=2016)
