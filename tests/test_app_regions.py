import pandas as pd
import pytest

from censusmap.app.regions import build_region_table
from censusmap.core.catalog.sources import AttributeSourceSpec
from censusmap.core.errors import EmptySliceWarning, KeyConversionError


def test_year_and_parent_slice_yields_single_row(attributes_df, geometries_gdf, g1):
    gdf = build_region_table(
        attributes_df, geometries_gdf, year=2016, parent_region="RegionX"
    )

    assert len(gdf) == 1
    row = gdf.iloc[0]
    assert row["region_code"] == 100
    assert row["persons"] == 500
    assert row.geometry.equals(g1)


def test_unknown_parent_region_yields_empty_table(attributes_df, geometries_gdf):
    with pytest.warns(EmptySliceWarning):
        gdf = build_region_table(
            attributes_df, geometries_gdf, year=2016, parent_region="RegionZ"
        )

    assert len(gdf) == 0
    assert gdf.crs.equals("EPSG:4326")


def test_text_code_joins_integer_code(geometries_gdf):
    attributes = pd.DataFrame({
        "region_code": [100], "year": [2016], "persons": [500],
    })

    gdf = build_region_table(attributes, geometries_gdf, year=2016)

    matched = gdf.set_index("region_code").loc[100]
    assert matched["persons"] == 500


def test_row_count_follows_geometries(joined_gdf, metro_geometries_gdf):
    assert len(joined_gdf) == len(metro_geometries_gdf)
    assert joined_gdf.geometry.notna().all()


def test_matched_values_copied_exactly(joined_gdf, metro_attributes_df):
    expected = (
        metro_attributes_df[metro_attributes_df["year"] == 2016]
        .set_index("region_code")["persons"]
    )
    by_code = joined_gdf.set_index("region_code")

    for code, persons in expected.items():
        assert by_code.loc[code, "persons"] == persons
    assert pd.isna(by_code.loc[300, "persons"])
    assert pd.isna(by_code.loc[300, "year"])


def test_unset_crs_gets_default_tag(attributes_df, geometries_gdf):
    gdf = build_region_table(attributes_df, geometries_gdf, year=2016)
    assert gdf.crs.equals("EPSG:4326")


def test_configured_default_crs(monkeypatch, attributes_df, geometries_gdf):
    from censusmap import settings
    settings.set_default_crs("EPSG:4283")

    gdf = build_region_table(attributes_df, geometries_gdf, year=2016)

    assert gdf.crs.equals("EPSG:4283")


def test_target_crs_reprojects(joined_gdf, metro_geometries_gdf, metro_attributes_df):
    projected = build_region_table(
        metro_attributes_df, metro_geometries_gdf, year=2016, target_crs="EPSG:3857"
    )

    assert projected.crs.equals("EPSG:3857")
    assert projected.total_bounds[0] > 1e7
    # Attribute values are untouched by reprojection
    assert projected["persons"].tolist()[:2] == joined_gdf["persons"].tolist()[:2]


def test_bad_geometry_code_raises_by_default(attributes_df, geometries_gdf):
    geometries_gdf.loc[1, "region_code"] = "20O"

    with pytest.raises(KeyConversionError):
        build_region_table(attributes_df, geometries_gdf, year=2016)


def test_bad_geometry_code_skipped_under_skip_policy(attributes_df, geometries_gdf):
    geometries_gdf.loc[1, "region_code"] = "20O"

    gdf = build_region_table(
        attributes_df, geometries_gdf, year=2016, key_policy="skip"
    )

    assert gdf["region_code"].tolist() == [100]


def test_skip_policy_from_environment(monkeypatch, attributes_df, geometries_gdf):
    from censusmap.settings import Settings
    monkeypatch.setenv("CENSUSMAP_KEY_POLICY", "skip")
    Settings.reset()
    geometries_gdf.loc[1, "region_code"] = None

    gdf = build_region_table(attributes_df, geometries_gdf, year=2016)

    assert len(gdf) == 1


def test_attribute_spec_maps_source_columns(geometries_gdf):
    raw = pd.DataFrame({
        "SA2_NAME": ["A"], "SA2_CODE": ["100"], "TIME": ["2016"], "persons": [500],
    })
    spec = AttributeSourceSpec(
        region_code_col="SA2_CODE", region_name_col="SA2_NAME", year_col="TIME",
        value_cols=["persons"],
    )

    gdf = build_region_table(
        raw, geometries_gdf, year=2016, parent_region="RegionX", attribute_spec=spec
    )

    assert gdf.iloc[0]["persons"] == 500
    assert "SA2_CODE" not in gdf.columns


def test_nearby_large_codes_do_not_join(g1, g2):
    import geopandas as gpd

    geometries = gpd.GeoDataFrame({
        "region_code": ["9007199254740993", "9007199254740992"],
        "region_name": ["A", "B"],
        "parent_region_name": ["RegionX", "RegionX"],
        "geometry": [g1, g2],
    }, geometry="geometry")
    attributes = pd.DataFrame({
        "region_name": ["B"],
        "region_code": ["9007199254740992"],
        "year": [2016],
        "persons": [7],
    })

    gdf = build_region_table(attributes, geometries, year=2016)

    by_code = gdf.set_index("region_code")["persons"]
    assert pd.isna(by_code.loc[9007199254740993])
    assert by_code.loc[9007199254740992] == 7
