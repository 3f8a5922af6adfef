import numpy as np
import geopandas as gpd
import matplotlib.pyplot as plt

from censusmap.viz.choropleth import plot_interactive_choropleth, plot_static_choropleth
from censusmap.viz.utils import classify_values, labels_from_bins, prepare_web_geodata


def test_labels_from_bins():
    assert labels_from_bins(np.array([10, 20, 30])) == ["≤ 10", "(10, 20]", "(20, 30]"]
    assert labels_from_bins(np.array([])) == []


def test_classify_values_ignores_missing(joined_gdf):
    bins = classify_values(joined_gdf["persons"], scheme="quantiles", k=2)

    assert len(bins) == 2
    assert bins[-1] == 700


def test_prepare_web_geodata_projects_and_keys(joined_gdf):
    projected = joined_gdf.to_crs("EPSG:3857")

    gdf, geojson, locs = prepare_web_geodata(projected, "region_code")

    assert gdf.crs.equals("EPSG:4326")
    assert locs == ["100", "200", "300"]
    assert [f["id"] for f in geojson["features"]] == locs


def test_static_choropleth_draws_missing_regions(joined_gdf):
    ax = plot_static_choropleth(joined_gdf, "persons", title="Persons 2016")

    assert ax.get_title() == "Persons 2016"
    assert len(ax.collections) >= 2
    plt.close(ax.figure)


def test_static_choropleth_with_scheme(joined_gdf):
    ax = plot_static_choropleth(joined_gdf, "persons", scheme="quantiles", k=5)

    assert ax.get_legend() is not None
    plt.close(ax.figure)


def test_static_choropleth_empty_table(joined_gdf):
    ax = plot_static_choropleth(joined_gdf.iloc[0:0], "persons")

    assert len(ax.collections) == 0
    plt.close(ax.figure)


def test_interactive_choropleth(joined_gdf):
    fig = plot_interactive_choropleth(joined_gdf, "persons", title="Persons")

    trace = fig.data[0]
    assert list(trace.locations) == ["100", "200", "300"]
    assert fig.layout.title.text == "Persons"


def test_interactive_choropleth_empty_table(joined_gdf):
    fig = plot_interactive_choropleth(joined_gdf.iloc[0:0], "persons")

    assert len(fig.data) == 0
