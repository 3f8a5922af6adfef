from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional
import typer

from censusmap.core.catalog.sources import get_attribute_spec, get_geometry_spec
from censusmap.core.errors import CensusMapError
from censusmap.core.types import REGION_CODE
from censusmap.settings import configure_logging

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command()
def build(
    attributes: str = typer.Argument(..., help="Attribute table (.csv/.parquet)."),
    geometries: str = typer.Argument(..., help="Boundary file, .zip or URL."),
    output: Path = typer.Option(..., "--output", "-o", help=".gpkg/.geojson/.parquet"),
    year: Optional[int] = typer.Option(None, help="Keep attribute rows for this year."),
    parent: Optional[str] = typer.Option(None, help="Keep geometries in this parent region."),
    attribute_preset: str = typer.Option("canonical", help="Attribute column preset."),
    geometry_preset: str = typer.Option("canonical", help="Geometry column preset."),
    crs: Optional[str] = typer.Option(None, help="CRS for untagged geometries."),
    target_crs: Optional[str] = typer.Option(None, help="Reproject output to this CRS."),
    key_policy: Optional[str] = typer.Option(None, help="'raise' or 'skip' bad region codes."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Join attributes onto boundaries and write the region table."""
    from censusmap.app.regions import build_region_table
    from censusmap.infra.adapters.geometries import WRITE_SUFFIXES, write_geometry_table

    if verbose:
        configure_logging(logging.INFO)

    if output.suffix.lower() not in WRITE_SUFFIXES:
        raise typer.BadParameter(
            f"Cannot write '{output.suffix}' files. Use one of {sorted(WRITE_SUFFIXES)}.",
            param_hint="--output",
        )

    try:
        attr_spec = get_attribute_spec(attribute_preset)
        geo_spec = get_geometry_spec(geometry_preset)
    except KeyError as e:
        raise typer.BadParameter(str(e.args[0]))

    try:
        gdf = build_region_table(
            attributes,
            geometries,
            year=year,
            parent_region=parent,
            attribute_spec=attr_spec,
            geometry_spec=geo_spec,
            key_policy=key_policy,
            crs=crs,
            target_crs=target_crs,
        )
        write_geometry_table(gdf, output)
    except (CensusMapError, ValueError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"OK: {len(gdf)} regions -> {output}")


@app.command()
def plot(
    joined: Path = typer.Argument(..., help="Region table written by 'build'."),
    column: str = typer.Option(..., "--column", "-c", help="Variable to map."),
    output: Path = typer.Option(..., "--output", "-o", help=".html (interactive) or image."),
    scheme: Optional[str] = typer.Option(None, help="mapclassify scheme for static maps."),
    k: int = typer.Option(5, help="Number of classes."),
    title: Optional[str] = typer.Option(None),
) -> None:
    """Render a choropleth from a joined region table."""
    import geopandas as gpd
    from censusmap.viz import choropleth

    gdf = gpd.read_parquet(joined) if joined.suffix.lower() == ".parquet" else gpd.read_file(joined)
    if column not in gdf.columns:
        raise typer.BadParameter(f"Column '{column}' not found. Available: {list(gdf.columns)}")

    if output.suffix.lower() == ".html":
        if REGION_CODE not in gdf.columns:
            raise typer.BadParameter(
                f"Interactive maps need a '{REGION_CODE}' column. Available: {list(gdf.columns)}"
            )
        fig = choropleth.plot_interactive_choropleth(gdf, column, title=title)
        fig.write_html(output)
    else:
        ax = choropleth.plot_static_choropleth(gdf, column, scheme=scheme, k=k, title=title)
        ax.figure.savefig(output, dpi=150, bbox_inches="tight")

    typer.echo(f"OK: {output}")


if __name__ == "__main__":
    app()
