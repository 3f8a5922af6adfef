"""
CensusMap - Source Catalog.

Defines the "contract" between a concrete attribute/geometry source and the
canonical column names used by the join pipeline.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from censusmap.core.types import REGION_CODE, REGION_NAME, PARENT_REGION, YEAR

# ---------------------------------------------------------------------
# Data Models
# ---------------------------------------------------------------------


class AttributeSourceSpec(BaseModel):
    """
    Maps a demographic attribute table onto canonical columns.
    """
    model_config = ConfigDict(frozen=True)

    name: str = "canonical"
    region_code_col: str = REGION_CODE
    region_name_col: Optional[str] = REGION_NAME
    year_col: str = YEAR

    # Empty means "keep every remaining column"
    value_cols: List[str] = Field(default_factory=list)

    # Passed straight to the pandas reader
    read_kwargs: Dict[str, Any] = Field(default_factory=dict)

    @property
    def column_map(self) -> Dict[str, str]:
        mapping = {
            self.region_code_col: REGION_CODE,
            self.year_col: YEAR,
        }
        if self.region_name_col:
            mapping[self.region_name_col] = REGION_NAME
        return mapping

    @property
    def required_columns(self) -> List[str]:
        return [REGION_CODE, YEAR, *self.value_cols]


class GeometrySourceSpec(BaseModel):
    """
    Maps a boundary-geometry table onto canonical columns.
    """
    model_config = ConfigDict(frozen=True)

    name: str = "canonical"
    region_code_col: str = REGION_CODE
    region_name_col: Optional[str] = REGION_NAME
    parent_region_col: Optional[str] = PARENT_REGION

    # --- File/archive reading ---
    layer: Optional[str] = None
    member_glob: str = "*.shp"

    # CRS to assume when the file itself carries none
    crs: Optional[str] = None

    @property
    def column_map(self) -> Dict[str, str]:
        mapping = {self.region_code_col: REGION_CODE}
        if self.region_name_col:
            mapping[self.region_name_col] = REGION_NAME
        if self.parent_region_col:
            mapping[self.parent_region_col] = PARENT_REGION
        return mapping

    @property
    def required_columns(self) -> List[str]:
        return list(self.column_map.values())


# ---------------------------------------------------------------------
# Catalog Registry
# ---------------------------------------------------------------------

ATTRIBUTE_CATALOG: Dict[str, AttributeSourceSpec] = {
    "canonical": AttributeSourceSpec(),
}

GEOMETRY_CATALOG: Dict[str, GeometrySourceSpec] = {
    "canonical": GeometrySourceSpec(),
    # ABS Australian Statistical Geography Standard, Statistical Area 2
    "asgs_sa2_2016": GeometrySourceSpec(
        name="asgs_sa2_2016",
        region_code_col="SA2_MAIN16",
        region_name_col="SA2_NAME16",
        parent_region_col="GCC_NAME16",
        member_glob="SA2_2016_AUST*.shp",
        crs="EPSG:4283",
    ),
    "asgs_sa2_2021": GeometrySourceSpec(
        name="asgs_sa2_2021",
        region_code_col="SA2_CODE21",
        region_name_col="SA2_NAME21",
        parent_region_col="GCC_NAME21",
        member_glob="SA2_2021_AUST*.shp",
        crs="EPSG:7844",
    ),
}


def get_attribute_spec(name: str) -> AttributeSourceSpec:
    """Finds an attribute preset by name."""
    try:
        return ATTRIBUTE_CATALOG[name]
    except KeyError:
        raise KeyError(
            f"Unknown attribute preset '{name}'. "
            f"Available: {sorted(ATTRIBUTE_CATALOG)}"
        ) from None


def get_geometry_spec(name: str) -> GeometrySourceSpec:
    """Finds a geometry preset by name."""
    try:
        return GEOMETRY_CATALOG[name]
    except KeyError:
        raise KeyError(
            f"Unknown geometry preset '{name}'. "
            f"Available: {sorted(GEOMETRY_CATALOG)}"
        ) from None
