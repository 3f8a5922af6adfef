"""
CensusMap - Shared Domain Types.
"""
from pathlib import Path
from typing import Union, Literal, Tuple

import pandas as pd
import geopandas as gpd

# How unconvertible region codes are handled:
# - "raise": the whole run fails with KeyConversionError
# - "skip": offending rows are dropped and logged
KeyPolicy = Literal["raise", "skip"]
KEY_POLICIES: Tuple[str, ...] = ("raise", "skip")

# Canonical column names shared by both inputs and the joined output
REGION_CODE = "region_code"
REGION_NAME = "region_name"
PARENT_REGION = "parent_region_name"
YEAR = "year"

# An attribute source can be a DataFrame or a tabular file path
AttributeInput = Union[pd.DataFrame, str, Path]

# A geometry source can be a GeoDataFrame, a vector file/zip path, or a URL
GeometryInput = Union[gpd.GeoDataFrame, str, Path]
