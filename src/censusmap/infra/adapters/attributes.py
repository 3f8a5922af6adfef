"""
CensusMap - Infrastructure Adapter for Attribute Tables.

Reads demographic tables from memory or tabular files and renames their
columns to the canonical names expected by the join pipeline.
"""
import pandas as pd
from pathlib import Path
from typing import Optional

from censusmap.core.catalog.sources import AttributeSourceSpec
from censusmap.core.errors import SourceLoadError
from censusmap.core.types import AttributeInput
from censusmap.settings import logger


def _read_table(path: Path, spec: AttributeSourceSpec) -> pd.DataFrame:
    suffix = path.suffix.lower()
    kwargs = dict(spec.read_kwargs)

    if suffix in {".csv", ".txt", ".gz"}:
        # Keep codes as text so leading zeros and odd values reach normalization
        dtype = {spec.region_code_col: str, **kwargs.pop("dtype", {})}
        return pd.read_csv(path, dtype=dtype, **kwargs)
    if suffix == ".parquet":
        return pd.read_parquet(path, **kwargs)

    raise SourceLoadError(
        f"Unsupported attribute file type '{suffix}' for {path}. "
        "Use .csv or .parquet."
    )


def load_attribute_table(
    source: AttributeInput,
    spec: Optional[AttributeSourceSpec] = None,
) -> pd.DataFrame:
    """
    Loads an attribute table and maps it onto canonical columns.

    Args:
        source: A DataFrame (copied) or a path to a .csv/.parquet file.
        spec: Column mapping; defaults to the canonical identity mapping.

    Returns:
        pd.DataFrame with at least 'region_code' and 'year' columns.
    """
    spec = spec or AttributeSourceSpec()

    if isinstance(source, pd.DataFrame):
        df = source.copy()
    else:
        path = Path(source)
        if not path.exists():
            raise SourceLoadError(f"Attribute file not found: {path}")

        logger.info(f"    📄 Reading attributes from {path.name}...")
        try:
            df = _read_table(path, spec)
        except SourceLoadError:
            raise
        except Exception as e:
            raise SourceLoadError(f"Could not read attribute file {path}: {e}") from e

    df = df.rename(columns=spec.column_map)

    missing = [c for c in spec.required_columns if c not in df.columns]
    if missing:
        raise SourceLoadError(
            f"Attribute table is missing required columns {missing}. "
            f"Available: {list(df.columns)}"
        )

    if spec.value_cols:
        keep = [c for c in spec.column_map.values() if c in df.columns]
        df = df[keep + [c for c in spec.value_cols if c not in keep]]

    logger.info(f"    ✅ Loaded {len(df)} attribute rows.")
    return df
