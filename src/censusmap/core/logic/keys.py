"""
CensusMap - Core Logic for Region Keys.

Region codes arrive as text ("100"), floats (100.0) or integers depending on
the source. They are cast once, at the pipeline boundary, to a canonical
int64 key. Parsing is exact: codes never pass through float64, so two
distinct codes can not collapse into one key.
"""
import re
import numpy as np
import pandas as pd
from typing import Any, Optional, Tuple

from censusmap.core.errors import KeyConversionError
from censusmap.core.types import KeyPolicy, REGION_CODE
from censusmap.settings import logger

# Trailing ".0" left behind by int->float->str conversions
_FLOAT_SUFFIX = re.compile(r"\.0+$")
_INT_TEXT = re.compile(r"[+-]?\d+")

_INT64 = np.iinfo(np.int64)
# Floats above this can no longer represent every integer
_FLOAT_EXACT_LIMIT = 2 ** 53


def _parse_code(value: Any) -> Optional[int]:
    """Exact integer value of one code, or None if it is not a valid key."""
    if isinstance(value, (bool, np.bool_)):
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None

    if isinstance(value, (int, np.integer)):
        code = int(value)
    elif isinstance(value, (float, np.floating)):
        if not float(value).is_integer() or abs(value) > _FLOAT_EXACT_LIMIT:
            return None
        code = int(value)
    else:
        text = _FLOAT_SUFFIX.sub("", str(value).strip())
        if not _INT_TEXT.fullmatch(text):
            return None
        code = int(text)

    if not _INT64.min <= code <= _INT64.max:
        return None
    return code


def coerce_region_codes(codes: pd.Series) -> Tuple[pd.Series, pd.Series]:
    """
    Attempts the integer cast without deciding what to do with failures.

    Returns:
        (parsed, invalid): object Series of Python ints (None where invalid)
        and a boolean mask of rows whose code is null, non-numeric,
        fractional or outside the int64 range.
    """
    # dtype=object keeps Python ints; Series.map would infer float64
    values = [_parse_code(v) for v in codes.tolist()]
    parsed = pd.Series(values, index=codes.index, dtype=object)
    invalid = pd.Series([v is None for v in values], index=codes.index, dtype=bool)
    return parsed, invalid


def normalize_region_codes(
    df: pd.DataFrame,
    *,
    source: str,
    policy: KeyPolicy = "raise",
    column: str = REGION_CODE,
) -> pd.DataFrame:
    """
    Returns a copy of `df` whose `column` is int64.

    Under policy 'raise' any unconvertible code fails the run.
    Under policy 'skip' those rows are dropped with a warning.
    """
    out = df.copy()
    if out.empty:
        out[column] = out[column].astype("int64")
        return out

    parsed, invalid = coerce_region_codes(out[column])

    if invalid.any():
        bad_values = out.loc[invalid, column].tolist()
        if policy == "raise":
            raise KeyConversionError(source, bad_values)

        logger.warning(
            f"    ⚠️ Dropped {len(bad_values)} {source} row(s) with "
            f"unconvertible region codes: {bad_values[:5]}"
        )
        out = out.loc[~invalid]
        parsed = parsed.loc[~invalid]

    out[column] = parsed.astype("int64")
    return out
