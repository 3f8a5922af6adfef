import pandas as pd
import pytest

from censusmap.core.errors import KeyConversionError
from censusmap.core.logic.keys import coerce_region_codes, normalize_region_codes


def test_text_codes_become_int64():
    df = pd.DataFrame({"region_code": ["100", " 200 ", "300.0", 400, 500.0]})

    result = normalize_region_codes(df, source="geometries")

    assert result["region_code"].dtype == "int64"
    assert result["region_code"].tolist() == [100, 200, 300, 400, 500]


def test_input_is_not_mutated():
    df = pd.DataFrame({"region_code": ["100"]})
    normalize_region_codes(df, source="attributes")
    assert df["region_code"].tolist() == ["100"]


def test_invalid_codes_are_flagged():
    codes = pd.Series(["100", "abc", None, "12.5", ""])

    _, invalid = coerce_region_codes(codes)

    assert invalid.tolist() == [False, True, True, True, True]


def test_raise_policy_fails_whole_run():
    df = pd.DataFrame({"region_code": ["100", "N/A", "x1"]})

    with pytest.raises(KeyConversionError) as exc:
        normalize_region_codes(df, source="geometries", policy="raise")

    assert exc.value.source == "geometries"
    assert exc.value.values == ["N/A", "x1"]
    assert isinstance(exc.value, ValueError)


def test_skip_policy_drops_only_bad_rows():
    df = pd.DataFrame({"region_code": ["100", "N/A", "200"], "v": [1, 2, 3]})

    result = normalize_region_codes(df, source="attributes", policy="skip")

    assert result["region_code"].tolist() == [100, 200]
    assert result["v"].tolist() == [1, 3]


def test_empty_frame_keeps_integer_key():
    df = pd.DataFrame({"region_code": pd.Series([], dtype=object)})

    result = normalize_region_codes(df, source="geometries")

    assert result.empty
    assert result["region_code"].dtype == "int64"


def test_large_codes_keep_exact_values():
    # 2**53 + 1 is not representable as a float64
    df = pd.DataFrame({"region_code": ["9007199254740993", "9007199254740992"]})

    result = normalize_region_codes(df, source="geometries")

    assert result["region_code"].tolist() == [9007199254740993, 9007199254740992]
    assert result["region_code"].nunique() == 2


def test_codes_outside_int64_are_rejected():
    df = pd.DataFrame({"region_code": ["99999999999999999999", "-99999999999999999999", "100"]})

    with pytest.raises(KeyConversionError) as exc:
        normalize_region_codes(df, source="attributes", policy="raise")
    assert exc.value.values == ["99999999999999999999", "-99999999999999999999"]

    result = normalize_region_codes(df, source="attributes", policy="skip")
    assert result["region_code"].tolist() == [100]


def test_floats_beyond_exact_range_are_rejected():
    codes = pd.Series([2.0 ** 60, 100.0], dtype=object)

    _, invalid = coerce_region_codes(codes)

    assert invalid.tolist() == [True, False]
