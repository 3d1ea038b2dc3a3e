from __future__ import annotations

"""Smoothing utilities (sample-weighted centered moving average)."""

import pandas as pd


def weighted_moving_average(raw: pd.DataFrame, window: int = 5) -> pd.DataFrame:
    """Smooth raw per-year rates over neighbouring *sampled* years.

    Point i averages points [i - window//2, i + window//2] of `raw` (by
    position, gaps between years are not filled), weighting each by its
    sample size. The window shrinks at both edges; there is no padding.
    A zero weight sum yields a rate of 0.

    Returns a DataFrame with columns year, rate.
    """
    if raw.empty:
        return pd.DataFrame({"year": pd.Series(dtype="int64"), "rate": pd.Series(dtype="float64")})

    span = 2 * (int(window) // 2) + 1
    # rate * sample_size is the recognized count; summing the integer counts
    # keeps the rolling sums exact.
    weighted = raw["recognized"].astype("float64")
    weights = raw["sample_size"].astype("float64")
    num = weighted.rolling(span, center=True, min_periods=1).sum()
    den = weights.rolling(span, center=True, min_periods=1).sum()
    rate = (num / den.where(den > 0)).fillna(0.0).clip(0, 1)
    return pd.DataFrame({"year": raw["year"].astype("int64").values, "rate": rate.astype("float64").values})
