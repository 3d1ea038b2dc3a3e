from __future__ import annotations

"""Era engine configuration (hyperparameters) using Pydantic."""

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Hyperparameters for the era distribution and its summary metrics.

    - floor_year: first calendar year of the tally
    - smoothing_window: symmetric moving-average width in sampled years (odd)
    - breadth_fraction: share of the peak rate a year must reach to count
    - breadth_peak_floor: lower bound for the peak rate in the breadth test
    - nostalgia_split_year: first year of the "recent" side of the ratio
    - default_peak_decade: label kept when no decade has a positive rate
    """

    floor_year: int = Field(1950, ge=0)
    smoothing_window: int = Field(5, ge=1)
    breadth_fraction: float = Field(0.5, gt=0, le=1)
    breadth_peak_floor: float = Field(0.01, gt=0)
    nostalgia_split_year: int = 2000
    default_peak_decade: str = "1990s"
