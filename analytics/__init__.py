from .config import EngineConfig
from .distribution import DistributionPoint, raw_distribution, year_tally
from .smoothing import weighted_moving_average
from .metrics import (
    EraResults,
    Metrics,
    breadth,
    center_of_gravity,
    compute_results,
    nostalgia_index,
    overall_rate,
    peak_decade,
    results_payload,
)
from .plots import bar_heights, decade_averages, plot_decades, share_text, taste_label

__all__ = [
    "EngineConfig",
    "DistributionPoint",
    "raw_distribution",
    "year_tally",
    "weighted_moving_average",
    "EraResults",
    "Metrics",
    "breadth",
    "center_of_gravity",
    "compute_results",
    "nostalgia_index",
    "overall_rate",
    "peak_decade",
    "results_payload",
    "bar_heights",
    "decade_averages",
    "plot_decades",
    "share_text",
    "taste_label",
]
