from __future__ import annotations

"""Summary metrics over the era distribution.

Everything here is a pure function of (figures, answers, current_year): no
division is left unguarded, and an empty answer set produces the documented
fallbacks instead of raising.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

import pandas as pd

from .config import EngineConfig
from .distribution import (
    Answers,
    DistributionPoint,
    FigureLike,
    answer_values,
    raw_distribution,
    to_points,
    year_tally,
)
from .smoothing import weighted_moving_average


@dataclass(frozen=True)
class Metrics:
    peak_decade: str
    center_of_gravity: int
    breadth: int
    overall_rate: int
    nostalgia_index: float

    def to_json(self) -> Dict[str, Any]:
        return {
            "peakDecade": self.peak_decade,
            "centerOfGravity": self.center_of_gravity,
            "breadth": self.breadth,
            "overallRate": self.overall_rate,
            "nostalgiaIndex": self.nostalgia_index,
        }


@dataclass(frozen=True)
class EraResults:
    raw: List[DistributionPoint]
    smoothed: List[Dict[str, Any]]
    metrics: Metrics
    tally: pd.DataFrame = field(repr=False, compare=False)


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def decade_label(year: int) -> str:
    return f"{(int(year) // 10) * 10}s"


def peak_decade(smoothed: pd.DataFrame, cfg: EngineConfig | None = None) -> str:
    """Decade with the highest mean smoothed rate.

    Decades are scanned in ascending order and must strictly beat the best so
    far (starting from 0), so ties go to the earliest decade and a curve with
    no positive rate keeps `cfg.default_peak_decade`.
    """
    cfg = cfg or EngineConfig()
    best = cfg.default_peak_decade
    if smoothed.empty:
        return best
    decades = (smoothed["year"] // 10) * 10
    means = smoothed.groupby(decades, sort=True)["rate"].mean()
    best_rate = 0.0
    for decade, mean in means.items():
        if float(mean) > best_rate:
            best_rate = float(mean)
            best = f"{int(decade)}s"
    return best


def center_of_gravity(raw: pd.DataFrame, current_year: int) -> int:
    """Mean year weighted by raw rate x sample size; current_year if unweighted."""
    if raw.empty:
        return int(current_year)
    weight = raw["rate"].astype("float64") * raw["sample_size"].astype("float64")
    total = float(weight.sum())
    if total <= 0:
        return int(current_year)
    return round_half_up(float((raw["year"].astype("float64") * weight).sum()) / total)


def overall_rate(answers: Answers) -> int:
    """Percentage of answers marked recognized, rounded; 0 without answers."""
    values = answer_values(answers)
    if not values:
        return 0
    recognized = sum(1 for a in values if a.recognized)
    return round_half_up(recognized / len(values) * 100)


def breadth(smoothed: pd.DataFrame, cfg: EngineConfig | None = None) -> int:
    """Span of years whose smoothed rate reaches half the (floored) peak."""
    cfg = cfg or EngineConfig()
    if smoothed.empty:
        return 0
    peak = max(float(smoothed["rate"].max()), float(cfg.breadth_peak_floor))
    above = smoothed.loc[smoothed["rate"] >= cfg.breadth_fraction * peak, "year"]
    if above.empty:
        return 0
    return int(above.max()) - int(above.min())


def nostalgia_index(smoothed: pd.DataFrame, cfg: EngineConfig | None = None) -> float:
    """Mean smoothed rate before the split year over the mean from it on.

    1.0 when the recent side has a zero mean (or no years); one decimal.
    """
    cfg = cfg or EngineConfig()
    split = int(cfg.nostalgia_split_year)
    pre = smoothed.loc[smoothed["year"] < split, "rate"]
    post = smoothed.loc[smoothed["year"] >= split, "rate"]
    pre_avg = float(pre.mean()) if not pre.empty else 0.0
    post_avg = float(post.mean()) if not post.empty else 0.0
    ratio = pre_avg / post_avg if post_avg > 0 else 1.0
    return math.floor(ratio * 10 + 0.5) / 10


def compute_results(
    figures: Iterable[FigureLike],
    answers: Answers,
    current_year: int,
    cfg: EngineConfig | None = None,
) -> EraResults:
    """Tally, smooth and summarize one finished answer set."""
    cfg = cfg or EngineConfig()
    figures = list(figures)
    values = answer_values(answers)

    tally = year_tally(figures, values, current_year, cfg)
    raw = raw_distribution(tally)
    smoothed = weighted_moving_average(raw, window=cfg.smoothing_window)

    metrics = Metrics(
        peak_decade=peak_decade(smoothed, cfg),
        center_of_gravity=center_of_gravity(raw, current_year),
        breadth=breadth(smoothed, cfg),
        overall_rate=overall_rate(values),
        nostalgia_index=nostalgia_index(smoothed, cfg),
    )
    smoothed_points = [{"year": int(y), "rate": float(r)} for y, r in zip(smoothed["year"], smoothed["rate"])]
    return EraResults(raw=to_points(raw), smoothed=smoothed_points, metrics=metrics, tally=tally)


def results_payload(
    figures: Iterable[FigureLike],
    answers: Answers,
    current_year: int,
    cfg: EngineConfig | None = None,
) -> Dict[str, Any]:
    """Results as handed to a client: smoothed distribution, metrics, inputs."""
    figures = list(figures)
    values = answer_values(answers)
    res = compute_results(figures, values, current_year, cfg)
    return {
        "distribution": list(res.smoothed),
        "metrics": res.metrics.to_json(),
        "figures": [f.to_json() if hasattr(f, "to_json") else f for f in figures],
        "answers": [a.to_json() if hasattr(a, "to_json") else a for a in values],
    }
