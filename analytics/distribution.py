from __future__ import annotations

"""Per-year tally and raw recognition distribution."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Protocol, Union

import numpy as np
import pandas as pd

from .config import EngineConfig


class WindowLike(Protocol):
    start: int
    end: int


class FigureLike(Protocol):
    id: int
    relevance_window: WindowLike


class AnswerLike(Protocol):
    figure_id: int
    recognized: bool


Answers = Union[Mapping[int, AnswerLike], Iterable[AnswerLike]]


@dataclass(frozen=True)
class DistributionPoint:
    year: int
    rate: float
    sample_size: int

    def to_json(self) -> Dict[str, Any]:
        return {"year": self.year, "rate": self.rate, "sampleSize": self.sample_size}


def answer_values(answers: Answers) -> List[AnswerLike]:
    if isinstance(answers, Mapping):
        return list(answers.values())
    return list(answers)


def year_tally(
    figures: Iterable[FigureLike],
    answers: Answers,
    current_year: int,
    cfg: EngineConfig | None = None,
) -> pd.DataFrame:
    """Count recognized/total attributions for every year in [floor, current].

    Each answer is attributed to every year of its figure's relevance window;
    years of a window outside the tally range are ignored, as are answers
    whose figure is not part of `figures`.

    Returns a DataFrame with columns year, recognized, total (one row per year).
    """
    cfg = cfg or EngineConfig()
    floor = int(cfg.floor_year)
    years = np.arange(floor, int(current_year) + 1, dtype="int64")
    recognized = np.zeros(len(years), dtype="int64")
    total = np.zeros(len(years), dtype="int64")

    windows: Dict[int, WindowLike] = {}
    for f in figures:
        windows.setdefault(f.id, f.relevance_window)

    for a in answer_values(answers):
        w = windows.get(a.figure_id)
        if w is None:
            continue
        lo = max(int(w.start), floor)
        hi = min(int(w.end), int(current_year))
        if lo > hi:
            continue
        span = slice(lo - floor, hi - floor + 1)
        total[span] += 1
        if a.recognized:
            recognized[span] += 1

    return pd.DataFrame({"year": years, "recognized": recognized, "total": total})


def raw_distribution(tally: pd.DataFrame) -> pd.DataFrame:
    """Per-year recognition rate for years with at least one attribution.

    Adds rate (float64) and sample_size; rows stay in year order.
    """
    out = tally.loc[tally["total"] > 0, ["year", "recognized", "total"]].copy()
    out = out.rename(columns={"total": "sample_size"}).reset_index(drop=True)
    out["rate"] = out["recognized"].astype("float64") / out["sample_size"].astype("float64")
    return out[["year", "rate", "sample_size", "recognized"]]


def to_points(raw: pd.DataFrame) -> List[DistributionPoint]:
    return [
        DistributionPoint(year=int(y), rate=float(r), sample_size=int(n))
        for y, r, n in zip(raw["year"], raw["rate"], raw["sample_size"])
    ]
