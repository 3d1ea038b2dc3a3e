from __future__ import annotations

"""Decade chart for a results screen: bar data, matplotlib rendering, share text."""

import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .metrics import decade_label

CHART_DECADES = ["1960s", "1970s", "1980s", "1990s", "2000s", "2010s", "2020s"]
MIN_BAR_PERCENT = 4.0
MAX_RATE_FLOOR = 0.1


def decade_averages(
    distribution: Iterable[Mapping[str, Any]],
    decades: Sequence[str] = CHART_DECADES,
) -> List[float]:
    """Mean rate per charted decade; 0 for decades with no points."""
    buckets: Dict[str, List[float]] = {}
    for point in distribution:
        buckets.setdefault(decade_label(int(point["year"])), []).append(float(point["rate"]))
    return [float(np.mean(buckets[d])) if buckets.get(d) else 0.0 for d in decades]


def bar_heights(averages: Sequence[float]) -> List[float]:
    """Bar heights in percent of the tallest bar, never below a visible stub."""
    max_rate = max([*averages, MAX_RATE_FLOOR])
    return [max(avg / max_rate * 100.0, MIN_BAR_PERCENT) for avg in averages]


def taste_label(nostalgia_index: float) -> str:
    if nostalgia_index > 1.2:
        return "classic film buff"
    if nostalgia_index < 0.8:
        return "pop culture native"
    return "well-rounded cinephile"


def share_text(metrics: Mapping[str, Any], url: str = "") -> str:
    lines = [
        f"I'm a {metrics['peakDecade']} {taste_label(float(metrics['nostalgiaIndex']))}!",
        "",
        f"My cultural center of gravity: {metrics['centerOfGravity']}",
        f"Recognized {metrics['overallRate']}% of celebrities",
    ]
    if url:
        lines += ["", f"What era are you from? {url}"]
    return "\n".join(lines)


def plot_decades(
    distribution: Iterable[Mapping[str, Any]],
    *,
    peak_decade: Optional[str] = None,
    save_path: Optional[str | bytes | os.PathLike[str]] = None,
) -> None:
    averages = decade_averages(distribution)
    heights = bar_heights(averages)
    colors = ["tab:orange" if d == peak_decade else "tab:blue" for d in CHART_DECADES]
    plt.figure()
    plt.bar(np.arange(len(CHART_DECADES)), heights, color=colors)
    plt.xticks(ticks=np.arange(len(CHART_DECADES)), labels=CHART_DECADES)
    plt.ylim(0, 105)
    plt.ylabel("Relative recognition (%)")
    plt.title("Recognition Rate by Decade" + (f": peak {peak_decade}" if peak_decade else ""))
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
