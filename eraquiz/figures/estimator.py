from __future__ import annotations

"""Relevance window estimation from associated-work year hints."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from ..errors import Unresolvable


@dataclass(frozen=True)
class RelevanceWindow:
    """Inclusive year range during which a figure is considered active."""

    start: int
    end: int

    def years(self) -> range:
        return range(self.start, self.end + 1)

    def to_json(self) -> Dict[str, int]:
        return {"start": self.start, "end": self.end}

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "RelevanceWindow":
        return cls(start=int(data["start"]), end=int(data["end"]))


def year_from_date(date_str: Optional[str]) -> Optional[int]:
    """Leading year of an ISO-ish date string ("2019-05-03" -> 2019)."""
    if not date_str:
        return None
    head = str(date_str).split("-")[0].strip()
    try:
        return int(head)
    except ValueError:
        return None


def estimate_relevance_window(
    year_hints: Iterable[Optional[int]],
    current_year: int,
    *,
    earliest_hint_year: int = 1920,
    floor_year: int = 1950,
    padding_years: int = 3,
    min_span_years: int = 5,
) -> RelevanceWindow:
    """Turn work-year hints into a padded, minimum-width window.

    Hints outside [earliest_hint_year, current_year] are discarded. The
    surviving extremes are padded by `padding_years` and clamped to
    [floor_year, current_year]. A window narrower than `min_span_years` is
    recentered to mid -/+ padding_years and is *not* clamped again, so the
    result may end after `current_year` or start before `floor_year`.

    Raises:
        Unresolvable: no hint survives the filter.
    """
    years = [int(y) for y in year_hints if y is not None and earliest_hint_year <= int(y) <= current_year]
    if not years:
        raise Unresolvable("no usable year hints")

    start = max(floor_year, min(years) - padding_years)
    end = min(current_year, max(years) + padding_years)

    if end - start < min_span_years:
        mid = (start + end) // 2
        return RelevanceWindow(start=mid - padding_years, end=mid + padding_years)

    return RelevanceWindow(start=start, end=end)
