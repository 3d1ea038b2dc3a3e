from __future__ import annotations

"""Candidate person records -> usable Figures.

A candidate is one record of the metadata export (popular-people pages):

    {"id": 31, "name": "...", "profile_path": "/abc.jpg", "popularity": 57.3,
     "known_for_department": "Acting",
     "known_for": [{"title": "...", "release_date": "1994-07-06", ...}]}

Building never issues further lookups; everything comes from `known_for`.
"""

import json
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from ..app.explain import trace as xtrace
from ..errors import Unresolvable
from ..session.models import Figure
from ..util.randomness import Permutation
from .estimator import estimate_relevance_window, year_from_date

DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"
TOP_WORKS_LIMIT = 3


class CandidateSource(Protocol):
    def fetch(self) -> List[Dict[str, Any]]: ...


class JsonCandidateSource:
    """Candidates from a local JSON export.

    Accepts either a flat list of people or a list of result pages
    (`[{"results": [...]}, ...]` / `{"results": [...]}`). People without a
    profile image are dropped.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def fetch(self) -> List[Dict[str, Any]]:
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = [data]
        people: List[Dict[str, Any]] = []
        for item in data or []:
            if isinstance(item, dict) and "results" in item:
                people.extend(item.get("results") or [])
            else:
                people.append(item)
        return [p for p in people if p.get("profile_path")]


def _work_year(work: Dict[str, Any]) -> Optional[int]:
    return year_from_date(work.get("release_date")) or year_from_date(work.get("first_air_date"))


def build_figure(
    person: Dict[str, Any],
    current_year: int,
    *,
    image_base_url: str = DEFAULT_IMAGE_BASE_URL,
    estimator_params: Optional[Dict[str, int]] = None,
) -> Figure:
    """Build a Figure from one candidate record.

    Raises:
        Unresolvable: no known works, no datable work, or no titled work.
    """
    known_for = person.get("known_for") or []
    if not known_for:
        raise Unresolvable(f"person {person.get('id')} has no known works")

    window = estimate_relevance_window(
        (_work_year(w) for w in known_for),
        current_year,
        **(estimator_params or {}),
    )

    titles = [w.get("title") or w.get("name") for w in known_for]
    top_works = tuple(t for t in titles if t)[:TOP_WORKS_LIMIT]
    if not top_works:
        raise Unresolvable(f"person {person.get('id')} has no titled works")

    popularity = float(person.get("popularity") or 0.0)
    return Figure(
        id=int(person["id"]),
        display_name=str(person.get("name", "")),
        image_ref=f"{image_base_url}{person.get('profile_path') or ''}",
        relevance_window=window,
        category=person.get("known_for_department") or "Actor",
        popularity_score=min(100, int(math.floor(popularity + 0.5))),
        top_works=top_works,
    )


def usable_figures(
    people: Iterable[Dict[str, Any]],
    current_year: int,
    *,
    image_base_url: str = DEFAULT_IMAGE_BASE_URL,
    estimator_params: Optional[Dict[str, int]] = None,
) -> List[Figure]:
    """Build every candidate, dropping the unresolvable ones.

    A person listed more than once (e.g. on two result pages) is kept only
    the first time; answers are keyed by figure id.
    """
    figures: List[Figure] = []
    seen: set[int] = set()
    for person in people:
        try:
            fig = build_figure(
                person,
                current_year,
                image_base_url=image_base_url,
                estimator_params=estimator_params,
            )
        except Unresolvable as exc:
            xtrace("candidate_dropped", {"id": person.get("id"), "reason": str(exc)})
            continue
        if fig.id in seen:
            xtrace("candidate_dropped", {"id": fig.id, "reason": "duplicate id"})
            continue
        seen.add(fig.id)
        figures.append(fig)
    return figures


def select_figures(figures: Sequence[Figure], count: int, permute: Permutation) -> List[Figure]:
    """Shuffle with the injected permutation and keep the first `count`."""
    shuffled = permute(list(figures))
    return shuffled[: min(count, len(shuffled))]
