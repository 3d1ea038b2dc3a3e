from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from eraquiz.figures.estimator import RelevanceWindow
from eraquiz.session.models import Answer, Figure

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def figure(fid: int, start: int, end: int) -> Figure:
    return Figure(
        id=fid,
        display_name=f"Figure {fid}",
        image_ref=f"https://img.example/{fid}.jpg",
        relevance_window=RelevanceWindow(start=start, end=end),
        category="Acting",
        popularity_score=50,
        top_works=(f"Work {fid}",),
    )


def answer(fid: int, recognized: bool) -> Answer:
    return Answer(figure_id=fid, recognized=recognized, timestamp=NOW)


def figures_for(n: int) -> List[Figure]:
    return [figure(i, 1960 + 5 * i, 1966 + 5 * i) for i in range(1, n + 1)]


def person(pid: int, year: int, **extra: Any) -> Dict[str, Any]:
    rec: Dict[str, Any] = {
        "id": pid,
        "name": f"Person {pid}",
        "profile_path": f"/p{pid}.jpg",
        "popularity": 50.0,
        "known_for_department": "Acting",
        "known_for": [{"title": f"Film {pid}", "release_date": f"{year}-01-01", "media_type": "movie"}],
    }
    rec.update(extra)
    return rec


class FakeSource:
    def __init__(self, people: List[Dict[str, Any]]) -> None:
        self.people = people
        self.calls = 0

    def fetch(self) -> List[Dict[str, Any]]:
        self.calls += 1
        return list(self.people)
