from __future__ import annotations

"""Plain serializable records for figures, answers and sessions."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..figures.estimator import RelevanceWindow


class Status(str, Enum):
    INTRO = "intro"
    PLAYING = "playing"
    REVEAL = "reveal"
    RESULTS = "results"


class Action(str, Enum):
    START = "start"
    SUBMIT_ANSWER = "submit_answer"
    CHANGE_ANSWER = "change_answer"
    ADVANCE = "advance"
    GO_BACK = "go_back"


def _iso(ts: Optional[datetime]) -> Optional[str]:
    return ts.isoformat() if ts is not None else None


def _parse_ts(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = value
    else:
        ts = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


@dataclass(frozen=True)
class Figure:
    id: int
    display_name: str
    image_ref: str
    relevance_window: RelevanceWindow
    category: str = "Actor"
    popularity_score: int = 0
    top_works: Tuple[str, ...] = ()

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "imageRef": self.image_ref,
            "relevanceWindow": self.relevance_window.to_json(),
            "category": self.category,
            "popularityScore": self.popularity_score,
            "topWorks": list(self.top_works),
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Figure":
        return cls(
            id=int(data["id"]),
            display_name=str(data.get("displayName", "")),
            image_ref=str(data.get("imageRef", "")),
            relevance_window=RelevanceWindow.from_json(data["relevanceWindow"]),
            category=str(data.get("category", "Actor")),
            popularity_score=int(data.get("popularityScore", 0)),
            top_works=tuple(str(w) for w in data.get("topWorks", [])),
        )


@dataclass(frozen=True)
class Answer:
    figure_id: int
    recognized: bool
    timestamp: datetime

    def to_json(self) -> Dict[str, Any]:
        return {
            "figureId": self.figure_id,
            "recognized": self.recognized,
            "timestamp": _iso(self.timestamp),
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Answer":
        return cls(
            figure_id=int(data["figureId"]),
            recognized=bool(data["recognized"]),
            timestamp=_parse_ts(data.get("timestamp")) or datetime.fromtimestamp(0, timezone.utc),
        )


@dataclass(frozen=True)
class Session:
    """Immutable session record.

    Transitions return a new Session; `answers` is keyed by figure id and
    holds at most one live answer per figure.
    """

    id: str = ""
    status: Status = Status.INTRO
    figures: Tuple[Figure, ...] = ()
    current_index: int = 0
    answers: Mapping[int, Answer] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def answer_for(self, index: int) -> Optional[Answer]:
        if not (0 <= index < len(self.figures)):
            return None
        return self.answers.get(self.figures[index].id)

    def answer_list(self) -> List[Answer]:
        """Answers in figure order (stable across serialization), one per id."""
        out: List[Answer] = []
        seen = set()
        for f in self.figures:
            if f.id in self.answers and f.id not in seen:
                seen.add(f.id)
                out.append(self.answers[f.id])
        return out

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status.value,
            "figures": [f.to_json() for f in self.figures],
            "currentIndex": self.current_index,
            "answers": [a.to_json() for a in self.answer_list()],
            "createdAt": _iso(self.created_at),
            "completedAt": _iso(self.completed_at),
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Session":
        answers = [Answer.from_json(a) for a in data.get("answers", [])]
        return cls(
            id=str(data.get("id", "")),
            status=Status(data.get("status", Status.INTRO.value)),
            figures=tuple(Figure.from_json(f) for f in data.get("figures", [])),
            current_index=int(data.get("currentIndex", 0)),
            # later entries win, matching overwrite semantics
            answers={a.figure_id: a for a in answers},
            created_at=_parse_ts(data.get("createdAt")),
            completed_at=_parse_ts(data.get("completedAt")),
        )
