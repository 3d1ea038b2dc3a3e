from __future__ import annotations

"""Schema constants and Pydantic models for Parquet-backed session records."""

import json
from datetime import datetime, timezone
from typing import Literal, Optional

import pandas as pd
from pandas.api.types import CategoricalDtype
from pydantic import BaseModel, Field, field_validator, model_validator

from eraquiz.session.models import Session

# --- Constants ---

STATUSES = {"intro", "playing", "reveal", "results"}


def _cat_dtype(categories: set[str]) -> CategoricalDtype:
    return CategoricalDtype(categories=sorted(categories), ordered=False)


DTYPES = {
    "id": "string",
    "status": _cat_dtype(STATUSES),
    "current_index": "UInt16",
    # JSON text columns; the figure sequence is fixed per session
    "figures": "string",
    "answers": "string",
    # timezone-aware UTC timestamps
    "created_at": pd.DatetimeTZDtype(tz="UTC"),
    "completed_at": pd.DatetimeTZDtype(tz="UTC"),
}


def _ensure_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


# --- Pydantic models ---

class SessionRow(BaseModel):
    id: str = Field(min_length=1)
    status: Literal["intro", "playing", "reveal", "results"]
    current_index: int = Field(ge=0, le=65535)
    figures: str
    answers: str = "[]"
    created_at: datetime
    completed_at: Optional[datetime] = None

    @field_validator("created_at", "completed_at")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _ensure_utc(v)

    @model_validator(mode="after")
    def _index_within_figures(self) -> "SessionRow":
        n = len(json.loads(self.figures))
        if self.current_index > n:
            raise ValueError(f"current_index {self.current_index} exceeds {n} figures")
        return self

    @classmethod
    def from_session(cls, session: Session) -> "SessionRow":
        data = session.to_json()
        return cls(
            id=session.id,
            status=session.status.value,
            current_index=session.current_index,
            figures=json.dumps(data["figures"], separators=(",", ":")),
            answers=json.dumps(data["answers"], separators=(",", ":")),
            created_at=session.created_at or datetime.now(timezone.utc),
            completed_at=session.completed_at,
        )

    def to_session(self) -> Session:
        return Session.from_json(
            {
                "id": self.id,
                "status": self.status,
                "figures": json.loads(self.figures),
                "currentIndex": self.current_index,
                "answers": json.loads(self.answers),
                "createdAt": self.created_at.isoformat(),
                "completedAt": self.completed_at.isoformat() if self.completed_at else None,
            }
        )
