from __future__ import annotations

"""Session stores: in-memory and Parquet-backed (pandas + pyarrow).

Unit of data: one row per session, upserted by id. The quiz core does one
get, computes, and one put per request; nothing here coordinates concurrent
writers, so the last put for an id wins.
"""

from pathlib import Path
from typing import Dict, Protocol

import pandas as pd

from eraquiz.session.models import Session

from .schema import DTYPES, SessionRow


DATA_FILE = "sessions.parquet"


class NotFound(KeyError):
    """No session stored under the requested id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


class SessionStore(Protocol):
    def get(self, session_id: str) -> Session: ...

    def put(self, session_id: str, session: Session) -> None: ...


class MemorySessionStore:
    """Dict-backed store for tests and single-process play."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise NotFound(session_id) from None

    def put(self, session_id: str, session: Session) -> None:
        # Validate the record the same way the Parquet store would.
        SessionRow.from_session(session)
        self._sessions[session_id] = session

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


def _empty_df() -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in DTYPES.items()})


def _fix_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    for col, dt in DTYPES.items():
        if col not in df.columns:
            df[col] = pd.Series(None, index=df.index, dtype="object")
        if isinstance(dt, pd.DatetimeTZDtype):
            df[col] = pd.to_datetime(df[col], utc=True)
        else:
            df[col] = df[col].astype(dt)
    return df[list(DTYPES.keys())]


class ParquetSessionStore:
    """Single Parquet file of session rows, rewritten on every put."""

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)
        self.path = self.data_dir / DATA_FILE

    def init_store(self) -> None:
        """Ensure the data directory and an empty file with the right schema exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            _empty_df().to_parquet(self.path, engine="pyarrow", compression="zstd", index=False)

    def load_all(self) -> pd.DataFrame:
        if not self.path.exists():
            return _empty_df()
        return _fix_dtypes(pd.read_parquet(self.path, engine="pyarrow"))

    def get(self, session_id: str) -> Session:
        df = self.load_all()
        hit = df[df["id"] == session_id]
        if hit.empty:
            raise NotFound(session_id)
        row = hit.iloc[-1]
        completed = row["completed_at"]
        return SessionRow(
            id=str(row["id"]),
            status=str(row["status"]),
            current_index=int(row["current_index"]),
            figures=str(row["figures"]),
            answers=str(row["answers"]),
            created_at=row["created_at"].to_pydatetime(),
            completed_at=None if pd.isna(completed) else completed.to_pydatetime(),
        ).to_session()

    def put(self, session_id: str, session: Session) -> None:
        """Insert or replace the row keyed by session_id."""
        row = SessionRow.from_session(session).model_dump()
        row["id"] = session_id
        df_new = _fix_dtypes(pd.DataFrame([row]))
        self.init_store()
        df = self.load_all()
        df = df[df["id"] != session_id]
        if df.empty:
            combined = df_new
        else:
            combined = _fix_dtypes(pd.concat([df, df_new], ignore_index=True))
        combined.to_parquet(self.path, engine="pyarrow", compression="zstd", index=False)

    def list_ids(self, status: str | None = None) -> list[str]:
        df = self.load_all()
        if status is not None:
            df = df[df["status"].astype("string") == status]
        return [str(x) for x in df["id"]]


def export_ndjson(df: pd.DataFrame, out_path: Path) -> None:
    """Export a DataFrame to line-delimited JSON (NDJSON) for quick inspection."""
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True, date_format="iso")
