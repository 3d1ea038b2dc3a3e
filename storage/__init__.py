from .schema import STATUSES, DTYPES, SessionRow
from .store import (
    NotFound,
    SessionStore,
    MemorySessionStore,
    ParquetSessionStore,
    export_ndjson,
)

__all__ = [
    "STATUSES",
    "DTYPES",
    "SessionRow",
    "NotFound",
    "SessionStore",
    "MemorySessionStore",
    "ParquetSessionStore",
    "export_ndjson",
]
