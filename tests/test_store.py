import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pydantic import ValidationError

from eraquiz.session import machine
from storage.schema import SessionRow
from storage.store import MemorySessionStore, NotFound, ParquetSessionStore, export_ndjson

from tests.helpers import NOW, figures_for


def _playing(sid: str = "s-1"):
    return machine.start(machine.new_session(), figures_for(5), session_id=sid, now=NOW)


def _finished(sid: str = "s-done"):
    s = _playing(sid)
    for i in range(5):
        s = machine.submit_answer(s, i < 3, now=NOW)
        s = machine.advance(s, now=NOW + timedelta(minutes=2))
    return s


class SessionRowTests(unittest.TestCase):
    def test_naive_timestamps_become_utc(self) -> None:
        row = SessionRow(
            id="x",
            status="playing",
            current_index=0,
            figures="[]",
            created_at=datetime(2024, 1, 1, 8, 0),
        )
        self.assertEqual(row.created_at.tzinfo, timezone.utc)
        self.assertIsNone(row.completed_at)

    def test_index_beyond_figures_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            SessionRow(id="x", status="playing", current_index=3, figures="[]", created_at=NOW)

    def test_unknown_status_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            SessionRow(id="x", status="paused", current_index=0, figures="[]", created_at=NOW)

    def test_round_trip_through_row(self) -> None:
        s = _finished()
        self.assertEqual(SessionRow.from_session(s).to_session(), s)


class MemoryStoreTests(unittest.TestCase):
    def test_put_get(self) -> None:
        store = MemorySessionStore()
        s = _playing()
        store.put(s.id, s)
        self.assertIs(store.get(s.id), s)
        self.assertIn(s.id, store)
        self.assertEqual(len(store), 1)

    def test_missing_id(self) -> None:
        with self.assertRaises(NotFound) as ctx:
            MemorySessionStore().get("nope")
        self.assertEqual(ctx.exception.session_id, "nope")
        self.assertEqual(str(ctx.exception), "Session not found: nope")

    def test_put_overwrites(self) -> None:
        store = MemorySessionStore()
        s = _playing()
        store.put(s.id, s)
        updated = machine.submit_answer(s, True, now=NOW)
        store.put(s.id, updated)
        self.assertEqual(len(store), 1)
        self.assertEqual(store.get(s.id), updated)


class ParquetStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name) / "data"
        self.store = ParquetSessionStore(self.data_dir)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_init_creates_empty_file(self) -> None:
        self.store.init_store()
        self.assertTrue(self.store.path.exists())
        self.assertTrue(self.store.load_all().empty)
        self.assertEqual(self.store.list_ids(), [])

    def test_round_trip_in_progress(self) -> None:
        s = machine.submit_answer(_playing(), False, now=NOW)
        self.store.put(s.id, s)
        loaded = ParquetSessionStore(self.data_dir).get(s.id)
        self.assertEqual(loaded, s)
        self.assertIsNone(loaded.completed_at)
        self.assertEqual(machine.view(loaded), machine.view(s))

    def test_round_trip_finished(self) -> None:
        s = _finished()
        self.store.put(s.id, s)
        loaded = self.store.get(s.id)
        self.assertEqual(loaded.completed_at, NOW + timedelta(minutes=2))
        self.assertEqual(loaded.answer_list(), s.answer_list())

    def test_upsert_keeps_one_row_per_id(self) -> None:
        a = _playing("a")
        b = _playing("b")
        self.store.put(a.id, a)
        self.store.put(b.id, b)
        a2 = machine.submit_answer(a, True, now=NOW)
        self.store.put(a.id, a2)
        self.assertEqual(sorted(self.store.list_ids()), ["a", "b"])
        self.assertEqual(self.store.get("a"), a2)
        self.assertEqual(self.store.list_ids(status="reveal"), ["a"])
        self.assertEqual(self.store.list_ids(status="playing"), ["b"])

    def test_missing_id(self) -> None:
        with self.assertRaises(NotFound):
            self.store.get("nope")
        self.store.put("a", _playing("a"))
        with self.assertRaises(NotFound):
            self.store.get("nope")

    def test_export_ndjson(self) -> None:
        self.store.put("a", _playing("a"))
        out = Path(self._tmp.name) / "export" / "sessions.ndjson"
        export_ndjson(self.store.load_all(), out)
        lines = out.read_text(encoding="utf-8").strip().splitlines()
        self.assertEqual(len(lines), 1)
        self.assertIn('"id":"a"', lines[0])


if __name__ == "__main__":
    unittest.main()
