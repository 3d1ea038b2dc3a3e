from __future__ import annotations

"""Session Manager: orchestrates candidates, the state machine, and persistence.

Each client request is one store read, a pure transition, and one store write.
It is CLI-agnostic and front-end ready.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from analytics.config import EngineConfig
from analytics.metrics import results_payload
from storage.store import MemorySessionStore, ParquetSessionStore, SessionStore

from ..errors import InvalidState
from ..figures.candidates import CandidateSource, JsonCandidateSource, select_figures, usable_figures
from ..session import machine
from ..session.models import Session, Status
from ..util.clock import Clock, SystemClock, current_year
from ..util.randomness import Permutation, make_permutation
from .explain import trace as xtrace


@dataclass(frozen=True)
class Step:
    """Outcome of advance(): the new record, plus results once finished."""

    session: Session
    results: Optional[Dict[str, Any]] = None

    @property
    def finished(self) -> bool:
        return self.session.status is Status.RESULTS


def make_store(cfg: Dict[str, Any]) -> SessionStore:
    storage = cfg.get("storage") or {}
    if storage.get("backend") == "memory":
        return MemorySessionStore()
    return ParquetSessionStore(Path(storage.get("data_dir", "./.eraquiz/sessions")))


class SessionManager:
    def __init__(
        self,
        cfg: Dict[str, Any],
        store: SessionStore,
        source: CandidateSource,
        *,
        clock: Optional[Clock] = None,
        permute: Optional[Permutation] = None,
        engine_cfg: Optional[EngineConfig] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.cfg = cfg
        self.store = store
        self.source = source
        self.clock: Clock = clock or SystemClock()
        self.permute: Permutation = permute or make_permutation()
        self.engine_cfg = engine_cfg or EngineConfig(floor_year=int(cfg.get("estimator", {}).get("floor_year", 1950)))
        self._new_id = id_factory or (lambda: str(uuid4()))

    @classmethod
    def from_config(
        cls,
        cfg: Dict[str, Any],
        *,
        clock: Optional[Clock] = None,
        seed: Optional[int] = None,
    ) -> "SessionManager":
        source = JsonCandidateSource(cfg.get("candidates", {}).get("path", "./data/popular_people.json"))
        return cls(cfg, make_store(cfg), source, clock=clock, permute=make_permutation(seed))

    # --- Lifecycle ---------------------------------------------------------

    def start_session(self) -> Session:
        """Build the figure pool, pick the sequence, and persist a playing session.

        Raises:
            InsufficientData: too few usable figures; nothing is written.
        """
        quiz = self.cfg.get("quiz", {})
        cands = self.cfg.get("candidates", {})
        year = current_year(self.clock)

        people = self.source.fetch()
        pool = usable_figures(
            people,
            year,
            image_base_url=cands.get("image_base_url", "https://image.tmdb.org/t/p/w500"),
            estimator_params=self.cfg.get("estimator") or None,
        )
        selected = select_figures(pool, int(quiz.get("figures_per_session", 40)), self.permute)

        session = machine.start(
            machine.new_session(),
            selected,
            session_id=self._new_id(),
            now=self.clock.now(),
            min_figures=int(quiz.get("min_figures", machine.MIN_FIGURES)),
        )
        self.store.put(session.id, session)
        xtrace(
            "session_started",
            {"id": session.id, "candidates": len(people), "usable": len(pool), "figures": len(session.figures)},
        )
        return session

    def get(self, session_id: str) -> Session:
        return self.store.get(session_id)

    def view(self, session_id: str) -> machine.SessionView:
        return machine.view(self.store.get(session_id))

    # --- Transitions -------------------------------------------------------

    def _transition(self, session_id: str, fn: Callable[[Session], Session]) -> Session:
        session = self.store.get(session_id)
        updated = fn(session)
        self.store.put(session_id, updated)
        return updated

    def submit_answer(self, session_id: str, recognized: bool) -> Session:
        now = self.clock.now()
        session = self._transition(session_id, lambda s: machine.submit_answer(s, recognized, now=now))
        xtrace("answer_recorded", {"id": session_id, "index": session.current_index, "recognized": bool(recognized)})
        return session

    def change_answer(self, session_id: str) -> Session:
        return self._transition(session_id, machine.change_answer)

    def go_back(self, session_id: str) -> Session:
        return self._transition(session_id, machine.go_back)

    def advance(self, session_id: str) -> Step:
        now = self.clock.now()
        session = self._transition(session_id, lambda s: machine.advance(s, now=now))
        if session.status is not Status.RESULTS:
            return Step(session=session)
        xtrace("session_completed", {"id": session_id, "answers": len(session.answers)})
        return Step(session=session, results=self.finalize(session))

    # --- Results -----------------------------------------------------------

    def finalize(self, session: Session) -> Dict[str, Any]:
        """Results payload for a finished session; recomputable at any time."""
        if session.status is not Status.RESULTS:
            raise InvalidState(
                f"session {session.id} is not complete",
                status=session.status.value,
                action="results",
            )
        payload = results_payload(
            session.figures,
            session.answer_list(),
            current_year(self.clock),
            self.engine_cfg,
        )
        xtrace("results_computed", {"id": session.id, **payload["metrics"]})
        return payload

    def results(self, session_id: str) -> Dict[str, Any]:
        return self.finalize(self.store.get(session_id))
