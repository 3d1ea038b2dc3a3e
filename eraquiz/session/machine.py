from __future__ import annotations

"""Session state machine.

Sessions move intro -> playing <-> reveal -> results. Every transition is an
entry in TRANSITIONS keyed by (source status, action); any pair missing from
the table is rejected with InvalidState. Transitions never mutate their input:
they return a new Session, so a rejected call leaves the caller's record as it
was.

Navigation rules:
- submit_answer records (or overwrites) the answer for the current figure and
  shows the reveal, without moving the index.
- change_answer returns to playing on the same figure; the old answer stays
  until the next submit_answer replaces it.
- advance / go_back land on `reveal` when the target figure already has an
  answer (review), otherwise on `playing`.
- advance past the last figure finishes the session (status results).
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, Optional, Sequence, Tuple

from ..errors import InsufficientData, InvalidState
from .models import Action, Answer, Figure, Session, Status

MIN_FIGURES = 5

Effect = Callable[..., Session]
Guard = Callable[[Session], Optional[str]]


@dataclass(frozen=True)
class Transition:
    targets: FrozenSet[Status]
    effect: Effect
    guard: Optional[Guard] = None


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot for a front end (pure data)."""

    session_id: str
    status: Status
    index: int
    total: int
    figure: Optional[Figure]
    answer: Optional[Answer]
    can_go_back: bool
    is_last: bool


# --- Guards ---------------------------------------------------------------

def _index_in_bounds(session: Session) -> Optional[str]:
    if not (0 <= session.current_index < len(session.figures)):
        return f"current_index {session.current_index} out of bounds for {len(session.figures)} figures"
    return None


def _can_go_back(session: Session) -> Optional[str]:
    reason = _index_in_bounds(session)
    if reason:
        return reason
    if session.current_index <= 0:
        return "already at the first figure"
    return None


# --- Effects --------------------------------------------------------------

def _landing_status(session: Session, index: int) -> Status:
    return Status.REVEAL if session.answer_for(index) is not None else Status.PLAYING


def _start(
    session: Session,
    *,
    figures: Sequence[Figure],
    session_id: str,
    now: datetime,
    min_figures: int = MIN_FIGURES,
) -> Session:
    if len(figures) < min_figures:
        raise InsufficientData(len(figures), min_figures)
    ids = [f.id for f in figures]
    if len(set(ids)) != len(ids):
        dupes = sorted({i for i in ids if ids.count(i) > 1})
        raise InvalidState(
            f"figure ids must be unique within a session, repeated: {dupes}",
            status=session.status.value,
            action=Action.START.value,
        )
    return Session(
        id=session_id,
        status=Status.PLAYING,
        figures=tuple(figures),
        current_index=0,
        answers={},
        created_at=now,
        completed_at=None,
    )


def _submit_answer(session: Session, *, recognized: bool, now: datetime) -> Session:
    figure = session.figures[session.current_index]
    answers = dict(session.answers)
    answers[figure.id] = Answer(figure_id=figure.id, recognized=bool(recognized), timestamp=now)
    return replace(session, status=Status.REVEAL, answers=answers)


def _change_answer(session: Session) -> Session:
    return replace(session, status=Status.PLAYING)


def _advance(session: Session, *, now: datetime) -> Session:
    nxt = session.current_index + 1
    if nxt < len(session.figures):
        return replace(session, current_index=nxt, status=_landing_status(session, nxt))
    # Index stays on the last figure; results is terminal.
    return replace(session, status=Status.RESULTS, completed_at=now)


def _go_back(session: Session) -> Session:
    prev = session.current_index - 1
    return replace(session, current_index=prev, status=_landing_status(session, prev))


TRANSITIONS: Dict[Tuple[Status, Action], Transition] = {
    (Status.INTRO, Action.START): Transition(frozenset({Status.PLAYING}), _start),
    (Status.PLAYING, Action.SUBMIT_ANSWER): Transition(frozenset({Status.REVEAL}), _submit_answer, _index_in_bounds),
    (Status.REVEAL, Action.CHANGE_ANSWER): Transition(frozenset({Status.PLAYING}), _change_answer, _index_in_bounds),
    (Status.REVEAL, Action.ADVANCE): Transition(
        frozenset({Status.PLAYING, Status.REVEAL, Status.RESULTS}), _advance, _index_in_bounds
    ),
    (Status.PLAYING, Action.GO_BACK): Transition(frozenset({Status.PLAYING, Status.REVEAL}), _go_back, _can_go_back),
    (Status.REVEAL, Action.GO_BACK): Transition(frozenset({Status.PLAYING, Status.REVEAL}), _go_back, _can_go_back),
}


def apply(session: Session, action: Action, **kwargs: Any) -> Session:
    """Run `action` against `session` through the transition table.

    Raises:
        InvalidState: unknown action, (status, action) is not in the table,
            its guard fails, or start() is given repeated figure ids.
        InsufficientData: start() with fewer figures than required.
    """
    try:
        action = Action(action)
    except ValueError:
        raise InvalidState(
            f"unknown action {action!r}",
            status=session.status.value,
            action=str(action),
        ) from None
    transition = TRANSITIONS.get((session.status, action))
    if transition is None:
        raise InvalidState(
            f"cannot {action.value} while {session.status.value}",
            status=session.status.value,
            action=action.value,
        )
    if transition.guard is not None:
        reason = transition.guard(session)
        if reason:
            raise InvalidState(reason, status=session.status.value, action=action.value)
    out = transition.effect(session, **kwargs)
    if out.status not in transition.targets:
        raise InvalidState(
            f"{action.value} produced unexpected status {out.status.value}",
            status=session.status.value,
            action=action.value,
        )
    return out


# --- Public API -----------------------------------------------------------

def new_session() -> Session:
    return Session()


def start(
    session: Session,
    figures: Sequence[Figure],
    *,
    session_id: str,
    now: datetime,
    min_figures: int = MIN_FIGURES,
) -> Session:
    return apply(session, Action.START, figures=figures, session_id=session_id, now=now, min_figures=min_figures)


def submit_answer(session: Session, recognized: bool, *, now: datetime) -> Session:
    return apply(session, Action.SUBMIT_ANSWER, recognized=recognized, now=now)


def change_answer(session: Session) -> Session:
    return apply(session, Action.CHANGE_ANSWER)


def advance(session: Session, *, now: datetime) -> Session:
    return apply(session, Action.ADVANCE, now=now)


def go_back(session: Session) -> Session:
    return apply(session, Action.GO_BACK)


def current_figure(session: Session) -> Optional[Figure]:
    """Figure shown for a stored record, derived from its fields alone."""
    if session.status in (Status.INTRO, Status.RESULTS):
        return None
    if 0 <= session.current_index < len(session.figures):
        return session.figures[session.current_index]
    return None


def view(session: Session) -> SessionView:
    total = len(session.figures)
    return SessionView(
        session_id=session.id,
        status=session.status,
        index=session.current_index,
        total=total,
        figure=current_figure(session),
        answer=session.answer_for(session.current_index),
        can_go_back=session.status in (Status.PLAYING, Status.REVEAL) and session.current_index > 0,
        is_last=total > 0 and session.current_index >= total - 1,
    )
