from .models import Action, Answer, Figure, Session, Status
from .machine import (
    TRANSITIONS,
    SessionView,
    advance,
    apply,
    change_answer,
    current_figure,
    go_back,
    new_session,
    start,
    submit_answer,
    view,
)

__all__ = [
    "Action",
    "Answer",
    "Figure",
    "Session",
    "Status",
    "TRANSITIONS",
    "SessionView",
    "advance",
    "apply",
    "change_answer",
    "current_figure",
    "go_back",
    "new_session",
    "start",
    "submit_answer",
    "view",
]
