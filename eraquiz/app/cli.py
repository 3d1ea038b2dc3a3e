from __future__ import annotations

"""CLI for EraQuiz using SessionManager."""

import argparse
import json
import sys
from typing import Any, Callable, Dict

from analytics.plots import CHART_DECADES, bar_heights, decade_averages, plot_decades, share_text
from storage.store import MemorySessionStore, NotFound

from .. import __version__
from ..config.config import load_config, validate_config
from ..errors import QuizError
from ..session.models import Status
from ..util.randomness import seed_from_env
from .explain import enable as explain_enable
from .session_manager import SessionManager

PLAYING_PROMPT = "Recognize them? [y]es / [n]o / [b]ack / [q]uit: "
REVEAL_PROMPT = "[enter] next / [c]hange answer / [b]ack / [q]uit: "


def _build_ui() -> Dict[str, Callable[..., Any]]:
    def ask(prompt: str) -> str:
        return input(prompt)

    def inform(msg: str) -> None:
        print(msg)

    return {"ask": ask, "inform": inform}


def _describe(view: Any) -> str:
    fig = view.figure
    if fig is None:
        return ""
    works = ", ".join(fig.top_works)
    return f"[{view.index + 1}/{view.total}] {fig.display_name} ({fig.category}) - {works}"


def play_loop(sm: SessionManager, session_id: str, ui: Dict[str, Callable[..., Any]]) -> Dict[str, Any] | None:
    """Drive one session from the terminal until results or quit.

    Returns the results payload when the session finishes, None on quit.
    """
    ask = ui["ask"]
    inform = ui["inform"]
    while True:
        view = sm.view(session_id)
        if view.status is Status.RESULTS:
            return sm.results(session_id)

        if view.status is Status.PLAYING:
            inform(_describe(view))
            choice = ask(PLAYING_PROMPT).strip().lower()
            if choice in ("y", "yes"):
                sm.submit_answer(session_id, True)
            elif choice in ("n", "no"):
                sm.submit_answer(session_id, False)
            elif choice == "b" and view.can_go_back:
                sm.go_back(session_id)
            elif choice == "q":
                return None
            continue

        # reveal
        fig = view.figure
        answer = "recognized" if view.answer is not None and view.answer.recognized else "not recognized"
        if fig is not None:
            w = fig.relevance_window
            inform(f"{fig.display_name}: active {w.start}-{w.end}. You answered: {answer}.")
        choice = ask(REVEAL_PROMPT).strip().lower()
        if choice in ("", "n", "next"):
            step = sm.advance(session_id)
            if step.finished:
                return step.results
        elif choice == "c":
            sm.change_answer(session_id)
        elif choice == "b" and view.can_go_back:
            sm.go_back(session_id)
        elif choice == "q":
            return None


def format_results(payload: Dict[str, Any]) -> str:
    m = payload["metrics"]
    lines = [
        f"Peak decade:       {m['peakDecade']}",
        f"Center of gravity: {m['centerOfGravity']}",
        f"Breadth:           {m['breadth']} years",
        f"Recognized:        {m['overallRate']}%",
        f"Nostalgia index:   {m['nostalgiaIndex']}",
        "",
    ]
    heights = bar_heights(decade_averages(payload["distribution"]))
    for decade, h in zip(CHART_DECADES, heights):
        lines.append(f"{decade} {'#' * int(round(h / 5))}")
    lines += ["", share_text(m)]
    return "\n".join(lines)


def _emit_results(payload: Dict[str, Any], args: argparse.Namespace) -> None:
    if getattr(args, "json", False):
        print(json.dumps(payload, indent=2))
    else:
        print("\nYour Results:")
        print(format_results(payload))
    plot_path = getattr(args, "plot", None)
    if plot_path:
        plot_decades(payload["distribution"], peak_decade=payload["metrics"]["peakDecade"], save_path=plot_path)
        print(f"Chart saved to: {plot_path}")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="eraquiz")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--explain", action="store_true")
    p.add_argument("--seed", type=int, default=None, help="Seed for the figure shuffle (overrides SEED)")
    sub = p.add_subparsers(dest="cmd")

    pp = sub.add_parser("play")
    pp.add_argument("--candidates", default=None, help="Path to a JSON export of candidate people")
    pp.add_argument("--plot", default=None, help="Save the decade chart to this path")
    pp.add_argument("--json", action="store_true", help="Print the results payload as JSON")

    rp = sub.add_parser("resume")
    rp.add_argument("session_id")
    rp.add_argument("--plot", default=None)
    rp.add_argument("--json", action="store_true")

    res = sub.add_parser("results")
    res.add_argument("session_id")
    res.add_argument("--plot", default=None)
    res.add_argument("--json", action="store_true")

    args = p.parse_args(argv)

    if args.version:
        print(f"eraquiz {__version__}")
        return 0
    if args.cmd is None:
        p.print_help()
        return 0

    cfg = validate_config(load_config(args.config))
    if args.explain or cfg.get("explain"):
        explain_enable(True)
    if getattr(args, "candidates", None):
        cfg["candidates"]["path"] = args.candidates

    seed = args.seed if args.seed is not None else seed_from_env()
    sm = SessionManager.from_config(cfg, seed=seed)
    persistent = not isinstance(sm.store, MemorySessionStore)
    if args.cmd in ("resume", "results") and not persistent:
        print(
            "ERROR: storage backend 'memory' does not keep sessions between runs; "
            "set storage.backend to 'parquet'.",
            file=sys.stderr,
        )
        return 1

    sid = getattr(args, "session_id", "")
    try:
        if args.cmd == "play":
            session = sm.start_session()
            sid = session.id
            print(f"Session {sid}: {len(session.figures)} figures.")
            payload = play_loop(sm, sid, _build_ui())
        elif args.cmd == "resume":
            payload = play_loop(sm, sid, _build_ui())
        else:
            payload = sm.results(args.session_id)
    except FileNotFoundError as e:
        print(f"ERROR: Candidate file not found: {e.filename}", file=sys.stderr)
        return 2
    except NotFound as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except QuizError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if payload is None:
        if persistent:
            print(f"Session saved; resume it later with: eraquiz resume {sid}")
        else:
            print("Session discarded: the memory backend does not keep sessions after exit.")
        return 0
    _emit_results(payload, args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
