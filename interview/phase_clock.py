"""Phase labeling and duration-aware turn budget."""
from __future__ import annotations

from .types import PHASES, Phase, Terminal

# (upper bound on turns answered, phase); anything above the last bound is closing.
PHASE_THRESHOLDS: tuple[tuple[int, Phase], ...] = (
    (1, "introduction"),
    (5, "technical"),
    (7, "behavioral"),
)

# (upper bound on duration in minutes, question budget)
BUDGET_STEPS: tuple[tuple[int, int], ...] = (
    (15, 6),
    (30, 10),
    (45, 15),
)
MAX_BUDGET = 20


def phase_for(turns_answered: int) -> Phase:
    """Label a turn count with its interview phase."""

    for bound, phase in PHASE_THRESHOLDS:
        if turns_answered <= bound:
            return phase
    return "closing"


def question_budget(duration_minutes: float) -> int:
    """Maximum interviewer turns before the end must be announced."""

    for bound, budget in BUDGET_STEPS:
        if duration_minutes <= bound:
            return budget
    return MAX_BUDGET


def should_announce_end(turns_answered: int, terminal: Terminal, duration_minutes: float) -> bool:
    return terminal == "running" and turns_answered >= question_budget(duration_minutes)


def should_finalize(terminal: Terminal) -> bool:
    return terminal == "completed"


def later_phase(current: Phase, candidate: Phase) -> Phase:
    """Return whichever phase comes later, so the phase never regresses."""

    return max(current, candidate, key=PHASES.index)


__all__ = [
    "phase_for",
    "question_budget",
    "should_announce_end",
    "should_finalize",
    "later_phase",
    "MAX_BUDGET",
]
