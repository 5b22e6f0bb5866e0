"""Phase progression state machine.

Phases run 1 → 6 in a fixed order; ``currentPhase == 7`` means the hunt is
finished. A team's state for phase N is derived from its stored record:

    Locked(N)     currentPhase < N
    Active(N)     currentPhase == N and phaseN.completed is false
    Completed(N)  phaseN.completed is true
    Done          currentPhase == 7

A passing submission moves Active(N) → Completed(N) & Active(N+1). A failing
one leaves the record untouched. There is no backward transition.

The evaluators below are pure: they score raw client answers against the
private keys in ``codehunt.content`` and never trust a client-reported score.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from codehunt import content
from codehunt.exceptions import StateConflictError, ValidationError

FIRST_PHASE = 1
FINAL_PHASE = 6
DONE_PHASE = 7

PHASE1_MARKER = "VU2050"
PHASE3_MIN_SCORE = 3
PHASE4_ROOM = "2012"


class PhaseState(str, enum.Enum):
    locked = "locked"
    active = "active"
    completed = "completed"
    done = "done"


@dataclass(frozen=True)
class PhaseOutcome:
    """Result of scoring one submission."""

    phase: int
    passed: bool
    score: int | None = None
    total: int | None = None
    results: list[dict[str, Any]] = field(default_factory=list)
    record: dict[str, Any] = field(default_factory=dict)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _check_phase(phase: int) -> None:
    if not FIRST_PHASE <= phase <= FINAL_PHASE:
        raise ValidationError(f"Unknown phase {phase}")


def phase_key(phase: int) -> str:
    return f"phase{phase}"


def is_completed(team: dict[str, Any], phase: int) -> bool:
    record = team.get(phase_key(phase)) or {}
    return bool(record.get("completed"))


def phase_state(team: dict[str, Any], phase: int) -> PhaseState:
    """Derive the state of ``phase`` from a stored team record."""
    _check_phase(phase)
    current = team.get("currentPhase", FIRST_PHASE)
    if current >= DONE_PHASE:
        return PhaseState.done
    if is_completed(team, phase) or current > phase:
        return PhaseState.completed
    if current < phase:
        return PhaseState.locked
    return PhaseState.active


def ensure_can_submit(team: dict[str, Any], phase: int) -> None:
    """Raise StateConflictError unless ``phase`` is the team's active phase."""
    state = phase_state(team, phase)
    if state is PhaseState.active:
        return
    if state is PhaseState.completed and team.get("currentPhase") == phase:
        raise StateConflictError(f"Phase {phase} already completed")
    raise StateConflictError(f"Not on Phase {phase}")


def submission_guard(phase: int) -> dict[str, Any]:
    """Preconditions the store re-checks atomically while applying the merge."""
    return {"currentPhase": phase, f"{phase_key(phase)}.completed": False}


def advance_patch(outcome: PhaseOutcome, now: datetime | None = None) -> dict[str, Any]:
    """Merge-patch for a passing outcome: completion flag and cursor move together."""
    if not outcome.passed:
        raise ValueError("Only passing outcomes advance a team")
    completed_at = (now or _utc_now()).isoformat()
    return {
        phase_key(outcome.phase): {
            **outcome.record,
            "completed": True,
            "completedAt": completed_at,
        },
        "currentPhase": outcome.phase + 1,
    }


# ---------------------------------------------------------------------------
# Per-phase pass policy
# ---------------------------------------------------------------------------


def evaluate_phase1(ai_prompt: str, drive_link: str | None = None) -> PhaseOutcome:
    """Pass when the prompt mentions the event marker, in any case."""
    record: dict[str, Any] = {"aiPrompt": ai_prompt}
    if drive_link:
        record["driveLink"] = drive_link
    return PhaseOutcome(
        phase=1,
        passed=PHASE1_MARKER in ai_prompt.upper(),
        record=record,
    )


def _score_list(phase: int, answers: list[Any]) -> tuple[int, list[tuple[content.ContentItem, Any, bool]]]:
    scored = []
    score = 0
    for index, item in enumerate(content.items(phase)):
        answer = answers[index] if index < len(answers) else None
        ok = item.is_correct(answer)
        score += ok
        scored.append((item, answer, ok))
    return score, scored


def evaluate_phase2(answers: list[Any]) -> PhaseOutcome:
    """Every quiz question must be right."""
    score, scored = _score_list(2, answers)
    total = len(scored)
    return PhaseOutcome(
        phase=2,
        passed=score == total,
        score=score,
        total=total,
        results=[
            {"questionIndex": index, "isCorrect": ok}
            for index, (_, _, ok) in enumerate(scored)
        ],
    )


def evaluate_phase3(answers: list[Any]) -> PhaseOutcome:
    """At least PHASE3_MIN_SCORE of the code-reading questions must be right."""
    score, scored = _score_list(3, answers)
    return PhaseOutcome(
        phase=3,
        passed=score >= PHASE3_MIN_SCORE,
        score=score,
        total=len(scored),
        results=[
            {
                "questionId": item.id,
                "userAnswer": answer,
                "correctAnswer": item.correct_answer,
                "isCorrect": ok,
            }
            for item, answer, ok in scored
        ],
    )


def evaluate_phase4(answer: str | None) -> PhaseOutcome:
    """Normalised output of the fixed program, or its numeric alias."""
    submitted = content.normalize_text(answer or "")
    passed = submitted in (
        content.PHASE4_CANONICAL_ANSWER,
        content.PHASE4_NUMERIC_ALIAS,
    )
    return PhaseOutcome(phase=4, passed=passed, score=int(passed), total=1)


def evaluate_phase5(answers: dict[Any, Any] | None) -> PhaseOutcome:
    """Every riddle must be right; the score is rebuilt from the raw answer map."""
    by_id: dict[int, Any] = {}
    for raw_id, entry in (answers or {}).items():
        try:
            riddle_id = int(raw_id)
        except (TypeError, ValueError):
            continue
        by_id[riddle_id] = entry.get("answer") if isinstance(entry, dict) else entry

    riddles = content.items(5)
    results = []
    score = 0
    for riddle in riddles:
        ok = riddle.id in by_id and riddle.is_correct(by_id[riddle.id])
        score += ok
        results.append({"riddleId": riddle.id, "isCorrect": ok})

    return PhaseOutcome(
        phase=5,
        passed=score == len(riddles),
        score=score,
        total=len(riddles),
        results=results,
    )


def evaluate_phase6(location_answer: str | None) -> PhaseOutcome:
    """Terminal phase: always passes and records the location proof."""
    return PhaseOutcome(
        phase=6,
        passed=True,
        record={"locationAnswer": location_answer or ""},
    )
