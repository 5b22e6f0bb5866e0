"""Unit tests for phase progression rules and per-phase scoring."""

from datetime import datetime, timezone

import pytest

from codehunt import content
from codehunt.exceptions import StateConflictError, ValidationError
from codehunt.state_machine import (
    PhaseOutcome,
    PhaseState,
    advance_patch,
    ensure_can_submit,
    evaluate_phase1,
    evaluate_phase2,
    evaluate_phase3,
    evaluate_phase4,
    evaluate_phase5,
    evaluate_phase6,
    phase_state,
    submission_guard,
)


def _team(current_phase: int, completed: set[int] | None = None) -> dict:
    completed = completed or set()
    team = {"teamId": "TEAM_1", "teamName": "alpha", "currentPhase": current_phase}
    for n in range(1, 7):
        team[f"phase{n}"] = {"completed": n in completed}
    return team


PHASE2_KEY = [q.correct_answer for q in content.PHASE2_QUESTIONS]
PHASE3_KEY = [q.correct_answer for q in content.PHASE3_QUESTIONS]
PHASE5_ALL_RIGHT = {"1": {"answer": 2}, "2": {"answer": 2}, "3": {"answer": "BLDG 2"}}


class TestPhaseState:
    def test_fresh_team(self):
        team = _team(1)
        assert phase_state(team, 1) is PhaseState.active
        assert phase_state(team, 2) is PhaseState.locked

    def test_completed_phase(self):
        team = _team(3, {1, 2})
        assert phase_state(team, 2) is PhaseState.completed
        assert phase_state(team, 3) is PhaseState.active
        assert phase_state(team, 6) is PhaseState.locked

    def test_done(self):
        assert phase_state(_team(7, set(range(1, 7))), 4) is PhaseState.done

    def test_unknown_phase(self):
        with pytest.raises(ValidationError):
            phase_state(_team(1), 9)


class TestEnsureCanSubmit:
    def test_active_phase_passes(self):
        ensure_can_submit(_team(4, {1, 2, 3}), 4)

    def test_ahead_of_current(self):
        with pytest.raises(StateConflictError, match="Not on Phase 3"):
            ensure_can_submit(_team(1), 3)

    def test_replay_of_past_phase(self):
        with pytest.raises(StateConflictError, match="Not on Phase 1"):
            ensure_can_submit(_team(2, {1}), 1)

    def test_finished_team_cannot_submit(self):
        with pytest.raises(StateConflictError, match="Not on Phase 6"):
            ensure_can_submit(_team(7, set(range(1, 7))), 6)

    def test_completed_flag_blocks_even_on_current(self):
        with pytest.raises(StateConflictError, match="already completed"):
            ensure_can_submit(_team(2, {1, 2}), 2)

    def test_guard_matches_active_state(self):
        assert submission_guard(5) == {"currentPhase": 5, "phase5.completed": False}


class TestAdvancePatch:
    def test_flag_and_cursor_move_together(self):
        now = datetime(2026, 3, 1, tzinfo=timezone.utc)
        patch = advance_patch(PhaseOutcome(phase=3, passed=True), now)
        assert patch == {
            "phase3": {"completed": True, "completedAt": now.isoformat()},
            "currentPhase": 4,
        }

    def test_keeps_phase_fields(self):
        patch = advance_patch(evaluate_phase1("VU2050 city", "https://drive/x"))
        assert patch["phase1"]["aiPrompt"] == "VU2050 city"
        assert patch["phase1"]["driveLink"] == "https://drive/x"
        assert patch["currentPhase"] == 2

    def test_final_phase_reaches_done(self):
        assert advance_patch(evaluate_phase6("library"))["currentPhase"] == 7

    def test_failing_outcome_rejected(self):
        with pytest.raises(ValueError):
            advance_patch(PhaseOutcome(phase=2, passed=False))


class TestPhase1:
    @pytest.mark.parametrize("prompt", ["test VU2050 plan", "vu2050", "a city in Vu2050 style"])
    def test_marker_any_case(self, prompt):
        assert evaluate_phase1(prompt).passed is True

    def test_missing_marker(self):
        assert evaluate_phase1("VU 2050 city").passed is False


class TestPhase2:
    def test_all_correct_passes(self):
        outcome = evaluate_phase2(PHASE2_KEY)
        assert outcome.passed is True
        assert outcome.score == outcome.total == 10

    def test_one_wrong_fails(self):
        answers = list(PHASE2_KEY)
        answers[4] = (answers[4] + 1) % 4
        outcome = evaluate_phase2(answers)
        assert outcome.passed is False
        assert outcome.score == 9
        assert outcome.results[4] == {"questionIndex": 4, "isCorrect": False}

    def test_short_answer_list_counts_missing_as_wrong(self):
        outcome = evaluate_phase2(PHASE2_KEY[:7])
        assert outcome.score == 7
        assert outcome.passed is False

    def test_string_indices_are_not_correct(self):
        outcome = evaluate_phase2([str(a) for a in PHASE2_KEY])
        assert outcome.score == 0

    def test_integral_floats_are_correct(self):
        outcome = evaluate_phase2([float(a) for a in PHASE2_KEY])
        assert outcome.passed is True


class TestPhase3:
    def _answers_with_score(self, score: int) -> list[int]:
        return [
            key if i < score else (key + 1) % 4
            for i, key in enumerate(PHASE3_KEY)
        ]

    def test_exactly_min_score_passes(self):
        outcome = evaluate_phase3(self._answers_with_score(3))
        assert outcome.score == 3
        assert outcome.passed is True

    def test_below_min_score_fails(self):
        outcome = evaluate_phase3(self._answers_with_score(2))
        assert outcome.score == 2
        assert outcome.passed is False

    def test_results_expose_user_and_correct_answers(self):
        outcome = evaluate_phase3([3, 1, 0, 0, 2])
        assert outcome.results[0] == {
            "questionId": 1,
            "userAnswer": 3,
            "correctAnswer": 0,
            "isCorrect": False,
        }
        assert outcome.score == 4


class TestPhase4:
    @pytest.mark.parametrize(
        "answer",
        ["positive sum: 22, count: 4", "  Positive Sum: 22, Count: 4  ", "22", " 22\n"],
    )
    def test_accepted(self, answer):
        assert evaluate_phase4(answer).passed is True

    @pytest.mark.parametrize("answer", ["", None, "21", "positive sum: 22", "sum 22 count 4"])
    def test_rejected(self, answer):
        assert evaluate_phase4(answer).passed is False


class TestPhase5:
    def test_all_correct_passes(self):
        outcome = evaluate_phase5(PHASE5_ALL_RIGHT)
        assert outcome.passed is True
        assert outcome.score == outcome.total == 3

    def test_text_answer_normalized(self):
        answers = dict(PHASE5_ALL_RIGHT, **{"3": {"answer": "  bldg2 "}})
        assert evaluate_phase5(answers).passed is True

    def test_one_wrong_fails(self):
        answers = dict(PHASE5_ALL_RIGHT, **{"1": {"answer": 0}})
        outcome = evaluate_phase5(answers)
        assert outcome.passed is False
        assert outcome.score == 2
        assert {"riddleId": 1, "isCorrect": False} in outcome.results

    def test_missing_riddle_fails(self):
        answers = {k: v for k, v in PHASE5_ALL_RIGHT.items() if k != "2"}
        assert evaluate_phase5(answers).passed is False

    def test_duplicate_keys_cannot_inflate_score(self):
        answers = {"1": {"answer": 2}, "01": {"answer": 2}, "2": {"answer": 2}}
        outcome = evaluate_phase5(answers)
        assert outcome.score == 2
        assert outcome.passed is False

    def test_garbage_keys_ignored(self):
        answers = dict(PHASE5_ALL_RIGHT, bogus={"answer": 1})
        assert evaluate_phase5(answers).score == 3

    def test_empty(self):
        outcome = evaluate_phase5(None)
        assert outcome.score == 0
        assert outcome.passed is False


class TestPhase6:
    def test_always_passes(self):
        outcome = evaluate_phase6(None)
        assert outcome.passed is True
        assert outcome.record == {"locationAnswer": ""}
