"""Phase submissions: guard, score, persist.

Every submit follows the same order: resolve the team, check it is on the
phase and has not passed it, score with the state machine, then persist the
advance as one guarded merge so a duplicate request cannot credit twice.
Failing submissions write nothing.
"""

from typing import Any

from codehunt import content
from codehunt.exceptions import NotFoundError, StateConflictError, ValidationError
from codehunt.logging_config import bind_team, get_logger
from codehunt.state_machine import (
    PHASE1_MARKER,
    PHASE4_ROOM,
    PhaseOutcome,
    advance_patch,
    ensure_can_submit,
    evaluate_phase1,
    evaluate_phase2,
    evaluate_phase3,
    evaluate_phase4,
    evaluate_phase5,
    evaluate_phase6,
    submission_guard,
)
from codehunt.store.base import TeamStore

logger = get_logger(__name__)


class ProgressService:
    def __init__(self, store: TeamStore):
        self.store = store

    async def _load(self, team_id: str) -> dict[str, Any]:
        team = await self.store.get(team_id)
        if team is None:
            raise NotFoundError("Team not found")
        bind_team(team_id)
        return team

    async def _load_for_submit(self, team_id: str, phase: int) -> dict[str, Any]:
        team = await self._load(team_id)
        try:
            ensure_can_submit(team, phase)
        except StateConflictError as e:
            logger.info(
                "submission_rejected",
                team_id=team_id,
                phase=phase,
                current_phase=team.get("currentPhase"),
                reason=e.message,
            )
            raise
        return team

    async def _advance(self, team: dict[str, Any], outcome: PhaseOutcome) -> dict[str, Any]:
        updated = await self.store.save(
            team["teamId"],
            advance_patch(outcome),
            expect=submission_guard(outcome.phase),
        )
        if updated is None:
            raise NotFoundError("Team not found")
        logger.info(
            "phase_completed",
            team_id=team["teamId"],
            team_name=team["teamName"],
            phase=outcome.phase,
            score=outcome.score,
            total=outcome.total,
        )
        return updated

    def _log_failure(self, team: dict[str, Any], outcome: PhaseOutcome) -> None:
        logger.info(
            "phase_failed",
            team_id=team["teamId"],
            team_name=team["teamName"],
            phase=outcome.phase,
            score=outcome.score,
            total=outcome.total,
        )

    # -- phase 1 ------------------------------------------------------------

    async def submit_phase1(
        self, team_id: str, ai_prompt: str, drive_link: str | None = None
    ) -> dict[str, Any]:
        team = await self._load_for_submit(team_id, 1)
        outcome = evaluate_phase1(ai_prompt, drive_link)
        if not outcome.passed:
            self._log_failure(team, outcome)
            raise ValidationError(f'AI Prompt must contain keyword "{PHASE1_MARKER}"')
        updated = await self._advance(team, outcome)
        return {"completed": True, "current_phase": updated["currentPhase"]}

    # -- phase 2 ------------------------------------------------------------

    def check_phase2_answer(self, question_index: int, answer: Any) -> bool:
        item = content.item_at(2, question_index)
        return content.check_single_answer(2, item.id, answer)

    async def submit_phase2(self, team_id: str, answers: list[Any]) -> dict[str, Any]:
        team = await self._load_for_submit(team_id, 2)
        outcome = evaluate_phase2(answers)
        current = team["currentPhase"]
        if outcome.passed:
            current = (await self._advance(team, outcome))["currentPhase"]
        else:
            self._log_failure(team, outcome)
        return {
            "score": outcome.score,
            "total": outcome.total,
            "passed": outcome.passed,
            "results": outcome.results,
            "current_phase": current,
        }

    # -- phase 3 ------------------------------------------------------------

    async def submit_phase3(self, team_id: str, answers: list[Any]) -> dict[str, Any]:
        team = await self._load_for_submit(team_id, 3)
        outcome = evaluate_phase3(answers)
        current = team["currentPhase"]
        if outcome.passed:
            current = (await self._advance(team, outcome))["currentPhase"]
        else:
            self._log_failure(team, outcome)
        # answer keys are echoed on purpose so teams can review
        return {
            "score": outcome.score,
            "total": outcome.total,
            "passed": outcome.passed,
            "results": outcome.results,
            "questions": content.full_items(3),
            "current_phase": current,
        }

    # -- phase 4 ------------------------------------------------------------

    async def submit_phase4(self, team_id: str, answer: str | None) -> dict[str, Any]:
        team = await self._load_for_submit(team_id, 4)
        outcome = evaluate_phase4(answer)
        if not outcome.passed:
            self._log_failure(team, outcome)
            return {
                "success": False,
                "correct": False,
                "message": "Incorrect output. Try again!",
                "current_phase": team["currentPhase"],
            }
        updated = await self._advance(team, outcome)
        return {
            "success": True,
            "correct": True,
            "message": f"Correct! The next treasure is at Room {PHASE4_ROOM}!",
            "room": PHASE4_ROOM,
            "current_phase": updated["currentPhase"],
        }

    # -- phase 5 ------------------------------------------------------------

    async def check_phase5_answer(self, team_id: str, riddle_id: int, answer: Any) -> bool:
        team = await self._load(team_id)
        if team.get("currentPhase") != 5:
            raise StateConflictError("Not on Phase 5")
        return content.check_single_answer(5, riddle_id, answer)

    async def complete_phase5(self, team_id: str, answers: dict[str, Any]) -> dict[str, Any]:
        team = await self._load_for_submit(team_id, 5)
        outcome = evaluate_phase5(answers)
        if not outcome.passed:
            self._log_failure(team, outcome)
            return {
                "success": False,
                "score": outcome.score,
                "total": outcome.total,
                "message": (
                    f"You scored {outcome.score}/{outcome.total}. "
                    "All challenges must be correct to pass. Try again!"
                ),
                "results": outcome.results,
                "current_phase": team["currentPhase"],
            }
        updated = await self._advance(team, outcome)
        return {
            "success": True,
            "score": outcome.score,
            "total": outcome.total,
            "message": "Phase 5 completed! Proceed to the final phase.",
            "results": outcome.results,
            "current_phase": updated["currentPhase"],
        }

    # -- phase 6 ------------------------------------------------------------

    async def submit_phase6(self, team_id: str, location_answer: str | None) -> dict[str, Any]:
        team = await self._load_for_submit(team_id, 6)
        updated = await self._advance(team, evaluate_phase6(location_answer))
        return {
            "team_name": updated["teamName"],
            "team_leader": updated["teamLeader"],
            "current_phase": updated["currentPhase"],
        }
