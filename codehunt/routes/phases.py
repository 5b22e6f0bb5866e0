"""Phase endpoints: content, per-item feedback and submissions for phases 1-6."""

from typing import Any

from fastapi import APIRouter, Depends

from codehunt import content
from codehunt.exceptions import CodeHuntError, raise_http_exception
from codehunt.schemas import (
    AnswerListRequest,
    CheckSingleRequest,
    CheckSingleResponse,
    Phase1SubmitRequest,
    Phase1SubmitResponse,
    Phase2SubmitResponse,
    Phase3SubmitResponse,
    Phase4SubmitRequest,
    Phase4SubmitResponse,
    Phase5AnswerRequest,
    Phase5CompleteRequest,
    Phase5CompleteResponse,
    Phase6SubmitRequest,
    Phase6SubmitResponse,
)
from codehunt.services.progress_service import ProgressService
from codehunt.store.base import TeamStore
from codehunt.store.factory import get_team_store

router = APIRouter(prefix="/api", tags=["phases"])


def get_progress_service(store: TeamStore = Depends(get_team_store)) -> ProgressService:
    return ProgressService(store)


def _content_route(phase: int):
    async def get_content() -> list[dict[str, Any]]:
        return content.get_public_questions(phase)

    get_content.__doc__ = f"Phase {phase} items without answer keys."
    return get_content


for _phase in (2, 3, 4, 5):
    router.add_api_route(
        f"/phase{_phase}/content",
        _content_route(_phase),
        methods=["GET"],
        name=f"phase{_phase}_content",
    )


@router.post("/phase1/submit", response_model=Phase1SubmitResponse)
async def submit_phase1(
    body: Phase1SubmitRequest,
    service: ProgressService = Depends(get_progress_service),
):
    """Image prompt submission; the prompt must carry the event marker."""
    try:
        result = await service.submit_phase1(body.team_id, body.ai_prompt, body.drive_link)
    except CodeHuntError as e:
        raise_http_exception(e)
    return Phase1SubmitResponse(**result)


@router.post("/phase2/check-single", response_model=CheckSingleResponse)
async def check_phase2_answer(
    body: CheckSingleRequest,
    service: ProgressService = Depends(get_progress_service),
):
    """Immediate feedback for one quiz question. Stateless."""
    try:
        correct = service.check_phase2_answer(body.question_index, body.answer)
    except CodeHuntError as e:
        raise_http_exception(e)
    return CheckSingleResponse(correct=correct)


@router.post("/phase2/submit", response_model=Phase2SubmitResponse)
async def submit_phase2(
    body: AnswerListRequest,
    service: ProgressService = Depends(get_progress_service),
):
    """Quiz submission; passes only with every answer correct."""
    try:
        result = await service.submit_phase2(body.team_id, body.answers)
    except CodeHuntError as e:
        raise_http_exception(e)
    return Phase2SubmitResponse(**result)


@router.post("/phase3/submit", response_model=Phase3SubmitResponse)
async def submit_phase3(
    body: AnswerListRequest,
    service: ProgressService = Depends(get_progress_service),
):
    """Code-reading submission; the full answer key comes back for review."""
    try:
        result = await service.submit_phase3(body.team_id, body.answers)
    except CodeHuntError as e:
        raise_http_exception(e)
    return Phase3SubmitResponse(**result)


@router.post("/phase4/submit", response_model=Phase4SubmitResponse)
async def submit_phase4(
    body: Phase4SubmitRequest,
    service: ProgressService = Depends(get_progress_service),
):
    """Output of the debugged program."""
    try:
        result = await service.submit_phase4(body.team_id, body.answer)
    except CodeHuntError as e:
        raise_http_exception(e)
    return Phase4SubmitResponse(**result)


@router.post("/phase5/answer", response_model=CheckSingleResponse)
async def answer_phase5_riddle(
    body: Phase5AnswerRequest,
    service: ProgressService = Depends(get_progress_service),
):
    """Immediate feedback for one riddle."""
    try:
        correct = await service.check_phase5_answer(body.team_id, body.riddle_id, body.answer)
    except CodeHuntError as e:
        raise_http_exception(e)
    return CheckSingleResponse(correct=correct)


@router.post("/phase5/complete", response_model=Phase5CompleteResponse)
async def complete_phase5(
    body: Phase5CompleteRequest,
    service: ProgressService = Depends(get_progress_service),
):
    """Riddle completion; the score is recomputed here, ``body.score`` is ignored."""
    try:
        result = await service.complete_phase5(body.team_id, body.answers)
    except CodeHuntError as e:
        raise_http_exception(e)
    return Phase5CompleteResponse(**result)


@router.post("/phase6/submit", response_model=Phase6SubmitResponse)
async def submit_phase6(
    body: Phase6SubmitRequest,
    service: ProgressService = Depends(get_progress_service),
):
    """Final location proof; always accepted once the team reaches phase 6."""
    try:
        result = await service.submit_phase6(body.team_id, body.location_answer)
    except CodeHuntError as e:
        raise_http_exception(e)
    return Phase6SubmitResponse(**result)
