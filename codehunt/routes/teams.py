"""Team endpoints: registration, resume by name and the leaderboard."""

from fastapi import APIRouter, Depends

from codehunt.exceptions import CodeHuntError, raise_http_exception
from codehunt.logging_config import get_logger
from codehunt.schemas import (
    LeaderboardEntry,
    RegisterTeamRequest,
    RegisterTeamResponse,
    TeamResponse,
)
from codehunt.services.team_service import TeamService
from codehunt.store.base import TeamStore
from codehunt.store.factory import get_team_store

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["teams"])


@router.post("/teams/register", response_model=RegisterTeamResponse, status_code=201)
async def register_team(
    body: RegisterTeamRequest,
    store: TeamStore = Depends(get_team_store),
):
    """Register a team. Names are unique regardless of case."""
    try:
        team = await TeamService(store).register(body)
    except CodeHuntError as e:
        raise_http_exception(e)
    return RegisterTeamResponse(team=TeamResponse.model_validate(team))


@router.get("/teams/{team_name}", response_model=TeamResponse)
async def get_team(
    team_name: str,
    store: TeamStore = Depends(get_team_store),
):
    """Look up a team by name so a returning team can resume."""
    try:
        team = await TeamService(store).get_by_name(team_name)
    except CodeHuntError as e:
        raise_http_exception(e)
    return TeamResponse.model_validate(team)


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def get_leaderboard(store: TeamStore = Depends(get_team_store)):
    """Teams that finished phase 6, first finishers first."""
    try:
        return await TeamService(store).leaderboard()
    except CodeHuntError as e:
        raise_http_exception(e)
