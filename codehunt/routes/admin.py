"""Administrative endpoints guarded by the optional admin key."""

from typing import Any

from fastapi import APIRouter, Depends

from codehunt.auth import require_admin
from codehunt.exceptions import CodeHuntError, raise_http_exception
from codehunt.schemas import DeleteResponse, StatsResponse
from codehunt.services.team_service import TeamService
from codehunt.store.base import TeamStore
from codehunt.store.factory import get_team_store

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/teams")
async def list_teams(store: TeamStore = Depends(get_team_store)) -> list[dict[str, Any]]:
    """Every team record."""
    try:
        return await TeamService(store).list_teams()
    except CodeHuntError as e:
        raise_http_exception(e)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(store: TeamStore = Depends(get_team_store)):
    """Total teams and completions per phase."""
    try:
        return await TeamService(store).stats()
    except CodeHuntError as e:
        raise_http_exception(e)


@router.delete("/teams/{team_id}", response_model=DeleteResponse)
async def delete_team(team_id: str, store: TeamStore = Depends(get_team_store)):
    try:
        await TeamService(store).delete(team_id)
    except CodeHuntError as e:
        raise_http_exception(e)
    return DeleteResponse(message="Team deleted")


@router.delete("/clear-all", response_model=DeleteResponse)
async def clear_all_teams(store: TeamStore = Depends(get_team_store)):
    """Delete every team. Irreversible."""
    try:
        deleted = await TeamService(store).purge()
    except CodeHuntError as e:
        raise_http_exception(e)
    return DeleteResponse(message="All teams cleared", deleted=deleted)
