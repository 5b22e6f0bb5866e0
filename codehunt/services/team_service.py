"""Team registration, lookup, leaderboard and administrative operations."""

import time
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from codehunt.exceptions import NotFoundError
from codehunt.logging_config import get_logger
from codehunt.schemas import RegisterTeamRequest
from codehunt.state_machine import FINAL_PHASE, FIRST_PHASE, phase_key
from codehunt.store.base import LEADERBOARD_LIMIT, TeamStore

logger = get_logger(__name__)


def generate_team_id() -> str:
    return f"TEAM_{int(time.time() * 1000)}_{uuid4().hex[:9]}"


def new_team_record(team_id: str, body: RegisterTeamRequest) -> dict[str, Any]:
    """Fresh record: phase 1 active, every completion flag false."""
    record: dict[str, Any] = {
        "teamId": team_id,
        "teamName": body.team_name.lower(),
        "teamLeader": body.team_leader,
        "teamMembers": list(body.team_members),
        "email": body.email,
        "theme": body.theme,
        "currentPhase": FIRST_PHASE,
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    for phase in range(FIRST_PHASE, FINAL_PHASE + 1):
        record[phase_key(phase)] = {"completed": False}
    return record


class TeamService:
    def __init__(self, store: TeamStore):
        self.store = store

    async def register(self, body: RegisterTeamRequest) -> dict[str, Any]:
        team_id = generate_team_id()
        team = await self.store.create(team_id, new_team_record(team_id, body))
        logger.info(
            "team_registered",
            team_id=team_id,
            team_name=team["teamName"],
            theme=body.theme,
            backend=self.store.name,
        )
        return team

    async def get_by_name(self, team_name: str) -> dict[str, Any]:
        team = await self.store.find_by_name(team_name)
        if team is None:
            raise NotFoundError("Team not found")
        return team

    async def leaderboard(self) -> list[dict[str, Any]]:
        return await self.store.list_completed(LEADERBOARD_LIMIT)

    async def list_teams(self) -> list[dict[str, Any]]:
        return await self.store.list_all()

    async def stats(self) -> dict[str, Any]:
        return await self.store.aggregate_stats()

    async def delete(self, team_id: str) -> None:
        if not await self.store.delete(team_id):
            raise NotFoundError("Team not found")
        logger.warning("team_deleted", team_id=team_id)

    async def purge(self) -> int:
        deleted = await self.store.purge()
        logger.warning("teams_purged", deleted=deleted)
        return deleted
