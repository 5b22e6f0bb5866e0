"""Process-local team store.

Starts empty and loses everything on restart. Only ``purge`` clears it.
"""

import asyncio
import copy
from typing import Any

from codehunt.exceptions import DuplicateTeamError
from codehunt.logging_config import get_logger
from codehunt.store.base import (
    LEADERBOARD_LIMIT,
    TeamStore,
    check_expectations,
    compute_stats,
    get_path,
    is_finished,
    leaderboard_entry,
    merge_patch,
)

logger = get_logger(__name__)


class MemoryTeamStore(TeamStore):
    name = "In-Memory"

    def __init__(self) -> None:
        self._teams: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def create(self, team_id: str, team: dict[str, Any]) -> dict[str, Any]:
        name = team["teamName"].lower()
        async with self._lock:
            if team_id in self._teams or self._find(name) is not None:
                raise DuplicateTeamError(name)
            self._teams[team_id] = copy.deepcopy(team)
            return copy.deepcopy(self._teams[team_id])

    async def get(self, team_id: str) -> dict[str, Any] | None:
        record = self._teams.get(team_id)
        return copy.deepcopy(record) if record is not None else None

    def _find(self, normalized_name: str) -> dict[str, Any] | None:
        for record in self._teams.values():
            if record["teamName"] == normalized_name:
                return record
        return None

    async def find_by_name(self, team_name: str) -> dict[str, Any] | None:
        record = self._find(team_name.lower())
        return copy.deepcopy(record) if record is not None else None

    async def save(
        self,
        team_id: str,
        patch: dict[str, Any],
        expect: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        async with self._lock:
            current = self._teams.get(team_id)
            if current is None:
                return None
            check_expectations(team_id, current, expect)
            # build the new record first so a failed merge leaves the old one intact
            self._teams[team_id] = merge_patch(current, patch)
            return copy.deepcopy(self._teams[team_id])

    async def list_all(self) -> list[dict[str, Any]]:
        return [copy.deepcopy(r) for r in self._teams.values()]

    async def list_completed(self, limit: int = LEADERBOARD_LIMIT) -> list[dict[str, Any]]:
        finished = [r for r in self._teams.values() if is_finished(r)]
        finished.sort(key=lambda r: get_path(r, "phase6.completedAt") or "")
        return [leaderboard_entry(r) for r in finished[:limit]]

    async def aggregate_stats(self) -> dict[str, Any]:
        return compute_stats(list(self._teams.values()))

    async def delete(self, team_id: str) -> bool:
        async with self._lock:
            return self._teams.pop(team_id, None) is not None

    async def purge(self) -> int:
        async with self._lock:
            count = len(self._teams)
            self._teams.clear()
        logger.warning("memory_store_purged", deleted=count)
        return count
