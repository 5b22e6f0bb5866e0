"""Team record store interface and the merge-patch semantics shared by backends."""

import copy
from abc import ABC, abstractmethod
from typing import Any

from codehunt.exceptions import StateConflictError

LEADERBOARD_LIMIT = 10
PHASES = range(1, 7)

_MISSING = object()


def merge_patch(target: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict with ``patch`` merged into ``target``.

    Scalars and lists replace; nested dicts merge recursively. Neither input
    is mutated.
    """
    merged = copy.deepcopy(target)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_patch(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def get_path(record: dict[str, Any], dotted: str, default: Any = None) -> Any:
    node: Any = record
    for part in dotted.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def check_expectations(team_id: str, record: dict[str, Any], expect: dict[str, Any] | None) -> None:
    """Raise StateConflictError when any dot-path in ``expect`` differs from ``record``.

    A missing ``completed`` flag reads as False.
    """
    for dotted, expected in (expect or {}).items():
        actual = get_path(record, dotted, _MISSING)
        if actual is _MISSING and dotted.endswith(".completed"):
            actual = False
        if actual != expected:
            raise StateConflictError(
                f"Team {team_id} changed concurrently ({dotted} is {actual!r})"
            )


def is_finished(record: dict[str, Any]) -> bool:
    return bool(get_path(record, "phase6.completed", False))


def leaderboard_entry(record: dict[str, Any]) -> dict[str, Any]:
    return {
        "teamId": record["teamId"],
        "teamName": record["teamName"],
        "teamLeader": record["teamLeader"],
    }


def compute_stats(records: list[dict[str, Any]]) -> dict[str, Any]:
    phase_stats = {f"phase{n}": 0 for n in PHASES}
    for record in records:
        for n in PHASES:
            if get_path(record, f"phase{n}.completed", False):
                phase_stats[f"phase{n}"] += 1
    return {"totalTeams": len(records), "phaseStats": phase_stats}


class TeamStore(ABC):
    """Keyed storage for team records.

    Records are plain dicts in the wire shape (camelCase keys). Lookups of
    unknown ids/names return None. Every mutation is durable on return.
    """

    name: str = "abstract"

    async def start(self) -> None:
        """Prepare the backend (connections, schema)."""

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def create(self, team_id: str, team: dict[str, Any]) -> dict[str, Any]:
        """Insert a new record; DuplicateTeamError if the id or team name exists."""

    @abstractmethod
    async def get(self, team_id: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    async def find_by_name(self, team_name: str) -> dict[str, Any] | None:
        """Case-insensitive lookup by team name."""

    @abstractmethod
    async def save(
        self,
        team_id: str,
        patch: dict[str, Any],
        expect: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Atomically merge ``patch`` into the record and return the result.

        ``expect`` maps dot-paths to required current values; a mismatch
        raises StateConflictError and nothing is written. Returns None for an
        unknown id.
        """

    @abstractmethod
    async def list_all(self) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    async def list_completed(self, limit: int = LEADERBOARD_LIMIT) -> list[dict[str, Any]]:
        """Leaderboard rows for teams with phase 6 completed, earliest finishers first."""

    @abstractmethod
    async def aggregate_stats(self) -> dict[str, Any]:
        ...

    @abstractmethod
    async def delete(self, team_id: str) -> bool:
        ...

    @abstractmethod
    async def purge(self) -> int:
        """Delete every record; returns how many were removed."""
