"""Pick the team store backend from configuration, once, at startup."""

from fastapi import Request

from codehunt.config import Settings
from codehunt.store.base import TeamStore
from codehunt.store.memory import MemoryTeamStore
from codehunt.store.sql import SqlTeamStore


def create_team_store(settings: Settings) -> TeamStore:
    if settings.storage_backend == "sql":
        return SqlTeamStore(settings)
    return MemoryTeamStore()


def get_team_store(request: Request) -> TeamStore:
    """FastAPI dependency for the store created in ``create_app``."""
    return request.app.state.team_store
