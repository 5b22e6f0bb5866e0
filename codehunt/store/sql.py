"""Durable team store on SQLAlchemy (PostgreSQL in production)."""

import asyncio
import copy
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from codehunt.config import Settings
from codehunt.database import close_db, get_database_url, get_db_session, init_db
from codehunt.exceptions import DuplicateTeamError, StateConflictError, StorageError
from codehunt.logging_config import get_logger
from codehunt.models import TeamRow
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


# attempts at a compare-and-set write before giving up on a busy record
SAVE_ATTEMPTS = 3


def _columns(document: dict[str, Any]) -> dict[str, Any]:
    return {
        "document": document,
        "team_name": document["teamName"],
        "current_phase": document.get("currentPhase", 1),
        "finished": is_finished(document),
        "finished_at": get_path(document, "phase6.completedAt"),
    }


class SqlTeamStore(TeamStore):
    """Team records in one ``teams`` table.

    Writes are compare-and-set on the row's ``revision`` counter, so a guarded
    save never commits over a record that changed after it was read, whatever
    the dialect. SQLite has a single writer, so writes there also queue on a
    process-wide lock.
    """

    name = "SQL"

    def __init__(self, settings: Settings):
        self._settings = settings
        url = get_database_url(settings.database_url)
        self._write_lock = asyncio.Lock() if url.startswith("sqlite") else None

    async def start(self) -> None:
        await init_db(self._settings)

    async def close(self) -> None:
        await close_db()

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with get_db_session() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("storage_error", error=str(e))
            raise StorageError() from e

    @asynccontextmanager
    async def _writing(self) -> AsyncGenerator[None, None]:
        if self._write_lock is None:
            yield
            return
        async with self._write_lock:
            yield

    async def create(self, team_id: str, team: dict[str, Any]) -> dict[str, Any]:
        name = team["teamName"].lower()
        async with self._writing(), self._session() as session:
            existing = await session.execute(
                select(TeamRow.team_id).where(
                    or_(TeamRow.team_id == team_id, TeamRow.team_name == name)
                )
            )
            if existing.first() is not None:
                raise DuplicateTeamError(name)

            session.add(TeamRow(team_id=team_id, revision=0, **_columns(copy.deepcopy(team))))
            try:
                await session.commit()
            except IntegrityError:
                # lost a race on the unique name index
                raise DuplicateTeamError(name) from None
            return copy.deepcopy(team)

    async def get(self, team_id: str) -> dict[str, Any] | None:
        async with self._session() as session:
            result = await session.execute(
                select(TeamRow.document).where(TeamRow.team_id == team_id)
            )
            return result.scalar_one_or_none()

    async def find_by_name(self, team_name: str) -> dict[str, Any] | None:
        async with self._session() as session:
            result = await session.execute(
                select(TeamRow.document).where(TeamRow.team_name == team_name.lower())
            )
            return result.scalar_one_or_none()

    async def save(
        self,
        team_id: str,
        patch: dict[str, Any],
        expect: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        async with self._writing(), self._session() as session:
            for _ in range(SAVE_ATTEMPTS):
                result = await session.execute(
                    select(TeamRow.document, TeamRow.revision).where(TeamRow.team_id == team_id)
                )
                row = result.one_or_none()
                if row is None:
                    return None
                document, revision = row
                check_expectations(team_id, document, expect)

                merged = merge_patch(document, patch)
                written = await session.execute(
                    update(TeamRow)
                    .where(TeamRow.team_id == team_id, TeamRow.revision == revision)
                    .values(revision=revision + 1, **_columns(merged))
                    .execution_options(synchronize_session=False)
                )
                if written.rowcount == 1:
                    await session.commit()
                    return copy.deepcopy(merged)

                # another writer got in first; re-read and re-check
                await session.rollback()
                logger.info("team_save_retry", team_id=team_id, revision=revision)

        raise StateConflictError(f"Team {team_id} is busy, please retry")

    async def list_all(self) -> list[dict[str, Any]]:
        async with self._session() as session:
            result = await session.execute(
                select(TeamRow.document).order_by(TeamRow.created_at)
            )
            return list(result.scalars().all())

    async def list_completed(self, limit: int = LEADERBOARD_LIMIT) -> list[dict[str, Any]]:
        async with self._session() as session:
            result = await session.execute(
                select(TeamRow.document)
                .where(TeamRow.finished.is_(True))
                .order_by(TeamRow.finished_at, TeamRow.created_at)
                .limit(limit)
            )
            return [leaderboard_entry(doc) for doc in result.scalars().all()]

    async def aggregate_stats(self) -> dict[str, Any]:
        return compute_stats(await self.list_all())

    async def delete(self, team_id: str) -> bool:
        async with self._writing(), self._session() as session:
            result = await session.execute(
                delete(TeamRow).where(TeamRow.team_id == team_id)
            )
            await session.commit()
            return result.rowcount > 0

    async def purge(self) -> int:
        async with self._writing(), self._session() as session:
            result = await session.execute(delete(TeamRow))
            await session.commit()
            logger.warning("sql_store_purged", deleted=result.rowcount)
            return result.rowcount
