"""API run against the SQL store on SQLite."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from codehunt.database import get_engine
from codehunt.main import create_app
from codehunt.models import Base


@pytest_asyncio.fixture
async def sql_client(sql_settings):
    app = create_app(sql_settings)
    store = app.state.team_store
    await store.start()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    await store.close()


@pytest.mark.asyncio
async def test_register_and_progress(sql_client, make_team_payload):
    resp = await sql_client.post("/api/teams/register", json=make_team_payload("Beta"))
    assert resp.status_code == 201
    team_id = resp.json()["team"]["teamId"]

    dup = await sql_client.post("/api/teams/register", json=make_team_payload("beta"))
    assert dup.status_code == 409

    body = {"teamId": team_id, "aiPrompt": "VU2050 skyline", "driveLink": "https://drive/x"}
    assert (await sql_client.post("/api/phase1/submit", json=body)).status_code == 200
    assert (await sql_client.post("/api/phase1/submit", json=body)).status_code == 409

    team = (await sql_client.get("/api/teams/BETA")).json()
    assert team["currentPhase"] == 2
    assert team["phase1"]["driveLink"] == "https://drive/x"
    assert team["phase2"] == {"completed": False}

    health = (await sql_client.get("/api/health")).json()
    assert health["database"] == "SQL"


@pytest.mark.asyncio
async def test_storage_failure_is_503(sql_client, make_team_payload):
    resp = await sql_client.post("/api/teams/register", json=make_team_payload("Gamma"))
    assert resp.status_code == 201

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    for resp in (
        await sql_client.post("/api/teams/register", json=make_team_payload("Delta")),
        await sql_client.get("/api/teams/gamma"),
        await sql_client.get("/api/leaderboard"),
    ):
        assert resp.status_code == 503
        assert resp.json()["detail"]["type"] == "storage_error"
        assert "teams" not in resp.json()["detail"]["detail"]
