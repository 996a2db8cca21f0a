"""
Failure Injection Tests.

Database and Redis outages: reads degrade, writes fail loudly.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import IntegrityError, OperationalError
from redis.exceptions import ConnectionError as RedisConnectionError

import opsboard.app.core.redis_client as redis_client_module
from opsboard.app.main import app
from opsboard.app.core.exceptions import PersistenceUnavailable
from opsboard.app.core.token_revocation import is_token_revoked, revoke_token
from opsboard.app.services.parcel_store import ParcelStore
from opsboard.app.services.weekly_plan_store import WeeklyPlanStore
from opsboard.app.services.project_store import ProjectStore, ProjectTaskStore


def _unavailable_session():
    session = MagicMock()
    session.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("connection refused")))
    session.commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("connection refused")))
    session.refresh = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.mark.asyncio
async def test_reads_degrade_to_empty():
    store = ParcelStore(_unavailable_session())

    assert await store.list_for_owner(1) == []
    assert await store.get(1, 1) is None
    assert await store.get_settings(1) is None


@pytest.mark.asyncio
async def test_task_and_plan_reads_degrade():
    session = _unavailable_session()
    assert await ProjectTaskStore(session).list_for_project(1) == []
    assert await WeeklyPlanStore(session).list_for_owner(1) == []


@pytest.mark.asyncio
async def test_writes_raise_persistence_unavailable():
    store = ParcelStore(_unavailable_session())

    with pytest.raises(PersistenceUnavailable) as exc_info:
        await store.create(1, {"tracking_number": "EE001040482TH"})
    assert exc_info.value.status_code == 503

    with pytest.raises(PersistenceUnavailable):
        await store.update(1, 1, {"note": "x"})

    with pytest.raises(PersistenceUnavailable):
        await store.delete(1, 1)


@pytest.mark.asyncio
async def test_constraint_errors_are_not_masked():
    session = MagicMock()
    session.execute = AsyncMock(side_effect=IntegrityError("UPDATE", {}, Exception("NOT NULL")))

    with pytest.raises(IntegrityError):
        await ParcelStore(session).update(1, 1, {"tracking_number": None})


class _UnavailableSessions:
    """Session factory whose sessions cannot reach the database."""

    def __call__(self):
        return self

    async def __aenter__(self):
        return _unavailable_session()

    async def __aexit__(self, *exc_info):
        return False


@pytest.mark.asyncio
async def test_endpoints_degrade_when_database_is_down(client, owner, monkeypatch):
    headers, _ = owner
    monkeypatch.setattr(app.state, "session_factory", _UnavailableSessions())

    response = await client.get("/v1/parcels", headers=headers)
    assert response.status_code == 200
    assert response.json() == []

    response = await client.get("/v1/parcels/1", headers=headers)
    assert response.status_code == 200
    assert response.json() is None

    response = await client.get("/v1/dashboard/summary", headers=headers)
    assert response.status_code == 200
    assert response.json()["total_parcels"] == 0


@pytest.mark.asyncio
async def test_write_endpoint_returns_503_when_database_is_down(client, owner, monkeypatch):
    headers, _ = owner
    monkeypatch.setattr(app.state, "session_factory", _UnavailableSessions())

    response = await client.post("/v1/parcels", json={"tracking_number": "EE001040482TH"}, headers=headers)

    assert response.status_code == 503
    assert response.json()["error_code"] == "ERR_DB_UNAVAILABLE"


@pytest.mark.asyncio
async def test_project_delete_commits_nothing_when_second_statement_fails(mocker):
    session = MagicMock()
    session.execute = mocker.AsyncMock(side_effect=[
        MagicMock(rowcount=2),
        OperationalError("DELETE FROM projects", {}, Exception("connection lost")),
    ])
    session.commit = mocker.AsyncMock()

    with pytest.raises(PersistenceUnavailable):
        await ProjectStore(session).delete_with_tasks(1, 1)

    assert session.execute.await_count == 2
    session.commit.assert_not_awaited()


class _BrokenRedis:
    async def set(self, *args, **kwargs):
        raise RedisConnectionError("redis down")

    async def exists(self, *args, **kwargs):
        raise RedisConnectionError("redis down")


@pytest.mark.asyncio
async def test_revocation_fails_open_when_redis_is_down(monkeypatch):
    monkeypatch.setattr(redis_client_module, "redis_client", _BrokenRedis())

    assert await revoke_token("some-token", 1) is False
    assert await is_token_revoked("some-token") is False
