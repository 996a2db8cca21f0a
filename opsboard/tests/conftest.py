"""
Centralized Test Configuration.
"""

import json
import pytest
import httpx
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from opsboard.app.main import app
from opsboard.app.db.session import Base
from opsboard.app.services.carrier_client import CarrierClient
import opsboard.app.core.redis_client as redis_client_module

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
CARRIER_URL = "https://carrier.test/post/api/v1/track"
DEFAULT_CARRIER_TOKEN = "Token default-test-token"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        return True

    async def delete(self, key):
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        return 1 if key in self.store else 0

    async def flushdb(self):
        self.store = {}


class CarrierStub:
    """
    Stands in for the carrier's tracking endpoint.

    `items` maps barcode -> list of event dicts. Set `status_code`, `body`
    or `error` to simulate failures.
    """

    def __init__(self):
        self.items = {}
        self.status_code = 200
        self.body = None
        self.error = None
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.body is not None:
            return httpx.Response(self.status_code, content=self.body)

        barcodes = json.loads(request.content)["barcode"]
        items = {b: self.items[b] for b in barcodes if b in self.items}
        return httpx.Response(self.status_code, json={
            "status": True,
            "message": "successful",
            "response": {
                "items": items,
                "track_count": {"track_date": "19/10/2569", "count_number": 1, "track_count_limit": 1000},
            },
        })

    @property
    def last_request_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def make_event():
    """Factory for carrier event dicts."""
    def _make(barcode="EE001040482TH", status="201", description="In transit",
              date="19/07/2562 15:13:00+07:00", location="Bangkok", delivery_status=None):
        return {
            "barcode": barcode,
            "status": status,
            "status_description": description,
            "status_date": date,
            "location": location,
            "postcode": "10000",
            "delivery_status": delivery_status,
            "delivery_description": None,
            "delivery_datetime": None,
            "receiver_name": None,
            "signature": None,
            "status_detail": description,
            "delivery_officer_name": None,
            "delivery_officer_tel": None,
            "office_name": None,
            "office_tel": None,
            "call_center_tel": "1545",
        }
    return _make


@pytest.fixture
def carrier_api():
    return CarrierStub()


@pytest.fixture
async def carrier_client(carrier_api):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(carrier_api.handler))
    yield CarrierClient(CARRIER_URL, default_token=DEFAULT_CARRIER_TOKEN, http_client=http_client)
    await http_client.aclose()


@pytest.fixture(autouse=True)
def mock_redis(monkeypatch):
    """Swap the module-level Redis client used by token revocation."""
    client = MockRedis()
    monkeypatch.setattr(redis_client_module, "redis_client", client)
    return client


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(carrier_client):
    """Async client for testing, wired to the test database and carrier stub."""
    app.state.session_factory = TestingSessionLocal
    app.state.carrier_client = carrier_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


async def _register(client, username):
    response = await client.post("/v1/auth/register", json={
        "email": f"{username}@test.com",
        "username": username,
        "password": "password123",
    })
    assert response.status_code == 201
    data = response.json()
    return {"Authorization": f"Bearer {data['access_token']}"}, data["user_id"]


@pytest.fixture
async def owner(client):
    """Registered user: (auth headers, user id)."""
    return await _register(client, "owner1")


@pytest.fixture
async def other_owner(client):
    """A second user for cross-owner checks."""
    return await _register(client, "owner2")
