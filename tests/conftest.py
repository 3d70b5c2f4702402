"""Shared test configuration and fixtures.

Every test gets a fresh in-memory SQLite database behind a
``LocalDataService``, so the stores, adapters, and session manager run
against the same contract the hosted backend implements.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine

from maintenance_tracker.config import Settings
from maintenance_tracker.context import AppContext
from maintenance_tracker.database import create_engine, create_session_factory, init_models
from maintenance_tracker.main import create_app
from maintenance_tracker.remote.base import AuthUser
from maintenance_tracker.remote.local import LocalDataService
from maintenance_tracker.schemas.accommodation import Accommodation, AccommodationCreate
from maintenance_tracker.schemas.task import TaskCreate
from maintenance_tracker.services.accommodation_service import AccommodationService

TEST_SECRET = "test-secret-key"
TEST_EMAIL = "supervisor@test.com"
TEST_PASSWORD = "testpass123"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_engine("sqlite+aiosqlite://")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def remote(engine: AsyncEngine) -> LocalDataService:
    return LocalDataService(create_session_factory(engine), secret_key=TEST_SECRET)


@pytest_asyncio.fixture
async def test_user(remote: LocalDataService) -> AuthUser:
    """A registered supervisor with a profile row."""
    return await remote.register_user(TEST_EMAIL, TEST_PASSWORD, "Test Supervisor", role="chief")


@pytest_asyncio.fixture
async def signed_in(remote: LocalDataService, test_user: AuthUser) -> AuthUser:
    """Sign the test user in at the remote (not through a SessionManager)."""
    await remote.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)
    return test_user


@pytest_asyncio.fixture
async def context(remote: LocalDataService) -> AsyncGenerator[AppContext, None]:
    context = AppContext.from_remote(remote)
    await context.start()
    yield context
    context.sessions.teardown_auth_listener()


@pytest.fixture
def app(context: AppContext) -> FastAPI:
    settings = Settings(_env_file=None, data_backend="local", local_jwt_secret_key=TEST_SECRET)
    return create_app(settings=settings, context=context)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """httpx client wired to an app that uses the test context."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture
async def logged_in_client(client: AsyncClient, test_user: AuthUser) -> AsyncClient:
    response = await client.post("/login", json={"email": TEST_EMAIL, "password": TEST_PASSWORD})
    assert response.status_code == 303, response.text
    return client


# ---------------------------------------------------------------------------
# Convenience fixtures: records
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def accommodation(remote: LocalDataService, signed_in: AuthUser) -> Accommodation:
    """An active accommodation created by the signed-in test user."""
    service = AccommodationService(remote)
    return await service.create(AccommodationCreate(code="ab1", name="Villa Sur", address="Calle Mayor 1"))


@pytest.fixture
def task_data(accommodation: Accommodation):
    """Build a TaskCreate for ``accommodation``; keyword arguments override fields."""

    def build(**overrides) -> TaskCreate:
        fields = {
            "accommodation_id": accommodation.id,
            "area_catalog_id": "bathroom",
            "description": "Leaking tap",
        }
        fields.update(overrides)
        return TaskCreate(**fields)

    return build
