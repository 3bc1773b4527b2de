from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from peerlearn.core import database
from peerlearn.core.security import create_access_token
from peerlearn.main import app
from peerlearn.models.tutoring_request import TutoringStatus
from peerlearn.services.subject_service import SubjectService
from peerlearn.services.tutoring_service import TutoringRequestService
from peerlearn.services.user_service import UserService


@pytest.fixture
async def engine(tmp_path):
    engine = database.init_engine(f"sqlite+aiosqlite:///{tmp_path / 'peerlearn.db'}")
    await database.create_all()
    yield engine
    await database.dispose_engine()


@pytest.fixture
async def session(engine):
    async with database.AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client(engine):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


def auth(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
async def alice(session):
    return await UserService(session).create_user("Alice@Example.com", "Alice Johnson", "x")


@pytest.fixture
async def brian(session):
    return await UserService(session).create_user("brian@example.com", "Brian Lee", "x")


@pytest.fixture
async def chloe(session):
    return await UserService(session).create_user("chloe@example.com", "Chloe Kim", "x")


@pytest.fixture
async def physics(session):
    return await SubjectService(session).find_or_create_by_name("Physics", "Mechanics, electromagnetism")


@pytest.fixture
async def accepted_request(session, alice, brian, physics):
    service = TutoringRequestService(session)
    request = await service.create_request(alice.id, alice.id, brian.id, physics.id, "Help me")
    return await service.update_status(request.id, brian.id, TutoringStatus.ACCEPTED)
