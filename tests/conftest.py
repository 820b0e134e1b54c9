"""
Общие фикстуры тестов.

Переменные окружения выставляются до импорта приложения: настройки читаются
один раз при импорте app.core.config.
"""
import os
import tempfile

os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "development"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="manualhub-uploads-"))

import pytest
import pytest_asyncio
from fakeredis import aioredis
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.db import Base, get_db, enable_sqlite_foreign_keys
from app.core.session_blacklist import SessionBlacklist, get_session_blacklist
from app.db import models  # noqa: F401  регистрирует таблицы в Base.metadata
from app.main import app

DEFAULT_PASSWORD = "Passw0rd!"


@pytest_asyncio.fixture
async def engine():
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def redis_client():
    client = aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def blacklist(redis_client):
    return SessionBlacklist(redis_client)


@pytest_asyncio.fixture
async def client(session_factory, blacklist):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_blacklist] = lambda: blacklist

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Регистрация и вход; возвращает (user_json, headers)"""

    async def _register(email: str, name: str = "Test User", password: str = DEFAULT_PASSWORD, invitation_token=None):
        payload = {"email": email, "password": password, "name": name}
        if invitation_token:
            payload["invitation_token"] = invitation_token
        response = await client.post("/api/auth/signup", json=payload)
        assert response.status_code == 201, response.text

        login = await client.post("/api/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        # Cookie не нужна, ходим через Bearer
        client.cookies.clear()
        token = login.json()["access_token"]
        return response.json(), {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture
def create_team(client):
    async def _create_team(headers, name: str = "Docs Team"):
        response = await client.post("/api/team", json={"name": name}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create_team


@pytest.fixture
def create_manual(client):
    async def _create_manual(headers, title: str = "Onboarding", description: str = None):
        payload = {"title": title}
        if description is not None:
            payload["description"] = description
        response = await client.post("/api/manual", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create_manual


@pytest.fixture
def join_team(client, register):
    """Новый пользователь, приглашенный владельцем команды с заданной ролью"""

    async def _join_team(owner_headers, email: str, role: str = "EDITOR", name: str = "Member"):
        response = await client.post(
            "/api/team/member", json={"email": email, "role": role}, headers=owner_headers
        )
        assert response.status_code == 201, response.text
        token = response.json()["invitation_link"].rsplit("/", 1)[-1]
        return await register(email, name=name, invitation_token=token)

    return _join_team
