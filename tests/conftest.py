"""
Shared test fixtures for the Fieldlog test suite.

Provides:
- A fresh SQLite database per test (file in tmp_path, no pooling so that it
  can be used from the test thread and from the TestClient event loop)
- A TestClient with get_db overridden
- Helpers to create users / activities and to authenticate requests
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

import fieldlog.models  # noqa: F401
from fieldlog.core import security
from fieldlog.database import get_db
from fieldlog.main import app
from fieldlog.models.activity import Activity
from fieldlog.models.user import User, UserRole

logging.getLogger("fieldlog").setLevel(logging.WARNING)


# ========================== Database Fixtures ==============================


@pytest.fixture()
def session_maker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    asyncio.run(create_tables())
    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture()
def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


# ========================== Seeding Helpers ================================


@pytest.fixture()
def make_user(session_maker):
    def _make_user(
        email: str,
        role: UserRole | str = UserRole.SERVER,
        password: str = "password123",
        name: str = "Test User",
        active: bool = True,
        approved: bool = True,
    ) -> User:
        async def _create() -> User:
            async with session_maker() as db:
                user = User(
                    email=email,
                    password=security.get_password_hash(password),
                    name=name,
                    role=role.value if isinstance(role, UserRole) else role,
                    active=active,
                    approved=approved,
                )
                db.add(user)
                await db.commit()
                await db.refresh(user)
                return user

        return asyncio.run(_create())

    return _make_user


@pytest.fixture()
def make_activity(session_maker):
    def _make_activity(owner: User, type: str = "training", date: datetime | None = None, **extra: Any) -> Activity:
        description = extra.pop("description", "Visita de suporte ao município")

        async def _create() -> Activity:
            async with session_maker() as db:
                activity = Activity(
                    type=type,
                    description=description,
                    date=date or datetime(2024, 1, 15, 10, 0),
                    userId=owner.id,
                    **extra,
                )
                db.add(activity)
                await db.commit()
                await db.refresh(activity)
                return activity

        return asyncio.run(_create())

    return _make_activity


@pytest.fixture()
def auth_headers():
    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {security.create_access_token(subject=user.id)}"}

    return _auth_headers


@pytest.fixture()
def admin(make_user):
    return make_user("admin@example.com", UserRole.ADMIN, name="Admin")


@pytest.fixture()
def manager(make_user):
    return make_user("manager@example.com", UserRole.MANAGER, name="Manager")


@pytest.fixture()
def server(make_user):
    return make_user("server@example.com", UserRole.SERVER, name="Ana Silva")


@pytest.fixture()
def other_server(make_user):
    return make_user("other@example.com", UserRole.SERVER, name="Bruno Costa")
