"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator, Callable, Generator
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any

# Configure the app for tests before anything reads settings
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTO_CREATE_SCHEMA"] = "false"
os.environ["PASSWORD_MEMORY_COST"] = "1024"
os.environ["PASSWORD_TIME_COST"] = "1"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from domain.services.account_service import AccountService
from domain.services.authorization_service import AuthorizationService
from domain.services.content_service import ContentService
from domain.services.membership_resolver import MembershipResolver
from domain.services.membership_service import MembershipService
from domain.services.session_service import SessionService
from infrastructure.auth.password import Argon2PasswordHasher
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory, one shared connection)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with the full schema."""
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Database session for asserting on stored rows."""
    async with session_factory() as session:
        yield session


@dataclass
class Services:
    """The service graph wired against the test database."""

    sessions: SessionService
    resolver: MembershipResolver
    memberships: MembershipService
    accounts: AccountService
    authorization: AuthorizationService
    content: ContentService


@pytest.fixture
def services(session_factory: async_sessionmaker[AsyncSession]) -> Services:
    def uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    hasher = Argon2PasswordHasher()
    sessions = SessionService(uow_factory)
    resolver = MembershipResolver(uow_factory, sessions)
    memberships = MembershipService(
        uow_factory, session_service=sessions, resolver=resolver, password_hasher=hasher
    )
    authorization = AuthorizationService(uow_factory, resolver=resolver, password_hasher=hasher)
    return Services(
        sessions=sessions,
        resolver=resolver,
        memberships=memberships,
        accounts=AccountService(
            uow_factory,
            session_service=sessions,
            membership_service=memberships,
            password_hasher=hasher,
        ),
        authorization=authorization,
        content=ContentService(uow_factory, resolver=resolver, authorization=authorization),
    )


@pytest.fixture
def app(
    services: Services, session_factory: async_sessionmaker[AsyncSession]
) -> Generator[FastAPI, None, None]:
    """Application with every service bound to the test database."""
    from api.v1.dependencies import (
        get_account_service,
        get_authorization_service,
        get_content_service,
        get_membership_service,
    )
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_account_service] = lambda: services.accounts
    app.dependency_overrides[get_membership_service] = lambda: services.memberships
    app.dependency_overrides[get_authorization_service] = lambda: services.authorization
    app.dependency_overrides[get_content_service] = lambda: services.content

    yield app

    app.dependency_overrides.clear()


BrowserFactory = Callable[[], AbstractAsyncContextManager[AsyncClient]]


@pytest.fixture
def browser(app: FastAPI) -> BrowserFactory:
    """Open a client with its own cookie jar, one per simulated browser."""

    def open_browser() -> AbstractAsyncContextManager[AsyncClient]:
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return open_browser


@pytest.fixture
async def client(browser: BrowserFactory) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no cookies)."""
    async with browser() as c:
        yield c
