"""Common test fixtures for the notes API."""

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import models  # noqa: F401  registers every table on Base.metadata
from config.database import Base
from models.account import Account
from tests.fakes import FakeRemoteSite
from utils import external_services


@pytest_asyncio.fixture
async def engine(tmp_path):
    """SQLite database file per test, with working SAVEPOINTs."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


async def _create_account(session_factory, name, role=Account.ROLE_USER, image=""):
    async with session_factory() as session:
        account = Account(name=name, nickname=name.title(), password="not-a-real-hash", role=role, image=image)
        session.add(account)
        await session.commit()
        return account


@pytest_asyncio.fixture
async def account(session_factory):
    """The site owner."""
    return await _create_account(session_factory, "alice", Account.ROLE_SUPERADMIN, image="/alice.png")


@pytest_asyncio.fixture
async def other_account(session_factory):
    return await _create_account(session_factory, "bob")


@pytest_asyncio.fixture
async def remote_site(monkeypatch):
    """Route every outbound HTTP call to a fake remote site."""
    site = FakeRemoteSite()
    client = httpx.AsyncClient(transport=httpx.MockTransport(site.handler))
    monkeypatch.setattr(external_services, "http_client", client)
    yield site
    await client.aclose()


@pytest.fixture
def deleted_files(monkeypatch):
    """Record attachment file deletions instead of calling MinIO."""
    from utils import minio_client

    deleted = []

    async def fake_delete_file(path):
        deleted.append(path)

    monkeypatch.setattr(minio_client, "delete_file", fake_delete_file)
    return deleted
