"""Tests for engine creation and schema bootstrapping."""

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.pool import NullPool

from event_tracker import database
from event_tracker.database import create_engine, init_db


@pytest.fixture
def fresh_engine(tmp_path):
    return create_engine(f"sqlite+aiosqlite:///{tmp_path / 'fresh.db'}", poolclass=NullPool)


async def _table_names(engine) -> set[str]:
    async with engine.connect() as conn:
        return set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))


@pytest.mark.asyncio
async def test_sqlite_connections_enforce_foreign_keys(fresh_engine):
    async with fresh_engine.connect() as conn:
        result = await conn.execute(text("PRAGMA foreign_keys"))
        assert result.scalar() == 1
    await fresh_engine.dispose()


@pytest.mark.asyncio
async def test_init_db_leaves_schema_to_migrations_by_default(fresh_engine, monkeypatch):
    monkeypatch.setattr(database.settings, "auto_create_schema", False)

    await init_db(bind=fresh_engine)

    assert await _table_names(fresh_engine) == set()
    await fresh_engine.dispose()


@pytest.mark.asyncio
async def test_init_db_creates_tables_when_enabled(fresh_engine, monkeypatch):
    monkeypatch.setattr(database.settings, "auto_create_schema", True)

    await init_db(bind=fresh_engine)

    assert {"users", "events"} <= await _table_names(fresh_engine)
    await fresh_engine.dispose()


def test_get_session_maker_prefers_test_override():
    sentinel = object()
    previous = database.set_test_session_maker(sentinel)
    try:
        assert database.get_session_maker() is sentinel
    finally:
        database.set_test_session_maker(previous)
