"""Testes do lifespan: criação do schema com retentativas e limpeza do Redis."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import redis
from sqlalchemy import Column, Integer, MetaData, Table, create_engine, inspect
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from shared.startup import close_redis_resources, database_lifespan_factory, wait_for_schema


def _metadata():
    metadata = MetaData()
    Table("announcements", metadata, Column("id", Integer, primary_key=True))
    return metadata


def _memory_engine():
    # create_all roda em outra thread; todas precisam ver o mesmo banco em memória
    return create_engine("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})


def _operational_error():
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


@pytest.mark.asyncio
async def test_wait_for_schema_creates_tables():
    engine = _memory_engine()

    await wait_for_schema("panel", _metadata(), engine, retries=1)

    assert inspect(engine).has_table("announcements")


@pytest.mark.asyncio
async def test_wait_for_schema_retries_until_database_answers():
    metadata = MagicMock()
    metadata.create_all.side_effect = [_operational_error(), None]

    await wait_for_schema("panel", metadata, engine=object(), retries=3, wait_seconds=0)

    assert metadata.create_all.call_count == 2


@pytest.mark.asyncio
async def test_wait_for_schema_gives_up_after_last_attempt():
    metadata = MagicMock()
    metadata.create_all.side_effect = _operational_error()

    with pytest.raises(OperationalError):
        await wait_for_schema("panel", metadata, engine=object(), retries=2, wait_seconds=0)

    assert metadata.create_all.call_count == 2


def test_close_redis_resources_closes_publisher_and_cache():
    publisher, cache = MagicMock(), MagicMock()
    app = SimpleNamespace(state=SimpleNamespace(event_publisher=publisher, redis_cache=cache))

    close_redis_resources(app)

    publisher.close.assert_called_once_with()
    cache.close.assert_called_once_with()


def test_close_redis_resources_without_redis():
    app = SimpleNamespace(state=SimpleNamespace(event_publisher=None))
    close_redis_resources(app)


def test_close_redis_resources_keeps_going_on_error():
    publisher, cache = MagicMock(), MagicMock()
    publisher.close.side_effect = redis.ConnectionError("gone")
    app = SimpleNamespace(state=SimpleNamespace(event_publisher=publisher, redis_cache=cache))

    close_redis_resources(app)

    cache.close.assert_called_once_with()


@pytest.mark.asyncio
async def test_lifespan_prepares_schema_and_cleans_up():
    engine = _memory_engine()
    cache = MagicMock()
    app = SimpleNamespace(state=SimpleNamespace(event_publisher=None, redis_cache=cache))
    lifespan = database_lifespan_factory(service_name="Panel Service", metadata=_metadata(), engine=engine)

    async with lifespan(app):
        assert inspect(engine).has_table("announcements")
        cache.close.assert_not_called()

    cache.close.assert_called_once_with()
