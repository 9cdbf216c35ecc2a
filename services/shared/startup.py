"""Lifespan for services that own a database and Redis connections."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

import redis
from fastapi import FastAPI
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.sql.schema import MetaData

logger = logging.getLogger(__name__)


async def wait_for_schema(
    service_name: str,
    metadata: MetaData,
    engine: Engine,
    *,
    retries: int = 10,
    wait_seconds: float = 2.0,
) -> None:
    """Create missing tables, retrying while the database is still booting."""
    for attempt in range(1, retries + 1):
        try:
            await asyncio.to_thread(metadata.create_all, bind=engine)
            return
        except OperationalError as exc:
            if attempt == retries:
                logger.error("[%s] Banco indisponível após %s tentativas, desistindo.", service_name, retries)
                raise
            logger.warning(
                "[%s] Banco indisponível, aguardando %ss... tentativa %s: %s",
                service_name,
                wait_seconds,
                attempt,
                exc,
            )
            await asyncio.sleep(wait_seconds)


def close_redis_resources(app: FastAPI) -> None:
    """Close the cache client and the event publisher kept on ``app.state``."""
    publisher = getattr(app.state, "event_publisher", None)
    cache = getattr(app.state, "redis_cache", None)
    for resource in (publisher, cache):
        if resource is None:
            continue
        try:
            resource.close()
        except redis.RedisError:
            logger.warning("Falha ao fechar conexão Redis", exc_info=True)


def database_lifespan_factory(
    *,
    service_name: str,
    metadata: MetaData,
    engine: Engine,
    retries: int = 10,
    wait_seconds: float = 2.0,
):
    """Return a FastAPI lifespan that prepares the schema and releases Redis on shutdown."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        logger.info("Starting %s...", service_name)
        await wait_for_schema(
            service_name,
            metadata,
            engine,
            retries=retries,
            wait_seconds=wait_seconds,
        )
        try:
            yield
        finally:
            close_redis_resources(app)
            logger.info("%s stopped", service_name)

    return _lifespan
