"""Health check utilities for FastAPI services.

Provides endpoints /health and /ready for Docker/Kubernetes monitoring.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Optional, Union

import redis
import redis.asyncio as aioredis
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


def check_database_health(engine: Optional[Engine]) -> bool:
    """Verifica se o banco de dados está disponível.

    Returns:
        True se banco está disponível, False caso contrário
    """
    if engine is None:
        return False

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        return True
    except SQLAlchemyError:
        return False


async def check_redis_health(
    redis_client: Optional[Union[redis.Redis, aioredis.Redis, str]] = None
) -> Optional[bool]:
    """Verifica se o Redis está disponível.

    Returns:
        True se Redis está disponível,
        False se Redis está configurado mas indisponível,
        None se Redis não está configurado
    """
    if redis_client is None or redis_client == "":
        return None

    try:
        if isinstance(redis_client, str):
            temp_client = aioredis.from_url(redis_client)
            try:
                await asyncio.wait_for(temp_client.ping(), timeout=1.0)
                return True
            finally:
                await temp_client.aclose()

        if isinstance(redis_client, redis.Redis):
            redis_client.ping()
            return True

        await asyncio.wait_for(redis_client.ping(), timeout=1.0)
        return True
    except (redis.RedisError, OSError, asyncio.TimeoutError):
        return False


def create_health_router(
    service_name: str,
    database_engine: Optional[Engine] = None,
    redis_client: Optional[Union[redis.Redis, aioredis.Redis, str]] = None,
    *,
    require_database: bool = True,
) -> APIRouter:
    """Cria router FastAPI com endpoints /health e /ready.

    Args:
        service_name: Nome do serviço (ex: "panel", "assistant")
        database_engine: Engine SQLAlchemy para verificação de banco
        redis_client: Cliente Redis para verificação (opcional)
        require_database: se False, /ready não exige banco (serviços sem estado)
    """
    router = APIRouter(tags=["Health"])

    @router.get("/health", status_code=status.HTTP_200_OK)
    def health():
        """Sempre retorna 200 OK se o serviço está rodando."""
        return {
            "status": "ok",
            "service": service_name,
            "timestamp": _utc_timestamp(),
        }

    @router.get("/ready", status_code=status.HTTP_200_OK)
    async def ready():
        """Verifica dependências; 503 se alguma falhou."""
        checks = {}
        all_healthy = True

        if require_database:
            db_healthy = check_database_health(database_engine)
            checks["database"] = db_healthy
            if not db_healthy:
                all_healthy = False

        redis_healthy = await check_redis_health(redis_client)
        checks["redis"] = redis_healthy
        if redis_healthy is False:
            all_healthy = False

        response_data = {
            "status": "ready" if all_healthy else "not_ready",
            "service": service_name,
            "timestamp": _utc_timestamp(),
            "checks": checks,
        }

        return JSONResponse(
            content=response_data,
            status_code=status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return router
