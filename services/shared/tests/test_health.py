"""Testes para endpoints de health check (/health e /ready)."""

import pytest
import redis
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from fastapi import FastAPI, status
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from shared.health import check_database_health, check_redis_health, create_health_router


def _memory_engine():
    return create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def _broken_engine():
    # diretório inexistente: o sqlite falha ao abrir o arquivo
    return create_engine("sqlite:////nonexistent-dir/isa/health.db")


def _client(**kwargs):
    app = FastAPI()
    app.include_router(create_health_router(service_name="test-service", **kwargs))
    return TestClient(app)


class TestDatabaseHealthCheck:
    """Testes para verificação de saúde do banco de dados."""

    def test_check_database_health_success(self):
        """Testa que check_database_health retorna True quando banco está disponível."""
        assert check_database_health(_memory_engine()) is True

    def test_check_database_health_failure(self):
        """Testa que check_database_health retorna False quando banco está indisponível."""
        assert check_database_health(_broken_engine()) is False

    def test_check_database_health_without_engine(self):
        assert check_database_health(None) is False


class TestRedisHealthCheck:
    """Testes para verificação de saúde do Redis."""

    @pytest.mark.asyncio
    async def test_check_redis_health_success(self):
        """Testa que check_redis_health retorna True quando Redis está disponível."""
        mock_redis = AsyncMock()
        mock_redis.ping.return_value = True

        result = await check_redis_health(mock_redis)
        assert result is True
        mock_redis.ping.assert_called_once()

    @pytest.mark.asyncio
    async def test_check_redis_health_failure(self):
        """Testa que check_redis_health retorna False quando Redis está indisponível."""
        mock_redis = AsyncMock()
        mock_redis.ping.side_effect = redis.ConnectionError("Connection failed")

        result = await check_redis_health(mock_redis)
        assert result is False

    @pytest.mark.asyncio
    async def test_check_redis_health_sync_client(self):
        """Clientes síncronos (cache do painel) também são verificados."""
        mock_redis = MagicMock(spec=redis.Redis)
        mock_redis.ping.return_value = True

        assert await check_redis_health(mock_redis) is True
        mock_redis.ping.assert_called_once()

    @pytest.mark.asyncio
    async def test_check_redis_health_none(self):
        """Testa que check_redis_health retorna None quando Redis não está configurado."""
        assert await check_redis_health(None) is None
        assert await check_redis_health("") is None


class TestHealthEndpoints:
    """Testes para endpoints /health e /ready."""

    def test_health_endpoint_always_returns_ok(self):
        """Testa que /health sempre retorna 200 OK."""
        response = _client(database_engine=None, redis_client=None).get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "test-service"
        assert data["timestamp"].endswith("Z")

    def test_ready_endpoint_with_healthy_dependencies(self):
        """Testa que /ready retorna 200 quando todas as dependências estão saudáveis."""
        response = _client(database_engine=_memory_engine(), redis_client=None).get("/ready")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"]["database"] is True
        assert data["checks"]["redis"] is None  # Não configurado

    def test_ready_endpoint_with_unhealthy_database(self):
        """Testa que /ready retorna 503 quando banco de dados está indisponível."""
        response = _client(database_engine=_broken_engine(), redis_client=None).get("/ready")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        data = response.json()
        assert data["status"] == "not_ready"
        assert data["checks"]["database"] is False

    def test_ready_endpoint_with_unhealthy_redis(self):
        mock_redis = AsyncMock()
        mock_redis.ping.side_effect = redis.ConnectionError("down")

        response = _client(database_engine=_memory_engine(), redis_client=mock_redis).get("/ready")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["checks"]["redis"] is False

    def test_ready_endpoint_without_database(self):
        """Serviços sem banco (assistente) não checam o banco."""
        response = _client(redis_client=None, require_database=False).get("/ready")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "ready"
        assert "database" not in data["checks"]
