"""Environment-driven configuration for the ISA services.

Development runs on the docker-compose defaults below and only gets a
``UserWarning`` for them; with ``ENVIRONMENT``/``ENV`` set to production the
same defaults are refused with ``ValueError``.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
import warnings
from typing import Dict, Optional
from urllib.parse import urlsplit

# docker-compose local; nunca usar fora dele
_DEV_DATABASE_URLS: Dict[str, str] = {
    "panel": "postgresql://user:password@db_panel:5432/paneldb",
}
_DEV_REDIS_URL = "redis://redis:6379/0"

_DEFAULT_EVENT_STREAM = "panel-events"
_DEFAULT_HOST = "0.0.0.0"
_DEFAULT_PORT = 8000
_MIN_SECRET_KEY_LENGTH = 32

_WEAK_DB_PASSWORDS = {"password", "123456", "admin", "root", "test", ""}
_WEAK_SECRET_KEYS = {"secret", "changeme", "default", "dev-secret-change-me"}


@dataclass(frozen=True)
class DatabaseConfig:
    url: str


@dataclass(frozen=True)
class RedisConfig:
    url: str
    stream: str


@dataclass(frozen=True)
class ServiceConfig:
    name: str
    host: str
    port: int
    database: DatabaseConfig
    redis: RedisConfig


def current_environment() -> str:
    return os.getenv("ENVIRONMENT", os.getenv("ENV", "development")).lower()


def is_production() -> bool:
    return current_environment() in ("production", "prod")


def _refuse_in_production(message: str, *, stacklevel: int = 3) -> None:
    """Raise in production, warn anywhere else."""
    if is_production():
        raise ValueError(message)
    warnings.warn(message, UserWarning, stacklevel=stacklevel)


def _lookup_database_url(service_name: str) -> str:
    """``<SERVICE>_DATABASE_URL``, then ``DATABASE_URL``, then the compose default."""
    service_env = f"{service_name.upper()}_DATABASE_URL"
    explicit = os.getenv(service_env) or os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    fallback = _DEV_DATABASE_URLS.get(service_name, "")
    if fallback:
        if is_production():
            raise ValueError(
                "Valores padrão de banco de dados não podem ser usados em produção. "
                f"Defina {service_env} ou DATABASE_URL como variável de ambiente."
            )
        warnings.warn(
            f"Usando valor padrão de banco de dados para {service_name}. "
            f"Em produção, defina {service_env} ou DATABASE_URL.",
            UserWarning,
            stacklevel=2,
        )
    return fallback


def _extract_password(db_url: str) -> Optional[str]:
    try:
        return urlsplit(db_url).password
    except ValueError:
        return None


def _check_database_password(db_url: str, service_name: str) -> None:
    password = _extract_password(db_url)
    if password is not None and password.lower() in _WEAK_DB_PASSWORDS:
        _refuse_in_production(
            f"Senha insegura detectada em DATABASE_URL para {service_name}. "
            "Use uma senha forte em produção."
        )


def _check_secret_key(secret_key: str) -> None:
    if secret_key in _WEAK_SECRET_KEYS:
        _refuse_in_production(
            "SECRET_KEY parece ser um valor padrão inseguro. "
            "Gere uma chave segura com: openssl rand -hex 64"
        )
    if len(secret_key) < _MIN_SECRET_KEY_LENGTH:
        warnings.warn(
            f"SECRET_KEY muito curta ({len(secret_key)} caracteres). "
            f"Recomendado mínimo de {_MIN_SECRET_KEY_LENGTH} caracteres.",
            UserWarning,
            stacklevel=3,
        )


def load_service_config(service_name: str, *, require_database: bool = True) -> ServiceConfig:
    """Build the :class:`ServiceConfig` of ``service_name`` from the environment.

    Args:
        service_name: ``panel`` ou ``assistant``
        require_database: ``False`` para serviços sem banco (o assistant)

    Raises:
        ValueError: banco não configurado, ou valor inseguro em produção
    """
    name = service_name.lower()

    db_url = ""
    if require_database:
        db_url = _lookup_database_url(name)
        if not db_url:
            raise ValueError(
                f"DATABASE_URL not configured for service '{name}'. "
                f"Set DATABASE_URL or {name.upper()}_DATABASE_URL."
            )
        _check_database_password(db_url, name)

    secret_key = os.getenv("SECRET_KEY")
    if secret_key:
        _check_secret_key(secret_key)

    return ServiceConfig(
        name=name,
        host=os.getenv("APP_HOST", _DEFAULT_HOST),
        port=int(os.getenv("APP_PORT", str(_DEFAULT_PORT))),
        database=DatabaseConfig(url=db_url),
        redis=RedisConfig(
            url=os.getenv("REDIS_URL", _DEV_REDIS_URL),
            stream=os.getenv("EVENT_STREAM", _DEFAULT_EVENT_STREAM),
        ),
    )
