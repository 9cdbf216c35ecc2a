"""Cache Redis para configurações de IA dos clientes.

O gateway do WhatsApp e o painel leem a configuração de IA com frequência;
as funções abaixo cacheiam o JSON com TTL e degradam para no-op sem Redis.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional
from uuid import UUID

import redis


AI_CONFIG_CACHE_PREFIX = "ai-config:user:"


def create_redis_cache(redis_url: Optional[str]) -> Optional[redis.Redis]:
    """Cria cliente Redis para cache.

    Args:
        redis_url: URL de conexão Redis (ou None se não configurado)

    Returns:
        Cliente Redis ou None se não configurado
    """
    if not redis_url or not redis_url.strip():
        return None

    try:
        return redis.Redis.from_url(redis_url, decode_responses=True)
    except ValueError:
        return None


def _get_ai_config_cache_key(user_id: UUID) -> str:
    return f"{AI_CONFIG_CACHE_PREFIX}{user_id}"


def get_cached_ai_config(
    cache: Optional[redis.Redis],
    user_id: UUID,
) -> Optional[Dict[str, Any]]:
    """Recupera a configuração de IA do cache.

    Returns:
        Dicionário com a configuração ou None se não encontrado
    """
    if cache is None:
        return None

    try:
        cached_data = cache.get(_get_ai_config_cache_key(user_id))
        if cached_data is None:
            return None
        return json.loads(cached_data)
    except (redis.RedisError, ValueError, TypeError):
        return None


def set_cached_ai_config(
    cache: Optional[redis.Redis],
    user_id: UUID,
    config: Dict[str, Any],
    ttl: int = 300,
) -> bool:
    """Armazena a configuração de IA no cache.

    Args:
        cache: Cliente Redis (ou None se não disponível)
        user_id: ID do usuário dono da configuração
        config: Dicionário serializável em JSON
        ttl: Time to live em segundos (padrão: 300 = 5 minutos)

    Returns:
        True se armazenado com sucesso, False caso contrário
    """
    if cache is None:
        return False

    try:
        cache.set(_get_ai_config_cache_key(user_id), json.dumps(config, default=str), ex=ttl)
        return True
    except (redis.RedisError, TypeError):
        return False


def invalidate_ai_config_cache(
    cache: Optional[redis.Redis],
    user_id: UUID,
) -> bool:
    if cache is None:
        return False

    try:
        cache.delete(_get_ai_config_cache_key(user_id))
        return True
    except redis.RedisError:
        return False


def get_cache_ttl(ttl_type: str, default: int = 300) -> int:
    """Obtém TTL de cache de variável de ambiente (``CACHE_TTL_<TIPO>``)."""
    ttl_str = os.getenv(f"CACHE_TTL_{ttl_type.upper()}")

    if ttl_str:
        try:
            return int(ttl_str)
        except ValueError:
            pass

    return default
