"""Testes para o cache Redis de configurações de IA."""

import json
import os
from unittest.mock import MagicMock, patch
from uuid import uuid4

import redis

from shared.cache import (
    AI_CONFIG_CACHE_PREFIX,
    create_redis_cache,
    get_cache_ttl,
    get_cached_ai_config,
    invalidate_ai_config_cache,
    set_cached_ai_config,
)


class TestCreateRedisCache:
    def test_returns_none_without_url(self):
        assert create_redis_cache(None) is None
        assert create_redis_cache("") is None
        assert create_redis_cache("   ") is None

    def test_returns_none_for_invalid_url(self):
        assert create_redis_cache("not-a-redis-url") is None

    def test_builds_client_from_url(self):
        with patch("redis.Redis.from_url") as from_url:
            create_redis_cache("redis://localhost:6379/0")
        from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=True)


class TestAIConfigCache:
    """Leitura, escrita e invalidação da configuração cacheada."""

    def test_get_returns_none_when_cache_disabled(self):
        assert get_cached_ai_config(None, uuid4()) is None

    def test_get_decodes_cached_json(self):
        user_id = uuid4()
        cache = MagicMock()
        cache.get.return_value = json.dumps({"tone": "friendly"})

        result = get_cached_ai_config(cache, user_id)

        assert result == {"tone": "friendly"}
        cache.get.assert_called_once_with(f"{AI_CONFIG_CACHE_PREFIX}{user_id}")

    def test_get_miss_returns_none(self):
        cache = MagicMock()
        cache.get.return_value = None
        assert get_cached_ai_config(cache, uuid4()) is None

    def test_get_ignores_corrupted_payload(self):
        cache = MagicMock()
        cache.get.return_value = "{não é json"
        assert get_cached_ai_config(cache, uuid4()) is None

    def test_get_degrades_on_redis_error(self):
        cache = MagicMock()
        cache.get.side_effect = redis.ConnectionError("down")
        assert get_cached_ai_config(cache, uuid4()) is None

    def test_set_stores_json_with_ttl(self):
        user_id = uuid4()
        cache = MagicMock()

        stored = set_cached_ai_config(cache, user_id, {"formality": 5}, ttl=120)

        assert stored is True
        key, payload = cache.set.call_args.args
        assert key == f"{AI_CONFIG_CACHE_PREFIX}{user_id}"
        assert json.loads(payload) == {"formality": 5}
        assert cache.set.call_args.kwargs == {"ex": 120}

    def test_set_without_cache_returns_false(self):
        assert set_cached_ai_config(None, uuid4(), {}) is False

    def test_set_returns_false_on_redis_error(self):
        cache = MagicMock()
        cache.set.side_effect = redis.TimeoutError("slow")
        assert set_cached_ai_config(cache, uuid4(), {"a": 1}) is False

    def test_invalidate_deletes_key(self):
        user_id = uuid4()
        cache = MagicMock()

        assert invalidate_ai_config_cache(cache, user_id) is True
        cache.delete.assert_called_once_with(f"{AI_CONFIG_CACHE_PREFIX}{user_id}")

    def test_invalidate_without_cache(self):
        assert invalidate_ai_config_cache(None, uuid4()) is False


class TestCacheTTL:
    def test_reads_ttl_from_env(self):
        with patch.dict(os.environ, {"CACHE_TTL_AI_CONFIG": "42"}):
            assert get_cache_ttl("AI_CONFIG") == 42

    def test_lowercase_type_is_normalized(self):
        with patch.dict(os.environ, {"CACHE_TTL_AI_CONFIG": "60"}):
            assert get_cache_ttl("ai_config") == 60

    def test_invalid_value_falls_back_to_default(self):
        with patch.dict(os.environ, {"CACHE_TTL_AI_CONFIG": "abc"}):
            assert get_cache_ttl("AI_CONFIG", 300) == 300

    def test_missing_value_uses_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_cache_ttl("AI_CONFIG", 90) == 90
