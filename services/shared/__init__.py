"""Shared utilities used across the ISA services."""

from .config import ServiceConfig, is_production, load_service_config
from .cors import (
    EDGE_CORS_HEADERS,
    configure_cors,
    edge_json_response,
    edge_preflight_response,
)
from .errors import FunctionError, register_function_error_handler
from .health import create_health_router
from .logging import RequestContextLogMiddleware, configure_logging
from .messaging import EventPublisher, create_event_publisher
from .startup import close_redis_resources, database_lifespan_factory, wait_for_schema

__all__ = [
    "ServiceConfig",
    "is_production",
    "load_service_config",
    "EDGE_CORS_HEADERS",
    "configure_cors",
    "edge_json_response",
    "edge_preflight_response",
    "FunctionError",
    "register_function_error_handler",
    "create_health_router",
    "RequestContextLogMiddleware",
    "configure_logging",
    "EventPublisher",
    "create_event_publisher",
    "close_redis_resources",
    "database_lifespan_factory",
    "wait_for_schema",
]
