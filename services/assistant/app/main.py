import os

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from app.routers import chat
from shared import (
    RequestContextLogMiddleware,
    configure_cors,
    configure_logging,
    create_health_router,
    load_service_config,
    register_function_error_handler,
)

tags_metadata = [
    {
        "name": "Functions",
        "description": "Chat da ISA: encaminha a conversa ao modelo de linguagem.",
    }
]

_CONFIG = load_service_config("assistant", require_database=False)
_ROOT_PATH = os.getenv("APP_ROOT_PATH", "")
_LOGGER = configure_logging("assistant")

app = FastAPI(
    title="ISA Assistant Service",
    version="0.1.0",
    description="Proxy sem estado entre o navegador e a API de chat da Groq.",
    openapi_tags=tags_metadata,
    root_path=_ROOT_PATH,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.config = _CONFIG
app.state.http_transport = None
app.add_middleware(RequestContextLogMiddleware, logger=_LOGGER)
configure_cors(app)
register_function_error_handler(app)


def custom_openapi_schema():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    schema["openapi"] = "3.0.3"
    app.openapi_schema = schema
    return app.openapi_schema


app.openapi = custom_openapi_schema

app.include_router(
    create_health_router(
        service_name="assistant",
        redis_client=None,
        require_database=False,
    )
)
app.include_router(chat.router)


@app.get("/")
def root():
    return {
        "service": "assistant",
        "status": "ok",
        "docs_url": "/docs",
    }
