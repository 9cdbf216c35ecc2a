import os
from html import escape

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from fastapi.responses import HTMLResponse

from app.core.database import Base, engine
from app.models import ai_config, announcement, auth, client, system_log, ticket, whatsapp  # noqa: F401  registra as tabelas
from app.routers import (
    account_requests,
    ai_configs,
    announcements,
    clients,
    functions,
    reports,
    tickets,
)
from app.routers import auth as auth_routes
from app.routers import whatsapp as whatsapp_routes
from shared import (
    RequestContextLogMiddleware,
    configure_cors,
    configure_logging,
    create_event_publisher,
    create_health_router,
    database_lifespan_factory,
    load_service_config,
    register_function_error_handler,
)
from shared.cache import create_redis_cache

tags_metadata = [
    {"name": "Auth", "description": "Login por e-mail ou matrícula, redefinição de senha e sessão atual."},
    {"name": "Functions", "description": "Funções chamadas direto pelo navegador (provision-user)."},
    {"name": "Account Requests", "description": "Solicitações de cadastro e sua aprovação."},
    {"name": "Clients", "description": "Clientes da plataforma ISA."},
    {"name": "Admins", "description": "Administradores do painel."},
    {"name": "Profile", "description": "Dados do próprio usuário."},
    {"name": "WhatsApp", "description": "Instâncias, contatos e mensagens do WhatsApp."},
    {"name": "AI Configs", "description": "Comportamento e base de conhecimento da IA de cada cliente."},
    {"name": "Support", "description": "Chamados de suporte."},
    {"name": "Announcements", "description": "Avisos enviados aos clientes."},
    {"name": "Reports", "description": "Indicadores do painel e trilha de auditoria."},
]

_CONFIG = load_service_config("panel")
_ROOT_PATH = os.getenv("APP_ROOT_PATH", "")
_EVENT_PUBLISHER = create_event_publisher(_CONFIG.redis.url, _CONFIG.redis.stream)
_REDIS_CACHE = create_redis_cache(_CONFIG.redis.url)
_LOGGER = configure_logging("panel")

lifespan = database_lifespan_factory(
    service_name="Panel Service",
    metadata=Base.metadata,
    engine=engine,
)

app = FastAPI(
    title="ISA Panel Service",
    version="0.1.0",
    description="API do painel ISA: cadastro, autenticação, WhatsApp, IA, suporte e relatórios.",
    openapi_tags=tags_metadata,
    root_path=_ROOT_PATH,
    lifespan=lifespan,
    docs_url=None,
    redoc_url="/redoc",
)

app.state.config = _CONFIG
app.state.event_publisher = _EVENT_PUBLISHER
app.state.redis_cache = _REDIS_CACHE
app.state.assistant_service_url = os.getenv("ASSISTANT_SERVICE_URL")
app.state.assistant_transport = None
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


@app.get("/docs", include_in_schema=False)
async def custom_swagger_ui_html():
    return HTMLResponse(f"""
    <!DOCTYPE html>
    <html>
    <head>
        <link type="text/css" rel="stylesheet" href="https://cdn.jsdelivr.net/npm/swagger-ui-dist@5/swagger-ui.css">
        <title>{escape(app.title)} - Swagger UI</title>
    </head>
    <body>
        <div id="swagger-ui"></div>
        <script src="https://cdn.jsdelivr.net/npm/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
        <script>
        const ui = SwaggerUIBundle({{
            url: window.location.pathname.replace(/\\/docs$/, '') + '/openapi.json',
            dom_id: '#swagger-ui',
            presets: [
                SwaggerUIBundle.presets.apis,
                SwaggerUIBundle.SwaggerUIStandalonePreset
            ],
            layout: "BaseLayout",
            deepLinking: true
        }})
        </script>
    </body>
    </html>
    """)


health_router = create_health_router(
    service_name="panel",
    database_engine=engine,
    redis_client=_CONFIG.redis.url if _CONFIG.redis.url else None,
)
app.include_router(health_router)

app.include_router(auth_routes.router)
app.include_router(functions.router)
app.include_router(account_requests.router)
app.include_router(clients.router)
app.include_router(clients.admins_router)
app.include_router(clients.profile_router)
app.include_router(whatsapp_routes.router)
app.include_router(ai_configs.router)
app.include_router(tickets.router)
app.include_router(announcements.router)
app.include_router(reports.logs_router)
app.include_router(reports.router)


@app.get("/")
def root():
    return {
        "service": "panel",
        "status": "ok",
        "docs_url": "/docs",
        "config": {
            "redis_stream": _CONFIG.redis.stream,
        },
    }
