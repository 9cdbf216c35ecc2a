"""CORS (Cross-Origin Resource Sharing) configuration utilities.

Development allows every origin; production only the comma separated
domains of ``CORS_ORIGINS``. ``X-Request-ID`` is exposed so the panel can
show it in error reports.

Serverless-style function endpoints (``/functions/v1/*``) are called straight
from the browser with the anon key, so they always answer with the permissive
header set in ``EDGE_CORS_HEADERS``.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.types import Receive, Scope, Send

from .config import is_production
from .logging import REQUEST_ID_HEADER

EDGE_FUNCTIONS_PREFIX = "/functions/v1/"

EDGE_CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def get_cors_origins() -> List[str]:
    """Obtém lista de origens permitidas para CORS baseado no ambiente.

    Returns:
        Lista de origens permitidas

    Raises:
        ValueError: Se em produção e CORS_ORIGINS não estiver configurado
    """
    if is_production():
        cors_origins = os.getenv("CORS_ORIGINS", "").strip()

        if not cors_origins:
            raise ValueError(
                "CORS_ORIGINS must be set in production. "
                "Configure allowed domains separated by commas, e.g.: "
                "CORS_ORIGINS=https://app.example.com,https://admin.example.com"
            )

        origins = [origin.strip() for origin in cors_origins.split(",") if origin.strip()]

        if not origins:
            raise ValueError(
                "CORS_ORIGINS must contain at least one valid domain in production."
            )

        return origins

    return ["*"]


class EdgeAwareCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that leaves the function routes alone.

    Functions answer their own preflight and attach ``EDGE_CORS_HEADERS``;
    the restricted origin list must not reject them first.
    """

    def __init__(self, app, *, edge_prefix: str = EDGE_FUNCTIONS_PREFIX, **options) -> None:
        super().__init__(app, **options)
        self.edge_prefix = edge_prefix

    def _is_edge_path(self, scope: Scope) -> bool:
        path = scope.get("path", "")
        root_path = scope.get("root_path", "")
        if root_path and path.startswith(root_path):
            path = path[len(root_path):]
        return path.startswith(self.edge_prefix)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and self._is_edge_path(scope):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


def configure_cors(app: FastAPI) -> None:
    """Configura middleware CORS no app FastAPI baseado no ambiente.

    Raises:
        ValueError: Se em produção e CORS_ORIGINS não estiver configurado
    """
    origins = get_cors_origins()

    allow_credentials = os.getenv("CORS_ALLOW_CREDENTIALS", "false").lower() == "true"
    max_age = int(os.getenv("CORS_MAX_AGE", "600"))

    # Com "*" o navegador recusa credentials
    if origins == ["*"] and allow_credentials:
        allow_credentials = False

    app.add_middleware(
        EdgeAwareCORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=max_age,
    )


def edge_json_response(content: Any, status_code: int = 200) -> JSONResponse:
    """JSON response carrying the permissive function CORS headers."""
    return JSONResponse(content=content, status_code=status_code, headers=dict(EDGE_CORS_HEADERS))


def edge_preflight_response() -> Response:
    return Response(content="ok", media_type="text/plain", headers=dict(EDGE_CORS_HEADERS))
