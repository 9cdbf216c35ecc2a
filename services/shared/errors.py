"""Erros das funções serverless (``/functions/v1/*``).

As funções respondem sempre ``{"error": "..."}`` com os cabeçalhos CORS
permissivos, nunca o ``{"detail": ...}`` padrão do FastAPI.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request

from .cors import edge_json_response

logger = logging.getLogger(__name__)


class FunctionError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


async def function_error_handler(request: Request, exc: FunctionError):
    if exc.status_code >= 500:
        logger.error("Function %s failed: %s", request.url.path, exc.message)
    return edge_json_response({"error": exc.message}, status_code=exc.status_code)


def register_function_error_handler(app: FastAPI) -> None:
    app.add_exception_handler(FunctionError, function_error_handler)
