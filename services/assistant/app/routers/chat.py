from typing import Dict, List

from fastapi import APIRouter, Request

from app.core.settings import get_groq_settings
from app.services.groq_client import gerar_resposta
from shared import FunctionError, edge_json_response, edge_preflight_response

router = APIRouter(prefix="/functions/v1", tags=["Functions"])

ALLOWED_ROLES = ("system", "user", "assistant")


def validar_mensagens(body) -> List[Dict[str, str]]:
    if not isinstance(body, dict):
        raise FunctionError(400, "Request body must be a JSON object")

    messages = body.get("messages")
    if not isinstance(messages, list) or not messages:
        raise FunctionError(400, "messages must be a non-empty array")

    cleaned = []
    for index, message in enumerate(messages):
        if not isinstance(message, dict):
            raise FunctionError(400, f"messages[{index}] must be an object")
        role = message.get("role")
        content = message.get("content")
        if role not in ALLOWED_ROLES:
            raise FunctionError(400, f"messages[{index}].role must be one of: {', '.join(ALLOWED_ROLES)}")
        if not isinstance(content, str):
            raise FunctionError(400, f"messages[{index}].content must be a string")
        cleaned.append({"role": role, "content": content})
    return cleaned


@router.options("/isa-chat", include_in_schema=False)
def isa_chat_preflight():
    return edge_preflight_response()


@router.post("/isa-chat")
async def isa_chat(request: Request):
    try:
        body = await request.json()
    except ValueError:
        raise FunctionError(400, "Invalid JSON body")

    messages = validar_mensagens(body)
    reply = await gerar_resposta(
        get_groq_settings(),
        messages,
        transport=getattr(request.app.state, "http_transport", None),
    )
    return edge_json_response({"message": reply})
