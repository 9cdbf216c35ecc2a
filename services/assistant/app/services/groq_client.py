import logging
from typing import Dict, List, Optional

import httpx

from app.core.settings import GroqSettings
from app.prompts import ISA_SYSTEM_PROMPT
from shared import FunctionError

logger = logging.getLogger(__name__)


def montar_payload(settings: GroqSettings, messages: List[Dict[str, str]]) -> dict:
    return {
        "model": settings.model,
        "messages": [{"role": "system", "content": ISA_SYSTEM_PROMPT}, *messages],
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
    }


async def gerar_resposta(
    settings: GroqSettings,
    messages: List[Dict[str, str]],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    Encaminha a conversa para o chat-completions da Groq e devolve o texto gerado.
    Qualquer falha vira FunctionError 500 com a mensagem repassada ao navegador.
    """
    if not settings.api_key:
        logger.error("GROQ_API_KEY not configured")
        raise FunctionError(500, "GROQ_API_KEY is not configured")

    headers = {
        "Authorization": f"Bearer {settings.api_key}",
        "Content-Type": "application/json",
    }

    async with httpx.AsyncClient(transport=transport, timeout=settings.timeout_seconds) as client:
        try:
            resp = await client.post(settings.api_url, json=montar_payload(settings, messages), headers=headers)
        except httpx.RequestError as exc:
            logger.error("Groq request failed: %s", exc)
            raise FunctionError(500, "Failed to reach Groq API") from exc

    if resp.status_code < 200 or resp.status_code >= 300:
        logger.error("Groq API error: %s %s", resp.status_code, resp.text)
        raise FunctionError(500, f"Groq API error: {resp.status_code}")

    try:
        content = resp.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise FunctionError(500, "Invalid response from Groq API") from exc

    if not isinstance(content, str):
        raise FunctionError(500, "Invalid response from Groq API")

    logger.info("Groq response received successfully")
    return content
