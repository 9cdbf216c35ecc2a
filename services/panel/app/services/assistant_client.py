import logging
from typing import Any, Dict, Optional

import httpx

from app.services.ai_preview import persona_prompt

logger = logging.getLogger(__name__)

ISA_CHAT_PATH = "/functions/v1/isa-chat"


async def solicitar_resposta_assistente(
    assistant_service_url: Optional[str],
    config: Dict[str, Any],
    message: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[str]:
    """
    Pede ao serviço de assistente uma resposta de teste para a configuração.
    Sem URL configurada, ou se o serviço falhar, retorna None e o chamador usa a prévia local.
    """
    if not assistant_service_url:
        return None

    url = f"{assistant_service_url.rstrip('/')}{ISA_CHAT_PATH}"
    body = {
        "messages": [
            {"role": "system", "content": persona_prompt(config)},
            {"role": "user", "content": message},
        ]
    }

    async with httpx.AsyncClient(transport=transport, timeout=30.0) as client:
        try:
            resp = await client.post(url, json=body)
        except httpx.RequestError:
            logger.warning("Assistant service unreachable at %s", url)
            return None

    if resp.status_code != 200:
        logger.warning("Assistant service returned %s", resp.status_code)
        return None

    try:
        data = resp.json()
    except ValueError:
        logger.warning("Assistant service returned a non-JSON body")
        return None
    reply = data.get("message") if isinstance(data, dict) else None
    return reply if isinstance(reply, str) and reply.strip() else None
