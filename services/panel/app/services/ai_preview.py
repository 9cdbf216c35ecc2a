"""Prévia local da resposta da IA, usada quando o serviço de assistente não está configurado."""

import re
from typing import Any, Dict, Optional

from app.models.ai_config import DEFAULT_FORMALITY_LEVEL, DEFAULT_TONE, DEFAULT_WELCOME_MESSAGE

_TONE_OPENERS = {
    "friendly": "Que bom falar com você!",
    "professional": "Obrigado pelo contato.",
    "casual": "Beleza!",
    "formal": "Agradecemos o seu contato.",
    "enthusiastic": "Uau, que ótimo receber sua mensagem!",
}

_WORD = re.compile(r"\w{4,}", re.UNICODE)


def _closing(formality_level: int) -> str:
    if formality_level >= 8:
        return "Permanecemos à disposição."
    if formality_level <= 3:
        return "Qualquer coisa, é só chamar!"
    return "Posso ajudar em algo mais?"


def _words(text: str) -> set:
    return {word.lower() for word in _WORD.findall(text or "")}


def _match_faq(faqs, message: str) -> Optional[str]:
    asked = _words(message)
    best_answer, best_score = None, 0
    for faq in faqs or []:
        if not isinstance(faq, dict):
            continue
        score = len(asked & _words(faq.get("question", "")))
        if score > best_score:
            best_answer, best_score = faq.get("answer"), score
    return best_answer


def _match_trigger(triggers, message: str) -> Optional[str]:
    lowered = (message or "").lower()
    for trigger in triggers or []:
        if isinstance(trigger, dict) and trigger.get("keyword") and trigger["keyword"].lower() in lowered:
            return trigger.get("response")
    return None


def build_preview(config: Dict[str, Any], message: str) -> str:
    welcome = config.get("welcome_message") or DEFAULT_WELCOME_MESSAGE
    tone = config.get("tone") or DEFAULT_TONE
    formality = config.get("formality_level") or DEFAULT_FORMALITY_LEVEL

    answer = _match_trigger(config.get("triggers"), message) or _match_faq(config.get("faqs"), message)
    if not answer:
        answer = f'Recebi sua mensagem: "{message}". Vou verificar e já te respondo.'

    parts = [welcome, _TONE_OPENERS.get(tone, _TONE_OPENERS[DEFAULT_TONE]), answer, _closing(formality)]
    return " ".join(part.strip() for part in parts if part)


def persona_prompt(config: Dict[str, Any]) -> str:
    """Instruções extras enviadas ao assistente para simular a IA do cliente."""
    knowledge = config.get("knowledge_base") or {}
    company = knowledge.get("company") or {}
    lines = [
        f"Você é {config.get('ai_name') or 'o assistente'} atendendo pelo WhatsApp.",
        f"Tom de voz: {config.get('tone') or DEFAULT_TONE}; formalidade {config.get('formality_level') or DEFAULT_FORMALITY_LEVEL}/10.",
        f"Mensagem de boas-vindas: {config.get('welcome_message') or DEFAULT_WELCOME_MESSAGE}",
    ]
    if company.get("name"):
        lines.append(f"Empresa: {company['name']} ({company.get('segment') or 'segmento não informado'}).")
    for key, label in (("products", "Produtos"), ("policies", "Políticas"), ("sensitive", "Evite")):
        if knowledge.get(key):
            lines.append(f"{label}: {knowledge[key]}")
    for faq in config.get("faqs") or []:
        if isinstance(faq, dict) and faq.get("question"):
            lines.append(f"P: {faq['question']} R: {faq.get('answer', '')}")
    return "\n".join(lines)
