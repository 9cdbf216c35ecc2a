import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"
DEFAULT_GROQ_MODEL = "llama-3.1-70b-versatile"


@dataclass(frozen=True)
class GroqSettings:
    api_key: Optional[str]
    api_url: str
    model: str
    temperature: float = 0.7
    max_tokens: int = 1024
    timeout_seconds: float = 60.0


def get_groq_settings() -> GroqSettings:
    # lido a cada chamada: a chave pode ser rotacionada sem reiniciar
    return GroqSettings(
        api_key=os.getenv("GROQ_API_KEY") or None,
        api_url=os.getenv("GROQ_API_URL", DEFAULT_GROQ_API_URL),
        model=os.getenv("GROQ_MODEL", DEFAULT_GROQ_MODEL),
        timeout_seconds=float(os.getenv("GROQ_TIMEOUT_SECONDS", "60")),
    )
