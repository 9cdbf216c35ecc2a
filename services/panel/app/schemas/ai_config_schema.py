from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

_TONE_PATTERN = "^(friendly|professional|casual|formal|enthusiastic)$"


class BusinessHours(BaseModel):
    start: str = Field(default="08:00", pattern=r"^\d{2}:\d{2}$")
    end: str = Field(default="18:00", pattern=r"^\d{2}:\d{2}$")
    days: List[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])


class FAQItem(BaseModel):
    question: str
    answer: str


class TriggerItem(BaseModel):
    keyword: str
    response: str


class AIConfigUpdate(BaseModel):
    ai_name: Optional[str] = Field(default=None, min_length=1, max_length=80)
    welcome_message: Optional[str] = None
    tone: Optional[str] = Field(default=None, pattern=_TONE_PATTERN)
    formality_level: Optional[int] = Field(default=None, ge=1, le=10)
    allowed_emojis: Optional[List[str]] = None
    business_hours: Optional[BusinessHours] = None
    knowledge_base: Optional[Dict[str, Any]] = None
    faqs: Optional[List[FAQItem]] = None
    triggers: Optional[List[TriggerItem]] = None


class AIConfigOut(BaseModel):
    id: UUID
    user_id: UUID
    ai_name: Optional[str]
    welcome_message: Optional[str]
    tone: Optional[str]
    formality_level: Optional[int]
    allowed_emojis: Optional[List[Any]]
    business_hours: Optional[Dict[str, Any]]
    knowledge_base: Optional[Dict[str, Any]]
    faqs: Optional[List[Any]]
    triggers: Optional[List[Any]]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class AIConfigTestIn(BaseModel):
    message: str = Field(..., min_length=1, examples=["Qual o horário de atendimento?"])


class AIConfigTestOut(BaseModel):
    reply: str
    source: str
