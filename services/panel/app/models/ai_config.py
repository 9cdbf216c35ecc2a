import uuid
from sqlalchemy import Column, DateTime, Integer, String, Text, JSON
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
from app.core.database import Base, utcnow

DEFAULT_AI_NAME = "Assistente IA"
DEFAULT_WELCOME_MESSAGE = "Olá! Como posso ajudar?"
DEFAULT_TONE = "friendly"
DEFAULT_FORMALITY_LEVEL = 5


def default_knowledge_base():
    return {
        "company": {
            "name": "",
            "segment": "",
            "products": "",
            "values": "",
            "mission": "",
        },
        "contact": {
            "hours": "",
            "phones": "",
            "address": "",
            "email": "",
        },
        "products": "",
        "policies": "",
        "keywords": "",
        "sensitive": "",
    }


def default_business_hours():
    return {"start": "08:00", "end": "18:00", "days": [1, 2, 3, 4, 5]}


class AIConfig(Base):
    __tablename__ = "ai_configs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), nullable=False, unique=True, index=True)
    ai_name = Column(String, nullable=True, default=DEFAULT_AI_NAME)
    welcome_message = Column(Text, nullable=True, default=DEFAULT_WELCOME_MESSAGE)
    tone = Column(String, nullable=True, default=DEFAULT_TONE)
    formality_level = Column(Integer, nullable=True, default=DEFAULT_FORMALITY_LEVEL)
    allowed_emojis = Column(JSONB().with_variant(JSON, "sqlite"), nullable=True, default=list)
    business_hours = Column(JSONB().with_variant(JSON, "sqlite"), nullable=True, default=default_business_hours)
    knowledge_base = Column(JSONB().with_variant(JSON, "sqlite"), nullable=True, default=default_knowledge_base)
    faqs = Column(JSONB().with_variant(JSON, "sqlite"), nullable=True, default=list)
    triggers = Column(JSONB().with_variant(JSON, "sqlite"), nullable=True, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)
