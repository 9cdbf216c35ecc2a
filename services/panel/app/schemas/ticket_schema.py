from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator

_PRIORITY_PATTERN = "^(low|normal|high|urgent)$"
_STATUS_PATTERN = "^(open|in_progress|resolved|closed)$"


class TicketCreate(BaseModel):
    subject: str = Field(..., min_length=3, examples=["Instância não conecta"])
    category: Optional[str] = Field(default=None, examples=["whatsapp"])
    priority: str = Field(default="normal", pattern=_PRIORITY_PATTERN)
    message: str = Field(..., min_length=1)
    attachment_url: Optional[str] = None


class TicketUpdate(BaseModel):
    status: Optional[str] = Field(default=None, pattern=_STATUS_PATTERN)
    priority: Optional[str] = Field(default=None, pattern=_PRIORITY_PATTERN)
    assigned_admin_id: Optional[UUID] = None

    @field_validator("status", "priority")
    @classmethod
    def campos_obrigatorios(cls, value):
        # omitir mantém o valor atual; null explícito não é aceito
        if value is None:
            raise ValueError("não pode ser nulo")
        return value


class TicketMessageCreate(BaseModel):
    content: str = Field(..., min_length=1)
    attachment_url: Optional[str] = None


class TicketMessageOut(BaseModel):
    id: UUID
    ticket_id: UUID
    sender_id: UUID
    content: str
    attachment_url: Optional[str]
    is_system_message: bool
    created_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class TicketOut(BaseModel):
    id: UUID
    user_id: UUID
    subject: str
    category: Optional[str]
    priority: str
    status: str
    assigned_admin_id: Optional[UUID]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class TicketDetailOut(TicketOut):
    messages: List[TicketMessageOut] = Field(default_factory=list)
